"""
Main FastAPI Application Entry Point
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.errors import register_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import RequestIdMiddleware
from app.api import (
    auth_router,
    users_router,
    teams_router,
    documents_router,
    models_router,
    chat_router,
    payments_router,
    companies_router,
)
from app.db.session import dispose_engine
from app.workers import BackgroundRunner

configure_logging(settings.app.env, settings.app.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.runner = BackgroundRunner()
    logger.info("Workspace API - Registered Routes:")
    for route in app.routes:
        if hasattr(route, "methods"):
            logger.info(f"  {sorted(route.methods)} {route.path}")
    try:
        yield
    finally:
        await app.state.runner.shutdown()
        await dispose_engine()
        logger.info("Workspace API stopped")


app = FastAPI(
    title="Workspace API",
    description="Teams, documents, simulated model training, chat and company chatbot contexts",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(RequestIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.app.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(teams_router, prefix="/api")
app.include_router(documents_router, prefix="/api")
app.include_router(models_router, prefix="/api")
app.include_router(chat_router, prefix="/api")
app.include_router(payments_router, prefix="/api")
app.include_router(companies_router, prefix="/api")


@app.get("/health")
@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "backend",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
