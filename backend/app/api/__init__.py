"""API routes for the workspace platform."""

from app.api.auth import router as auth_router
from app.api.users import router as users_router
from app.api.teams import router as teams_router
from app.api.documents import router as documents_router
from app.api.ai_models import router as models_router
from app.api.chat import router as chat_router
from app.api.payments import router as payments_router
from app.api.companies import router as companies_router

__all__ = [
    "auth_router",
    "users_router",
    "teams_router",
    "documents_router",
    "models_router",
    "chat_router",
    "payments_router",
    "companies_router",
]
