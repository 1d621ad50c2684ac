"""
Database session management.

The engine is created lazily from ``settings.database.url`` and can be
rebuilt with ``init_engine`` (tests point it at a throwaway SQLite file).
"""
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.engine import make_url
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.db.base import Base

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def init_engine(url: Optional[str] = None) -> AsyncEngine:
    """
    (Re)create the async engine and session factory.

    Args:
        url: Database URL, defaults to the configured one

    Returns:
        AsyncEngine: The new engine
    """
    global _engine, _session_factory

    url = make_url(url or settings.database.url)
    if url.get_backend_name() == "sqlite":
        options = {}
        if not url.database or url.database == ":memory:":
            # One shared connection so the in-memory database survives across sessions
            options["poolclass"] = StaticPool
        engine = create_async_engine(
            url,
            echo=settings.database.database_echo,
            connect_args={"check_same_thread": False},
            **options,
        )
    else:
        engine = create_async_engine(
            url,
            echo=settings.database.database_echo,
            pool_pre_ping=True,
            pool_size=settings.database.database_pool_size,
            max_overflow=settings.database.database_max_overflow,
        )

    _engine = engine
    _session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    return engine


def get_engine() -> AsyncEngine:
    if _engine is None:
        init_engine()
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    if _session_factory is None:
        init_engine()
    return _session_factory


async def create_all() -> None:
    """Create all tables (development and tests; production uses Alembic)."""
    import app.models  # noqa: F401  registers mappers

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    if _engine is not None:
        await _engine.dispose()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for database sessions.

    Usage in FastAPI:
        @app.get("/endpoint")
        async def endpoint(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with get_session_factory()() as session:
        try:
            yield session
        finally:
            await session.close()
