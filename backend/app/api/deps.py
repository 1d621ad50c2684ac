"""
FastAPI dependencies for authentication and background jobs.
"""
from fastapi import Depends, Request
from fastapi.security import APIKeyHeader, HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import uuid

from app.core.errors import AuthenticationError
from app.core.security import decode_token
from app.db.session import get_db
from app.models.user import User
from app.services.auth_service import AuthService
from app.services.usage_service import UsageService
from app.workers.runner import BackgroundRunner

bearer_scheme = HTTPBearer(auto_error=False)
api_key_scheme = APIKeyHeader(name="X-API-Key", auto_error=False)


def _user_id_from(payload: dict) -> uuid.UUID:
    try:
        return uuid.UUID(payload.get("sub") or "")
    except ValueError:
        raise AuthenticationError("Invalid token payload")


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    api_key: Optional[str] = Depends(api_key_scheme),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Dependency to get the authenticated user from a bearer token or API key.

    Args:
        request: Current request (API key calls are billed per endpoint)
        credentials: HTTP Bearer credentials (access JWT)
        api_key: Value of the X-API-Key header
        db: Database session

    Returns:
        User: Authenticated user

    Raises:
        AuthenticationError: If no valid credential is supplied
    """
    auth_service = AuthService(db)

    if credentials is not None:
        payload = decode_token(credentials.credentials)
        if payload.get("type") != "access":
            raise AuthenticationError("Invalid token type")
        user = await auth_service.get_user_by_id(_user_id_from(payload))
        if not user:
            raise AuthenticationError("User not found")
        return user

    if api_key:
        payload = decode_token(api_key)
        if payload.get("type") != "api_key":
            raise AuthenticationError("Invalid API key")
        user = await auth_service.get_user_by_api_key(api_key)
        if not user or user.id != _user_id_from(payload):
            raise AuthenticationError("Invalid API key")
        if user.is_active:
            UsageService(db).record(
                user,
                "api_call",
                endpoint=request.url.path,
                ip=request.client.host if request.client else None,
                user_agent=request.headers.get("user-agent"),
            )
            await db.commit()
        return user

    raise AuthenticationError("Not authorized to access this route")


async def get_current_active_user(
    current_user: User = Depends(get_current_user)
) -> User:
    """
    Dependency to get current active user.

    Raises:
        AuthenticationError: If the account was deactivated
    """
    if not current_user.is_active:
        raise AuthenticationError("Account is deactivated")
    return current_user


def get_runner(request: Request) -> BackgroundRunner:
    """Background runner owned by the application."""
    return request.app.state.runner
