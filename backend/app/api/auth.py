"""
Authentication API endpoints.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.api.deps import get_current_active_user
from app.core.errors import AuthenticationError
from app.db.session import get_db
from app.models.user import User
from app.schemas.common import ApiResponse
from app.schemas.user import (
    ApiKeyResponse,
    TokenResponse,
    UserCreate,
    UserLogin,
    UserResponse,
)
from app.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new account and return an access token.

    **Args:**
    - name, email, password (min 6 characters)
    - userType: individual (default) or business
    - businessName: required for business accounts
    """
    auth_service = AuthService(db)
    user = await auth_service.create_user(user_data)
    return TokenResponse(token=auth_service.create_user_token(user), data=UserResponse.model_validate(user))


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """User login - returns a JWT access token."""
    auth_service = AuthService(db)

    user = await auth_service.authenticate_user(credentials.email, credentials.password)
    if not user:
        raise AuthenticationError("Invalid credentials")

    await auth_service.touch_last_active(user)
    return TokenResponse(token=auth_service.create_user_token(user), data=UserResponse.model_validate(user))


@router.post("/logout", response_model=ApiResponse[dict])
async def logout(current_user: User = Depends(get_current_active_user)):
    """Stateless logout; the client discards its token."""
    logger.info(f"User {current_user.id} logged out")
    return ApiResponse(data={})


@router.get("/me", response_model=ApiResponse[UserResponse])
async def me(current_user: User = Depends(get_current_active_user)):
    """Get the authenticated account."""
    return ApiResponse(data=UserResponse.model_validate(current_user))


@router.post("/api-key", response_model=ApiResponse[ApiKeyResponse])
async def generate_api_key(
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Issue a new API key (valid for one year). The previous key stops working.

    Individual accounts on the free plan are not eligible.
    """
    api_key = await AuthService(db).generate_api_key(current_user)
    return ApiResponse(data=ApiKeyResponse(api_key=api_key))
