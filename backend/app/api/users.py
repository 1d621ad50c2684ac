"""
User Management API

Endpoints for the caller's profile, password, usage statistics and account
deactivation.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.db.session import get_db
from app.api.deps import get_current_active_user
from app.models.user import User
from app.schemas.common import ApiResponse, MessageResponse
from app.schemas.user import PasswordChangeRequest, UsageActivity, UsageSummary, UserResponse, UserUpdate
from app.services.auth_service import AuthService
from app.services.usage_service import UsageService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/profile", response_model=ApiResponse[UserResponse])
async def get_profile(current_user: User = Depends(get_current_active_user)):
    """Get current user profile."""
    return ApiResponse(data=UserResponse.model_validate(current_user))


@router.put("/profile", response_model=ApiResponse[UserResponse])
async def update_profile(
    update_data: UserUpdate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Update profile fields.

    Business details are only stored for business accounts.
    """
    user = await AuthService(db).update_profile(current_user, update_data)
    logger.info(f"User {user.id} updated profile")
    return ApiResponse(data=UserResponse.model_validate(user))


@router.put("/change-password", response_model=MessageResponse)
async def change_password(
    request: PasswordChangeRequest,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Change the caller's password; the current password must match."""
    await AuthService(db).change_password(
        current_user.id, request.current_password, request.new_password
    )
    logger.info(f"User {current_user.id} changed password")
    return MessageResponse(message="Password updated successfully")


@router.get("/usage", response_model=ApiResponse[UsageSummary])
async def get_usage(
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Usage counts per kind, token and storage totals, last 7 days, recent activity."""
    summary = await UsageService(db).summary(current_user.id)
    summary["recent_activity"] = [UsageActivity.model_validate(r) for r in summary["recent_activity"]]
    return ApiResponse(data=UsageSummary.model_validate(summary))


@router.delete("", response_model=ApiResponse[dict])
async def delete_account(
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Deactivate the caller's account. Data is kept; the account can no longer sign in."""
    await AuthService(db).deactivate(current_user)
    return ApiResponse(data={})
