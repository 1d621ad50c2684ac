"""
Authentication service for accounts, access tokens and API keys.
"""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from typing import Optional
import logging
import uuid

from app.core.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from app.core.security import (
    verify_password,
    get_password_hash,
    create_access_token,
    create_api_key,
    hash_token,
    validate_password_strength,
)
from app.db.base import utcnow
from app.models.user import User
from app.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)

BUSINESS_FIELDS = ("business_name", "business_size", "industry", "website")


class AuthService:
    """Service for authentication operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email.

        Args:
            email: User email address

        Returns:
            User or None if not found
        """
        result = await self.db.execute(
            select(User).where(User.email == email.lower())
        )
        return result.scalar_one_or_none()

    async def get_user_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        """
        Get user by ID.

        Args:
            user_id: User UUID

        Returns:
            User or None if not found
        """
        result = await self.db.execute(
            select(User).where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_user_by_api_key(self, api_key: str) -> Optional[User]:
        """Find the user whose current API key hash matches."""
        result = await self.db.execute(
            select(User).where(User.api_key_hash == hash_token(api_key))
        )
        return result.scalar_one_or_none()

    async def create_user(self, user_data: UserCreate) -> User:
        """
        Register a new individual or business account.

        Business accounts become owners of the team they later create.

        Raises:
            ValidationError: If the password is too short
            ConflictError: If the email is already registered
        """
        is_valid, error_msg = validate_password_strength(user_data.password)
        if not is_valid:
            raise ValidationError(error_msg)

        email = user_data.email.lower()
        if await self.get_user_by_email(email):
            raise ConflictError("Email already registered")

        user = User(
            name=user_data.name,
            email=email,
            password_hash=get_password_hash(user_data.password),
            user_type=user_data.user_type,
            role="owner" if user_data.user_type == "business" else "user",
            plan="free",
            last_active_at=utcnow(),
        )
        if user_data.user_type == "business":
            for field in BUSINESS_FIELDS:
                setattr(user, field, getattr(user_data, field))

        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Email already registered")
        await self.db.refresh(user)

        logger.info(f"Registered {user.user_type} account {user.id}")
        return user

    async def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """
        Authenticate user with email and password.

        Args:
            email: User email
            password: Plain text password

        Returns:
            User if authentication successful, None otherwise
        """
        user = await self.get_user_by_email(email)
        if not user or not user.is_active:
            return None

        if not verify_password(password, user.password_hash):
            return None

        return user

    def create_user_token(self, user: User) -> str:
        """Issue an access token for the user."""
        return create_access_token(
            data={
                "sub": str(user.id),
                "email": user.email,
                "role": user.role,
            }
        )

    async def generate_api_key(self, user: User) -> str:
        """
        Issue a new API key, replacing any previous one.

        Raises:
            AuthorizationError: For individual accounts on the free plan
        """
        if user.user_type == "individual" and user.plan == "free":
            raise AuthorizationError("API access is not available on the free plan")

        api_key = create_api_key(str(user.id))
        user.api_key_hash = hash_token(api_key)
        await self.db.commit()
        logger.info(f"Issued API key for user {user.id}")
        return api_key

    async def touch_last_active(self, user: User) -> None:
        user.last_active_at = utcnow()
        await self.db.commit()

    async def update_profile(self, user: User, data: UserUpdate) -> User:
        """
        Update name, email and (business accounts only) business details.

        Raises:
            ConflictError: If the new email belongs to another account
        """
        updates = data.model_dump(exclude_unset=True)

        if updates.get("email"):
            email = updates["email"].lower()
            if email != user.email:
                existing = await self.get_user_by_email(email)
                if existing and existing.id != user.id:
                    raise ConflictError("Email already in use")
                user.email = email

        if updates.get("name"):
            user.name = updates["name"].strip()

        if user.is_business:
            for field in BUSINESS_FIELDS:
                if field in updates:
                    setattr(user, field, updates[field])

        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def change_password(
        self,
        user_id: uuid.UUID,
        current_password: str,
        new_password: str
    ) -> None:
        """
        Change user password.

        Args:
            user_id: User UUID
            current_password: Current password (for verification)
            new_password: New password

        Raises:
            AuthenticationError: If current password is incorrect
            ValidationError: If new password is too short
        """
        user = await self.get_user_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        if not verify_password(current_password, user.password_hash):
            raise AuthenticationError("Current password is incorrect")

        is_valid, error_msg = validate_password_strength(new_password)
        if not is_valid:
            raise ValidationError(error_msg)

        user.password_hash = get_password_hash(new_password)
        await self.db.commit()

    async def deactivate(self, user: User) -> None:
        """Soft-delete: the account can no longer authenticate."""
        user.is_active = False
        user.api_key_hash = None
        await self.db.commit()
        logger.info(f"Deactivated user {user.id}")
