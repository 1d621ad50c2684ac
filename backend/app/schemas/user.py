"""
User schemas for request/response validation.
"""
from pydantic import EmailStr, Field, UUID4, field_validator, model_validator
from typing import Literal, Optional
from datetime import datetime

from app.schemas.common import CamelModel


class UserCreate(CamelModel):
    """Schema for user registration."""
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., description="User password (min 6 characters)")
    user_type: Literal["individual", "business"] = "individual"
    business_name: Optional[str] = None
    business_size: Optional[str] = None
    industry: Optional[str] = None
    website: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Please add a name")
        return v

    @model_validator(mode="after")
    def require_business_name(self):
        if self.user_type == "business" and not (self.business_name or "").strip():
            raise ValueError("Business name is required for business accounts")
        return self


class UserLogin(CamelModel):
    """Schema for user login."""
    email: EmailStr
    password: str


class UserUpdate(CamelModel):
    """Schema for updating user profile."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    business_name: Optional[str] = None
    business_size: Optional[str] = None
    industry: Optional[str] = None
    website: Optional[str] = None


class UserResponse(CamelModel):
    """Schema for user response."""
    id: UUID4
    name: str
    email: EmailStr
    user_type: str
    business_name: Optional[str] = None
    business_size: Optional[str] = None
    industry: Optional[str] = None
    website: Optional[str] = None
    plan: str
    role: str
    team_id: Optional[UUID4] = None
    is_team_member: bool
    is_active: bool
    documents_uploaded: int
    models_created: int
    total_tokens_used: int
    last_active_at: Optional[datetime] = None
    created_at: datetime


class TokenResponse(CamelModel):
    """Registration/login envelope carrying the access token."""
    success: bool = True
    token: str
    data: UserResponse


class ApiKeyResponse(CamelModel):
    api_key: str


class PasswordChangeRequest(CamelModel):
    """Schema for password change request."""
    current_password: str
    new_password: str


class UsageStat(CamelModel):
    kind: str
    count: int


class DailyUsage(CamelModel):
    date: str
    count: int
    tokens: int


class UsageActivity(CamelModel):
    id: UUID4
    kind: str
    resource_type: Optional[str] = None
    resource_id: Optional[UUID4] = None
    total_tokens: int
    storage_used: int
    endpoint: Optional[str] = None
    timestamp: datetime


class UsageSummary(CamelModel):
    """Usage statistics for the current user."""
    usage_by_kind: list[UsageStat]
    total_tokens: int
    storage_used: int
    daily_usage: list[DailyUsage]
    recent_activity: list[UsageActivity]
