"""
Team schemas.
"""
from pydantic import EmailStr, Field, UUID4
from typing import Optional
from datetime import datetime

from app.schemas.common import CamelModel


class TeamCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=500)


class TeamUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=500)


class MemberAdd(CamelModel):
    email: EmailStr
    role: str = "member"


class MemberRoleUpdate(CamelModel):
    role: str


class MemberUser(CamelModel):
    id: UUID4
    name: str
    email: EmailStr


class TeamMemberResponse(CamelModel):
    user_id: UUID4
    role: str
    added_at: datetime
    user: Optional[MemberUser] = None


class TeamResponse(CamelModel):
    id: UUID4
    name: str
    description: Optional[str] = None
    owner_id: UUID4
    members: list[TeamMemberResponse]
    created_at: datetime
    updated_at: Optional[datetime] = None
