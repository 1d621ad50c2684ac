"""
Document schemas.
"""
from pydantic import Field, UUID4
from typing import Optional
from datetime import datetime

from app.schemas.common import CamelModel


class DocumentUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    is_public: Optional[bool] = None


class DocumentResponse(CamelModel):
    id: UUID4
    title: str
    description: Optional[str] = None
    file_name: str
    file_size: int
    file_type: str
    is_public: bool
    user_id: UUID4
    team_id: Optional[UUID4] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
