"""
Chat schemas.
"""
from pydantic import Field, UUID4
from typing import Literal, Optional
from datetime import datetime

from app.schemas.common import CamelModel

Language = Literal["english", "hindi", "arabic", "nepali", "spanish", "french", "chinese"]


class ChatCreate(CamelModel):
    model_id: UUID4
    title: Optional[str] = Field(None, max_length=100)
    language: Language = "english"


class ChatUpdate(CamelModel):
    title: str = Field(..., min_length=1, max_length=100)


class MessageCreate(CamelModel):
    content: Optional[str] = None


class ChatMessageResponse(CamelModel):
    id: UUID4
    role: str
    content: str
    token_count: int
    created_at: datetime


class ChatResponse(CamelModel):
    id: UUID4
    title: str
    ai_model_id: UUID4
    language: str
    total_tokens_used: int
    is_active: bool
    reply_pending: bool
    user_id: UUID4
    team_id: Optional[UUID4] = None
    messages: list[ChatMessageResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: Optional[datetime] = None


class MessageAccepted(CamelModel):
    """Returned while the assistant reply is being generated."""
    message: ChatMessageResponse
    chat: ChatResponse
    reply_status: str = "pending"
