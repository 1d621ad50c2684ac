"""
AI model schemas.
"""
from pydantic import Field, UUID4
from typing import Literal, Optional
from datetime import datetime

from app.schemas.common import CamelModel
from app.schemas.document import DocumentResponse

BaseModelName = Literal["gpt", "gemini", "mistral", "llama", "custom"]


class AIModelCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=500)
    base_model: BaseModelName = "gpt"
    document_ids: list[UUID4] = Field(default_factory=list)
    is_public: bool = False


class AIModelUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=500)
    is_public: Optional[bool] = None


class AIModelResponse(CamelModel):
    id: UUID4
    name: str
    description: Optional[str] = None
    base_model: str
    status: str
    training_progress: int
    training_error: Optional[str] = None
    training_started_at: Optional[datetime] = None
    training_completed_at: Optional[datetime] = None
    is_public: bool
    user_id: UUID4
    team_id: Optional[UUID4] = None
    documents: list[DocumentResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: Optional[datetime] = None
