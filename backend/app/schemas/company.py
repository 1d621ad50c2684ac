"""
Company schemas for request/response validation.
"""
from pydantic import Field
from typing import Literal, Optional
from datetime import datetime

from app.schemas.common import CamelModel

TrainingStatus = Literal["in_progress", "completed", "failed"]


class CompanyCreate(CamelModel):
    """Schema for creating company. Presence is checked by the service."""
    company_id: Optional[str] = None
    name: Optional[str] = None
    document_context: Optional[str] = None
    chatbot_url: Optional[str] = None
    document_name: Optional[str] = None


class SummaryCreate(CamelModel):
    """Create a company from an uploaded document summary."""
    user_id: Optional[str] = None
    file_name: Optional[str] = None
    summary: Optional[str] = None


class CompanyUpdate(CamelModel):
    """Schema for updating company. Context changes go through the context endpoint."""
    name: Optional[str] = Field(None, min_length=1)
    document_name: Optional[str] = None
    chatbot_url: Optional[str] = None
    logo_url: Optional[str] = None
    brand_color: Optional[str] = None


class TrainingStatusUpdate(CamelModel):
    status: Optional[str] = None


class ContextUpdate(CamelModel):
    context: Optional[str] = None
    expected_version: Optional[int] = Field(None, ge=0)


class CompanyResponse(CamelModel):
    """Schema for company response."""
    company_id: str
    name: str
    document_name: Optional[str] = None
    document_context: Optional[str] = None
    context_version: int
    training_status: str
    chatbot_url: str
    logo_url: Optional[str] = None
    brand_color: str
    created_at: datetime
    updated_at: Optional[datetime] = None


class CompanyRef(CamelModel):
    id: str
    name: str


class SummaryCreated(CamelModel):
    company_id: str
    chatbot_url: str
    file_name: str
    summary_length: int


class ContextWriteResult(CamelModel):
    company: CompanyRef
    context: str
    version: int
    updated_at: datetime
    is_active: bool


class ContextReadResult(CamelModel):
    company: CompanyRef
    context: str
    version: int
    updated_at: Optional[datetime] = None
    source: Literal["context_collection", "company_fallback"]


class ContextVersionSummary(CamelModel):
    id: str
    version: int
    is_active: bool
    context_length: int
    created_at: datetime


class ContextDiagnostic(CamelModel):
    company_id: str
    exists: bool
    company_name: Optional[str] = None
    has_document_context: bool = False
    document_context_length: int = 0
    contexts_count: int = 0
    active_contexts: int = 0
    contexts: list[ContextVersionSummary] = Field(default_factory=list)
    suggestion: Optional[str] = None
    action: Optional[str] = None


class DiagnosticResponse(CamelModel):
    success: bool = True
    diagnostic: ContextDiagnostic
