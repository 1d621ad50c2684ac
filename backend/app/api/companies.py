"""
Company API

Public endpoints used by the support chatbot widget: company records, their
versioned training context and a read-only context diagnostic.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.core.errors import InternalError
from app.db.session import get_db
from app.schemas.common import ApiResponse
from app.schemas.company import (
    CompanyCreate,
    CompanyResponse,
    CompanyUpdate,
    ContextDiagnostic,
    ContextReadResult,
    ContextUpdate,
    ContextWriteResult,
    DiagnosticResponse,
    SummaryCreate,
    SummaryCreated,
    TrainingStatusUpdate,
)
from app.services.company_service import CompanyService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/companies", tags=["companies"])


@router.post("", response_model=ApiResponse[CompanyResponse], status_code=status.HTTP_201_CREATED)
async def create_company(
    data: CompanyCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Create a company with context version 1.

    **Body:** companyId, name, documentContext, chatbotUrl (all required),
    documentName (optional)
    """
    company = await CompanyService(db).create_company(data)
    return ApiResponse(data=CompanyResponse.model_validate(company))


@router.post("/summary", response_model=ApiResponse[SummaryCreated], status_code=status.HTTP_201_CREATED)
async def store_summary(
    data: SummaryCreate,
    db: AsyncSession = Depends(get_db)
):
    """Create a company from a document summary and return its chatbot URL."""
    created = await CompanyService(db).create_from_summary(data.user_id, data.file_name, data.summary)
    return ApiResponse(data=SummaryCreated.model_validate(created))


@router.get("/{company_id}", response_model=ApiResponse[CompanyResponse])
async def get_company(
    company_id: str,
    db: AsyncSession = Depends(get_db)
):
    company = await CompanyService(db).get_company(company_id)
    return ApiResponse(data=CompanyResponse.model_validate(company))


@router.put("/{company_id}", response_model=ApiResponse[CompanyResponse])
async def update_company(
    company_id: str,
    data: CompanyUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Update name, branding or chatbot URL. Context changes use the context endpoint."""
    company = await CompanyService(db).update_company(company_id, data)
    return ApiResponse(data=CompanyResponse.model_validate(company))


@router.delete("/{company_id}", response_model=ApiResponse[dict])
async def delete_company(
    company_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Delete the company together with all of its context versions."""
    await CompanyService(db).delete_company(company_id)
    return ApiResponse(data={})


@router.put("/{company_id}/training-status", response_model=ApiResponse[CompanyResponse])
async def update_training_status(
    company_id: str,
    data: TrainingStatusUpdate,
    db: AsyncSession = Depends(get_db)
):
    company = await CompanyService(db).update_training_status(company_id, data.status)
    return ApiResponse(data=CompanyResponse.model_validate(company))


@router.post("/{company_id}/context", response_model=ApiResponse[ContextWriteResult])
async def update_context(
    company_id: str,
    data: ContextUpdate,
    db: AsyncSession = Depends(get_db)
):
    """
    Store a new context version and make it the only active one.

    **Body:**
    - context: new context text (required)
    - expectedVersion: optional; the write is rejected with 400 when the
      company's current version differs
    """
    result = await CompanyService(db).update_context(company_id, data.context, data.expected_version)
    return ApiResponse(data=ContextWriteResult.model_validate(result))


@router.get("/{company_id}/context", response_model=ApiResponse[ContextReadResult])
async def get_context(
    company_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Active context version, or the company's stored context as version 1."""
    result = await CompanyService(db).get_context(company_id)
    return ApiResponse(data=ContextReadResult.model_validate(result))


@router.get("/{company_id}/context-diagnostic", response_model=DiagnosticResponse)
async def context_diagnostic(
    company_id: str,
    db: AsyncSession = Depends(get_db)
):
    """
    Report on a company's context state.

    A missing company is reported with ``exists: false`` rather than 404.
    """
    try:
        diagnostic = await CompanyService(db).diagnose(company_id)
    except SQLAlchemyError as e:
        logger.error(f"Context diagnostic for {company_id} failed: {e}", exc_info=True)
        raise InternalError("Failed to run context diagnostic")
    return DiagnosticResponse(diagnostic=ContextDiagnostic.model_validate(diagnostic))
