"""
Document API

PDF upload plus owner-only changes; documents are readable by the owner's
team.
"""
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import uuid

from app.db.session import get_db
from app.api.deps import get_current_active_user
from app.models.user import User
from app.schemas.common import ApiResponse, ListResponse
from app.schemas.document import DocumentResponse, DocumentUpdate
from app.services.document_service import DocumentService

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post("", response_model=ApiResponse[DocumentResponse], status_code=status.HTTP_201_CREATED)
async def upload_document(
    document: UploadFile = File(...),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Upload a PDF (max 10MB by default).

    **Form fields:**
    - document: the file
    - title: required
    - description: optional
    """
    created = await DocumentService(db).upload(current_user, document, title, description)
    return ApiResponse(data=DocumentResponse.model_validate(created))


@router.get("", response_model=ListResponse[DocumentResponse])
async def list_documents(
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    documents = await DocumentService(db).list_for_user(current_user)
    return ListResponse.of([DocumentResponse.model_validate(d) for d in documents])


@router.get("/{document_id}", response_model=ApiResponse[DocumentResponse])
async def get_document(
    document_id: uuid.UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    document = await DocumentService(db).get_readable(document_id, current_user)
    return ApiResponse(data=DocumentResponse.model_validate(document))


@router.put("/{document_id}", response_model=ApiResponse[DocumentResponse])
async def update_document(
    document_id: uuid.UUID,
    data: DocumentUpdate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    document = await DocumentService(db).update(document_id, current_user, data)
    return ApiResponse(data=DocumentResponse.model_validate(document))


@router.delete("/{document_id}", response_model=ApiResponse[dict])
async def delete_document(
    document_id: uuid.UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    await DocumentService(db).delete(document_id, current_user)
    return ApiResponse(data={})
