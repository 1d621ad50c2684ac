"""
Document upload and management.
"""
import logging
from typing import List, Optional
import uuid

from fastapi import UploadFile
from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import InternalError, NotFoundError, PlanLimitError, ValidationError
from app.models.document import Document
from app.models.user import User
from app.schemas.document import DocumentUpdate
from app.services import authorization, storage
from app.services.plans import within_limit
from app.services.subscription_service import SubscriptionService
from app.services.usage_service import UsageService

logger = logging.getLogger(__name__)


class DocumentService:
    """Service for document operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_document(self, document_id: uuid.UUID) -> Document:
        result = await self.db.execute(select(Document).where(Document.id == document_id))
        document = result.scalar_one_or_none()
        if not document:
            raise NotFoundError("Document not found")
        return document

    async def get_readable(self, document_id: uuid.UUID, user: User) -> Document:
        document = await self.get_document(document_id)
        authorization.ensure_can_read(user, document, "document")
        return document

    async def get_owned(self, document_id: uuid.UUID, user: User) -> Document:
        document = await self.get_document(document_id)
        authorization.ensure_can_mutate(user, document, "document")
        return document

    async def list_for_user(self, user: User) -> List[Document]:
        """Own documents plus those shared with the user's team."""
        visible = Document.user_id == user.id
        if user.team_id is not None:
            visible = or_(visible, Document.team_id == user.team_id)
        result = await self.db.execute(
            select(Document).where(visible).order_by(Document.created_at.desc())
        )
        return list(result.scalars().all())

    async def _usage_totals(self, user_id: uuid.UUID) -> tuple[int, int]:
        result = await self.db.execute(
            select(func.count(Document.id), func.coalesce(func.sum(Document.file_size), 0))
            .where(Document.user_id == user_id)
        )
        count, storage_used = result.one()
        return int(count), int(storage_used)

    async def upload(
        self,
        user: User,
        upload: UploadFile,
        title: Optional[str],
        description: Optional[str] = None,
    ) -> Document:
        """
        Store an uploaded PDF and record it.

        The stored file is removed again if validation or persistence fails.

        Raises:
            ValidationError: Missing title, wrong type or oversize file
            PlanLimitError: Document count or storage limit reached
        """
        if not title or not title.strip():
            raise ValidationError("Please add a title")

        limits = await SubscriptionService(self.db).resolve_limits(user)
        count, storage_used = await self._usage_totals(user.id)
        if not within_limit(limits.max_documents, count):
            raise PlanLimitError("Document limit reached for your plan. Please upgrade.")

        path, size = await storage.save_upload(upload)
        try:
            if not within_limit(limits.max_storage, storage_used, size):
                raise PlanLimitError("Storage limit reached for your plan. Please upgrade.")

            document = Document(
                title=title.strip(),
                description=description,
                file_name=upload.filename or "document.pdf",
                file_path=path,
                file_size=size,
                file_type=upload.content_type,
                user_id=user.id,
                team_id=user.team_id,
            )
            self.db.add(document)
            await self.db.flush()

            user.documents_uploaded = (user.documents_uploaded or 0) + 1
            UsageService(self.db).record(
                user,
                "document_upload",
                resource_type="document",
                resource_id=document.id,
                request_size=size,
                storage_used=size,
                endpoint="/api/documents",
            )
            await self.db.commit()
        except PlanLimitError:
            await storage.delete_file(path)
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            await storage.delete_file(path)
            logger.error(f"Failed to save document: {e}", exc_info=True)
            raise InternalError("Failed to save document")

        await self.db.refresh(document)
        logger.info(f"Document {document.id} uploaded by {user.id} ({size} bytes)")
        return document

    async def update(self, document_id: uuid.UUID, user: User, data: DocumentUpdate) -> Document:
        document = await self.get_owned(document_id, user)
        updates = data.model_dump(exclude_unset=True)
        if updates.get("title"):
            document.title = updates["title"].strip()
        if "description" in updates:
            document.description = updates["description"]
        if updates.get("is_public") is not None:
            document.is_public = updates["is_public"]
        await self.db.commit()
        await self.db.refresh(document)
        return document

    async def delete(self, document_id: uuid.UUID, user: User) -> None:
        document = await self.get_owned(document_id, user)
        path = document.file_path
        await self.db.delete(document)
        await self.db.commit()
        await storage.delete_file(path)
        logger.info(f"Document {document_id} deleted by {user.id}")
