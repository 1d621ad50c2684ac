"""
Company records and their versioned training context.

Context writes run in one transaction and move ``Company.context_version``
with a compare-and-swap, so concurrent updates for the same company cannot
leave it with zero or several active versions.
"""
import logging
import secrets
import string
import time
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ConflictError, InternalError, NotFoundError, ValidationError
from app.models.company import Company, TRAINING_STATUSES, default_logo_url
from app.repositories.company_repository import CompanyRepository
from app.schemas.company import CompanyCreate, CompanyUpdate

logger = logging.getLogger(__name__)

SOURCE_VERSIONED = "context_collection"
SOURCE_FALLBACK = "company_fallback"

CREATE_CONTEXT = "CREATE_CONTEXT"
UPLOAD_DOCUMENT = "UPLOAD_DOCUMENT"
FIX_ACTIVE_CONTEXTS = "FIX_ACTIVE_CONTEXTS"

ACTIONS = {
    CREATE_CONTEXT: "Create version 1 from the company's stored document context",
    UPLOAD_DOCUMENT: "Upload a document to generate the company context",
    FIX_ACTIVE_CONTEXTS: "Keep only the latest context version active",
}

_ID_ALPHABET = string.ascii_lowercase + string.digits


def _present(value: Optional[str]) -> bool:
    return bool(value and value.strip())


def generate_company_id(user_id: str) -> str:
    """``<userId>-<ms timestamp>-<6 random chars>``"""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(6))
    return f"{user_id}-{int(time.time() * 1000)}-{suffix}"


def reported_version(company: Company) -> int:
    """
    Version a reader is shown: the pointer, or 1 for a company whose only
    context is the stored text.
    """
    if company.context_version:
        return company.context_version
    return 1 if _present(company.document_context) else 0


def suggest(contexts_count: int, active_contexts: int, has_document_context: bool) -> Optional[str]:
    """Remediation code for an anomalous context state, None when healthy."""
    if contexts_count == 0:
        return CREATE_CONTEXT if has_document_context else UPLOAD_DOCUMENT
    if active_contexts != 1:
        return FIX_ACTIVE_CONTEXTS
    return None


class CompanyService:
    """Service for company and context-version operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = CompanyRepository(db)

    async def get_company(self, company_id: str) -> Company:
        company = await self.repo.get(company_id)
        if not company:
            raise NotFoundError("Company not found")
        return company

    async def _commit(self, failure: str, conflict: Optional[str] = None) -> None:
        """Commit, mapping persistence failures after a full rollback."""
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"{failure}: {e.orig}")
            raise ConflictError(conflict or failure)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"{failure}: {e}", exc_info=True)
            raise InternalError(failure)

    # ==================== Company CRUD ====================

    async def create_company(self, data: CompanyCreate) -> Company:
        """
        Create the company and its first context version together.

        Raises:
            ValidationError: A required field is missing
            ConflictError: The company id is taken
        """
        required = (data.company_id, data.name, data.document_context, data.chatbot_url)
        if not all(_present(value) for value in required):
            raise ValidationError("Please provide all required fields")

        company_id = data.company_id.strip()
        if await self.repo.get(company_id):
            raise ConflictError("Company with this ID already exists")

        company = Company(
            company_id=company_id,
            name=data.name.strip(),
            document_name=data.document_name,
            document_context=data.document_context,
            context_version=1,
            training_status="completed",
            chatbot_url=data.chatbot_url,
            logo_url=default_logo_url(data.name),
        )
        try:
            self.repo.add(company)
            await self.db.flush()
            await self.repo.add_version(company_id, data.document_context, 1)
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Company with this ID already exists")
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to create company {company_id}: {e}", exc_info=True)
            raise InternalError("Failed to create company")
        await self._commit("Failed to create company", conflict="Company with this ID already exists")
        await self.db.refresh(company)

        logger.info(f"Company {company_id} created with context version 1")
        return company

    async def create_from_summary(
        self, user_id: Optional[str], file_name: Optional[str], summary: Optional[str]
    ) -> Dict[str, Any]:
        """Create a company whose context is an uploaded document's summary."""
        if not (_present(user_id) and _present(file_name) and _present(summary)):
            raise ValidationError("Please provide userId, fileName and summary")

        company_id = generate_company_id(user_id.strip())
        chatbot_url = f"/chatbot/summary/{company_id}"
        await self.create_company(CompanyCreate(
            company_id=company_id,
            name=file_name,
            document_context=summary,
            chatbot_url=chatbot_url,
            document_name=file_name,
        ))
        return {
            "company_id": company_id,
            "chatbot_url": chatbot_url,
            "file_name": file_name,
            "summary_length": len(summary),
        }

    async def update_company(self, company_id: str, data: CompanyUpdate) -> Company:
        company = await self.get_company(company_id)
        updates = data.model_dump(exclude_unset=True)
        for field in ("name", "document_name", "chatbot_url", "logo_url", "brand_color"):
            if updates.get(field) is not None:
                setattr(company, field, updates[field])
        await self._commit("Failed to update company")
        await self.db.refresh(company)
        return company

    async def delete_company(self, company_id: str) -> None:
        company = await self.get_company(company_id)
        await self.repo.delete(company)
        await self._commit("Failed to delete company")
        logger.info(f"Company {company_id} deleted")

    async def update_training_status(self, company_id: str, status: Optional[str]) -> Company:
        if status not in TRAINING_STATUSES:
            raise ValidationError(f"Status must be one of: {', '.join(TRAINING_STATUSES)}")
        company = await self.get_company(company_id)
        company.training_status = status
        await self._commit("Failed to update training status")
        await self.db.refresh(company)
        return company

    # ==================== Context versions ====================

    async def update_context(
        self,
        company_id: str,
        context: Optional[str],
        expected_version: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Write a new active context version.

        Reads the pointer and the highest recorded version, swaps the pointer
        forward, deactivates every older version and inserts the new one, all
        in one transaction. Nothing is written if any step fails.

        Args:
            company_id: External company id
            context: New context text
            expected_version: Version the caller last read; rejects the write
                when the company has moved on since

        Raises:
            ValidationError: Missing context
            NotFoundError: Unknown company
            ConflictError: A concurrent writer won, or ``expected_version`` is stale
            InternalError: Any other persistence failure
        """
        if not _present(context):
            raise ValidationError("Please provide context")

        company = await self.get_company(company_id)
        current = company.context_version or 0
        shown = reported_version(company)
        if expected_version is not None and expected_version != shown:
            await self.db.rollback()
            raise ConflictError(
                f"Context is at version {shown}, expected {expected_version}"
            )

        try:
            max_version = await self.repo.max_version(company_id)
            new_version = max(max_version, current) + 1

            if not await self.repo.swap_context_pointer(company_id, current, new_version, context):
                raise ConflictError("Context was updated concurrently, please retry")

            await self.repo.deactivate_versions(company_id)
            record = await self.repo.add_version(company_id, context, new_version)
        except ConflictError:
            await self.db.rollback()
            raise
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Context was updated concurrently, please retry")
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Context update for {company_id} failed: {e}", exc_info=True)
            raise InternalError("Failed to update company context")

        await self._commit(
            "Failed to update company context",
            conflict="Context was updated concurrently, please retry",
        )
        await self.db.refresh(company)

        logger.info(f"Company {company_id} context version {new_version} activated")
        return {
            "company": {"id": company.company_id, "name": company.name},
            "context": record.context,
            "version": record.version,
            "updated_at": record.updated_at or record.created_at,
            "is_active": record.is_active,
        }

    async def get_context(self, company_id: str) -> Dict[str, Any]:
        """
        Resolve the current context: the active version, else the cached
        text on the company record as version 1.

        Raises:
            NotFoundError: Unknown company, or no context from either source
        """
        company = await self.get_company(company_id)
        ref = {"id": company.company_id, "name": company.name}

        active = await self.repo.active_version(company_id)
        if active is not None:
            return {
                "company": ref,
                "context": active.context,
                "version": active.version,
                "updated_at": active.updated_at or active.created_at,
                "source": SOURCE_VERSIONED,
            }

        if _present(company.document_context):
            return {
                "company": ref,
                "context": company.document_context,
                "version": 1,
                "updated_at": company.updated_at,
                "source": SOURCE_FALLBACK,
            }

        raise NotFoundError("No context found for this company")

    async def diagnose(self, company_id: str) -> Dict[str, Any]:
        """Read-only report on a company's context state."""
        company = await self.repo.get(company_id)
        if company is None:
            return {"company_id": company_id, "exists": False}

        versions = await self.repo.list_versions(company_id)
        active = sum(1 for v in versions if v.is_active)
        document_context = company.document_context or ""
        has_document_context = _present(document_context)
        suggestion = suggest(len(versions), active, has_document_context)

        return {
            "company_id": company_id,
            "exists": True,
            "company_name": company.name,
            "has_document_context": has_document_context,
            "document_context_length": len(document_context),
            "contexts_count": len(versions),
            "active_contexts": active,
            "contexts": [
                {
                    "id": str(v.id),
                    "version": v.version,
                    "is_active": v.is_active,
                    "context_length": len(v.context or ""),
                    "created_at": v.created_at,
                }
                for v in versions
            ],
            "suggestion": suggestion,
            "action": ACTIONS.get(suggestion),
        }

    # ==================== Maintenance ====================

    async def repair(self, company_id: str) -> Optional[str]:
        """
        Bring one company back to exactly one active version.

        Returns:
            The remediation applied, UPLOAD_DOCUMENT when nothing can be
            done automatically, or None when the company was healthy
        """
        company = await self.get_company(company_id)
        versions = await self.repo.list_versions(company_id)
        active = [v for v in versions if v.is_active]

        if not versions:
            if not _present(company.document_context):
                return UPLOAD_DOCUMENT
            await self.repo.add_version(company_id, company.document_context, 1)
            company.context_version = 1
            await self._commit(f"Failed to repair company {company_id}")
            logger.info(f"Created context version 1 for {company_id}")
            return CREATE_CONTEXT

        if len(active) == 1:
            return None

        keep = active[0] if active else versions[0]
        await self.repo.deactivate_versions(company_id, keep_version=keep.version)
        keep.is_active = True
        company.context_version = keep.version
        company.document_context = keep.context
        await self._commit(f"Failed to repair company {company_id}")
        logger.info(f"Company {company_id} realigned on context version {keep.version}")
        return FIX_ACTIVE_CONTEXTS

    async def backfill(self) -> List[str]:
        """Create version 1 for every company that only has the cached text."""
        repaired = []
        for company in await self.repo.list_all():
            if await self.repo.max_version(company.company_id) > 0:
                continue
            if await self.repair(company.company_id) == CREATE_CONTEXT:
                repaired.append(company.company_id)
        return repaired
