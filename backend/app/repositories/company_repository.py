"""
Company repository for database operations.

Data access for companies and their context versions. Methods never commit;
the service owns the transaction boundary.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import utcnow
from app.models.company import Company, CompanyContextVersion

logger = logging.getLogger(__name__)


class CompanyRepository:
    """
    Repository for company and context-version persistence.

    The current context version is tracked by ``Company.context_version``;
    ``swap_context_pointer`` advances it only when it still holds the value
    the caller read.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    # ==================== Company CRUD ====================

    async def get(self, company_id: str) -> Optional[Company]:
        result = await self.session.execute(
            select(Company).where(Company.company_id == company_id)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> List[Company]:
        result = await self.session.execute(select(Company).order_by(Company.created_at))
        return list(result.scalars().all())

    def add(self, company: Company) -> Company:
        self.session.add(company)
        return company

    async def delete(self, company: Company) -> None:
        """Delete the company and every context version it owns."""
        await self.session.execute(
            delete(CompanyContextVersion).where(
                CompanyContextVersion.company_id == company.company_id
            )
        )
        await self.session.delete(company)

    # ==================== Context versions ====================

    async def max_version(self, company_id: str) -> int:
        """Highest version number recorded for the company, 0 if none."""
        result = await self.session.execute(
            select(func.max(CompanyContextVersion.version)).where(
                CompanyContextVersion.company_id == company_id
            )
        )
        return result.scalar_one() or 0

    async def list_versions(self, company_id: str) -> List[CompanyContextVersion]:
        """All versions, newest first."""
        result = await self.session.execute(
            select(CompanyContextVersion)
            .where(CompanyContextVersion.company_id == company_id)
            .order_by(CompanyContextVersion.version.desc())
        )
        return list(result.scalars().all())

    async def active_version(self, company_id: str) -> Optional[CompanyContextVersion]:
        """
        The authoritative version: the highest-numbered active one.

        Tolerates several active rows so reads never fail on a damaged
        company; the diagnostic reports that state.
        """
        result = await self.session.execute(
            select(CompanyContextVersion)
            .where(
                CompanyContextVersion.company_id == company_id,
                CompanyContextVersion.is_active.is_(True),
            )
            .order_by(CompanyContextVersion.version.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def swap_context_pointer(
        self,
        company_id: str,
        expected_version: int,
        new_version: int,
        context: str,
    ) -> bool:
        """
        Compare-and-swap the company's version pointer and cached text.

        Returns:
            True if the pointer still held ``expected_version`` and was moved
        """
        result = await self.session.execute(
            update(Company)
            .where(
                Company.company_id == company_id,
                Company.context_version == expected_version,
            )
            .values(
                context_version=new_version,
                document_context=context,
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def deactivate_versions(self, company_id: str, keep_version: Optional[int] = None) -> int:
        """Mark versions inactive, optionally sparing ``keep_version``."""
        stmt = (
            update(CompanyContextVersion)
            .where(
                CompanyContextVersion.company_id == company_id,
                CompanyContextVersion.is_active.is_(True),
            )
            .values(is_active=False, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if keep_version is not None:
            stmt = stmt.where(CompanyContextVersion.version != keep_version)
        result = await self.session.execute(stmt)
        return result.rowcount

    async def add_version(
        self, company_id: str, context: str, version: int, is_active: bool = True
    ) -> CompanyContextVersion:
        record = CompanyContextVersion(
            company_id=company_id,
            context=context,
            version=version,
            is_active=is_active,
        )
        self.session.add(record)
        await self.session.flush()
        return record

