"""
Company records backing the support chatbot widget, and their versioned
training context.
"""
from sqlalchemy import Column, String, Boolean, DateTime, Integer, Text, Uuid, ForeignKey, UniqueConstraint
import uuid

from app.db.base import Base, utcnow

TRAINING_STATUSES = ("in_progress", "completed", "failed")
DEFAULT_BRAND_COLOR = "#4f46e5"


def default_logo_url(name: str) -> str:
    initials = (name or "").strip()[:2].upper() or "CO"
    return f"https://placehold.co/100x100?text={initials}"


class Company(Base):
    """
    External-facing company record keyed by a caller-assigned ``company_id``.

    ``document_context`` is a cache of the active context version's text.
    ``context_version`` points at the version number the cache reflects and
    is the compare-and-swap target of every context update.
    """

    __tablename__ = "companies"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    document_name = Column(String(255), nullable=True)
    document_context = Column(Text, nullable=True)
    context_version = Column(Integer, nullable=False, default=0)
    training_status = Column(String(20), nullable=False, default="completed")
    chatbot_url = Column(String(500), nullable=False)

    # Branding
    logo_url = Column(String(500), nullable=True)
    brand_color = Column(String(20), nullable=False, default=DEFAULT_BRAND_COLOR)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<Company(company_id={self.company_id}, name={self.name})>"


class CompanyContextVersion(Base):
    """One version of a company's context text."""

    __tablename__ = "company_contexts"
    __table_args__ = (UniqueConstraint("company_id", "version", name="uq_company_contexts_company_version"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id = Column(
        String(255),
        ForeignKey("companies.company_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    context = Column(Text, nullable=False)
    version = Column(Integer, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<CompanyContextVersion(company_id={self.company_id}, version={self.version}, active={self.is_active})>"
