"""
Append-only ledger of billable actions.
"""
from sqlalchemy import Column, String, DateTime, ForeignKey, Integer, BigInteger, Uuid
import uuid

from app.db.base import Base, utcnow

USAGE_KINDS = ("document_upload", "model_training", "chat", "api_call")


class UsageRecord(Base):
    """Immutable usage fact. Rows are only ever inserted."""

    __tablename__ = "usage_records"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    team_id = Column(Uuid, ForeignKey("teams.id", ondelete="SET NULL"), nullable=True)
    kind = Column(String(30), nullable=False, index=True)

    # Resource reference
    resource_type = Column(String(30), nullable=True)
    resource_id = Column(Uuid, nullable=True)

    # Metrics
    request_size = Column(BigInteger, nullable=False, default=0)
    response_size = Column(BigInteger, nullable=False, default=0)
    total_tokens = Column(Integer, nullable=False, default=0)
    compute_time_ms = Column(Integer, nullable=False, default=0)
    storage_used = Column(BigInteger, nullable=False, default=0)

    # Request details
    endpoint = Column(String(255), nullable=True)
    status = Column(String(20), nullable=False, default="success")
    ip = Column(String(64), nullable=True)
    user_agent = Column(String(500), nullable=True)

    timestamp = Column(DateTime, default=utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<UsageRecord(user_id={self.user_id}, kind={self.kind})>"
