"""
Subscription model (payments are mocked).
"""
from sqlalchemy import Column, String, DateTime, ForeignKey, Text, Uuid, JSON, Index, text
import uuid

from app.db.base import Base, utcnow

SUBSCRIPTION_STATUSES = ("active", "inactive", "past_due", "canceled", "trialing")
LIVE_STATUSES = ("active", "trialing")
PAYMENT_METHODS = ("credit_card", "paypal", "bank_transfer", "none")

_LIVE_PREDICATE = text("status IN ('active', 'trialing')")


class Subscription(Base):
    """Per-user plan record. At most one row per user is active or trialing."""

    __tablename__ = "subscriptions"
    __table_args__ = (
        Index(
            "uq_subscriptions_one_live_per_user",
            "user_id",
            unique=True,
            postgresql_where=_LIVE_PREDICATE,
            sqlite_where=_LIVE_PREDICATE,
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    plan = Column(String(20), nullable=False, default="free")
    status = Column(String(20), nullable=False, default="active")

    start_date = Column(DateTime, default=utcnow, nullable=False)
    end_date = Column(DateTime, nullable=True)
    renewal_date = Column(DateTime, nullable=True)

    payment_method = Column(String(20), nullable=False, default="none")
    payment_method_details = Column(JSON, nullable=True)
    cancellation_reason = Column(Text, nullable=True)

    # Limits snapshot taken from the plan table when the plan was set
    features = Column(JSON, nullable=False, default=dict)
    invoices = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<Subscription(user_id={self.user_id}, plan={self.plan}, status={self.status})>"
