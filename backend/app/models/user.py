"""
User model for authentication and account management.
"""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Integer, BigInteger, Uuid
import uuid

from app.db.base import Base, utcnow

USER_TYPES = ("individual", "business")
USER_ROLES = ("user", "admin", "owner")


class User(Base):
    """Individual or business account."""

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    # Account kind
    user_type = Column(String(20), nullable=False, default="individual")
    business_name = Column(String(255), nullable=True)
    business_size = Column(String(50), nullable=True)
    industry = Column(String(100), nullable=True)
    website = Column(String(500), nullable=True)

    # Authorization
    plan = Column(String(20), nullable=False, default="free")
    role = Column(String(20), nullable=False, default="user")
    team_id = Column(Uuid, ForeignKey("teams.id", ondelete="SET NULL", use_alter=True), nullable=True, index=True)
    is_team_member = Column(Boolean, nullable=False, default=False)
    api_key_hash = Column(String(64), nullable=True, index=True)

    # Counters
    documents_uploaded = Column(Integer, nullable=False, default=0)
    models_created = Column(Integer, nullable=False, default=0)
    total_tokens_used = Column(BigInteger, nullable=False, default=0)

    # Status
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    # Timestamps
    last_active_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    @property
    def is_business(self) -> bool:
        return self.user_type == "business"

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, type={self.user_type})>"
