"""
Uploaded document model.
"""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, BigInteger, Uuid
import uuid

from app.db.base import Base, utcnow


class Document(Base):
    """PDF uploaded by a user, optionally visible to the user's team."""

    __tablename__ = "documents"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    file_name = Column(String(255), nullable=False)
    file_path = Column(String(1000), nullable=False)
    file_size = Column(BigInteger, nullable=False, default=0)
    file_type = Column(String(100), nullable=False)
    is_public = Column(Boolean, nullable=False, default=False)

    # Ownership
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    team_id = Column(Uuid, ForeignKey("teams.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<Document(id={self.id}, title={self.title})>"
