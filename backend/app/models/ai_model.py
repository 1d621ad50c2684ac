"""
AI model records and their training documents.
"""
from sqlalchemy import (
    Column, String, Boolean, DateTime, ForeignKey, Integer, Table, Text, Uuid
)
from sqlalchemy.orm import relationship
import uuid

from app.db.base import Base, utcnow

BASE_MODELS = ("gpt", "gemini", "mistral", "llama", "custom")
MODEL_STATUSES = ("pending", "training", "ready", "failed")


ai_model_documents = Table(
    "ai_model_documents",
    Base.metadata,
    Column("ai_model_id", Uuid, ForeignKey("ai_models.id", ondelete="CASCADE"), primary_key=True),
    Column("document_id", Uuid, ForeignKey("documents.id", ondelete="CASCADE"), primary_key=True),
)


class AIModel(Base):
    """A user's custom model; training is simulated."""

    __tablename__ = "ai_models"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(50), nullable=False)
    description = Column(String(500), nullable=True)
    base_model = Column(String(20), nullable=False, default="gpt")

    # Training state
    status = Column(String(20), nullable=False, default="pending", index=True)
    training_progress = Column(Integer, nullable=False, default=0)
    training_error = Column(Text, nullable=True)
    training_started_at = Column(DateTime, nullable=True)
    training_completed_at = Column(DateTime, nullable=True)

    is_public = Column(Boolean, nullable=False, default=False)

    # Ownership
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    team_id = Column(Uuid, ForeignKey("teams.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    documents = relationship("Document", secondary=ai_model_documents, lazy="selectin")

    def __repr__(self):
        return f"<AIModel(id={self.id}, name={self.name}, status={self.status})>"
