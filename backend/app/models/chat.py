"""
Chat sessions and their messages.
"""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Integer, BigInteger, Text, Uuid
from sqlalchemy.orm import relationship
import uuid

from app.db.base import Base, utcnow

CHAT_LANGUAGES = ("english", "hindi", "arabic", "nepali", "spanish", "french", "chinese")
MESSAGE_ROLES = ("user", "assistant", "system")


class Chat(Base):
    """Conversation between a user and one of the AI models."""

    __tablename__ = "chats"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(100), nullable=False, default="New Chat")
    ai_model_id = Column(Uuid, ForeignKey("ai_models.id", ondelete="CASCADE"), nullable=False, index=True)
    language = Column(String(20), nullable=False, default="english")
    total_tokens_used = Column(BigInteger, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    reply_pending = Column(Boolean, nullable=False, default=False)

    # Ownership
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    team_id = Column(Uuid, ForeignKey("teams.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    messages = relationship(
        "ChatMessage",
        back_populates="chat",
        cascade="all, delete-orphan",
        order_by="ChatMessage.sequence",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<Chat(id={self.id}, title={self.title})>"


class ChatMessage(Base):
    __tablename__ = "chat_messages"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    chat_id = Column(Uuid, ForeignKey("chats.id", ondelete="CASCADE"), nullable=False, index=True)
    sequence = Column(Integer, nullable=False, default=0)
    role = Column(String(20), nullable=False)
    content = Column(Text, nullable=False)
    token_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    chat = relationship("Chat", back_populates="messages")

    def __repr__(self):
        return f"<ChatMessage(chat_id={self.chat_id}, role={self.role})>"
