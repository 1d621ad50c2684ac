"""
Chat sessions with the mocked assistant.
"""
import logging
from typing import List, Optional
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError, ValidationError
from app.models.chat import Chat, ChatMessage
from app.models.user import User
from app.schemas.chat import ChatCreate
from app.services import authorization
from app.services.model_service import ModelService
from app.services.responder import estimate_tokens

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "New Chat"


class ChatService:
    """Service for chat operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_chat(self, chat_id: uuid.UUID) -> Chat:
        result = await self.db.execute(select(Chat).where(Chat.id == chat_id))
        chat = result.scalar_one_or_none()
        if not chat:
            raise NotFoundError("Chat not found")
        return chat

    async def get_readable(self, chat_id: uuid.UUID, user: User) -> Chat:
        chat = await self.get_chat(chat_id)
        authorization.ensure_can_read(user, chat, "chat")
        return chat

    async def get_owned(self, chat_id: uuid.UUID, user: User) -> Chat:
        chat = await self.get_chat(chat_id)
        authorization.ensure_can_mutate(user, chat, "chat")
        return chat

    async def list_for_user(self, user: User) -> List[Chat]:
        result = await self.db.execute(
            select(Chat).where(Chat.user_id == user.id).order_by(Chat.updated_at.desc())
        )
        return list(result.scalars().all())

    async def create(self, user: User, data: ChatCreate) -> Chat:
        """Start a chat with a model the user can read."""
        await ModelService(self.db).get_readable(data.model_id, user)

        chat = Chat(
            title=(data.title or "").strip() or DEFAULT_TITLE,
            ai_model_id=data.model_id,
            language=data.language,
            user_id=user.id,
            team_id=user.team_id,
        )
        self.db.add(chat)
        await self.db.commit()
        await self.db.refresh(chat)
        return chat

    async def rename(self, chat_id: uuid.UUID, user: User, title: str) -> Chat:
        chat = await self.get_owned(chat_id, user)
        chat.title = title.strip() or DEFAULT_TITLE
        await self.db.commit()
        await self.db.refresh(chat)
        return chat

    async def delete(self, chat_id: uuid.UUID, user: User) -> None:
        chat = await self.get_owned(chat_id, user)
        await self.db.delete(chat)
        await self.db.commit()

    async def add_user_message(self, chat_id: uuid.UUID, user: User, content: Optional[str]) -> ChatMessage:
        """
        Append the user's message and mark the reply as pending. The caller
        schedules the reply job.

        Raises:
            ValidationError: Empty content, or a reply is still pending
        """
        if not content or not content.strip():
            raise ValidationError("Please add a message")

        chat = await self.get_owned(chat_id, user)
        if chat.reply_pending:
            raise ValidationError("Please wait for the previous reply")

        message = ChatMessage(
            role="user",
            content=content.strip(),
            token_count=estimate_tokens(content),
            sequence=len(chat.messages),
        )
        chat.messages.append(message)
        chat.reply_pending = True
        await self.db.commit()
        await self.db.refresh(chat)
        return message
