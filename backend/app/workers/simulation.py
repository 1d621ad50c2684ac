"""
Simulated model training and mocked assistant replies.

Each job opens its own database session; the request that scheduled it has
already returned.
"""
import asyncio
import logging
import uuid


from app.core.config import settings
from app.db.base import utcnow
from app.db.session import get_session_factory
from app.models.ai_model import AIModel
from app.models.chat import Chat, ChatMessage
from app.models.user import User
from app.services.responder import generate_reply
from app.services.usage_service import UsageService

logger = logging.getLogger(__name__)


async def run_training(model_id: uuid.UUID) -> None:
    """
    Advance a model from ``training`` to ``ready`` in fixed steps.

    Stops early if the model was deleted or left the training state.
    """
    steps = settings.simulation.training_steps
    delay = settings.simulation.training_step_seconds
    factory = get_session_factory()

    try:
        for step in range(1, steps + 1):
            await asyncio.sleep(delay)
            async with factory() as session:
                model = await session.get(AIModel, model_id)
                if model is None or model.status != "training":
                    logger.info(f"Training of model {model_id} abandoned")
                    return

                model.training_progress = min(100, round(step * 100 / steps))
                if step == steps:
                    model.status = "ready"
                    model.training_completed_at = utcnow()
                await session.commit()

        logger.info(f"Model {model_id} finished training")
    except Exception as e:
        logger.error(f"Training of model {model_id} failed: {e}", exc_info=True)
        await _mark_training_failed(model_id, str(e))


async def _mark_training_failed(model_id: uuid.UUID, error: str) -> None:
    async with get_session_factory()() as session:
        model = await session.get(AIModel, model_id)
        if model is not None:
            model.status = "failed"
            model.training_error = error[:1000]
            await session.commit()


async def run_reply(chat_id: uuid.UUID) -> None:
    """Append the assistant's reply to the chat and bill the tokens."""
    await asyncio.sleep(settings.simulation.reply_delay_seconds)
    factory = get_session_factory()

    try:
        async with factory() as session:
            chat = await session.get(Chat, chat_id)
            if chat is None:
                logger.info(f"Chat {chat_id} deleted before reply")
                return

            model = await session.get(AIModel, chat.ai_model_id)
            user = await session.get(User, chat.user_id)
            last_user_message = next(
                (m.content for m in reversed(chat.messages) if m.role == "user"), ""
            )

            reply = generate_reply(
                last_user_message,
                model.name if model else "your assistant",
                len(chat.messages),
                chat.language,
            )
            chat.messages.append(ChatMessage(
                role="assistant",
                content=reply.content,
                token_count=reply.completion_tokens,
                sequence=len(chat.messages),
            ))
            chat.total_tokens_used = (chat.total_tokens_used or 0) + reply.total_tokens
            chat.reply_pending = False

            if user is not None:
                user.total_tokens_used = (user.total_tokens_used or 0) + reply.total_tokens
                UsageService(session).record(
                    user,
                    "chat",
                    resource_type="chat",
                    resource_id=chat.id,
                    total_tokens=reply.total_tokens,
                    request_size=len(last_user_message),
                    response_size=len(reply.content),
                    compute_time_ms=int(settings.simulation.reply_delay_seconds * 1000),
                    endpoint=f"/api/chat/{chat.id}/messages",
                )
            await session.commit()

        logger.info(f"Reply appended to chat {chat_id} ({reply.total_tokens} tokens)")
    except Exception as e:
        logger.error(f"Reply for chat {chat_id} failed: {e}", exc_info=True)
        async with factory() as session:
            chat = await session.get(Chat, chat_id)
            if chat is not None:
                chat.reply_pending = False
                await session.commit()
