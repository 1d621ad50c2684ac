"""
Chat API

Sending a message stores it and returns at once; the mocked assistant reply
is appended by a background job.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from app.db.session import get_db
from app.api.deps import get_current_active_user, get_runner
from app.models.user import User
from app.schemas.chat import (
    ChatCreate,
    ChatMessageResponse,
    ChatResponse,
    ChatUpdate,
    MessageAccepted,
    MessageCreate,
)
from app.schemas.common import ApiResponse, ListResponse
from app.services.chat_service import ChatService
from app.workers.runner import BackgroundRunner
from app.workers.simulation import run_reply

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("", response_model=ApiResponse[ChatResponse], status_code=status.HTTP_201_CREATED)
async def create_chat(
    data: ChatCreate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    chat = await ChatService(db).create(current_user, data)
    return ApiResponse(data=ChatResponse.model_validate(chat))


@router.get("", response_model=ListResponse[ChatResponse])
async def list_chats(
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    chats = await ChatService(db).list_for_user(current_user)
    return ListResponse.of([ChatResponse.model_validate(c) for c in chats])


@router.get("/{chat_id}", response_model=ApiResponse[ChatResponse])
async def get_chat(
    chat_id: uuid.UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    chat = await ChatService(db).get_readable(chat_id, current_user)
    return ApiResponse(data=ChatResponse.model_validate(chat))


@router.put("/{chat_id}", response_model=ApiResponse[ChatResponse])
async def rename_chat(
    chat_id: uuid.UUID,
    data: ChatUpdate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    chat = await ChatService(db).rename(chat_id, current_user, data.title)
    return ApiResponse(data=ChatResponse.model_validate(chat))


@router.delete("/{chat_id}", response_model=ApiResponse[dict])
async def delete_chat(
    chat_id: uuid.UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    await ChatService(db).delete(chat_id, current_user)
    return ApiResponse(data={})


@router.post(
    "/{chat_id}/messages",
    response_model=ApiResponse[MessageAccepted],
    status_code=status.HTTP_202_ACCEPTED,
)
async def send_message(
    chat_id: uuid.UUID,
    data: MessageCreate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
    runner: BackgroundRunner = Depends(get_runner)
):
    """Store the user's message; the reply follows asynchronously."""
    service = ChatService(db)
    message = await service.add_user_message(chat_id, current_user, data.content)
    chat = await service.get_chat(chat_id)
    runner.submit(run_reply(chat_id), name=f"reply-{chat_id}")
    return ApiResponse(data=MessageAccepted(
        message=ChatMessageResponse.model_validate(message),
        chat=ChatResponse.model_validate(chat),
    ))
