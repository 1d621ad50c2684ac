"""
AI Model API

Model records owned by a user, readable by the owner's team. Training is
simulated by a background job; the train endpoint returns immediately.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from app.db.session import get_db
from app.api.deps import get_current_active_user, get_runner
from app.models.user import User
from app.schemas.ai_model import AIModelCreate, AIModelResponse, AIModelUpdate
from app.schemas.common import ApiResponse, ListResponse
from app.services.model_service import ModelService
from app.workers.runner import BackgroundRunner
from app.workers.simulation import run_training

router = APIRouter(prefix="/models", tags=["models"])


@router.post("", response_model=ApiResponse[AIModelResponse], status_code=status.HTTP_201_CREATED)
async def create_model(
    data: AIModelCreate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    model = await ModelService(db).create(current_user, data)
    return ApiResponse(data=AIModelResponse.model_validate(model))


@router.get("", response_model=ListResponse[AIModelResponse])
async def list_models(
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    models = await ModelService(db).list_for_user(current_user)
    return ListResponse.of([AIModelResponse.model_validate(m) for m in models])


@router.get("/{model_id}", response_model=ApiResponse[AIModelResponse])
async def get_model(
    model_id: uuid.UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    model = await ModelService(db).get_readable(model_id, current_user)
    return ApiResponse(data=AIModelResponse.model_validate(model))


@router.put("/{model_id}", response_model=ApiResponse[AIModelResponse])
async def update_model(
    model_id: uuid.UUID,
    data: AIModelUpdate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    model = await ModelService(db).update(model_id, current_user, data)
    return ApiResponse(data=AIModelResponse.model_validate(model))


@router.delete("/{model_id}", response_model=ApiResponse[dict])
async def delete_model(
    model_id: uuid.UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    await ModelService(db).delete(model_id, current_user)
    return ApiResponse(data={})


@router.post("/{model_id}/train", response_model=ApiResponse[AIModelResponse], status_code=status.HTTP_202_ACCEPTED)
async def train_model(
    model_id: uuid.UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
    runner: BackgroundRunner = Depends(get_runner)
):
    """
    Start simulated training.

    Returns the model in ``training`` state; progress is visible via GET.
    """
    model = await ModelService(db).start_training(model_id, current_user)
    runner.submit(run_training(model.id), name=f"train-{model.id}")
    return ApiResponse(data=AIModelResponse.model_validate(model))
