"""
AI model records and simulated training.
"""
import logging
from typing import List
import uuid

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError, PlanLimitError, ValidationError
from app.db.base import utcnow
from app.models.ai_model import AIModel
from app.models.document import Document
from app.models.user import User
from app.schemas.ai_model import AIModelCreate, AIModelUpdate
from app.services import authorization
from app.services.plans import within_limit
from app.services.subscription_service import SubscriptionService
from app.services.usage_service import UsageService

logger = logging.getLogger(__name__)


class ModelService:
    """Service for AI model operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_model(self, model_id: uuid.UUID) -> AIModel:
        result = await self.db.execute(select(AIModel).where(AIModel.id == model_id))
        model = result.scalar_one_or_none()
        if not model:
            raise NotFoundError("Model not found")
        return model

    async def get_readable(self, model_id: uuid.UUID, user: User) -> AIModel:
        model = await self.get_model(model_id)
        authorization.ensure_can_read(user, model, "model")
        return model

    async def get_owned(self, model_id: uuid.UUID, user: User) -> AIModel:
        model = await self.get_model(model_id)
        authorization.ensure_can_mutate(user, model, "model")
        return model

    async def list_for_user(self, user: User) -> List[AIModel]:
        visible = AIModel.user_id == user.id
        if user.team_id is not None:
            visible = or_(visible, AIModel.team_id == user.team_id)
        result = await self.db.execute(
            select(AIModel).where(visible).order_by(AIModel.created_at.desc())
        )
        return list(result.scalars().all())

    async def _owned_documents(self, user: User, document_ids: List[uuid.UUID]) -> List[Document]:
        if not document_ids:
            return []
        unique_ids = list(dict.fromkeys(document_ids))
        result = await self.db.execute(
            select(Document).where(Document.id.in_(unique_ids), Document.user_id == user.id)
        )
        documents = list(result.scalars().all())
        if len(documents) != len(unique_ids):
            raise ValidationError("One or more documents not found or not owned by you")
        return documents

    async def create(self, user: User, data: AIModelCreate) -> AIModel:
        """
        Create a model record in ``pending`` state.

        Raises:
            PlanLimitError: Model limit reached
            ValidationError: Unknown or foreign document ids
        """
        limits = await SubscriptionService(self.db).resolve_limits(user)
        result = await self.db.execute(
            select(func.count(AIModel.id)).where(AIModel.user_id == user.id)
        )
        if not within_limit(limits.max_models, result.scalar_one()):
            raise PlanLimitError("Model limit reached for your plan. Please upgrade.")

        documents = await self._owned_documents(user, data.document_ids)

        model = AIModel(
            name=data.name.strip(),
            description=data.description,
            base_model=data.base_model,
            is_public=data.is_public,
            user_id=user.id,
            team_id=user.team_id,
            documents=documents,
        )
        self.db.add(model)
        await self.db.flush()

        user.models_created = (user.models_created or 0) + 1
        UsageService(self.db).record(
            user,
            "model_training",
            resource_type="model",
            resource_id=model.id,
            endpoint="/api/models",
        )
        await self.db.commit()
        await self.db.refresh(model)

        logger.info(f"Model {model.id} created by {user.id}")
        return model

    async def update(self, model_id: uuid.UUID, user: User, data: AIModelUpdate) -> AIModel:
        model = await self.get_owned(model_id, user)
        updates = data.model_dump(exclude_unset=True)
        if updates.get("name"):
            model.name = updates["name"].strip()
        if "description" in updates:
            model.description = updates["description"]
        if updates.get("is_public") is not None:
            model.is_public = updates["is_public"]
        await self.db.commit()
        await self.db.refresh(model)
        return model

    async def delete(self, model_id: uuid.UUID, user: User) -> None:
        model = await self.get_owned(model_id, user)
        await self.db.delete(model)
        await self.db.commit()
        logger.info(f"Model {model_id} deleted by {user.id}")

    async def start_training(self, model_id: uuid.UUID, user: User) -> AIModel:
        """
        Put the model into ``training``. The caller schedules the progress job.

        Raises:
            ValidationError: Already training, or no documents to train on
        """
        model = await self.get_owned(model_id, user)
        if model.status == "training":
            raise ValidationError("Model is already training")
        if not model.documents:
            raise ValidationError("Model has no documents to train on")

        model.status = "training"
        model.training_progress = 0
        model.training_error = None
        model.training_started_at = utcnow()
        model.training_completed_at = None
        await self.db.commit()
        await self.db.refresh(model)

        logger.info(f"Training started for model {model.id}")
        return model
