"""
Payments API (mocked billing).
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.api.deps import get_current_active_user
from app.models.user import User
from app.schemas.common import ApiResponse, ListResponse
from app.schemas.payment import (
    CancelRequest,
    Invoice,
    PaymentMethodUpdate,
    PlanFeatures,
    PlanResponse,
    SubscribeRequest,
    SubscriptionResponse,
)
from app.services.plans import PLANS
from app.services.subscription_service import SubscriptionService

router = APIRouter(prefix="/payments", tags=["payments"])


def _subscription_out(record: dict) -> SubscriptionResponse:
    return SubscriptionResponse.model_validate(record)


@router.get("/plans", response_model=ListResponse[PlanResponse])
async def list_plans():
    """Public plan catalogue."""
    plans = [
        PlanResponse(
            id=plan.id,
            name=plan.name,
            price=plan.price,
            description=plan.description,
            features=PlanFeatures.model_validate(plan.limits.as_dict()),
        )
        for plan in PLANS.values()
    ]
    return ListResponse.of(plans)


@router.get("/subscription", response_model=ApiResponse[SubscriptionResponse])
async def get_subscription(
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Current subscription; a free-tier record when the user never subscribed."""
    record = await SubscriptionService(db).current(current_user)
    return ApiResponse(data=_subscription_out(record))


@router.post("/subscribe", response_model=ApiResponse[SubscriptionResponse])
async def subscribe(
    data: SubscribeRequest,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    service = SubscriptionService(db)
    await service.subscribe(current_user, data.plan, data.payment_method, data.payment_method_details)
    return ApiResponse(data=_subscription_out(await service.current(current_user)))


@router.post("/cancel", response_model=ApiResponse[SubscriptionResponse])
async def cancel_subscription(
    data: CancelRequest,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    subscription = await SubscriptionService(db).cancel(current_user, data.reason)
    return ApiResponse(data=SubscriptionResponse.model_validate(subscription))


@router.get("/history", response_model=ListResponse[Invoice])
async def payment_history(
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    invoices = await SubscriptionService(db).history(current_user)
    return ListResponse.of([Invoice.model_validate(i) for i in invoices])


@router.put("/method", response_model=ApiResponse[SubscriptionResponse])
async def update_payment_method(
    data: PaymentMethodUpdate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    service = SubscriptionService(db)
    await service.update_payment_method(current_user, data.payment_method, data.details)
    return ApiResponse(data=_subscription_out(await service.current(current_user)))
