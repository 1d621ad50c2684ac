"""
Plan catalogue and subscription schemas.
"""
from pydantic import UUID4
from typing import Any, Literal, Optional
from datetime import datetime

from app.schemas.common import CamelModel

PlanName = Literal["free", "basic", "premium", "enterprise"]
PaymentMethod = Literal["credit_card", "paypal", "bank_transfer", "none"]


class PlanFeatures(CamelModel):
    max_documents: Optional[int] = None
    max_models: Optional[int] = None
    max_storage: Optional[int] = None
    max_team_members: Optional[int] = None
    support_level: str
    api_access: bool


class PlanResponse(CamelModel):
    id: str
    name: str
    price: float
    description: str
    features: PlanFeatures


class SubscribeRequest(CamelModel):
    plan: PlanName
    payment_method: PaymentMethod = "credit_card"
    payment_method_details: Optional[dict[str, Any]] = None


class CancelRequest(CamelModel):
    reason: Optional[str] = None


class PaymentMethodUpdate(CamelModel):
    payment_method: PaymentMethod
    details: Optional[dict[str, Any]] = None


class Invoice(CamelModel):
    id: str
    date: datetime
    amount: float
    status: str
    plan: str


class SubscriptionResponse(CamelModel):
    id: Optional[UUID4] = None
    user_id: UUID4
    plan: str
    status: str
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    renewal_date: Optional[datetime] = None
    payment_method: str
    cancellation_reason: Optional[str] = None
    features: PlanFeatures
