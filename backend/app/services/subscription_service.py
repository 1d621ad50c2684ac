"""
Subscription and plan resolution. Payments are mocked: subscribing records
the plan and a paid invoice without contacting any gateway.
"""
import logging
from datetime import timedelta
from typing import Any, Dict, List, Optional
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ConflictError, NotFoundError
from app.db.base import utcnow
from app.models.subscription import Subscription, LIVE_STATUSES
from app.models.user import User
from app.services.plans import DEFAULT_PLAN, PlanLimits, get_plan, get_plan_limits

logger = logging.getLogger(__name__)

BILLING_PERIOD = timedelta(days=30)
MOCK_HISTORY_MONTHS = 3


def _invoice(plan_id: str, amount: float, when) -> Dict[str, Any]:
    return {
        "id": f"inv_{uuid.uuid4().hex[:12]}",
        "date": when.isoformat(),
        "amount": amount,
        "status": "paid",
        "plan": plan_id,
    }


class SubscriptionService:
    """Service for subscription operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_live(self, user_id: uuid.UUID) -> Optional[Subscription]:
        """The user's active or trialing subscription, if any."""
        result = await self.db.execute(
            select(Subscription).where(
                Subscription.user_id == user_id,
                Subscription.status.in_(LIVE_STATUSES),
            )
        )
        return result.scalar_one_or_none()

    async def resolve_limits(self, user: User) -> PlanLimits:
        """
        Current feature limits. Users without a live subscription get the
        free tier; no record is created for them.
        """
        subscription = await self.get_live(user.id)
        if subscription is None:
            return get_plan_limits(DEFAULT_PLAN)
        return get_plan_limits(subscription.plan)

    async def current(self, user: User) -> Dict[str, Any]:
        """Live subscription as a dict, or a virtual free-tier record."""
        subscription = await self.get_live(user.id)
        if subscription is None:
            return {
                "id": None,
                "user_id": user.id,
                "plan": DEFAULT_PLAN,
                "status": "active",
                "start_date": None,
                "end_date": None,
                "renewal_date": None,
                "payment_method": "none",
                "cancellation_reason": None,
                "features": get_plan_limits(DEFAULT_PLAN).as_dict(),
            }
        return {
            "id": subscription.id,
            "user_id": subscription.user_id,
            "plan": subscription.plan,
            "status": subscription.status,
            "start_date": subscription.start_date,
            "end_date": subscription.end_date,
            "renewal_date": subscription.renewal_date,
            "payment_method": subscription.payment_method,
            "cancellation_reason": subscription.cancellation_reason,
            "features": subscription.features,
        }

    async def subscribe(
        self,
        user: User,
        plan_id: str,
        payment_method: str = "credit_card",
        payment_method_details: Optional[Dict[str, Any]] = None,
    ) -> Subscription:
        """
        Move the user to ``plan_id``.

        Updates the live subscription in place, or creates one when none
        exists, so a user never holds two live subscriptions.
        """
        plan = get_plan(plan_id)
        now = utcnow()
        renewal = now + BILLING_PERIOD if plan.price > 0 else None
        method = payment_method if plan.price > 0 else "none"

        subscription = await self.get_live(user.id)
        if subscription is None:
            subscription = Subscription(user_id=user.id, invoices=[])
            self.db.add(subscription)

        subscription.plan = plan.id
        subscription.status = "active"
        subscription.start_date = now
        subscription.end_date = None
        subscription.renewal_date = renewal
        subscription.payment_method = method
        subscription.payment_method_details = payment_method_details
        subscription.cancellation_reason = None
        subscription.features = plan.limits.as_dict()
        if plan.price > 0:
            subscription.invoices = list(subscription.invoices or []) + [_invoice(plan.id, plan.price, now)]

        user.plan = plan.id

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Subscription was changed concurrently, please retry")
        await self.db.refresh(subscription)

        logger.info(f"User {user.id} subscribed to {plan.id}")
        return subscription

    async def cancel(self, user: User, reason: Optional[str] = None) -> Subscription:
        subscription = await self.get_live(user.id)
        if subscription is None:
            raise NotFoundError("No active subscription found")

        subscription.status = "canceled"
        subscription.end_date = utcnow()
        subscription.renewal_date = None
        subscription.cancellation_reason = reason
        user.plan = DEFAULT_PLAN

        await self.db.commit()
        await self.db.refresh(subscription)
        logger.info(f"User {user.id} canceled subscription {subscription.id}")
        return subscription

    async def history(self, user: User) -> List[Dict[str, Any]]:
        """Stored invoices, newest first; mock monthly invoices when none exist."""
        result = await self.db.execute(
            select(Subscription).where(Subscription.user_id == user.id)
        )
        invoices = [
            invoice
            for subscription in result.scalars().all()
            for invoice in (subscription.invoices or [])
        ]
        if invoices:
            return sorted(invoices, key=lambda i: i["date"], reverse=True)

        plan = get_plan(user.plan if user.plan else DEFAULT_PLAN)
        now = utcnow()
        return [
            _invoice(plan.id, plan.price, now - BILLING_PERIOD * month)
            for month in range(MOCK_HISTORY_MONTHS)
        ]

    async def update_payment_method(
        self, user: User, payment_method: str, details: Optional[Dict[str, Any]] = None
    ) -> Subscription:
        subscription = await self.get_live(user.id)
        if subscription is None:
            raise NotFoundError("No active subscription found")

        subscription.payment_method = payment_method
        subscription.payment_method_details = details
        await self.db.commit()
        await self.db.refresh(subscription)
        return subscription
