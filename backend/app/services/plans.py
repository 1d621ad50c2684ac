"""
Static plan catalogue.

Maps a plan tier to an immutable limits record. ``None`` means unlimited.
"""
from dataclasses import dataclass, asdict
from typing import Dict, Optional

MB = 1024 * 1024
GB = 1024 * MB

DEFAULT_PLAN = "free"


@dataclass(frozen=True)
class PlanLimits:
    max_documents: Optional[int]
    max_models: Optional[int]
    max_storage: Optional[int]
    max_team_members: Optional[int]
    support_level: str
    api_access: bool

    def as_dict(self) -> Dict[str, object]:
        return asdict(self)


@dataclass(frozen=True)
class Plan:
    id: str
    name: str
    price: float
    description: str
    limits: PlanLimits


PLANS: Dict[str, Plan] = {
    "free": Plan(
        id="free",
        name="Free",
        price=0.0,
        description="Basic features for individuals getting started",
        limits=PlanLimits(10, 2, 100 * MB, 1, "basic", False),
    ),
    "basic": Plan(
        id="basic",
        name="Basic",
        price=9.99,
        description="Essential features for small teams and professionals",
        limits=PlanLimits(50, 5, 1 * GB, 3, "standard", True),
    ),
    "premium": Plan(
        id="premium",
        name="Premium",
        price=29.99,
        description="Advanced features for growing businesses",
        limits=PlanLimits(200, 15, 5 * GB, 10, "priority", True),
    ),
    "enterprise": Plan(
        id="enterprise",
        name="Enterprise",
        price=99.99,
        description="Complete solution for large organizations",
        limits=PlanLimits(None, None, 20 * GB, None, "dedicated", True),
    ),
}


def get_plan(plan_id: str) -> Plan:
    """
    Look up a plan by id.

    Raises:
        KeyError: If the plan id is unknown
    """
    return PLANS[plan_id]


def get_plan_limits(plan_id: str) -> PlanLimits:
    """Limits for a plan id, falling back to the free tier for unknown ids."""
    plan = PLANS.get(plan_id) or PLANS[DEFAULT_PLAN]
    return plan.limits


def within_limit(limit: Optional[int], current: int, adding: int = 1) -> bool:
    if limit is None:
        return True
    return current + adding <= limit
