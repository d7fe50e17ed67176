"""Billing plans and the Stripe product ids that unlock them."""

from dataclasses import dataclass, field
from enum import Enum


class SubscriptionStatus(str, Enum):
    """Stripe subscription statuses this service cares about (non-exhaustive)."""
    ACTIVE = "active"
    PENDING = "pending"


@dataclass(frozen=True)
class Plan:
    """A billing tier."""
    id: str
    name: str


FREE_PLAN = Plan(id="FREE", name="Free")
PRO_PLAN = Plan(id="PRO", name="Pro")
ENTERPRISE_PLAN = Plan(id="ENTERPRISE", name="Enterprise")


@dataclass(frozen=True)
class PlanTable:
    """Plans of one billing environment keyed by Stripe product id."""
    free: Plan
    products: dict[str, Plan] = field(default_factory=dict)


# Stripe product ids differ between test mode and live mode accounts
BILLING_PLANS: dict[str, PlanTable] = {
    "dev": PlanTable(
        free=FREE_PLAN,
        products={
            "dev_MQPRO": PRO_PLAN,
            "dev_MQENTERPRISE": ENTERPRISE_PLAN,
        },
    ),
    "test": PlanTable(
        free=FREE_PLAN,
        products={
            "test_MQPRO": PRO_PLAN,
            "test_MQENTERPRISE": ENTERPRISE_PLAN,
        },
    ),
    "prod": PlanTable(
        free=FREE_PLAN,
        products={
            "prod_MQPRO": PRO_PLAN,
            "prod_MQENTERPRISE": ENTERPRISE_PLAN,
        },
    ),
}
