"""
Subscription ledger.

A FREE plan is active as soon as it is selected; PRO waits in
PENDING_PAYMENT until the payment is confirmed. Device quota is derived from
the plan on every call.
"""

import logging
from dataclasses import dataclass
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import ForbiddenError, ValidationError
from models.subscription import Subscription, PlanEnum, SubscriptionStatusEnum
from repositories.subscription import SubscriptionRepository

logger = logging.getLogger(__name__)

DEVICE_LIMITS = {
    PlanEnum.FREE.value: 2,
    PlanEnum.PRO.value: 4,
}


def plan_to_limit(plan: str) -> int:
    return DEVICE_LIMITS.get(plan, DEVICE_LIMITS[PlanEnum.FREE.value])


@dataclass
class ActiveSubscription:
    subscription: Subscription
    device_limit: int

    @property
    def plan(self) -> str:
        return self.subscription.plan


async def get_subscription(db: AsyncSession, user_id: int) -> Optional[Subscription]:
    return await SubscriptionRepository(db).get_by_user(user_id)


async def select_plan(db: AsyncSession, user_id: int, plan: Optional[str]) -> Subscription:
    if plan not in DEVICE_LIMITS:
        raise ValidationError("plan must be FREE or PRO")

    status = (
        SubscriptionStatusEnum.ACTIVE.value
        if plan == PlanEnum.FREE.value
        else SubscriptionStatusEnum.PENDING_PAYMENT.value
    )
    subscription = await SubscriptionRepository(db).upsert(user_id, plan, status)
    logger.info(f"User {user_id} selected plan {plan} ({status})")
    return subscription


async def confirm_payment(db: AsyncSession, user_id: int) -> Subscription:
    repo = SubscriptionRepository(db)
    existing = await repo.get_by_user(user_id)
    if not existing:
        raise ValidationError("No subscription selected yet")

    updated = await repo.update(existing, {
        "plan": PlanEnum.PRO.value,
        "status": SubscriptionStatusEnum.ACTIVE.value,
    })
    logger.info(f"User {user_id} confirmed payment; PRO is active")
    return updated


async def require_chosen_subscription(db: AsyncSession, user_id: int) -> ActiveSubscription:
    """Gate for the app surface: a plan must be chosen, and PRO must be paid."""
    subscription = await get_subscription(db, user_id)
    if not subscription:
        raise ForbiddenError(
            "Please choose a subscription plan first.",
            code="SUBSCRIPTION_REQUIRED",
        )

    if subscription.plan == PlanEnum.PRO.value and subscription.status != SubscriptionStatusEnum.ACTIVE.value:
        raise ForbiddenError(
            "PRO plan not active yet.",
            code="SUBSCRIPTION_NOT_ACTIVE",
            status=subscription.status,
        )

    return ActiveSubscription(subscription=subscription, device_limit=plan_to_limit(subscription.plan))
