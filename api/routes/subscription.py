from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_current_user
from core.database import get_db
from models.user import User
from schemas.subscription import PlanSelect, SubscriptionRead
from services.subscription import confirm_payment, get_subscription, plan_to_limit, select_plan

router = APIRouter()


def _subscription_body(subscription):
    return {
        "ok": True,
        "subscription": SubscriptionRead.model_validate(subscription),
        "deviceLimit": plan_to_limit(subscription.plan),
    }


@router.get("/me")
async def my_subscription(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    subscription = await get_subscription(db, current_user.id)
    if not subscription:
        return {"ok": True, "subscription": None}
    return _subscription_body(subscription)


@router.post("/select")
async def select_subscription(
    body: PlanSelect,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    subscription = await select_plan(db, current_user.id, body.plan)
    return _subscription_body(subscription)


@router.post("/confirm-payment")
async def confirm_subscription_payment(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Mock payment confirmation: promotes the account to an active PRO plan."""
    subscription = await confirm_payment(db, current_user.id)
    return _subscription_body(subscription)
