from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from models.subscription import Subscription, PlanEnum, SubscriptionStatusEnum
from repositories.base import BaseRepository


class SubscriptionRepository(BaseRepository[Subscription]):

    def __init__(self, db: AsyncSession):
        super().__init__(Subscription, db)

    async def get_by_user(self, user_id: int) -> Optional[Subscription]:
        query = (
            select(Subscription)
            .where(Subscription.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def upsert(self, user_id: int, plan: str, status: str) -> Subscription:
        existing = await self.get_by_user(user_id)
        if existing:
            return await self.update(existing, {"plan": plan, "status": status})
        return await self.create({"user_id": user_id, "plan": plan, "status": status})

    async def count_active_pro(self) -> int:
        query = select(func.count()).select_from(Subscription).where(
            Subscription.plan == PlanEnum.PRO.value,
            Subscription.status == SubscriptionStatusEnum.ACTIVE.value,
        )
        result = await self.db.execute(query)
        return result.scalar_one()
