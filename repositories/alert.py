"""
Alert repository: platform-wide and owner-scoped reads, offline dedup lookup.
"""

from datetime import datetime
from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_

from models.alert import Alert, AlertStatusEnum, OFFLINE_ALERT_TYPE, SYSTEM_ELDERLY
from models.device import Device
from models.resident import Resident
from repositories.base import BaseRepository


def owned_alert_clause(user_id: int):
    """An alert belongs to a user through its device or its resident's device."""
    owned_devices = select(Device.id).where(Device.user_id == user_id)
    owned_residents = select(Resident.id).where(Resident.device_id.in_(owned_devices))
    return or_(
        Alert.device_id.in_(owned_devices),
        Alert.resident_id.in_(owned_residents),
    )


class AlertRepository(BaseRepository[Alert]):

    def __init__(self, db: AsyncSession):
        super().__init__(Alert, db)

    async def list_recent(self, limit: int = 50, owner_id: Optional[int] = None) -> List[Alert]:
        query = select(Alert).order_by(Alert.created_at.desc(), Alert.id.desc()).limit(limit)
        if owner_id is not None:
            query = query.where(owned_alert_clause(owner_id))
        result = await self.db.execute(query.execution_options(populate_existing=True))
        return list(result.scalars().all())

    async def get_owned(self, alert_id: int, owner_id: int) -> Optional[Alert]:
        query = (
            select(Alert)
            .where(Alert.id == alert_id, owned_alert_clause(owner_id))
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def count_created_since(self, since: datetime) -> int:
        query = select(func.count()).select_from(Alert).where(Alert.created_at >= since)
        result = await self.db.execute(query)
        return result.scalar_one()

    async def find_open_offline_alert(self, device_pk: int) -> Optional[Alert]:
        query = select(Alert).where(
            Alert.type == OFFLINE_ALERT_TYPE,
            Alert.status == AlertStatusEnum.NEW.value,
            Alert.elderly == SYSTEM_ELDERLY,
            Alert.device_id == device_pk,
        )
        result = await self.db.execute(query)
        return result.scalars().first()
