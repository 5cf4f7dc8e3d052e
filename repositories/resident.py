from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, func

from models.alert import Alert, ACTIVE_ALERT_STATUSES
from models.resident import Resident
from repositories.base import BaseRepository


class ResidentRepository(BaseRepository[Resident]):

    def __init__(self, db: AsyncSession):
        super().__init__(Resident, db)

    async def list_all(self) -> List[Resident]:
        result = await self.db.execute(select(Resident).order_by(Resident.id.asc()))
        return list(result.scalars().all())

    async def get_by_name(self, name: str) -> Optional[Resident]:
        result = await self.db.execute(select(Resident).where(Resident.name == name))
        return result.scalar_one_or_none()

    async def get_by_device(self, device_pk: int) -> Optional[Resident]:
        result = await self.db.execute(select(Resident).where(Resident.device_id == device_pk))
        return result.scalars().first()

    async def count_active_alerts(self, resident_id: int) -> int:
        query = select(func.count()).select_from(Alert).where(
            Alert.resident_id == resident_id,
            Alert.status.in_(ACTIVE_ALERT_STATUSES),
        )
        result = await self.db.execute(query)
        return result.scalar_one()

    async def delete_keeping_alert_snapshots(self, resident_id: int) -> None:
        """Detach historical alerts, then delete the resident, in one commit."""
        await self.db.execute(
            update(Alert)
            .where(Alert.resident_id == resident_id)
            .values(resident_id=None)
            .execution_options(synchronize_session=False)
        )
        await self.db.execute(delete(Resident).where(Resident.id == resident_id))
        await self.db.commit()
