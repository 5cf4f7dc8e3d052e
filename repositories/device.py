"""
Device repository: registry lookups, liveness queries and the claim write.
"""

from datetime import datetime
from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func
from sqlalchemy.orm import aliased

from models.device import Device
from repositories.base import BaseRepository


class DeviceRepository(BaseRepository[Device]):
    """Device repository with registry-specific operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(Device, db)

    async def get_by_external_id(self, device_id: str) -> Optional[Device]:
        query = (
            select(Device)
            .where(Device.device_id == device_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def list_devices(self, include_inactive: bool = False) -> List[Device]:
        query = select(Device).order_by(Device.id.asc())
        if not include_inactive:
            query = query.where(Device.is_active.is_(True))
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_for_user(self, user_id: int) -> List[Device]:
        query = select(Device).where(Device.user_id == user_id).order_by(Device.id.asc())
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count_for_user(self, user_id: int) -> int:
        query = select(func.count()).select_from(Device).where(Device.user_id == user_id)
        result = await self.db.execute(query)
        return result.scalar_one()

    async def assign_owner_within_limit(self, device_id: str, user_id: int, limit: int) -> bool:
        """Set the owner of an active, unclaimed device if the user is under ``limit``.

        The quota count is part of the UPDATE predicate so the check and the
        write are one statement. Does not commit; the caller owns the
        transaction. Returns True when a row was claimed.
        """
        owned = aliased(Device)
        owned_count = (
            select(func.count(owned.id))
            .where(owned.user_id == user_id)
            .scalar_subquery()
        )
        query = (
            update(Device)
            .where(
                Device.device_id == device_id,
                Device.is_active.is_(True),
                Device.user_id.is_(None),
                owned_count < limit,
            )
            .values(user_id=user_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(query)
        return result.rowcount == 1

    async def list_stale_active(self, cutoff: datetime) -> List[Device]:
        """Active devices that have checked in at least once but not since ``cutoff``."""
        query = (
            select(Device)
            .where(
                Device.is_active.is_(True),
                Device.last_seen_at.is_not(None),
                Device.last_seen_at < cutoff,
            )
            .order_by(Device.id.asc())
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())
