import logging
from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import ConflictError, NotFoundError, ValidationError
from models.resident import Resident
from repositories.device import DeviceRepository
from repositories.resident import ResidentRepository

logger = logging.getLogger(__name__)


async def list_residents(db: AsyncSession) -> List[Resident]:
    return await ResidentRepository(db).list_all()


async def create_resident(db: AsyncSession, name: Optional[str], room: Optional[str]) -> Resident:
    if not name or not room:
        raise ValidationError("name and room are required")

    try:
        resident = await ResidentRepository(db).create({"name": name, "room": room})
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Resident name already exists")

    logger.info(f"Created resident {resident.id}")
    return resident


async def update_resident(
    db: AsyncSession,
    resident_id: int,
    name: Optional[str] = None,
    room: Optional[str] = None,
) -> Resident:
    if not name and not room:
        raise ValidationError("Provide name or room")

    repo = ResidentRepository(db)
    resident = await repo.get(resident_id)
    if not resident:
        raise NotFoundError("Resident not found")

    changes = {}
    if name:
        changes["name"] = name
    if room:
        changes["room"] = room

    try:
        await repo.update(resident, changes)
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Resident name already exists")

    return await repo.get(resident_id)


async def assign_device(db: AsyncSession, resident_id: int, device_pk: Optional[int]) -> Resident:
    """Link a device to a resident. A device watches at most one resident."""
    if device_pk is None:
        raise ValidationError("deviceId (number) is required")

    repo = ResidentRepository(db)
    resident = await repo.get(resident_id)
    if not resident:
        raise NotFoundError("Resident not found")

    device = await DeviceRepository(db).get(device_pk)
    if not device:
        raise NotFoundError("Device not found")
    if not device.is_active:
        raise ConflictError("Device is disabled")

    holder = await repo.get_by_device(device_pk)
    if holder and holder.id != resident_id:
        raise ConflictError(
            "Device already assigned to another resident",
            assignedResidentId=holder.id,
        )

    await repo.update(resident, {"device_id": device_pk})
    logger.info(f"Assigned device {device.device_id} to resident {resident_id}")
    return await repo.get(resident_id)


async def unassign_device(db: AsyncSession, resident_id: int) -> Resident:
    repo = ResidentRepository(db)
    resident = await repo.get(resident_id)
    if not resident:
        raise NotFoundError("Resident not found")

    await repo.update(resident, {"device_id": None})
    return await repo.get(resident_id)


async def delete_resident(db: AsyncSession, resident_id: int) -> None:
    """Delete a resident once no alert is still open.

    Closed alerts keep their ``elderly``/``room`` snapshot and lose the link.
    """
    repo = ResidentRepository(db)
    if not await repo.exists(resident_id):
        raise NotFoundError("Resident not found")

    active = await repo.count_active_alerts(resident_id)
    if active > 0:
        raise ConflictError("Cannot delete resident with active alerts", activeAlerts=active)

    await repo.delete_keeping_alert_snapshots(resident_id)
    logger.info(f"Deleted resident {resident_id}")
