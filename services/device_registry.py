"""
Device registry: heartbeats, admin CRUD and the user claim protocol.
"""

import logging
from typing import Any, Dict, List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from models.device import Device
from repositories.device import DeviceRepository
from repositories.user import UserRepository
from services.helpers import utcnow
from services.subscription import ActiveSubscription

logger = logging.getLogger(__name__)


async def heartbeat(
    db: AsyncSession,
    device_id: Optional[str],
    name: Optional[str] = None,
    room: Optional[str] = None,
) -> Device:
    """Record a check-in. Unknown devices are registered; disabled ones are refused."""
    if not device_id:
        raise ValidationError("deviceId is required")

    repo = DeviceRepository(db)
    existing = await repo.get_by_external_id(device_id)

    if existing is None:
        try:
            device = await repo.create({
                "device_id": device_id,
                "name": name or None,
                "room": room or None,
                "is_active": True,
                "last_seen_at": utcnow(),
            })
        except IntegrityError:
            # Another heartbeat registered the same unit first; treat as an update.
            await db.rollback()
            return await heartbeat(db, device_id, name, room)
        logger.info(f"Registered device {device_id} on first heartbeat")
        return device

    if not existing.is_active:
        logger.warning(f"Heartbeat refused for disabled device {device_id}")
        raise ForbiddenError("Device is disabled by admin")

    changes: Dict[str, Any] = {"last_seen_at": utcnow()}
    if name:
        changes["name"] = name
    if room:
        changes["room"] = room
    return await repo.update(existing, changes)


async def list_devices(db: AsyncSession, include_inactive: bool = False) -> List[Device]:
    return await DeviceRepository(db).list_devices(include_inactive=include_inactive)


async def create_device(
    db: AsyncSession,
    device_id: Optional[str],
    name: Optional[str] = None,
    room: Optional[str] = None,
) -> Device:
    if not device_id:
        raise ValidationError("deviceId is required")

    try:
        device = await DeviceRepository(db).create({
            "device_id": device_id,
            "name": name or None,
            "room": room or None,
            "is_active": True,
        })
    except IntegrityError:
        await db.rollback()
        raise ConflictError("deviceId already exists")

    logger.info(f"Admin registered device {device_id}")
    return device


async def update_device(db: AsyncSession, id: int, changes: Dict[str, Any]) -> Device:
    """Apply an admin edit. ``changes`` holds only the fields present in the request."""
    allowed = {k: v for k, v in changes.items() if k in ("name", "room", "is_active")}
    if not allowed:
        raise ValidationError("Provide name, room, or isActive")

    repo = DeviceRepository(db)
    device = await repo.get(id)
    if not device:
        raise NotFoundError("Device not found")

    values: Dict[str, Any] = {}
    if "name" in allowed:
        values["name"] = allowed["name"] or None
    if "room" in allowed:
        values["room"] = allowed["room"] or None
    if "is_active" in allowed:
        if not isinstance(allowed["is_active"], bool):
            raise ValidationError("isActive must be boolean")
        values["is_active"] = allowed["is_active"]

    return await repo.update(device, values)


async def disable_device(db: AsyncSession, id: int) -> Device:
    """Soft delete. Residents and alerts keep their links."""
    repo = DeviceRepository(db)
    device = await repo.get(id)
    if not device:
        raise NotFoundError("Device not found")

    disabled = await repo.update(device, {"is_active": False})
    logger.info(f"Admin disabled device {device.device_id}")
    return disabled


async def list_user_devices(db: AsyncSession, user_id: int) -> List[Device]:
    return await DeviceRepository(db).list_for_user(user_id)


async def claim_device(
    db: AsyncSession,
    user_id: int,
    device_id: Optional[str],
    active: ActiveSubscription,
) -> Device:
    """Attach an existing device to the user's account.

    The user row is locked and the owner is written by a conditional UPDATE
    that re-counts the user's devices, so two concurrent claims cannot both
    pass the quota.
    """
    if not device_id:
        raise ValidationError("deviceId is required")

    repo = DeviceRepository(db)
    limit = active.device_limit
    plan = active.plan

    try:
        await UserRepository(db).lock(user_id)
        claimed = await repo.assign_owner_within_limit(device_id, user_id, limit)
        if claimed:
            await db.commit()
            logger.info(f"User {user_id} claimed device {device_id}")
            return await repo.get_by_external_id(device_id)

        # Nothing was written; work out why before the rollback expires the row.
        device = await repo.get_by_external_id(device_id)
        found = device is not None
        is_active = found and device.is_active
        owner_id = device.user_id if found else None
        await db.rollback()
    except Exception:
        await db.rollback()
        raise

    if not found:
        raise NotFoundError("Device not found")
    if not is_active:
        raise ConflictError("Device is disabled")
    if owner_id == user_id:
        return await repo.get_by_external_id(device_id)
    if owner_id is not None:
        raise ConflictError("Device already claimed")

    logger.info(f"User {user_id} hit device limit {limit} claiming {device_id}")
    raise ConflictError("Device limit reached", plan=plan, limit=limit)
