"""
Device registry routes.

Heartbeats are unauthenticated; the admin CRUD below requires ``x-api-key``.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import require_api_key
from core.database import get_db
from schemas.device import DeviceCreate, DeviceRead, DeviceUpdate, Heartbeat
from services import device_registry

heartbeat_router = APIRouter()
router = APIRouter(dependencies=[Depends(require_api_key)])


@heartbeat_router.post("/devices/heartbeat")
@heartbeat_router.post("/heartbeat")
async def device_heartbeat(body: Heartbeat, db: AsyncSession = Depends(get_db)):
    device = await device_registry.heartbeat(db, body.device_id, body.name, body.room)
    return {"ok": True, "device": DeviceRead.model_validate(device)}


@router.get("")
async def list_devices(
    include_inactive: bool = Query(False, alias="includeInactive"),
    db: AsyncSession = Depends(get_db),
):
    devices = await device_registry.list_devices(db, include_inactive=include_inactive)
    return [DeviceRead.model_validate(d) for d in devices]


@router.post("")
async def create_device(body: DeviceCreate, db: AsyncSession = Depends(get_db)):
    device = await device_registry.create_device(db, body.device_id, body.name, body.room)
    return {"ok": True, "device": DeviceRead.model_validate(device)}


@router.patch("/{id}")
async def update_device(id: int, body: DeviceUpdate, db: AsyncSession = Depends(get_db)):
    device = await device_registry.update_device(db, id, body.model_dump(exclude_unset=True))
    return {"ok": True, "device": DeviceRead.model_validate(device)}


@router.delete("/{id}")
async def disable_device(id: int, db: AsyncSession = Depends(get_db)):
    device = await device_registry.disable_device(db, id)
    return {"ok": True, "disabled": DeviceRead.model_validate(device)}
