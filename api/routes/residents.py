from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import require_api_key
from core.database import get_db
from schemas.resident import AssignDevice, ResidentCreate, ResidentRead, ResidentUpdate
from services import residents

router = APIRouter(dependencies=[Depends(require_api_key)])


@router.get("")
async def list_residents(db: AsyncSession = Depends(get_db)):
    return [ResidentRead.model_validate(r) for r in await residents.list_residents(db)]


@router.post("")
async def create_resident(body: ResidentCreate, db: AsyncSession = Depends(get_db)):
    created = await residents.create_resident(db, body.name, body.room)
    return {"ok": True, "created": ResidentRead.model_validate(created)}


@router.patch("/{id}")
async def update_resident(id: int, body: ResidentUpdate, db: AsyncSession = Depends(get_db)):
    updated = await residents.update_resident(db, id, body.name, body.room)
    return {"ok": True, "updated": ResidentRead.model_validate(updated)}


@router.patch("/{id}/assign-device")
async def assign_device(id: int, body: AssignDevice, db: AsyncSession = Depends(get_db)):
    updated = await residents.assign_device(db, id, body.device_id)
    return {"ok": True, "updated": ResidentRead.model_validate(updated)}


@router.patch("/{id}/unassign-device")
async def unassign_device(id: int, db: AsyncSession = Depends(get_db)):
    updated = await residents.unassign_device(db, id)
    return {"ok": True, "updated": ResidentRead.model_validate(updated)}


@router.delete("/{id}")
async def delete_resident(id: int, db: AsyncSession = Depends(get_db)):
    await residents.delete_resident(db, id)
    return {"ok": True}
