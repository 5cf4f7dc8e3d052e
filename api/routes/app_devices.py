from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_current_user, require_subscription
from core.database import get_db
from models.user import User
from schemas.device import ClaimRequest, DeviceRead
from services import device_registry
from services.subscription import ActiveSubscription

router = APIRouter()


@router.get("")
async def my_devices(
    current_user: User = Depends(get_current_user),
    active: ActiveSubscription = Depends(require_subscription),
    db: AsyncSession = Depends(get_db),
):
    devices = await device_registry.list_user_devices(db, current_user.id)
    return {
        "ok": True,
        "plan": active.plan,
        "deviceLimit": active.device_limit,
        "count": len(devices),
        "devices": [DeviceRead.model_validate(d) for d in devices],
    }


@router.post("/claim")
async def claim_device(
    body: ClaimRequest,
    current_user: User = Depends(get_current_user),
    active: ActiveSubscription = Depends(require_subscription),
    db: AsyncSession = Depends(get_db),
):
    device = await device_registry.claim_device(db, current_user.id, body.device_id, active)
    return {"ok": True, "device": DeviceRead.model_validate(device)}
