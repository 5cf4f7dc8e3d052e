"""
Mobile-app alert routes. Only alerts raised by, or about residents watched
by, the caller's claimed devices are visible.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_current_user, require_subscription
from core.database import get_db
from models.user import User
from schemas.alert import AlertStatusUpdate
from services import alert_lifecycle

router = APIRouter(dependencies=[Depends(require_subscription)])


@router.get("")
async def my_alerts(current_user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    alerts = await alert_lifecycle.list_alerts(db, owner_id=current_user.id)
    return {"ok": True, "alerts": [alert_lifecycle.to_alert_read(a) for a in alerts]}


@router.get("/latest")
async def my_latest_alert(current_user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    alerts = await alert_lifecycle.list_alerts(db, owner_id=current_user.id, limit=1)
    return {"ok": True, "alerts": [alert_lifecycle.to_alert_read(a) for a in alerts]}


@router.patch("/{id}")
async def update_my_alert(
    id: int,
    body: AlertStatusUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    alert = await alert_lifecycle.transition_alert(db, id, body.status, owner_id=current_user.id)
    payload = alert_lifecycle.to_alert_read(alert).model_dump(by_alias=True, mode="json")
    return {"ok": True, **payload, "alert": payload}
