"""
Platform alert routes, used by the sensor units and the staff dashboard.

All routes require ``x-api-key``.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_context, require_api_key
from core.context import ServiceContext
from core.database import get_db
from schemas.alert import AlertMediaUpdate, AlertStatusUpdate, EventCreate
from services import alert_lifecycle

events_router = APIRouter(dependencies=[Depends(require_api_key)])
router = APIRouter(dependencies=[Depends(require_api_key)])


async def _ingest(body: EventCreate, db: AsyncSession, context: ServiceContext):
    alert = await alert_lifecycle.create_alert(db, body, context.settings.TIMEZONE)
    alert_lifecycle.schedule_alert_push(context, alert)
    return {"ok": True, "alert": alert_lifecycle.to_alert_read(alert)}


@events_router.post("/events")
async def create_event(
    body: EventCreate,
    db: AsyncSession = Depends(get_db),
    context: ServiceContext = Depends(get_context),
):
    return await _ingest(body, db, context)


@router.post("")
async def create_alert(
    body: EventCreate,
    db: AsyncSession = Depends(get_db),
    context: ServiceContext = Depends(get_context),
):
    return await _ingest(body, db, context)


@router.get("")
async def list_alerts(db: AsyncSession = Depends(get_db)):
    alerts = await alert_lifecycle.list_alerts(db)
    return [alert_lifecycle.to_alert_read(a) for a in alerts]


@router.get("/latest")
async def latest_alert(db: AsyncSession = Depends(get_db)):
    alerts = await alert_lifecycle.list_alerts(db, limit=1)
    return [alert_lifecycle.to_alert_read(a) for a in alerts]


@router.get("/{id}")
async def get_alert(id: int, db: AsyncSession = Depends(get_db)):
    alert = await alert_lifecycle.get_alert(db, id)
    return alert_lifecycle.to_alert_detail(alert)


@router.patch("/{id}")
async def update_alert_status(id: int, body: AlertStatusUpdate, db: AsyncSession = Depends(get_db)):
    alert = await alert_lifecycle.transition_alert(db, id, body.status)
    return {"ok": True, "alert": alert_lifecycle.to_alert_read(alert)}


@router.patch("/{id}/media")
async def update_alert_media(id: int, body: AlertMediaUpdate, db: AsyncSession = Depends(get_db)):
    alert = await alert_lifecycle.set_media(db, id, body.media_url)
    return {"ok": True, "alert": alert_lifecycle.to_alert_read(alert)}
