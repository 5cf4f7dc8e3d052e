"""
Alert lifecycle: ingestion, status transitions and the outward alert view.

Confidence is stored as a fraction in [0, 1]. Sensors that report a
percentage (1 < c <= 100) are scaled down on the way in.
"""

import asyncio
import logging
import math
from typing import Any, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import NotFoundError, ValidationError
from models.alert import Alert, AlertStatusEnum
from models.device import Device
from repositories.alert import AlertRepository
from repositories.device import DeviceRepository
from repositories.resident import ResidentRepository
from schemas.alert import AlertDetail, AlertRead, EventCreate
from services.helpers import local_time_label, utcnow
from services.push_service import notify_new_alert

logger = logging.getLogger(__name__)

DEFAULT_SOURCE = "pi"
UNKNOWN_NAME = "Unknown"
RESIDENT_DELETED = "Resident deleted"
RECENT_LIMIT = 50

STATUS_ALIASES = {
    "new": AlertStatusEnum.NEW.value,
    "acknowledged": AlertStatusEnum.ACKNOWLEDGED.value,
    "acknowledge": AlertStatusEnum.ACKNOWLEDGED.value,
    "checked": AlertStatusEnum.ACKNOWLEDGED.value,
    "resolved": AlertStatusEnum.RESOLVED.value,
}


def normalize_confidence(value: Any) -> float:
    """Accept a fraction or a percentage and return a fraction."""
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        raise ValidationError("confidence must be a number")

    if math.isnan(confidence) or confidence < 0 or confidence > 100:
        raise ValidationError("confidence must be between 0 and 1 (or 0 and 100 as a percentage)")
    if confidence > 1:
        return confidence / 100
    return confidence


def to_percent(confidence: float) -> int:
    value = confidence * 100 if confidence <= 1 else confidence
    return int(math.floor(value + 0.5))


def parse_status(raw: Optional[str]) -> str:
    status = STATUS_ALIASES.get(str(raw or "").strip().lower())
    if not status:
        raise ValidationError("Invalid status")
    return status


def transition_changes(alert: Alert, target: str) -> Dict[str, Any]:
    """Fields to write when moving ``alert`` to ``target``.

    The acknowledged/resolved stamps are only written on entry, so repeating
    the current status leaves them as they were.
    """
    changes: Dict[str, Any] = {"status": target}
    if alert.status == target:
        return changes
    if target == AlertStatusEnum.ACKNOWLEDGED.value:
        changes["acknowledged_at"] = utcnow()
    elif target == AlertStatusEnum.RESOLVED.value:
        changes["resolved_at"] = utcnow()
    return changes


def display_name(alert: Alert) -> str:
    if alert.resident is not None:
        return alert.resident.name
    return alert.elderly or UNKNOWN_NAME


def linked_device(alert: Alert) -> Optional[Device]:
    """The alert's own device, else the device watching its resident."""
    if alert.device is not None:
        return alert.device
    if alert.resident is not None:
        return alert.resident.device
    return None


def to_alert_read(alert: Alert) -> AlertRead:
    device = linked_device(alert)
    return AlertRead(
        id=alert.id,
        type=alert.type,
        status=alert.status,
        room=alert.room,
        elderly=alert.elderly,
        confidence=alert.confidence,
        confidence_percent=to_percent(alert.confidence),
        time=alert.time,
        source=alert.source,
        media_url=alert.media_url,
        created_at=alert.created_at,
        acknowledged_at=alert.acknowledged_at,
        resolved_at=alert.resolved_at,
        resident_id=alert.resident_id,
        resident_exists=alert.resident is not None,
        display_name=display_name(alert),
        device_id=device.device_id if device else None,
    )


def to_alert_detail(alert: Alert) -> AlertDetail:
    read = to_alert_read(alert)
    return AlertDetail(
        **read.model_dump(),
        resident_display_name=alert.resident.name if alert.resident else RESIDENT_DELETED,
    )


async def create_alert(db: AsyncSession, event: EventCreate, tz_name: str) -> Alert:
    """Persist an incoming event as a ``New`` alert."""
    resident_repo = ResidentRepository(db)
    resident = None
    elderly = event.elderly
    room = event.room

    if event.resident_id is not None:
        if event.resident_id <= 0:
            raise ValidationError("Invalid residentId")
        resident = await resident_repo.get(event.resident_id)
        if not resident:
            raise ValidationError("residentId not found")
        elderly = resident.name
        room = resident.room
    elif elderly:
        resident = await resident_repo.get_by_name(elderly)

    if not elderly or not room or not event.type or event.confidence is None:
        raise ValidationError("Required: type, confidence, and (residentId OR elderly+room)")

    confidence = normalize_confidence(event.confidence)

    device_pk = None
    if event.device_id:
        device = await DeviceRepository(db).get_by_external_id(event.device_id)
        if not device:
            raise ValidationError("deviceId not found")
        device_pk = device.id
    elif resident is not None:
        device_pk = resident.device_id

    repo = AlertRepository(db)
    created = await repo.create({
        "resident_id": resident.id if resident else None,
        "device_id": device_pk,
        "elderly": elderly,
        "room": room,
        "type": event.type,
        "confidence": confidence,
        "status": AlertStatusEnum.NEW.value,
        "time": event.time or local_time_label(tz_name),
        "media_url": event.media_url or None,
        "source": event.source or DEFAULT_SOURCE,
    })
    logger.info(f"Created alert {created.id} ({created.type}) for {elderly}")
    return await repo.get(created.id)


def schedule_alert_push(context, alert: Alert) -> Optional[asyncio.Task]:
    """Dispatch the new-alert notification without waiting for it."""
    push = context.push_service
    if not context.settings.PUSH_ON_ALERT or push is None or not push.is_configured:
        return None

    title = alert.type
    body = f"{display_name(alert)} in {alert.room} ({to_percent(alert.confidence)}%)"
    task = asyncio.create_task(notify_new_alert(context.session_factory, push, title, body))
    context.track_task(task)
    return task


async def list_alerts(db: AsyncSession, owner_id: Optional[int] = None, limit: int = RECENT_LIMIT) -> List[Alert]:
    return await AlertRepository(db).list_recent(limit=limit, owner_id=owner_id)


async def get_alert(db: AsyncSession, alert_id: int, owner_id: Optional[int] = None) -> Alert:
    repo = AlertRepository(db)
    alert = await (repo.get(alert_id) if owner_id is None else repo.get_owned(alert_id, owner_id))
    if not alert:
        raise NotFoundError("Alert not found")
    return alert


async def transition_alert(
    db: AsyncSession,
    alert_id: int,
    raw_status: Optional[str],
    owner_id: Optional[int] = None,
) -> Alert:
    """Move an alert to a new status. Owner-scoped when ``owner_id`` is given."""
    target = parse_status(raw_status)
    alert = await get_alert(db, alert_id, owner_id)

    repo = AlertRepository(db)
    await repo.update(alert, transition_changes(alert, target))
    logger.info(f"Alert {alert_id} -> {target}")
    return await repo.get(alert_id)


async def set_media(db: AsyncSession, alert_id: int, media_url: Optional[str]) -> Alert:
    if not media_url:
        raise ValidationError("mediaUrl is required")

    alert = await get_alert(db, alert_id)
    repo = AlertRepository(db)
    await repo.update(alert, {"media_url": media_url})
    return await repo.get(alert_id)
