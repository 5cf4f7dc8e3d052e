"""
Alert model for fall and incident records.
"""

from enum import Enum as PyEnum
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from core.database import Base
from services.helpers import utcnow


class AlertStatusEnum(str, PyEnum):
    NEW = "New"
    ACKNOWLEDGED = "Acknowledged"
    RESOLVED = "Resolved"


ACTIVE_ALERT_STATUSES = (AlertStatusEnum.NEW.value, AlertStatusEnum.ACKNOWLEDGED.value)

OFFLINE_ALERT_TYPE = "Device offline"
SYSTEM_ELDERLY = "System"


class Alert(Base):
    """Incident record.

    ``elderly`` and ``room`` are snapshots taken at creation so the alert stays
    readable after its resident is deleted.
    """

    __tablename__ = "alerts"

    id = Column(Integer, primary_key=True, index=True)
    resident_id = Column(Integer, ForeignKey("residents.id", ondelete="SET NULL"), nullable=True, index=True)
    device_id = Column(Integer, ForeignKey("devices.id", ondelete="SET NULL"), nullable=True, index=True)

    elderly = Column(String(255), nullable=False)
    room = Column(String(255), nullable=False)
    type = Column(String(100), nullable=False)
    confidence = Column(Float, nullable=False, default=0.0)  # fraction 0..1
    status = Column(String(20), nullable=False, default=AlertStatusEnum.NEW.value, index=True)
    time = Column(String(50), nullable=False)
    media_url = Column(String(1024), nullable=True)
    source = Column(String(50), nullable=False, default="pi")

    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    acknowledged_at = Column(DateTime(timezone=True), nullable=True)
    resolved_at = Column(DateTime(timezone=True), nullable=True)

    resident = relationship("Resident", back_populates="alerts", lazy="selectin")
    device = relationship("Device", lazy="selectin")

    def __repr__(self):
        return f"<Alert(id={self.id}, type='{self.type}', status='{self.status}')>"
