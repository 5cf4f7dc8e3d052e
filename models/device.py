"""
Device model for cameras and sensor units.
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from core.database import Base
from services.helpers import utcnow


class Device(Base):
    """A physical unit identified by its external ``device_id``.

    ``is_active=False`` is a soft delete: the device stops being swept for
    liveness and its heartbeats are refused until an admin re-enables it.
    """

    __tablename__ = "devices"

    id = Column(Integer, primary_key=True, index=True)
    device_id = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=True)
    room = Column(String(255), nullable=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    is_active = Column(Boolean, default=True, nullable=False)
    last_seen_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    owner = relationship("User", back_populates="devices", lazy="selectin")
    resident = relationship("Resident", back_populates="device", uselist=False)

    def __repr__(self):
        return f"<Device(id={self.id}, device_id='{self.device_id}', active={self.is_active})>"
