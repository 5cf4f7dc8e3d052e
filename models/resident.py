from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from core.database import Base
from services.helpers import utcnow


class Resident(Base):
    """Person of care, optionally watched by one device."""

    __tablename__ = "residents"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False)
    room = Column(String(255), nullable=False)
    device_id = Column(Integer, ForeignKey("devices.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    device = relationship("Device", back_populates="resident", lazy="selectin")
    alerts = relationship("Alert", back_populates="resident")
