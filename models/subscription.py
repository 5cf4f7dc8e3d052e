from enum import Enum as PyEnum
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from core.database import Base
from services.helpers import utcnow


class PlanEnum(str, PyEnum):
    FREE = "FREE"
    PRO = "PRO"


class SubscriptionStatusEnum(str, PyEnum):
    PENDING_PAYMENT = "PENDING_PAYMENT"
    ACTIVE = "ACTIVE"


class Subscription(Base):
    __tablename__ = "subscriptions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    plan = Column(String(20), nullable=False)  # FREE, PRO
    status = Column(String(30), nullable=False)  # PENDING_PAYMENT, ACTIVE
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="subscription")
