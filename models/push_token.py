from sqlalchemy import Column, Integer, String, DateTime

from core.database import Base
from services.helpers import utcnow


class PushToken(Base):
    __tablename__ = "push_tokens"

    id = Column(Integer, primary_key=True, index=True)
    token = Column(String(4096), unique=True, nullable=False)
    platform = Column(String(20), nullable=False, default="ios")
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
