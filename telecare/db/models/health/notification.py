# telecare/db/models/health/notification.py
from typing import Optional
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
from datetime import datetime

from ....utils import generate_id, utcnow


class Notification(SQLModel, table=True):
    __tablename__ = "notifications"
    id: str = Field(default_factory=generate_id, primary_key=True)
    user_id: Optional[str] = Field(default=None, foreign_key="profiles.id", index=True)
    title: str
    message: str
    type: Optional[str] = Field(default=None)
    related_id: Optional[str] = Field(default=None)
    appointment_id: Optional[str] = Field(default=None, foreign_key="appointments.id")
    is_read: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
