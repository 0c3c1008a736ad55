# telecare/db/models/health/reminder.py
from typing import Optional
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
from datetime import datetime

from ....utils import generate_id, utcnow


class AppointmentReminder(SQLModel, table=True):
    __tablename__ = "appointment_reminders"
    id: str = Field(default_factory=generate_id, primary_key=True)
    appointment_id: str = Field(foreign_key="appointments.id", index=True)
    reminder_type: str  # 24_hours, 1_hour
    status: str = Field(default="pending", index=True)  # pending, sent
    sent_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
