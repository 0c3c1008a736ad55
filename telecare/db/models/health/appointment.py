# telecare/db/models/health/appointment.py
from typing import Optional
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
from datetime import datetime

from ....utils import generate_id, utcnow


class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    id: str = Field(default_factory=generate_id, primary_key=True)
    patient_id: Optional[str] = Field(default=None, foreign_key="profiles.id", index=True)
    doctor_id: Optional[str] = Field(default=None, foreign_key="profiles.id", index=True)
    appointment_date: datetime = Field(sa_type=DateTime(timezone=True))
    status: str = Field(default="scheduled")
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
