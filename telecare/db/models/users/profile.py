# telecare/db/models/users/profile.py
from typing import Optional
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
from datetime import datetime

from ....utils import generate_id, utcnow


class Profile(SQLModel, table=True):
    __tablename__ = "profiles"
    id: str = Field(default_factory=generate_id, primary_key=True)
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    role: str = Field(default="patient", max_length=30)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
