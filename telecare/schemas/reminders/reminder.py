# telecare/schemas/reminders/reminder.py
from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime


class DispatchResponse(BaseModel):
    success: bool = True
    processed: int


class DispatchErrorResponse(BaseModel):
    error: str


class ReminderResponse(BaseModel):
    id: str
    appointment_id: str
    reminder_type: str
    status: str
    sent_at: Optional[datetime] = None
    created_at: datetime


class ScheduleRemindersResponse(BaseModel):
    appointment_id: str
    created: List[ReminderResponse]
