from dataclasses import dataclass
from typing import List, Optional, Protocol
from datetime import datetime


@dataclass
class AppointmentDto:
    id: str
    appointment_date: datetime
    patient_id: Optional[str]
    doctor_id: Optional[str]
    status: str = "scheduled"
    doctor_first_name: Optional[str] = None
    doctor_last_name: Optional[str] = None


@dataclass
class PendingReminderDto:
    id: str
    reminder_type: str
    appointment_id: str
    appointment: Optional[AppointmentDto]  # None when the appointment row is missing


@dataclass
class ReminderDto:
    id: str
    appointment_id: str
    reminder_type: str
    status: str
    sent_at: Optional[datetime]
    created_at: datetime


class ReminderRepository(Protocol):
    def fetch_pending(self) -> List[PendingReminderDto]:
        ...

    def mark_sent(self, reminder_id: str, sent_at: datetime) -> bool:
        ...

    def get_appointment(self, appointment_id: str) -> Optional[AppointmentDto]:
        ...

    def list_for_appointment(self, appointment_id: str) -> List[ReminderDto]:
        ...

    def create(self, appointment_id: str, reminder_type: str) -> ReminderDto:
        ...
