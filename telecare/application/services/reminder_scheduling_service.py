from dataclasses import dataclass
from typing import List
from fastapi import HTTPException

from ..ports.reminder_repo import ReminderRepository, ReminderDto
from .reminder_policy import ReminderType


@dataclass
class ReminderSchedulingService:
    repo: ReminderRepository

    def schedule_for_appointment(self, appointment_id: str) -> List[ReminderDto]:
        """Create the missing 24_hours / 1_hour reminders for an appointment.

        Returns only the reminders created by this call.
        """
        appt = self.repo.get_appointment(appointment_id)
        if not appt:
            raise HTTPException(status_code=404, detail="Appointment not found")
        if appt.status in ("cancelled", "completed"):
            raise HTTPException(status_code=400, detail=f"Cannot schedule reminders for a {appt.status} appointment")

        existing = {r.reminder_type for r in self.repo.list_for_appointment(appointment_id)}
        created = []
        for reminder_type in ReminderType:
            if reminder_type.value in existing:
                continue
            created.append(self.repo.create(appointment_id, reminder_type.value))
        return created
