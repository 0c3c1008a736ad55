from typing import List, Optional
from datetime import datetime
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from .....db.models import Appointment, AppointmentReminder, Profile
from .....exceptions import ReminderStoreError, ReminderUpdateError
from .....utils import as_utc
from .....application.ports.reminder_repo import (
    ReminderRepository,
    AppointmentDto,
    PendingReminderDto,
    ReminderDto,
)


class SqlReminderRepository(ReminderRepository):
    def __init__(self, session: Session):
        self.session = session

    def _appt_to_dto(self, a: Appointment, doctor: Optional[Profile]) -> AppointmentDto:
        return AppointmentDto(
            id=a.id,
            appointment_date=a.appointment_date,
            patient_id=a.patient_id,
            doctor_id=a.doctor_id,
            status=a.status,
            doctor_first_name=doctor.first_name if doctor else None,
            doctor_last_name=doctor.last_name if doctor else None,
        )

    def _reminder_to_dto(self, r: AppointmentReminder) -> ReminderDto:
        return ReminderDto(
            id=r.id,
            appointment_id=r.appointment_id,
            reminder_type=r.reminder_type,
            status=r.status,
            sent_at=r.sent_at,
            created_at=r.created_at,
        )

    def fetch_pending(self) -> List[PendingReminderDto]:
        # Outer joins keep reminders whose appointment is gone so the caller can skip them
        try:
            rows = self.session.exec(
                select(AppointmentReminder, Appointment, Profile)
                .select_from(AppointmentReminder)
                .join(Appointment, AppointmentReminder.appointment_id == Appointment.id, isouter=True)
                .join(Profile, Appointment.doctor_id == Profile.id, isouter=True)
                .where(AppointmentReminder.status == "pending")
                .where(AppointmentReminder.sent_at == None)  # noqa: E711
                .order_by(AppointmentReminder.created_at)
            ).all()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise ReminderStoreError(f"Error fetching reminders: {e}") from e

        return [
            PendingReminderDto(
                id=r.id,
                reminder_type=r.reminder_type,
                appointment_id=r.appointment_id,
                appointment=self._appt_to_dto(a, d) if a else None,
            )
            for r, a, d in rows
        ]

    def mark_sent(self, reminder_id: str, sent_at: datetime) -> bool:
        try:
            r = self.session.get(AppointmentReminder, reminder_id)
            if not r or r.status != "pending":
                return False
            r.status = "sent"
            r.sent_at = as_utc(sent_at)
            self.session.add(r)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise ReminderUpdateError(f"Error updating reminder {reminder_id}: {e}") from e
        return True

    def get_appointment(self, appointment_id: str) -> Optional[AppointmentDto]:
        row = self.session.exec(
            select(Appointment, Profile)
            .join(Profile, Appointment.doctor_id == Profile.id, isouter=True)
            .where(Appointment.id == appointment_id)
        ).first()
        if not row:
            return None
        a, d = row
        return self._appt_to_dto(a, d)

    def list_for_appointment(self, appointment_id: str) -> List[ReminderDto]:
        rows = self.session.exec(
            select(AppointmentReminder)
            .where(AppointmentReminder.appointment_id == appointment_id)
            .order_by(AppointmentReminder.created_at)
        ).all()
        return [self._reminder_to_dto(r) for r in rows]

    def create(self, appointment_id: str, reminder_type: str) -> ReminderDto:
        r = AppointmentReminder(appointment_id=appointment_id, reminder_type=reminder_type, status="pending")
        self.session.add(r)
        self.session.commit()
        self.session.refresh(r)
        return self._reminder_to_dto(r)
