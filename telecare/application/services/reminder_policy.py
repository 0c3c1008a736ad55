"""Due-window policy for appointment reminders.

A reminder fires when its appointment starts within the reminder type's
tolerance of exactly ``offset`` after the dispatch instant::

    anchor = now + offset
    due    = |appointment_date - anchor| < tolerance

The comparison is strict, so a delta equal to the tolerance does not fire.

``1_hour`` reminders use a 5 minute tolerance, which only works when the
external scheduler polls at least every 5 minutes. A slower cadence lets an
appointment slip through the window between two polls and the reminder is
never sent.

Everything in this module is pure: no clock reads, no I/O.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone, tzinfo
from enum import Enum
from typing import Dict, Iterable, List, Optional
from zoneinfo import ZoneInfo

from ..ports.notification_sink import NotificationDto
from ..ports.reminder_repo import AppointmentDto, PendingReminderDto
from ...utils import as_utc


class ReminderType(str, Enum):
    TWENTY_FOUR_HOURS = "24_hours"
    ONE_HOUR = "1_hour"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["ReminderType"]:
        """Return the matching member, or None for values outside the set."""
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class ReminderWindow:
    offset: timedelta
    tolerance: timedelta
    title: str


REMINDER_WINDOWS: Dict[ReminderType, ReminderWindow] = {
    ReminderType.TWENTY_FOUR_HOURS: ReminderWindow(
        offset=timedelta(hours=24),
        tolerance=timedelta(minutes=30),
        title="Appointment Tomorrow",
    ),
    ReminderType.ONE_HOUR: ReminderWindow(
        offset=timedelta(hours=1),
        tolerance=timedelta(minutes=5),
        title="Appointment Soon",
    ),
}

# Longest scheduler cadence that still visits every window at least once
MAX_POLL_INTERVAL = min(w.tolerance for w in REMINDER_WINDOWS.values())

DEFAULT_DOCTOR_NAME = "your doctor"


@dataclass
class PlannedReminder:
    reminder_id: str
    reminder_type: ReminderType
    notification: NotificationDto


@dataclass
class DispatchPlan:
    processed: int = 0
    due: List[PlannedReminder] = field(default_factory=list)
    not_due: int = 0
    skipped_orphaned: int = 0
    skipped_unknown_type: int = 0
    skipped_duplicate: int = 0


def resolve_timezone(name: Optional[str]) -> tzinfo:
    if not name or name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def is_due(reminder_type: ReminderType, appointment_date: datetime, now: datetime) -> bool:
    window = REMINDER_WINDOWS[reminder_type]
    anchor = as_utc(now) + window.offset
    return abs(as_utc(appointment_date) - anchor) < window.tolerance


def doctor_display_name(appointment: AppointmentDto) -> str:
    parts = [
        p.strip()
        for p in (appointment.doctor_first_name, appointment.doctor_last_name)
        if p and p.strip()
    ]
    return " ".join(parts) if parts else DEFAULT_DOCTOR_NAME


def format_time_of_day(dt: datetime, display_tz: tzinfo = timezone.utc) -> str:
    # 09:30 PM -> 9:30 PM
    return as_utc(dt).astimezone(display_tz).strftime("%I:%M %p").lstrip("0")


def compose_notification(reminder_type: ReminderType, appointment: AppointmentDto, display_tz: tzinfo = timezone.utc) -> NotificationDto:
    doctor_name = doctor_display_name(appointment)
    if reminder_type is ReminderType.TWENTY_FOUR_HOURS:
        start = format_time_of_day(appointment.appointment_date, display_tz)
        message = f"Reminder: You have an appointment with {doctor_name} tomorrow at {start}"
    else:
        message = f"Reminder: Your appointment with {doctor_name} is in 1 hour!"

    return NotificationDto(
        user_id=appointment.patient_id,
        title=REMINDER_WINDOWS[reminder_type].title,
        message=message,
        related_id=appointment.id,
        appointment_id=appointment.id,
    )


def plan_dispatch(now: datetime, reminders: Iterable[PendingReminderDto], display_tz: tzinfo = timezone.utc) -> DispatchPlan:
    """Decide which of the fetched reminders are due at ``now``.

    Orphaned reminders and unknown reminder types are counted and skipped.
    A reminder id seen twice in the snapshot is planned only once.
    """
    plan = DispatchPlan()
    seen = set()
    for reminder in reminders:
        plan.processed += 1
        if reminder.id in seen:
            plan.skipped_duplicate += 1
            continue
        seen.add(reminder.id)

        if reminder.appointment is None:
            plan.skipped_orphaned += 1
            continue

        reminder_type = ReminderType.parse(reminder.reminder_type)
        if reminder_type is None:
            plan.skipped_unknown_type += 1
            continue

        if not is_due(reminder_type, reminder.appointment.appointment_date, now):
            plan.not_due += 1
            continue

        plan.due.append(
            PlannedReminder(
                reminder_id=reminder.id,
                reminder_type=reminder_type,
                notification=compose_notification(reminder_type, reminder.appointment, display_tz),
            )
        )
    return plan
