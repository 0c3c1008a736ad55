from dataclasses import dataclass
from typing import Optional, Protocol

APPOINTMENT_REMINDER = "appointment_reminder"


@dataclass(frozen=True)
class NotificationDto:
    user_id: Optional[str]
    title: str
    message: str
    related_id: str
    appointment_id: str
    type: str = APPOINTMENT_REMINDER


class NotificationSink(Protocol):
    def create(self, notification: NotificationDto) -> None:
        ...
