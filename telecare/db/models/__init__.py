# Models package (re-export feature modules for stable imports)
from .users.profile import Profile
from .health.appointment import Appointment
from .health.reminder import AppointmentReminder
from .health.notification import Notification

__all__ = [
    "Profile",
    "Appointment",
    "AppointmentReminder",
    "Notification",
]
