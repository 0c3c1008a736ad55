# Routers package
from . import reminders_router

__all__ = [
    "reminders_router",
]
