# Schemas package (re-export feature modules for stable imports)
from .reminders.reminder import *
from .common.common import *
