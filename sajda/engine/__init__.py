"""Prayer-time engine: schedule resolution, staleness, reminders."""
from .models import NextPrayer, PrayerCache, PrayerDatapoint, PrayerSchedule, Zone
from .reminders import generate_reminder_times
from .resolver import ScheduleResolver
from .state import EngineState, StateLockError
from .types import AlertMode, CalculationMethod, PrayerName, ScheduleSource

__all__ = [
    "AlertMode",
    "CalculationMethod",
    "EngineState",
    "NextPrayer",
    "PrayerCache",
    "PrayerDatapoint",
    "PrayerName",
    "PrayerSchedule",
    "ScheduleResolver",
    "ScheduleSource",
    "StateLockError",
    "Zone",
    "generate_reminder_times",
]
