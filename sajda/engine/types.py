"""Core type definitions for the prayer-time engine.

This module defines:
- Prayer names in canonical daily order
- Schedule sources (authoritative feed / computed fallback)
- Alert modes
- Calculation methods and their parameter bundles
- Engine-wide constants
"""
from dataclasses import dataclass
from enum import Enum

from loguru import logger

logger = logger.bind(module="engine.types")


# ============== Prayers ==============

class PrayerName(str, Enum):
    """The six daily events, in canonical order."""
    FAJR = "fajr"
    SYURUK = "syuruk"     # Sunrise, informational only
    DHUHR = "dhuhr"
    ASR = "asr"
    MAGHRIB = "maghrib"
    ISHA = "isha"


PRAYER_ORDER: tuple[PrayerName, ...] = (
    PrayerName.FAJR,
    PrayerName.SYURUK,
    PrayerName.DHUHR,
    PrayerName.ASR,
    PrayerName.MAGHRIB,
    PrayerName.ISHA,
)


# ============== Schedule Source ==============

class ScheduleSource(str, Enum):
    """Where a daily schedule came from."""
    JAKIM_API = "jakim-api"                    # Authoritative cached feed
    CALCULATED = "calculated-fallback"         # Computed from coordinates


CALCULATED_ZONE_CODE = "CALC"


# ============== Alert Modes ==============

class AlertMode(str, Enum):
    """Per-prayer alert mode chosen by the user."""
    MUTE = "mute"       # Notification only, no sound
    CHIME = "chime"     # Short tone
    ADHAN = "adhan"     # Full voice call

    @classmethod
    def parse(cls, value: str | None) -> "AlertMode":
        """Parse a stored mode; anything that is not mute/adhan plays a chime."""
        if not value or value == cls.MUTE.value:
            return cls.MUTE
        if value == cls.ADHAN.value:
            return cls.ADHAN
        return cls.CHIME


# ============== Calculation Methods ==============

@dataclass(frozen=True)
class MethodParameters:
    """Custom parameter bundle for a convention adhanpy has no preset for."""
    fajr_angle: float
    isha_angle: float | None = None
    isha_interval_minutes: int = 0


class CalculationMethod(str, Enum):
    """Named calculation conventions.

    JAKIM doubles as the sentinel that enables the authoritative cache.
    """
    JAKIM = "JAKIM"
    MWL = "MWL"
    ISNA = "ISNA"
    EGYPT = "Egypt"
    MAKKAH = "Makkah"
    KARACHI = "Karachi"
    TEHRAN = "Tehran"
    GULF = "Gulf"
    KUWAIT = "Kuwait"
    QATAR = "Qatar"
    SINGAPORE = "Singapore"

    @classmethod
    def parse(cls, value: "str | CalculationMethod | None") -> "CalculationMethod":
        """Parse a stored method name, as read from settings.yaml.

        Unknown names fall back to JAKIM.
        """
        if isinstance(value, CalculationMethod):
            return value
        if not value:
            return cls.JAKIM
        try:
            return cls(value)
        except ValueError:
            logger.warning(f"Unknown calculation method {value!r}, using JAKIM")
            return cls.JAKIM

    @property
    def custom_parameters(self) -> MethodParameters | None:
        """Explicit bundle, or None when the method maps to an adhanpy preset."""
        return CUSTOM_METHOD_PARAMETERS.get(self)

    @property
    def uses_authoritative_cache(self) -> bool:
        return self is CalculationMethod.JAKIM


CUSTOM_METHOD_PARAMETERS: dict[CalculationMethod, MethodParameters] = {
    CalculationMethod.JAKIM: MethodParameters(fajr_angle=18.0, isha_angle=18.0),
    CalculationMethod.TEHRAN: MethodParameters(fajr_angle=17.7, isha_angle=14.0),
}


# ============== Constants ==============

EARTH_RADIUS_KM = 6371.0
REFETCH_DISTANCE_KM = 5.0

WAKE_THRESHOLD_SECONDS = 5.0
TRIGGER_WINDOW_SECONDS = 2

MONTH_ABBR: tuple[str, ...] = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)
