"""Time and distance utilities.

Date keys and month tags use fixed English month abbreviations so they match
the authoritative feed regardless of the host locale.
"""
import math
from datetime import date, datetime

from .types import EARTH_RADIUS_KM, MONTH_ABBR


def local_now() -> datetime:
    """Current wall-clock time as an aware datetime in the host's zone."""
    return datetime.now().astimezone()


def date_key(day: date) -> str:
    """Cache key for a day, e.g. "23-Jan-2026"."""
    return f"{day.day:02d}-{MONTH_ABBR[day.month - 1]}-{day.year}"


def month_tag(day: date) -> str:
    """Cache month tag for a day, e.g. "Jan-2026"."""
    return f"{MONTH_ABBR[day.month - 1]}-{day.year}"


def format_clock(timestamp: int, tz) -> str:
    """Format an epoch timestamp as local HH:MM."""
    return datetime.fromtimestamp(timestamp, tz=tz).strftime("%H:%M")


def format_remaining(seconds: int) -> str:
    """Format a non-negative duration as HH:MM:SS (integer division, no rounding)."""
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in kilometres."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c
