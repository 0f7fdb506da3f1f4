"""Authoritative feed access"""
from .client import FeedError, PrayerFeedClient
from .models import PrayerDatapointModel, SolatResponse, ZoneRecord

__all__ = [
    "FeedError",
    "PrayerDatapointModel",
    "PrayerFeedClient",
    "SolatResponse",
    "ZoneRecord",
]
