"""Logging sinks and alert content resolution"""
from dataclasses import dataclass
from typing import Any, Optional

from loguru import logger

from ..engine.models import NextPrayer
from ..engine.types import AlertMode, PrayerName
from .base import AlertRequest, AlertSink, DisplaySink

logger = logger.bind(module="sinks.console")

APP_TITLE = "Sajda"
FRIDAY_TITLE = "Jumu'ah Mubarak"
FRIDAY_BODY = "Don't forget to read Surah Al-Kahf today."


@dataclass
class AlertContent:
    """What the user sees and hears for one alert"""
    title: str
    body: str
    sound_file: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "body": self.body, "sound_file": self.sound_file}


def resolve_sound_file(request: AlertRequest) -> Optional[str]:
    """Pick the audio resource for an alert; None when muted."""
    if request.mode is AlertMode.MUTE:
        return None
    if request.mode is AlertMode.ADHAN:
        if request.prayer == PrayerName.FAJR.value:
            return "Adhan_Fajr.mp3"
        return "Ahmed.mp3" if request.voice == "Ahmed" else "Nasser.mp3"
    return "Chime.mp3"


def build_alert_content(request: AlertRequest) -> AlertContent:
    """Notification text and sound for an alert request."""
    if request.friday_special:
        title, body = FRIDAY_TITLE, FRIDAY_BODY
    else:
        title, body = APP_TITLE, f"It is now time for {request.prayer.upper()}"
    return AlertContent(title=title, body=body, sound_file=resolve_sound_file(request))


class LoggingAlertSink(AlertSink):
    """Writes alerts to the log"""

    async def alert(self, request: AlertRequest) -> None:
        content = build_alert_content(request)
        logger.info(
            f"ALERT {request.prayer}: {content.title} - {content.body}"
            f" (sound={content.sound_file or 'none'})"
        )


class LoggingDisplaySink(DisplaySink):
    """Writes display signals to the log"""

    async def update(self, title: str, next_prayer: NextPrayer) -> None:
        logger.debug(f"Next: {next_prayer.name} at {next_prayer.time} ({next_prayer.remaining})")

    async def schedule_changed(self) -> None:
        logger.info("Today's schedule changed")

    async def system_woke(self) -> None:
        logger.info("System woke from sleep")

    async def reminder_due(self, time_hm: str) -> None:
        logger.info(f"Reminder due at {time_hm}")
