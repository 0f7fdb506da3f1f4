"""Side-effect sink interfaces

The ticker decides *when* something happens; sinks decide *how* it is shown
or heard.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from ..engine.models import NextPrayer
from ..engine.types import AlertMode


@dataclass
class AlertRequest:
    """A prayer time has arrived"""
    prayer: str
    weekday: int               # Monday == 0
    mode: AlertMode
    voice: str                 # Adhan voice variant, e.g. "Nasser"
    friday_special: bool = False

    @property
    def is_friday(self) -> bool:
        return self.weekday == 4

    def to_dict(self) -> dict[str, Any]:
        return {
            "prayer": self.prayer,
            "weekday": self.weekday,
            "mode": self.mode.value,
            "voice": self.voice,
            "friday_special": self.friday_special,
        }


class AlertSink(ABC):
    """Audible alerts and notifications"""

    @abstractmethod
    async def alert(self, request: AlertRequest) -> None:
        """Deliver the alert for one prayer

        Args:
            request: Prayer, weekday, configured mode and voice
        """
        pass


class DisplaySink(ABC):
    """Tray / dashboard presentation"""

    @abstractmethod
    async def update(self, title: str, next_prayer: NextPrayer) -> None:
        """Per-tick countdown

        Args:
            title: Compact fixed-width "name - remaining" text
            next_prayer: Full next prayer value
        """
        pass

    async def schedule_changed(self) -> None:
        """Coordinates, method or cache changed"""
        pass

    async def system_woke(self) -> None:
        """The host resumed from sleep"""
        pass

    async def reminder_due(self, time_hm: str) -> None:
        """A daily reminder time was reached

        Args:
            time_hm: The matching "HH:MM"
        """
        pass


class StatusSnapshot:
    """Latest display state, readable by the HTTP API"""

    def __init__(self):
        self.title: Optional[str] = None
        self.next_prayer: Optional[NextPrayer] = None
        self.last_wake_at: Optional[float] = None
        self.last_reminder: Optional[str] = None
        self.schedule_version: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "next_prayer": self.next_prayer.to_dict() if self.next_prayer else None,
            "last_wake_at": self.last_wake_at,
            "last_reminder": self.last_reminder,
            "schedule_version": self.schedule_version,
        }
