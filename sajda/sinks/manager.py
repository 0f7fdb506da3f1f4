"""Display hub - fans display signals out to every registered sink"""
import time
from typing import Awaitable, Callable, List

from loguru import logger

from ..engine.models import NextPrayer
from .base import DisplaySink, StatusSnapshot

logger = logger.bind(module="sinks.manager")


class DisplayHub(DisplaySink):
    """Display sink that forwards to many sinks

    A failing sink is logged and skipped; the others still receive the signal.
    The latest state is kept in `snapshot` for the HTTP API.
    """

    def __init__(self):
        self.sinks: List[DisplaySink] = []
        self.snapshot = StatusSnapshot()

    def register(self, sink: DisplaySink):
        """Register a display sink

        Args:
            sink: Sink instance
        """
        self.sinks.append(sink)
        logger.info(f"Display sink registered: {type(sink).__name__}")

    async def _broadcast(self, signal: str, call: Callable[[DisplaySink], Awaitable[None]]):
        for sink in self.sinks:
            try:
                await call(sink)
            except Exception as e:
                logger.error(f"Display sink {type(sink).__name__} failed on {signal}: {e}")

    async def update(self, title: str, next_prayer: NextPrayer) -> None:
        self.snapshot.title = title
        self.snapshot.next_prayer = next_prayer
        await self._broadcast("update", lambda s: s.update(title, next_prayer))

    async def schedule_changed(self) -> None:
        self.snapshot.schedule_version += 1
        await self._broadcast("schedule_changed", lambda s: s.schedule_changed())

    async def system_woke(self) -> None:
        self.snapshot.last_wake_at = time.time()
        await self._broadcast("system_woke", lambda s: s.system_woke())

    async def reminder_due(self, time_hm: str) -> None:
        self.snapshot.last_reminder = time_hm
        await self._broadcast("reminder_due", lambda s: s.reminder_due(time_hm))

    def list_sinks(self) -> list:
        """Names of the registered sinks"""
        return [type(s).__name__ for s in self.sinks]
