"""Tick-driven trigger scheduler.

Once per second:
1. Wake detection  - a long gap between ticks means the host slept; prayers
   that passed meanwhile are marked as triggered without alerting.
2. Day rollover    - the triggered set is cleared when the local date changes.
3. Display update  - the next prayer countdown goes to the display sink.
4. Prayer triggers - a prayer fires once inside [t, t + 2s); it is marked
   before any side effect so a failing sink never causes a repeat.
5. Reminders       - at second 0, the current HH:MM is checked against the
   day's reminder times.

Sink failures are logged and swallowed; delivery is at-most-once.
"""
import asyncio
import time
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Awaitable, Callable

from loguru import logger

from ..engine.reminders import reminder_times_for
from ..engine.resolver import ScheduleResolver
from ..engine.timeutil import local_now
from ..engine.types import TRIGGER_WINDOW_SECONDS, WAKE_THRESHOLD_SECONDS, PrayerName
from ..sinks.base import AlertRequest, AlertSink, DisplaySink
from ..user_settings import UserSettings
from .display import tray_title

logger = logger.bind(module="ticker.scheduler")

FRIDAY = 4


@dataclass
class TickerState:
    """Dedup and wake-detection state, owned by the ticker alone."""
    triggered_today: set[str] = field(default_factory=set)
    last_date: date | None = None
    last_tick: float | None = None  # monotonic seconds


class TriggerScheduler:
    """The 1 Hz control loop.

    Alerts are awaited inline, so a slow alert sink delays the next tick and
    alerts never overlap.
    """

    def __init__(
        self,
        resolver: ScheduleResolver,
        alert_sink: AlertSink,
        display_sink: DisplaySink,
        settings_loader: Callable[[], UserSettings] = UserSettings,
        clock: Callable[[], datetime] = local_now,
        monotonic: Callable[[], float] = time.monotonic,
        tick_interval: float = 1.0,
        wake_threshold: float = WAKE_THRESHOLD_SECONDS,
        trigger_window: int = TRIGGER_WINDOW_SECONDS,
    ):
        """Initialize the ticker.

        Args:
            resolver: Schedule source
            alert_sink: Receives prayer alerts
            display_sink: Receives countdown, wake and reminder signals
            settings_loader: Returns current user settings (read every use)
            clock: Wall clock, aware local datetime
            monotonic: Monotonic clock for wake detection
            tick_interval: Seconds between ticks
            wake_threshold: Tick gap (seconds) treated as a sleep/wake cycle
            trigger_window: Seconds after a prayer time during which it may fire
        """
        self.resolver = resolver
        self.alert_sink = alert_sink
        self.display_sink = display_sink
        self._load_settings = settings_loader
        self._clock = clock
        self._monotonic = monotonic
        self.tick_interval = tick_interval
        self.wake_threshold = wake_threshold
        self.trigger_window = trigger_window

        self.state = TickerState()
        self._running = False

    # ============== Lifecycle ==============

    @property
    def running(self) -> bool:
        return self._running

    @property
    def triggered_today(self) -> frozenset[str]:
        return frozenset(self.state.triggered_today)

    async def run(self) -> None:
        """Tick until stop() is called. A failing tick never ends the loop."""
        self._running = True
        logger.info("Ticker started")
        while self._running:
            try:
                await self.tick()
            except Exception as e:
                logger.error(f"Tick failed: {e}")
            await asyncio.sleep(self._delay_to_next_tick())
        logger.info("Ticker stopped")

    def stop(self) -> None:
        self._running = False

    def _delay_to_next_tick(self) -> float:
        # Align to the wall-clock second so the second == 0 check is reliable
        now_ts = self._clock().timestamp()
        return self.tick_interval - (now_ts % self.tick_interval)

    # ============== Tick ==============

    async def tick(self) -> None:
        """Run one tick against the current clocks."""
        now = self._clock()

        if self._detect_wake(self._monotonic()):
            await self._handle_wake(now)

        self._roll_day(now.date())

        await self._update_display(now)
        await self._fire_due_prayers(now)

        if now.second == 0:
            await self._check_reminders(now)

    def _detect_wake(self, mono_now: float) -> bool:
        last = self.state.last_tick
        self.state.last_tick = mono_now
        return last is not None and (mono_now - last) > self.wake_threshold

    async def _handle_wake(self, now: datetime) -> None:
        logger.info("Wake from sleep detected")
        schedule = self.resolver.resolve_today(now)
        if schedule is not None:
            now_ts = int(now.timestamp())
            for name, ts in schedule.times():
                if now_ts > ts and name.value not in self.state.triggered_today:
                    self.state.triggered_today.add(name.value)
                    logger.info(f"[Wake] Marked past prayer: {name.value}")

        await self._safe("system_woke", self.display_sink.system_woke)

    def _roll_day(self, today: date) -> None:
        if self.state.last_date != today:
            self.state.triggered_today.clear()
            self.state.last_date = today
            logger.info(f"New day {today}, reset triggered prayers")

    async def _update_display(self, now: datetime) -> None:
        next_prayer = self.resolver.next_prayer(now)
        if next_prayer is None:
            return
        title = tray_title(next_prayer, is_friday=now.weekday() == FRIDAY)
        await self._safe("display update", lambda: self.display_sink.update(title, next_prayer))

    async def _fire_due_prayers(self, now: datetime) -> None:
        schedule = self.resolver.resolve_today(now)
        if schedule is None:
            return

        now_ts = int(now.timestamp())
        for name, ts in schedule.times():
            in_window = ts <= now_ts < ts + self.trigger_window
            if not in_window or name.value in self.state.triggered_today:
                continue

            # Mark first: a failing alert must never cause a repeat
            self.state.triggered_today.add(name.value)
            logger.info(f"Time match for {name.value}")

            # Sunrise is informational only
            if name is PrayerName.SYURUK:
                continue

            await self._send_alert(name.value, now)

    async def _current_settings(self) -> UserSettings:
        # settings.yaml is read from disk; keep the file I/O off the event loop
        return await asyncio.to_thread(self._load_settings)

    async def _send_alert(self, prayer: str, now: datetime) -> None:
        user_settings = await self._current_settings()
        weekday = now.weekday()
        request = AlertRequest(
            prayer=prayer,
            weekday=weekday,
            mode=user_settings.alert_mode(prayer),
            voice=user_settings.adhan_selection,
            friday_special=(
                prayer == PrayerName.DHUHR.value
                and weekday == FRIDAY
                and user_settings.alkahf_enabled
            ),
        )
        await self._safe(f"alert for {prayer}", lambda: self.alert_sink.alert(request))

    async def _check_reminders(self, now: datetime) -> None:
        user_settings = await self._current_settings()
        if not user_settings.reminders_enabled:
            return

        if user_settings.random_reminders:
            active_times = reminder_times_for(now.date())
        else:
            active_times = user_settings.reminder_times

        current_hm = now.strftime("%H:%M")
        if current_hm in active_times:
            logger.info(f"Reminder trigger at {current_hm}")
            await self._safe("reminder", lambda: self.display_sink.reminder_due(current_hm))

    @staticmethod
    async def _safe(what: str, call: Callable[[], Awaitable[None]]) -> None:
        try:
            await call()
        except Exception as e:
            logger.error(f"{what} failed: {e}")
