"""Sajda service - wires the engine, the ticker, the feed and the stores.

Background work:
- ticker:          one asyncio task, ticks every second
- zones_refresh:   APScheduler interval job, refreshes the zone table
- staleness_check: APScheduler interval job, refetches a stale month
- refetches:       detached asyncio tasks; the last successful one wins
"""
import asyncio
from contextlib import suppress
from datetime import date
from typing import Any, Callable, Coroutine

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from loguru import logger

from .config import Settings, settings as default_settings
from .engine.calculation import compute_prayer_times
from .engine.models import NextPrayer, PrayerSchedule
from .engine.reminders import generate_reminder_times, reminder_times_for
from .engine.resolver import Calculator, ScheduleResolver
from .engine.state import Coordinates, EngineState
from .engine.timeutil import local_now
from .engine.types import CalculationMethod
from .feed.client import PrayerFeedClient
from .sinks.base import AlertSink
from .sinks.console import LoggingAlertSink, LoggingDisplaySink
from .sinks.manager import DisplayHub
from .sinks.webhook import WebhookAlertSink
from .store import CacheStore, SettingsStore
from .ticker.scheduler import TriggerScheduler

logger = logger.bind(module="service")


class SajdaService:
    """The daemon: engine state, ticker and background jobs"""

    def __init__(
        self,
        config: Settings | None = None,
        feed_client: PrayerFeedClient | None = None,
        cache_store: CacheStore | None = None,
        settings_store: SettingsStore | None = None,
        alert_sink: AlertSink | None = None,
        display: DisplayHub | None = None,
        clock: Callable = local_now,
        calculator: Calculator = compute_prayer_times,
    ):
        self.config = config or default_settings
        self.state = EngineState()
        self.resolver = ScheduleResolver(self.state, clock=clock, calculator=calculator)

        self.feed = feed_client or PrayerFeedClient(
            api_base=self.config.api_base,
            zones_url=self.config.zones_url,
            timeout_seconds=self.config.http_timeout_seconds,
        )
        self.cache_store = cache_store or CacheStore(self.config.data_dir)
        self.settings_store = settings_store or SettingsStore(self.config.data_dir)

        if display is None:
            display = DisplayHub()
            display.register(LoggingDisplaySink())
        self.display = display
        self.alert_sink = alert_sink or self._default_alert_sink()

        self.ticker = TriggerScheduler(
            resolver=self.resolver,
            alert_sink=self.alert_sink,
            display_sink=self.display,
            settings_loader=self.settings_store.load,
            clock=clock,
            tick_interval=self.config.tick_interval_seconds,
            wake_threshold=self.config.wake_threshold_seconds,
        )

        self.scheduler: AsyncIOScheduler | None = None
        self._ticker_task: asyncio.Task | None = None
        self._tasks: set[asyncio.Task] = set()
        self._inflight: set[Coordinates] = set()
        self._running = False

        self.resolver.add_listener(self._on_schedule_changed)

    def _default_alert_sink(self) -> AlertSink:
        if self.config.alert_webhook_url:
            return WebhookAlertSink(
                self.config.alert_webhook_url,
                timeout_seconds=self.config.http_timeout_seconds,
            )
        return LoggingAlertSink()

    # ============== Lifecycle ==============

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Restore state from disk, start the ticker and the background jobs."""
        if self._running:
            return
        self._running = True

        zones = self.cache_store.load_zones()
        if zones:
            self.resolver.update_zones(zones)

        cache = self.cache_store.load_cache()
        if cache is not None:
            self.resolver.update_cache(cache)

        self.resolver.set_method(self.settings_store.load().calculation_method)

        coords = self.config.coordinates
        if coords is not None:
            self.update_location(*coords)

        self._ticker_task = asyncio.create_task(self.ticker.run())

        self.scheduler = AsyncIOScheduler()
        self.scheduler.add_job(
            self.refresh_zones,
            "interval",
            hours=self.config.zones_refresh_hours,
            id="zones_refresh",
        )
        self.scheduler.add_job(
            self.check_staleness,
            "interval",
            minutes=self.config.refetch_check_minutes,
            id="staleness_check",
        )
        self.scheduler.start()

        if not zones:
            self._spawn(self.refresh_zones())

        logger.info("Sajda service started")

    async def stop(self) -> None:
        if not self._running:
            return
        self._running = False

        if self.scheduler is not None:
            self.scheduler.shutdown(wait=False)
            self.scheduler = None

        self.ticker.stop()
        if self._ticker_task is not None:
            self._ticker_task.cancel()
            with suppress(asyncio.CancelledError):
                await self._ticker_task
            self._ticker_task = None

        pending = list(self._tasks)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        self._tasks.clear()
        self._inflight.clear()

        logger.info("Sajda service stopped")

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _on_schedule_changed(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        task = loop.create_task(self.display.schedule_changed())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    # ============== Location & cache ==============

    def update_location(self, lat: float, lng: float) -> bool:
        """Push new coordinates and refetch if the cache went stale.

        Returns:
            Whether a refetch was started
        """
        self.resolver.update_coordinates(lat, lng)
        return self.ensure_fresh_cache()

    def ensure_fresh_cache(self) -> bool:
        """Spawn a refetch when the cache is missing, old or too far away."""
        coords = self.resolver.coordinates()
        if coords is None:
            return False

        lat, lng = coords
        if not self.resolver.needs_refetch(lat, lng):
            return False

        if coords in self._inflight:
            logger.debug(f"Refetch already running for ({lat:.4f}, {lng:.4f})")
            return False

        self._inflight.add(coords)
        self._spawn(self._refetch(lat, lng))
        return True

    async def _refetch(self, lat: float, lng: float) -> None:
        try:
            response = await self.feed.fetch_times(lat, lng)
            cache = response.to_cache(lat, lng)
            self.resolver.update_cache(cache)
            try:
                self.cache_store.save_cache(cache)
            except OSError as e:
                logger.error(f"Failed to save prayer cache: {e}")
        except Exception as e:
            logger.error(f"JAKIM refetch failed: {e}")
        finally:
            self._inflight.discard((lat, lng))

    async def check_staleness(self) -> None:
        self.ensure_fresh_cache()

    async def refresh_zones(self) -> None:
        try:
            records = await self.feed.fetch_zones()
        except Exception as e:
            logger.error(f"Zone refresh failed: {e}")
            return

        zones = [r.to_zone() for r in records]
        self.resolver.update_zones({z.code: z for z in zones})
        try:
            self.cache_store.save_zones(zones)
        except OSError as e:
            logger.error(f"Failed to save zones cache: {e}")

    # ============== Method ==============

    def set_method(self, method: CalculationMethod | str) -> CalculationMethod:
        """Switch calculation method and persist it to the user settings."""
        parsed = self.resolver.set_method(method)
        self.settings_store.update(calculation_method=parsed.value)
        return parsed

    # ============== Queries ==============

    def schedule(self) -> PrayerSchedule | None:
        return self.resolver.resolve_today()

    def next_prayer(self) -> NextPrayer | None:
        return self.resolver.next_prayer()

    def reminders(self, day: date) -> dict[str, Any]:
        """Generated and active reminder times for a date."""
        user_settings = self.settings_store.load()
        if not user_settings.reminders_enabled:
            active: list[str] = []
        elif user_settings.random_reminders:
            active = reminder_times_for(day)
        else:
            active = list(user_settings.reminder_times)
        return {
            "day": day.isoformat(),
            "generated": generate_reminder_times(day.year, day.month, day.day),
            "active": active,
            "random": user_settings.random_reminders,
            "enabled": user_settings.reminders_enabled,
        }

    def status(self) -> dict[str, Any]:
        cache = self.state.cache.get()
        zones = self.state.zones.get()
        coords = self.resolver.coordinates()

        jobs = []
        if self.scheduler is not None:
            for job in self.scheduler.get_jobs():
                jobs.append({
                    "id": job.id,
                    "next_run_time": job.next_run_time.isoformat() if job.next_run_time else None,
                })

        return {
            "running": self._running,
            "coordinates": list(coords) if coords else None,
            "method": self.resolver.current_method().value,
            "cache": {
                "zone": cache.zone,
                "zone_name": self.resolver.resolve_zone_name(cache.zone),
                "month": cache.month_tag,
                "days": len(cache.prayers),
            } if cache else None,
            "zones": len(zones) if zones else 0,
            "refetching": bool(self._inflight),
            "triggered_today": sorted(self.ticker.triggered_today),
            "display": self.display.snapshot.to_dict(),
            "display_sinks": self.display.list_sinks(),
            "jobs": jobs,
        }
