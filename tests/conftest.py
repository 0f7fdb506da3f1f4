"""Shared fakes: fixed-zone clocks, a scripted calculator, recording sinks."""
import asyncio
import calendar
import os
import sys
from datetime import date, datetime, timedelta, timezone

import pytest

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from sajda.config import Settings
from sajda.engine.models import NextPrayer, PrayerCache, PrayerDatapoint
from sajda.engine.types import MONTH_ABBR, PrayerName
from sajda.feed.models import ZoneRecord
from sajda.service import SajdaService
from sajda.sinks.base import AlertRequest, AlertSink, DisplaySink
from sajda.sinks.manager import DisplayHub

# Malaysia, no DST
TZ = timezone(timedelta(hours=8))

KL = (3.1390, 101.6869)

# Authoritative times (cache) and computed times differ by a few minutes so
# tests can tell which source was used.
CACHE_TIMES = {
    "fajr": (5, 55),
    "syuruk": (7, 15),
    "dhuhr": (13, 20),
    "asr": (16, 40),
    "maghrib": (19, 25),
    "isha": (20, 40),
}
COMPUTED_TIMES = {
    "fajr": (5, 50),
    "syuruk": (7, 10),
    "dhuhr": (13, 15),
    "asr": (16, 35),
    "maghrib": (19, 20),
    "isha": (20, 35),
}


def local(year, month, day, hour=0, minute=0, second=0) -> datetime:
    return datetime(year, month, day, hour, minute, second, tzinfo=TZ)


def ts(year, month, day, hour, minute, second=0) -> int:
    return int(local(year, month, day, hour, minute, second).timestamp())


def make_cache(year, month, lat=KL[0], lng=KL[1], zone="WLY01") -> PrayerCache:
    """A full month of authoritative times at CACHE_TIMES."""
    abbr = MONTH_ABBR[month - 1]
    prayers = {}
    for d in range(1, calendar.monthrange(year, month)[1] + 1):
        stamps = {name: ts(year, month, d, h, m) for name, (h, m) in CACHE_TIMES.items()}
        prayers[f"{d:02d}-{abbr}-{year}"] = PrayerDatapoint(
            day=d, hijri=f"1447-08-{d:02d}", **stamps
        )
    return PrayerCache(zone=zone, lat=lat, lng=lng, month_tag=f"{abbr}-{year}", prayers=prayers)


class FakeClock:
    """Wall clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, now: datetime):
        self.now = now

    def advance(self, seconds: float):
        self.now = self.now + timedelta(seconds=seconds)


class FakeMonotonic:
    def __init__(self, start: float = 1000.0):
        self.value = start

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float):
        self.value += seconds


class FakeCalculator:
    """Returns COMPUTED_TIMES for any date and records the calls."""

    def __init__(self, error: Exception | None = None):
        self.calls = []
        self.error = error

    def __call__(self, day: date, coordinates, method):
        self.calls.append((day, coordinates, method))
        if self.error is not None:
            raise self.error
        return {
            PrayerName(name): ts(day.year, day.month, day.day, h, m)
            for name, (h, m) in COMPUTED_TIMES.items()
        }


class RecordingAlertSink(AlertSink):
    def __init__(self, fail: bool = False):
        self.requests: list[AlertRequest] = []
        self.fail = fail

    async def alert(self, request: AlertRequest) -> None:
        self.requests.append(request)
        if self.fail:
            raise RuntimeError("speaker unplugged")

    @property
    def prayers(self) -> list[str]:
        return [r.prayer for r in self.requests]


class RecordingDisplaySink(DisplaySink):
    def __init__(self, fail: bool = False):
        self.updates: list[tuple[str, NextPrayer]] = []
        self.changed = 0
        self.woke = 0
        self.reminders: list[str] = []
        self.fail = fail

    def _maybe_fail(self):
        if self.fail:
            raise RuntimeError("tray gone")

    async def update(self, title: str, next_prayer: NextPrayer) -> None:
        self.updates.append((title, next_prayer))
        self._maybe_fail()

    async def schedule_changed(self) -> None:
        self.changed += 1
        self._maybe_fail()

    async def system_woke(self) -> None:
        self.woke += 1
        self._maybe_fail()

    async def reminder_due(self, time_hm: str) -> None:
        self.reminders.append(time_hm)
        self._maybe_fail()


class FakeMonth:
    def __init__(self, year, month):
        self.year = year
        self.month = month

    def to_cache(self, lat, lng):
        return make_cache(self.year, self.month, lat=lat, lng=lng)


class FakeFeed:
    def __init__(self, error=None):
        self.calls = []
        self.zone_calls = 0
        self.error = error
        self.gate: asyncio.Event | None = None

    async def fetch_times(self, lat, lng):
        self.calls.append((lat, lng))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return FakeMonth(2026, 1)

    async def fetch_zones(self):
        self.zone_calls += 1
        if self.error is not None:
            raise self.error
        return [ZoneRecord(jakimCode="WLY01", negeri="Wilayah Persekutuan", daerah="Kuala Lumpur")]


def build_service(tmp_path, feed=None, latitude=None, longitude=None):
    config = Settings(data_dir=tmp_path, latitude=latitude, longitude=longitude)
    display = DisplayHub()
    recorder = RecordingDisplaySink()
    display.register(recorder)
    service = SajdaService(
        config=config,
        feed_client=feed or FakeFeed(),
        alert_sink=RecordingAlertSink(),
        display=display,
        clock=FakeClock(local(2026, 1, 22, 10, 0, 0)),
        calculator=FakeCalculator(),
    )
    return service, recorder


async def drain(service):
    """Wait for the service's detached tasks, including ones they spawn."""
    while service._tasks:
        await asyncio.gather(*list(service._tasks), return_exceptions=True)


@pytest.fixture
def clock():
    # Thursday
    return FakeClock(local(2026, 1, 22, 10, 0, 0))


@pytest.fixture
def calculator():
    return FakeCalculator()
