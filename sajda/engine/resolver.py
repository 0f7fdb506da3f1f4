"""Schedule resolution engine.

Decides between the authoritative cached feed and the computed fallback,
answers cache staleness queries, and derives the next upcoming prayer.
"""
from datetime import date, datetime, timedelta
from typing import Callable

from loguru import logger

from .calculation import CalculationError, compute_prayer_times
from .hijri import hijri_label
from .models import NextPrayer, PrayerCache, PrayerSchedule, Zone
from .state import Coordinates, EngineState
from .timeutil import date_key, format_clock, format_remaining, haversine_km, local_now, month_tag
from .types import (
    CALCULATED_ZONE_CODE,
    REFETCH_DISTANCE_KM,
    CalculationMethod,
    PrayerName,
    ScheduleSource,
)

logger = logger.bind(module="engine.resolver")

Calculator = Callable[[date, Coordinates, CalculationMethod], dict[PrayerName, int]]
ChangeListener = Callable[[], None]


class ScheduleResolver:
    """Produces today's schedule and the next prayer from shared engine state.

    Reads are lock-per-field and copy-out; the resolver never holds a lock
    while computing or calling a listener.
    """

    def __init__(
        self,
        state: EngineState,
        clock: Callable[[], datetime] = local_now,
        calculator: Calculator = compute_prayer_times,
    ):
        """Initialize resolver.

        Args:
            state: Shared engine state
            clock: Returns the current aware local datetime
            calculator: Computes fallback timestamps for a date
        """
        self.state = state
        self._clock = clock
        self._calculator = calculator
        self._listeners: list[ChangeListener] = []

    # ============== Writers ==============

    def add_listener(self, listener: ChangeListener) -> None:
        """Register a "today's schedule changed" callback."""
        self._listeners.append(listener)

    def update_coordinates(self, lat: float, lng: float) -> None:
        self.state.coordinates.set((lat, lng))
        logger.info(f"Coordinates updated to ({lat:.4f}, {lng:.4f})")
        self._notify_changed()

    def set_method(self, method: CalculationMethod | str) -> CalculationMethod:
        """Switch calculation method; the cache stays valid."""
        parsed = CalculationMethod.parse(method)
        self.state.method.set(parsed)
        logger.info(f"Calculation method updated to {parsed.value}")
        self._notify_changed()
        return parsed

    def update_cache(self, cache: PrayerCache) -> None:
        """Replace the authoritative cache wholesale."""
        self.state.cache.set(cache)
        logger.info(f"Prayer cache updated: zone={cache.zone} month={cache.month_tag}")
        self._notify_changed()

    def update_zones(self, zones: dict[str, Zone]) -> None:
        self.state.zones.set(zones)
        logger.info(f"Zone table updated: {len(zones)} zones")

    def _notify_changed(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception as e:
                logger.error(f"Schedule change listener failed: {e}")

    # ============== Readers ==============

    def coordinates(self) -> Coordinates | None:
        return self.state.coordinates.get()

    def current_method(self) -> CalculationMethod:
        return self.state.method.get()

    def resolve_zone_name(self, code: str) -> str:
        zones = self.state.zones.get()
        if zones and code in zones:
            return zones[code].display_name
        return code

    # ============== Staleness ==============

    def needs_refetch(self, lat: float, lng: float, now: datetime | None = None) -> bool:
        """Whether the cache is missing, from another month, or too far away.

        Pure query; the refetch itself is done by the caller.
        """
        cache = self.state.cache.get()
        if cache is None:
            return True

        now = now or self._clock()
        if cache.month_tag != month_tag(now.date()):
            return True

        distance = haversine_km(cache.lat, cache.lng, lat, lng)
        return distance > REFETCH_DISTANCE_KM

    # ============== Resolution ==============

    def resolve_today(self, now: datetime | None = None) -> PrayerSchedule | None:
        """Today's schedule, or None when nothing is known yet."""
        now = now or self._clock()
        today = now.date()

        if self.current_method().uses_authoritative_cache:
            cache = self.state.cache.get()
            if cache is not None:
                point = cache.get(date_key(today))
                if point is not None:
                    return PrayerSchedule(
                        fajr=point.fajr,
                        syuruk=point.syuruk,
                        dhuhr=point.dhuhr,
                        asr=point.asr,
                        maghrib=point.maghrib,
                        isha=point.isha,
                        source=ScheduleSource.JAKIM_API,
                        zone_code=cache.zone,
                        zone_name=self.resolve_zone_name(cache.zone),
                        hijri=point.hijri,
                    )

        coords = self.coordinates()
        if coords is None:
            return None

        times = self._compute(today, coords)
        if times is None:
            return None

        return PrayerSchedule(
            fajr=times[PrayerName.FAJR],
            syuruk=times[PrayerName.SYURUK],
            dhuhr=times[PrayerName.DHUHR],
            asr=times[PrayerName.ASR],
            maghrib=times[PrayerName.MAGHRIB],
            isha=times[PrayerName.ISHA],
            source=ScheduleSource.CALCULATED,
            zone_code=CALCULATED_ZONE_CODE,
            zone_name=f"{coords[0]:.4f}, {coords[1]:.4f}",
            hijri=hijri_label(today),
        )

    def next_prayer(self, now: datetime | None = None) -> NextPrayer | None:
        """First prayer strictly after now; rolls over to tomorrow's fajr."""
        now = now or self._clock()
        schedule = self.resolve_today(now)
        if schedule is None:
            return None

        now_ts = int(now.timestamp())
        for name, ts in schedule.times():
            if ts > now_ts:
                return self._next(name.value, ts, now_ts, now)

        tomorrow_fajr = self._tomorrow_fajr(now.date() + timedelta(days=1))
        if tomorrow_fajr is None:
            return None
        return self._next(PrayerName.FAJR.value, tomorrow_fajr, now_ts, now)

    def _tomorrow_fajr(self, tomorrow: date) -> int | None:
        # The cache wins for tomorrow's fajr whatever the active method
        cache = self.state.cache.get()
        point = cache.get(date_key(tomorrow)) if cache is not None else None
        if point is not None:
            return point.fajr

        coords = self.coordinates()
        if coords is None:
            return None
        times = self._compute(tomorrow, coords)
        if times is None:
            return None
        return times[PrayerName.FAJR]

    def _compute(self, day: date, coords: Coordinates) -> dict[PrayerName, int] | None:
        try:
            return self._calculator(day, coords, self.current_method())
        except CalculationError as e:
            logger.warning(f"Fallback calculation failed: {e}")
            return None

    @staticmethod
    def _next(name: str, ts: int, now_ts: int, now: datetime) -> NextPrayer:
        return NextPrayer(
            name=name,
            time=format_clock(ts, now.tzinfo),
            remaining=format_remaining(ts - now_ts),
            timestamp=ts,
        )
