"""Data models for prayer schedules and the authoritative cache."""
from dataclasses import dataclass, field
from typing import Any, Iterator

from .types import PRAYER_ORDER, PrayerName, ScheduleSource


@dataclass(frozen=True)
class Zone:
    """A JAKIM zone: code plus district (daerah) and state (negeri)."""
    code: str
    district: str
    region: str

    @property
    def display_name(self) -> str:
        return f"{self.district}, {self.region}"

    def to_dict(self) -> dict[str, Any]:
        return {"jakimCode": self.code, "daerah": self.district, "negeri": self.region}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Zone":
        return cls(
            code=data["jakimCode"],
            district=data["daerah"],
            region=data["negeri"],
        )


@dataclass
class PrayerDatapoint:
    """One day of authoritative prayer times (epoch seconds)."""
    day: int
    fajr: int
    syuruk: int
    dhuhr: int
    asr: int
    maghrib: int
    isha: int
    hijri: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "day": self.day,
            "fajr": self.fajr,
            "syuruk": self.syuruk,
            "dhuhr": self.dhuhr,
            "asr": self.asr,
            "maghrib": self.maghrib,
            "isha": self.isha,
            "hijri": self.hijri,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PrayerDatapoint":
        return cls(
            day=int(data["day"]),
            fajr=int(data["fajr"]),
            syuruk=int(data["syuruk"]),
            dhuhr=int(data["dhuhr"]),
            asr=int(data["asr"]),
            maghrib=int(data["maghrib"]),
            isha=int(data["isha"]),
            hijri=data.get("hijri"),
        )


@dataclass
class PrayerCache:
    """Authoritative schedule snapshot for one zone and month.

    Replaced wholesale on refetch, never merged.
    """
    zone: str
    lat: float
    lng: float
    month_tag: str  # e.g. "Jan-2026"
    prayers: dict[str, PrayerDatapoint] = field(default_factory=dict)  # "23-Jan-2026" -> times

    def get(self, date_key: str) -> PrayerDatapoint | None:
        return self.prayers.get(date_key)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "zone": self.zone,
            "lat": self.lat,
            "lng": self.lng,
            "month_hash": self.month_tag,
            "prayers": {key: p.to_dict() for key, p in self.prayers.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PrayerCache":
        """Create from dictionary; raises KeyError/TypeError/ValueError on bad input."""
        return cls(
            zone=str(data["zone"]),
            lat=float(data["lat"]),
            lng=float(data["lng"]),
            month_tag=str(data["month_hash"]),
            prayers={
                str(key): PrayerDatapoint.from_dict(p)
                for key, p in data["prayers"].items()
            },
        )


@dataclass
class PrayerSchedule:
    """Today's six resolved timestamps and where they came from."""
    fajr: int
    syuruk: int
    dhuhr: int
    asr: int
    maghrib: int
    isha: int
    source: ScheduleSource
    zone_code: str
    zone_name: str
    hijri: str | None = None

    def time_of(self, name: PrayerName) -> int:
        return getattr(self, name.value)

    def times(self) -> Iterator[tuple[PrayerName, int]]:
        """Yield (name, timestamp) in canonical order."""
        for name in PRAYER_ORDER:
            yield name, self.time_of(name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "fajr": self.fajr,
            "syuruk": self.syuruk,
            "dhuhr": self.dhuhr,
            "asr": self.asr,
            "maghrib": self.maghrib,
            "isha": self.isha,
            "source": self.source.value,
            "zone_code": self.zone_code,
            "zone_name": self.zone_name,
            "hijri": self.hijri,
        }


@dataclass
class NextPrayer:
    """The next upcoming prayer. Derived every tick, never stored."""
    name: str
    time: str        # HH:MM local
    remaining: str   # HH:MM:SS
    timestamp: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "time": self.time,
            "remaining": self.remaining,
            "timestamp": self.timestamp,
        }
