"""Payload models of the waktusolat.app feed"""
from pydantic import BaseModel, ConfigDict, Field

from ..engine.models import PrayerCache, PrayerDatapoint, Zone


class PrayerDatapointModel(BaseModel):
    day: int
    fajr: int
    syuruk: int
    dhuhr: int
    asr: int
    maghrib: int
    isha: int
    hijri: str | None = None

    def to_datapoint(self) -> PrayerDatapoint:
        return PrayerDatapoint(**self.model_dump())


class SolatResponse(BaseModel):
    """Response of GET /v2/solat/gps/{lat}/{lng}: one month for one zone"""
    prayers: list[PrayerDatapointModel]
    status: str | None = None
    zone: str
    year: int
    month: str  # "JAN"

    @property
    def month_abbr(self) -> str:
        """The feed sends "JAN"; cache keys use "Jan"."""
        return self.month[:1].upper() + self.month[1:].lower()

    @property
    def month_tag(self) -> str:
        return f"{self.month_abbr}-{self.year}"

    def to_cache(self, lat: float, lng: float) -> PrayerCache:
        """Build the cache snapshot, keyed "dd-Mon-yyyy".

        Args:
            lat: Latitude the month was fetched for
            lng: Longitude the month was fetched for
        """
        prayers = {
            f"{p.day:02d}-{self.month_abbr}-{self.year}": p.to_datapoint()
            for p in self.prayers
        }
        return PrayerCache(
            zone=self.zone,
            lat=lat,
            lng=lng,
            month_tag=self.month_tag,
            prayers=prayers,
        )


class ZoneRecord(BaseModel):
    """One entry of GET /zones"""
    model_config = ConfigDict(populate_by_name=True)

    jakim_code: str = Field(alias="jakimCode")
    negeri: str
    daerah: str

    def to_zone(self) -> Zone:
        return Zone(code=self.jakim_code, district=self.daerah, region=self.negeri)
