"""Computed-fallback prayer times.

Maps a CalculationMethod to adhanpy parameters and runs adhanpy for one local
date. Methods adhanpy ships a preset for use it, including the preset's minute
adjustments; JAKIM and Tehran use explicit bundles. Times come back as
UTC-aware datetimes and are returned as epoch seconds.
"""
from datetime import date, datetime
from zoneinfo import ZoneInfo

from adhanpy.PrayerTimes import PrayerTimes
from adhanpy.calculation import CalculationMethod as AdhanMethod
from adhanpy.calculation.CalculationParameters import CalculationParameters

from .types import CalculationMethod, PrayerName

_UTC = ZoneInfo("UTC")

ADHAN_PRESETS: dict[CalculationMethod, AdhanMethod] = {
    CalculationMethod.MWL: AdhanMethod.MUSLIM_WORLD_LEAGUE,
    CalculationMethod.ISNA: AdhanMethod.NORTH_AMERICA,
    CalculationMethod.EGYPT: AdhanMethod.EGYPTIAN,
    CalculationMethod.MAKKAH: AdhanMethod.UMM_AL_QURA,
    CalculationMethod.KARACHI: AdhanMethod.KARACHI,
    CalculationMethod.GULF: AdhanMethod.DUBAI,
    CalculationMethod.KUWAIT: AdhanMethod.KUWAIT,
    CalculationMethod.QATAR: AdhanMethod.QATAR,
    CalculationMethod.SINGAPORE: AdhanMethod.SINGAPORE,
}


class CalculationError(RuntimeError):
    """Prayer times could not be computed for the given date and place."""


def build_parameters(method: CalculationMethod) -> CalculationParameters:
    """Translate a method into adhanpy parameters (Shafi madhab)."""
    preset = ADHAN_PRESETS.get(method)
    if preset is not None:
        return CalculationParameters(method=preset)

    params = method.custom_parameters
    kwargs: dict = {"fajr_angle": params.fajr_angle}
    if params.isha_interval_minutes:
        kwargs["isha_interval"] = params.isha_interval_minutes
    else:
        kwargs["isha_angle"] = params.isha_angle
    return CalculationParameters(**kwargs)


def compute_prayer_times(
    day: date,
    coordinates: tuple[float, float],
    method: CalculationMethod,
) -> dict[PrayerName, int]:
    """Compute the six timestamps for a local date.

    Args:
        day: Local calendar date
        coordinates: (latitude, longitude)
        method: Calculation convention

    Returns:
        Mapping of prayer name to epoch seconds

    Raises:
        CalculationError: if the astronomy cannot be resolved (e.g. polar day)
    """
    try:
        times = PrayerTimes(
            coordinates,
            datetime(day.year, day.month, day.day),
            calculation_parameters=build_parameters(method),
            time_zone=_UTC,
        )
        result = {
            PrayerName.FAJR: times.fajr,
            PrayerName.SYURUK: times.sunrise,
            PrayerName.DHUHR: times.dhuhr,
            PrayerName.ASR: times.asr,
            PrayerName.MAGHRIB: times.maghrib,
            PrayerName.ISHA: times.isha,
        }
        return {name: int(dt.timestamp()) for name, dt in result.items()}
    except (ArithmeticError, ValueError, TypeError, AttributeError, RuntimeError) as e:
        raise CalculationError(
            f"Cannot compute prayer times for {day} at {coordinates}: {e}"
        ) from e
