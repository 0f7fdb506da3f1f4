"""Tests for the computed fallback, Hijri labels and time helpers."""
import os
import sys
from datetime import date, timedelta, timezone

import pytest
from adhanpy.calculation import CalculationMethod as AdhanMethod

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from conftest import KL
from sajda.engine.calculation import ADHAN_PRESETS, build_parameters, compute_prayer_times
from sajda.engine.hijri import gregorian_to_hijri, hijri_label
from sajda.engine.timeutil import date_key, format_clock, format_remaining, haversine_km, month_tag
from sajda.engine.types import AlertMode, CalculationMethod, PrayerName


class TestComputePrayerTimes:
    """adhanpy-backed fallback."""

    @pytest.mark.parametrize("method", list(CalculationMethod))
    def test_ordering(self, method):
        times = compute_prayer_times(date(2026, 1, 23), KL, method)

        stamps = [times[name] for name in PrayerName]
        assert stamps == sorted(stamps)
        assert len(set(stamps)) == 6

    def test_kuala_lumpur_is_plausible(self):
        times = compute_prayer_times(date(2026, 1, 23), KL, CalculationMethod.JAKIM)
        myt = timezone(timedelta(hours=8))

        def hour(name):
            return format_clock(times[name], myt)

        assert "05:30" < hour(PrayerName.FAJR) < "06:30"
        assert "12:45" < hour(PrayerName.DHUHR) < "13:45"
        assert "19:00" < hour(PrayerName.MAGHRIB) < "19:45"

    def test_interval_isha(self):
        times = compute_prayer_times(date(2026, 1, 23), KL, CalculationMethod.MAKKAH)
        assert times[PrayerName.ISHA] - times[PrayerName.MAGHRIB] == 90 * 60

    def test_build_parameters_custom(self):
        params = build_parameters(CalculationMethod.JAKIM)
        assert params.fajr_angle == 18.0
        assert params.isha_angle == 18.0

        params = build_parameters(CalculationMethod.TEHRAN)
        assert params.fajr_angle == 17.7
        assert params.isha_angle == 14.0

    def test_build_parameters_preset(self):
        params = build_parameters(CalculationMethod.EGYPT)
        assert params.method is AdhanMethod.EGYPTIAN
        assert params.fajr_angle == 19.5
        assert params.isha_angle == 17.5
        assert params.method_adjustments.dhuhr == 1

        params = build_parameters(CalculationMethod.QATAR)
        assert params.fajr_angle == 18.0
        assert params.isha_interval == 90

    def test_every_method_is_mapped(self):
        for method in CalculationMethod:
            assert (method in ADHAN_PRESETS) != (method.custom_parameters is not None)

    @pytest.mark.parametrize("method, minutes", [
        (CalculationMethod.MWL, 1),
        (CalculationMethod.SINGAPORE, 1),
        (CalculationMethod.GULF, 3),
        (CalculationMethod.KUWAIT, 0),
    ])
    def test_preset_dhuhr_adjustment(self, method, minutes):
        # Dhuhr does not depend on twilight angles, only on the preset offset
        base = compute_prayer_times(date(2026, 1, 23), KL, CalculationMethod.JAKIM)
        times = compute_prayer_times(date(2026, 1, 23), KL, method)

        assert times[PrayerName.DHUHR] - base[PrayerName.DHUHR] == minutes * 60


class TestMethodAndModes:
    def test_unknown_method_defaults(self):
        assert CalculationMethod.parse("Atlantis") is CalculationMethod.JAKIM
        assert CalculationMethod.parse(None) is CalculationMethod.JAKIM

    def test_only_jakim_uses_cache(self):
        assert CalculationMethod.JAKIM.uses_authoritative_cache
        assert not CalculationMethod.MWL.uses_authoritative_cache

    @pytest.mark.parametrize("raw, expected", [
        (None, AlertMode.MUTE),
        ("mute", AlertMode.MUTE),
        ("adhan", AlertMode.ADHAN),
        ("chime", AlertMode.CHIME),
        ("beep", AlertMode.CHIME),
    ])
    def test_alert_mode_parse(self, raw, expected):
        assert AlertMode.parse(raw) is expected


class TestHijri:
    def test_known_dates(self):
        assert gregorian_to_hijri(date(2024, 1, 1)) == (1445, 6, 19)
        assert hijri_label(date(2025, 3, 1)) == "1446-09-01"
        assert hijri_label(date(2026, 1, 23)) == "1447-08-04"


class TestTimeUtil:
    def test_keys_use_english_months(self):
        assert date_key(date(2026, 1, 3)) == "03-Jan-2026"
        assert month_tag(date(2026, 12, 31)) == "Dec-2026"

    @pytest.mark.parametrize("seconds, expected", [
        (0, "00:00:00"),
        (59, "00:00:59"),
        (3661, "01:01:01"),
        (86399, "23:59:59"),
    ])
    def test_format_remaining(self, seconds, expected):
        assert format_remaining(seconds) == expected

    def test_haversine(self):
        assert haversine_km(*KL, *KL) == 0
        assert haversine_km(3.1390, 101.6869, 3.1395, 101.6870) < 0.1
        # One degree of latitude is about 111 km
        assert 110 < haversine_km(0.0, 0.0, 1.0, 0.0) < 112
