"""Tests for the deterministic daily reminder times."""
import os
import sys
from datetime import date

import pytest

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from sajda.engine.reminders import generate_reminder_times, reminder_times_for


def _minutes(hm: str) -> int:
    h, m = hm.split(":")
    return int(h) * 60 + int(m)


class TestGenerateReminderTimes:
    """Known outputs and structural properties."""

    @pytest.mark.parametrize("day, expected", [
        (date(2025, 1, 15), ["08:12", "17:46", "19:48"]),
        (date(2025, 3, 10), ["09:48", "11:18", "15:28"]),
        (date(2025, 3, 11), ["10:57", "12:51", "14:55"]),
        (date(2025, 6, 20), ["12:24", "17:54", "19:31"]),
        (date(2026, 1, 23), ["14:41", "16:47", "18:23"]),
    ])
    def test_known_days(self, day, expected):
        assert generate_reminder_times(day.year, day.month, day.day) == expected

    def test_gap_pushes_close_times_apart(self):
        """Raw 09:48 / 09:51 collide and the second is pushed 90 minutes on."""
        times = generate_reminder_times(2025, 3, 10)
        assert _minutes(times[1]) - _minutes(times[0]) == 90

    def test_ceiling_clamps_last_time(self):
        """Pushed past 21:00 the last time is clamped and the gap shrinks."""
        assert generate_reminder_times(2024, 3, 24) == ["19:26", "20:56", "21:00"]

    def test_same_day_same_times(self):
        assert generate_reminder_times(2026, 7, 4) == generate_reminder_times(2026, 7, 4)

    def test_wrapper_matches(self):
        assert reminder_times_for(date(2026, 1, 23)) == generate_reminder_times(2026, 1, 23)

    def test_properties_over_a_year(self):
        day = date(2025, 1, 1)
        while day.year == 2025:
            times = generate_reminder_times(day.year, day.month, day.day)
            minutes = [_minutes(t) for t in times]

            assert len(times) == 3
            assert minutes == sorted(minutes)
            assert all(480 <= m <= 1260 for m in minutes)
            for prev, cur in zip(minutes, minutes[1:]):
                assert cur - prev >= 90 or cur == 1260
            day = date.fromordinal(day.toordinal() + 1)
