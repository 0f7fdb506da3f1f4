"""Deterministic daily reminder times.

The date seeds a 64-bit linear congruential generator, so the same day always
yields the same three reminders, across restarts and in tests.
"""
from datetime import date

_MASK64 = (1 << 64) - 1
_LCG_MULTIPLIER = 6364136223846793005
_LCG_INCREMENT = 1442695040888963407

REMINDER_COUNT = 3
EARLIEST_MINUTE = 8 * 60   # 08:00
LATEST_MINUTE = 21 * 60    # 21:00
MIN_GAP_MINUTES = 90


def generate_reminder_times(year: int, month: int, day: int) -> list[str]:
    """Generate the three reminder times for a date.

    Args:
        year: Calendar year
        month: Month 1-12
        day: Day of month

    Returns:
        Three ascending "HH:MM" strings between 08:00 and 21:00, at least
        90 minutes apart unless pushed against the 21:00 ceiling.
    """
    window = LATEST_MINUTE - EARLIEST_MINUTE
    state = (year * 10000 + month * 100 + day) & _MASK64

    minutes: list[int] = []
    for _ in range(REMINDER_COUNT):
        state = (state * _LCG_MULTIPLIER + _LCG_INCREMENT) & _MASK64
        minutes.append(EARLIEST_MINUTE + (state >> 33) % window)

    minutes.sort()

    for i in range(1, len(minutes)):
        if minutes[i] - minutes[i - 1] < MIN_GAP_MINUTES:
            minutes[i] = min(minutes[i - 1] + MIN_GAP_MINUTES, LATEST_MINUTE)

    return [f"{m // 60:02d}:{m % 60:02d}" for m in minutes]


def reminder_times_for(day: date) -> list[str]:
    return generate_reminder_times(day.year, day.month, day.day)
