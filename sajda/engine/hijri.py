"""Approximate Hijri date via the tabular Islamic calendar.

Used to label computed-fallback schedules; authoritative schedules carry the
feed's own label.
"""
from datetime import date


def gregorian_to_hijri(day: date) -> tuple[int, int, int]:
    """Convert a Gregorian date to (year, month, day) in the tabular Hijri calendar."""
    a = (14 - day.month) // 12
    y = day.year + 4800 - a
    m = day.month + 12 * a - 3
    jdn = day.day + (153 * m + 2) // 5 + 365 * y + y // 4 - y // 100 + y // 400 - 32045

    l = jdn - 1948440 + 10632
    n = (l - 1) // 10631
    l = l - 10631 * n + 354
    j = ((10985 - l) // 5316) * ((50 * l) // 17719) + (l // 5670) * ((43 * l) // 15238)
    l = l - ((30 - j) // 15) * ((17719 * j) // 50) - (j // 16) * ((15238 * j) // 43) + 29
    month = (24 * l) // 709
    hday = l - (709 * month) // 24
    year = 30 * n + j - 30
    return year, month, hday


def hijri_label(day: date) -> str:
    """Hijri date formatted like the feed, e.g. "1447-08-04"."""
    year, month, hday = gregorian_to_hijri(day)
    return f"{year:04d}-{month:02d}-{hday:02d}"
