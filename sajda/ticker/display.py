"""Compact countdown text for the tray."""
from ..engine.models import NextPrayer

# Mathematical Monospace Digits start at U+1D7F6 for '0'
_MONO_ZERO = 0x1D7F6

DISPLAY_NAMES = {
    "fajr": "Subuh",
    "syuruk": "Syuruk",
    "dhuhr": "Zohor",
    "asr": "Asar",
    "maghrib": "Maghrib",
    "isha": "Isyak",
}


def to_mono_digits(text: str) -> str:
    """Swap ASCII digits for monospace ones so the title width never jitters."""
    return "".join(
        chr(_MONO_ZERO + ord(c) - ord("0")) if "0" <= c <= "9" else c
        for c in text
    )


def display_name(prayer: str, is_friday: bool = False) -> str:
    if prayer == "dhuhr" and is_friday:
        return "Jumaat"
    return DISPLAY_NAMES.get(prayer, prayer)


def tray_title(next_prayer: NextPrayer, is_friday: bool = False) -> str:
    """e.g. " Subuh - 01:02:03" with monospace digits."""
    return to_mono_digits(f" {display_name(next_prayer.name, is_friday)} - {next_prayer.remaining}")
