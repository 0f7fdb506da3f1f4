"""The 1 Hz trigger loop."""
from .display import tray_title, to_mono_digits
from .scheduler import TickerState, TriggerScheduler

__all__ = ["TickerState", "TriggerScheduler", "to_mono_digits", "tray_title"]
