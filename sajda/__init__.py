"""Sajda - prayer-time schedule engine and trigger daemon"""

__version__ = "0.1.0"
