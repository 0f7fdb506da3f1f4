"""Shared engine state with one exclusive-access guard per field.

Collaborators (location updates, feed refetches, user settings) write these
fields; the resolver reads them. Each field has its own lock so a coordinate
update never waits on a cache replace. Locks are held only long enough to
copy a reference in or out.
"""
import threading
from contextlib import contextmanager
from typing import Callable, Generic, Iterator, TypeVar

from .models import PrayerCache, Zone
from .types import CalculationMethod

T = TypeVar("T")

Coordinates = tuple[float, float]

LOCK_TIMEOUT_SECONDS = 2.0


class StateLockError(RuntimeError):
    """A state field could not be locked; fails only the current operation."""


class Guarded(Generic[T]):
    """A single value behind its own lock."""

    def __init__(self, name: str, value: T, timeout: float = LOCK_TIMEOUT_SECONDS):
        self.name = name
        self._value = value
        self._lock = threading.Lock()
        self._timeout = timeout

    @contextmanager
    def _held(self) -> Iterator[None]:
        if not self._lock.acquire(timeout=self._timeout):
            raise StateLockError(f"Timed out waiting for '{self.name}' lock")
        try:
            yield
        finally:
            self._lock.release()

    def get(self) -> T:
        with self._held():
            return self._value

    def set(self, value: T) -> None:
        with self._held():
            self._value = value

    def update(self, fn: Callable[[T], T]) -> T:
        """Replace the value with fn(old) under the lock and return the new value."""
        with self._held():
            self._value = fn(self._value)
            return self._value


class EngineState:
    """Owned state object injected into the resolver and the service."""

    def __init__(
        self,
        coordinates: Coordinates | None = None,
        method: CalculationMethod = CalculationMethod.JAKIM,
        cache: PrayerCache | None = None,
        zones: dict[str, Zone] | None = None,
    ):
        self.coordinates: Guarded[Coordinates | None] = Guarded("coordinates", coordinates)
        self.method: Guarded[CalculationMethod] = Guarded("method", method)
        self.cache: Guarded[PrayerCache | None] = Guarded("cache", cache)
        self.zones: Guarded[dict[str, Zone] | None] = Guarded("zones", zones)
