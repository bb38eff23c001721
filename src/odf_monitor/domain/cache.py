"""Single-slot time-to-live cache."""

import time
from typing import Callable, Generic, TypeVar

T = TypeVar("T")

Clock = Callable[[], float]


class TTLCache(Generic[T]):
    """Holds one value until its expiry time.

    The value and its expiry are stored as one tuple and replaced with a
    single assignment, so readers never see fresh data with a stale expiry.
    """

    def __init__(self, ttl_seconds: float, clock: Clock = time.monotonic) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entry: tuple[T, float] | None = None

    def get(self) -> T | None:
        """Return the cached value, or None when empty or expired."""
        entry = self._entry
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            return None
        return value

    def set(self, value: T) -> None:
        self._entry = (value, self._clock() + self.ttl_seconds)

    def get_or_compute(self, compute: Callable[[], T]) -> T:
        """Return the cached value or compute, store and return a fresh one.

        Concurrent misses each compute; the last write wins.
        """
        value = self.get()
        if value is not None:
            return value
        value = compute()
        self.set(value)
        return value
