"""
Core Module - Clock.

============================================================
RESPONSIBILITY
============================================================
Supplies the `now` used to evaluate flowing amounts.

- Estimation never reads the wall clock implicitly
- Callers pass `clock.timestamp()` into the pure estimator
- Tests swap in a MockClock to get deterministic reads

============================================================
DESIGN PRINCIPLES
============================================================
- UTC only
- Whole seconds since epoch, matching on-chain timestamps
- Mockable for testing
- Thread-safe

============================================================
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Generator, Optional, Union
import threading
import time


# ============================================================
# CLOCK PROTOCOL
# ============================================================

class ClockProtocol(ABC):
    """Abstract interface for the time source."""

    @abstractmethod
    def now(self) -> datetime:
        """Get current UTC datetime."""
        pass

    @abstractmethod
    def timestamp(self) -> int:
        """Get current Unix timestamp in whole seconds."""
        pass


# ============================================================
# SYSTEM CLOCK (PRODUCTION)
# ============================================================

class SystemClock(ClockProtocol):
    """Production clock using actual system time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def timestamp(self) -> int:
        # Floor to whole seconds; checkpoints are recorded at second precision.
        return int(time.time())


# ============================================================
# MOCK CLOCK (TESTING)
# ============================================================

class MockClock(ClockProtocol):
    """
    Mock clock for testing.

    Allows time manipulation for deterministic tests. Time may be
    moved backwards with `set_time` to simulate wall-clock regression.
    """

    def __init__(self, initial_time: Optional[Union[datetime, int]] = None):
        """
        Initialize mock clock.

        Args:
            initial_time: Starting time as datetime or epoch seconds
                (defaults to current UTC)
        """
        self._time = _coerce_datetime(initial_time) if initial_time is not None \
            else datetime.now(timezone.utc)
        self._lock = threading.Lock()

    def now(self) -> datetime:
        with self._lock:
            return self._time

    def timestamp(self) -> int:
        with self._lock:
            return int(self._time.timestamp())

    def set_time(self, new_time: Union[datetime, int]) -> None:
        """Set the current time (datetime or epoch seconds)."""
        with self._lock:
            self._time = _coerce_datetime(new_time)

    def advance(self, seconds: float = 0, **kwargs) -> None:
        """
        Advance time by the specified amount.

        Args:
            seconds: Number of seconds to advance
            **kwargs: Passed to timedelta (hours, minutes, days, etc.)
        """
        with self._lock:
            self._time = self._time + timedelta(seconds=seconds, **kwargs)


def _coerce_datetime(value: Union[datetime, int]) -> datetime:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value
    return datetime.fromtimestamp(value, tz=timezone.utc)


# ============================================================
# CLOCK FACTORY
# ============================================================

class ClockFactory:
    """Factory for the process-wide clock instance."""

    _instance: Optional[ClockProtocol] = None
    _lock = threading.Lock()

    @classmethod
    def get_clock(cls) -> ClockProtocol:
        """Get the global clock instance."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = SystemClock()
            return cls._instance

    @classmethod
    def set_clock(cls, clock: ClockProtocol) -> None:
        """Set the global clock instance."""
        with cls._lock:
            cls._instance = clock

    @classmethod
    def reset(cls) -> None:
        """Reset to default system clock."""
        with cls._lock:
            cls._instance = SystemClock()

    @classmethod
    @contextmanager
    def use_mock(
        cls,
        initial_time: Optional[Union[datetime, int]] = None,
    ) -> Generator[MockClock, None, None]:
        """
        Context manager to use mock clock temporarily.

        Args:
            initial_time: Initial time for mock clock
        """
        original = cls._instance
        mock = MockClock(initial_time)
        cls.set_clock(mock)
        try:
            yield mock
        finally:
            cls._instance = original


# ============================================================
# TIMESTAMP UTILITIES
# ============================================================

def from_unix(seconds: int) -> datetime:
    """Convert epoch seconds to an aware UTC datetime."""
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def timestamp_now() -> int:
    """Get current epoch seconds using global clock."""
    return ClockFactory.get_clock().timestamp()


# ============================================================
# EXPORTS
# ============================================================

__all__ = [
    "ClockProtocol",
    "SystemClock",
    "MockClock",
    "ClockFactory",
    "from_unix",
    "timestamp_now",
]
