"""Interfaces the scheduling engine drives: clock, wake-up timer and notifier."""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo


class Clock(ABC):
    """Source of the current local wall-clock time."""

    @abstractmethod
    def now(self) -> datetime:
        """Current time as a timezone-aware datetime."""


class SystemClock(Clock):
    """Reads the host clock in a fixed timezone."""

    def __init__(self, tz_name: str):
        self.tz = ZoneInfo(tz_name)

    def now(self) -> datetime:
        return datetime.now(self.tz)


class FixedClock(Clock):
    """Clock that only moves when told to."""

    def __init__(self, current: datetime):
        if current.tzinfo is None:
            raise ValueError("FixedClock needs a timezone-aware datetime")
        self.current = current

    def now(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta) -> None:
        self.current = self.current + delta


class WakeupPort(ABC):
    """One-shot, exact timer that delivers a fire event for a meal id.

    Arming an id replaces any wake-up already pending for it, and
    cancelling an id with nothing pending is a no-op.
    """

    @abstractmethod
    def arm(self, meal_id: int, fire_at_millis: int, payload: dict) -> None:
        """Schedule a wake-up for meal_id at fire_at_millis (epoch milliseconds)."""

    @abstractmethod
    def cancel(self, meal_id: int) -> None:
        """Drop any pending wake-up for meal_id."""

    def pending_ids(self) -> set[int]:
        """Ids with a wake-up currently pending, if the timer can tell."""
        return set()


class Notifier(ABC):
    """Presents a user-visible alert."""

    @abstractmethod
    async def present(self, notification_id: int, title: str, body: str) -> None:
        """Show (or replace) the notification with the given id."""
