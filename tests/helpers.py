"""Shared test helpers for meal reminder tests."""

from datetime import datetime
from zoneinfo import ZoneInfo

from domains.meal_reminders import WakeupPort

LONDON = ZoneInfo("Europe/London")


def local(year, month, day, hour=0, minute=0, second=0, microsecond=0) -> datetime:
    """Europe/London wall-clock datetime."""
    return datetime(year, month, day, hour, minute, second, microsecond, tzinfo=LONDON)


def millis(moment: datetime) -> int:
    return round(moment.timestamp() * 1000)


class RecordingWakeupPort(WakeupPort):
    """In-memory wake-up port that records every call in order."""

    def __init__(self):
        self.calls = []
        self.pending = {}  # meal_id -> (fire_at_millis, payload)
        self.failing_ids = set()

    def arm(self, meal_id, fire_at_millis, payload):
        if meal_id in self.failing_ids:
            raise RuntimeError(f"timer rejected meal {meal_id}")
        self.calls.append(("arm", meal_id, fire_at_millis, dict(payload)))
        self.pending[meal_id] = (fire_at_millis, dict(payload))

    def cancel(self, meal_id):
        self.calls.append(("cancel", meal_id))
        self.pending.pop(meal_id, None)

    def pending_ids(self):
        return set(self.pending)

    def arms(self):
        return [c for c in self.calls if c[0] == "arm"]

    def cancels(self):
        return [c[1] for c in self.calls if c[0] == "cancel"]

    def reset_calls(self):
        self.calls = []
