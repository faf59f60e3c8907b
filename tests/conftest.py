"""Pytest configuration and fixtures."""

import os
import tempfile

# Keep logs and the default store out of the working tree
os.environ.setdefault("MEAL_DATA_DIR", tempfile.mkdtemp(prefix="meal_reminders_test_"))

import pytest
from unittest.mock import AsyncMock, patch

from domains.meal_reminders import (
    FixedClock,
    InMemoryScheduleStore,
    MealReminderService,
    MealSchedule,
    SchedulingEngine,
)
from helpers import RecordingWakeupPort, local


@pytest.fixture
def clock():
    """Clock frozen at 06:00 on a summer day."""
    return FixedClock(local(2026, 6, 15, 6, 0))


@pytest.fixture
def wakeup():
    return RecordingWakeupPort()


@pytest.fixture
def notifier():
    """Notifier whose present() calls can be inspected."""
    mock = AsyncMock()
    mock.present = AsyncMock()
    return mock


@pytest.fixture
def breakfast_and_lunch():
    """Enabled breakfast at 07:00 and disabled lunch at 12:00."""
    return [
        MealSchedule(id=1, meal_type="breakfast", hour=7, minute=0, is_enabled=True),
        MealSchedule(id=2, meal_type="lunch", hour=12, minute=0, is_enabled=False),
    ]


@pytest.fixture
def store(breakfast_and_lunch):
    return InMemoryScheduleStore(breakfast_and_lunch)


@pytest.fixture
def engine(wakeup, clock):
    return SchedulingEngine(wakeup, clock)


@pytest.fixture
def service(store, engine, notifier):
    return MealReminderService(store, engine, notifier)


@pytest.fixture
def mock_httpx_client():
    """Create a mock httpx client."""
    with patch('httpx.AsyncClient') as mock:
        client = AsyncMock()
        mock.return_value.__aenter__.return_value = client
        yield client
