"""Meal reminders: recurring time-of-day notifications.

Uses APScheduler date triggers with SQLite persistence. Every wake-up is
one-shot and re-armed for the next day when it fires.
"""

from .errors import MealReminderError, ScheduleStoreError, ScheduleValidationError
from .models import MealSchedule, MealType, OperationResult, ResyncReport, WakeupPayload, default_message
from .ports import Clock, FixedClock, Notifier, SystemClock, WakeupPort
from .store import InMemoryScheduleStore, ScheduleStore, SqliteScheduleStore
from .engine import SchedulingEngine, following_fire_time, next_fire_datetime, next_fire_time
from .wakeup import APSchedulerWakeupPort
from .notifier import DiscordWebhookNotifier, LogNotifier, build_notifier
from .handler import handle_boot, handle_meal_fire
from .service import MealReminderService, create_service

__all__ = [
    "MealReminderError",
    "ScheduleStoreError",
    "ScheduleValidationError",
    "MealSchedule",
    "MealType",
    "OperationResult",
    "ResyncReport",
    "WakeupPayload",
    "default_message",
    "Clock",
    "FixedClock",
    "Notifier",
    "SystemClock",
    "WakeupPort",
    "InMemoryScheduleStore",
    "ScheduleStore",
    "SqliteScheduleStore",
    "SchedulingEngine",
    "following_fire_time",
    "next_fire_datetime",
    "next_fire_time",
    "APSchedulerWakeupPort",
    "DiscordWebhookNotifier",
    "LogNotifier",
    "build_notifier",
    "handle_boot",
    "handle_meal_fire",
    "MealReminderService",
    "create_service",
]
