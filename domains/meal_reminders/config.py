"""Meal reminders domain configuration."""

import os

from config import DATA_DIR

# Wall-clock timezone used to compute fire times
TIMEZONE = os.environ.get("MEAL_TIMEZONE", "Europe/London")

# Schedule store (single-document key-value table in SQLite)
STORE_DB = os.environ.get("MEAL_STORE_DB", str(DATA_DIR / "meal_schedules.db"))
STORE_KEY = "schedules"

# Ids cancelled on every resync even when absent from the stored list.
# Defaults to the three standard meal slots (breakfast, lunch, dinner).
_known_ids = os.environ.get("MEAL_KNOWN_IDS", "1,2,3")
KNOWN_IDS = {int(mid.strip()) for mid in _known_ids.split(",") if mid.strip()}

# Re-arm the next occurrence even if the schedule was disabled since it was armed
REARM_WHEN_DISABLED = os.environ.get("MEAL_REARM_WHEN_DISABLED", "true").lower() in ("1", "true", "yes")

# Notifications
NOTIFICATION_TITLE = os.environ.get("MEAL_NOTIFICATION_TITLE", "Meal Reminder")
NOTIFIER = os.environ.get("MEAL_NOTIFIER", "log")  # "log" or "discord"
DISCORD_WEBHOOK_URL = os.environ.get("DISCORD_WEBHOOK_MEALS")
WEBHOOK_TIMEOUT = 10.0

# APScheduler job options
JOB_ID_PREFIX = "meal_reminder_"
MISFIRE_GRACE_SECONDS = int(os.environ.get("MEAL_MISFIRE_GRACE_SECONDS", "3600"))
