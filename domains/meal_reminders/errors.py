"""Exceptions raised by the meal reminders domain."""


class MealReminderError(Exception):
    """Base class for meal reminder failures."""


class ScheduleStoreError(MealReminderError):
    """The schedule store could not be read or written."""


class ScheduleValidationError(MealReminderError):
    """A schedule record is missing fields or has out-of-range values."""
