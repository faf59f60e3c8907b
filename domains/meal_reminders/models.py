"""Meal schedule records and the values passed between scheduling components."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .errors import ScheduleValidationError


class MealType(str, Enum):
    """Known meal types. Schedules may carry other values too."""
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"


# Meal type keys used by the first mobile release
MEAL_TYPE_ALIASES = {
    "sarapan": MealType.BREAKFAST.value,
    "makan_siang": MealType.LUNCH.value,
    "makan_malam": MealType.DINNER.value,
}

DEFAULT_MESSAGES = {
    MealType.BREAKFAST.value: "Time for breakfast! Keep your energy up for the day.",
    MealType.LUNCH.value: "Time for a healthy lunch!",
    MealType.DINNER.value: "A balanced dinner keeps you healthy.",
}
FALLBACK_MESSAGE = "Time to eat!"

# camelCase spellings accepted when decoding records
_FIELD_ALIASES = {
    "mealType": "meal_type",
    "isEnabled": "is_enabled",
    "customMessage": "custom_message",
}


def normalize_meal_type(meal_type: str) -> str:
    """Lower-case a meal type and map legacy aliases onto the standard keys."""
    key = meal_type.strip().lower()
    return MEAL_TYPE_ALIASES.get(key, key)


def default_message(meal_type: str) -> str:
    """Get the default reminder text for a meal type."""
    return DEFAULT_MESSAGES.get(normalize_meal_type(meal_type), FALLBACK_MESSAGE)


def _require_int(data: dict, key: str) -> int:
    value = data.get(key)
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise ScheduleValidationError(f"'{key}' must be an integer, got {value!r}")
    return value


@dataclass
class MealSchedule:
    """One recurring meal reminder."""

    id: int
    meal_type: str
    hour: int
    minute: int
    is_enabled: bool = True
    custom_message: Optional[str] = None

    def __post_init__(self):
        if self.id <= 0:
            raise ScheduleValidationError(f"id must be positive, got {self.id}")
        if not 0 <= self.hour <= 23:
            raise ScheduleValidationError(f"hour must be 0-23, got {self.hour}")
        if not 0 <= self.minute <= 59:
            raise ScheduleValidationError(f"minute must be 0-59, got {self.minute}")
        if not isinstance(self.meal_type, str) or not self.meal_type.strip():
            raise ScheduleValidationError(f"meal_type must be a non-empty string, got {self.meal_type!r}")
        self.meal_type = normalize_meal_type(self.meal_type)

    @property
    def message(self) -> str:
        """Notification body: custom message when set, else the meal type default."""
        if self.custom_message:
            return self.custom_message
        return default_message(self.meal_type)

    def payload(self) -> "WakeupPayload":
        return WakeupPayload(id=self.id, hour=self.hour, minute=self.minute)

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "meal_type": self.meal_type,
            "hour": self.hour,
            "minute": self.minute,
            "is_enabled": self.is_enabled,
        }
        if self.custom_message:
            data["custom_message"] = self.custom_message
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "MealSchedule":
        """Build a schedule from a persisted record.

        Accepts both snake_case and camelCase keys.

        Raises:
            ScheduleValidationError: If the record is not a valid schedule
        """
        if not isinstance(data, dict):
            raise ScheduleValidationError(f"schedule must be an object, got {type(data).__name__}")

        record = {_FIELD_ALIASES.get(k, k): v for k, v in data.items()}

        meal_type = record.get("meal_type")
        if not isinstance(meal_type, str) or not meal_type.strip():
            raise ScheduleValidationError(f"'meal_type' must be a non-empty string, got {meal_type!r}")

        is_enabled = record.get("is_enabled")
        if not isinstance(is_enabled, bool):
            raise ScheduleValidationError(f"'is_enabled' must be a boolean, got {is_enabled!r}")

        custom_message = record.get("custom_message")
        if custom_message is not None and not isinstance(custom_message, str):
            raise ScheduleValidationError(f"'custom_message' must be a string, got {custom_message!r}")

        return cls(
            id=_require_int(record, "id"),
            meal_type=meal_type,
            hour=_require_int(record, "hour"),
            minute=_require_int(record, "minute"),
            is_enabled=is_enabled,
            custom_message=custom_message or None,
        )


@dataclass(frozen=True)
class WakeupPayload:
    """Data carried through a wake-up so the fire handler can re-arm it."""
    id: int
    hour: int
    minute: int

    def to_dict(self) -> dict:
        return {"id": self.id, "hour": self.hour, "minute": self.minute}


@dataclass
class ResyncReport:
    """Effects of a full resync."""
    cancelled: list[int] = field(default_factory=list)
    armed: dict[int, int] = field(default_factory=dict)  # id -> fire-at epoch millis
    failed: dict[int, str] = field(default_factory=dict)  # id -> error

    @property
    def ok(self) -> bool:
        return not self.failed

    def to_dict(self) -> dict:
        return {
            "cancelled": list(self.cancelled),
            "armed": {str(k): v for k, v in self.armed.items()},
            "failed": {str(k): v for k, v in self.failed.items()},
        }


@dataclass
class OperationResult:
    """Outcome of an externally requested operation."""
    success: bool
    message: str
    error_code: Optional[str] = None
    report: Optional[ResyncReport] = None

    @classmethod
    def ok(cls, message: str, report: Optional[ResyncReport] = None) -> "OperationResult":
        return cls(success=True, message=message, report=report)

    @classmethod
    def error(cls, error_code: str, message: str) -> "OperationResult":
        return cls(success=False, message=message, error_code=error_code)

    def to_dict(self) -> dict:
        data = {"success": self.success, "message": self.message}
        if self.error_code:
            data["error_code"] = self.error_code
        if self.report is not None:
            data["report"] = self.report.to_dict()
        return data
