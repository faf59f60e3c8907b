"""Tests for meal schedule records."""

import pytest

from domains.meal_reminders import MealSchedule, ScheduleValidationError, default_message
from domains.meal_reminders.models import FALLBACK_MESSAGE


def test_from_dict_accepts_snake_case():
    schedule = MealSchedule.from_dict({
        "id": 1, "meal_type": "breakfast", "hour": 7, "minute": 15,
        "is_enabled": True, "custom_message": "Eggs!"
    })

    assert schedule == MealSchedule(1, "breakfast", 7, 15, True, "Eggs!")


def test_from_dict_accepts_camel_case():
    schedule = MealSchedule.from_dict({
        "id": 3, "mealType": "dinner", "hour": 19, "minute": 0, "isEnabled": False
    })

    assert schedule.meal_type == "dinner"
    assert schedule.is_enabled is False
    assert schedule.custom_message is None


def test_legacy_meal_type_keys_are_mapped():
    """Meal types written by the first mobile release still work."""
    schedule = MealSchedule.from_dict({
        "id": 2, "meal_type": "makan_siang", "hour": 12, "minute": 0, "is_enabled": True
    })

    assert schedule.meal_type == "lunch"
    assert schedule.message == default_message("lunch")


def test_unknown_meal_type_uses_fallback_message():
    schedule = MealSchedule(id=4, meal_type="Snack", hour=16, minute=0)

    assert schedule.meal_type == "snack"
    assert schedule.message == FALLBACK_MESSAGE


def test_custom_message_overrides_default():
    schedule = MealSchedule(id=1, meal_type="breakfast", hour=7, minute=0, custom_message="Oats today")
    assert schedule.message == "Oats today"


def test_empty_custom_message_falls_back_to_default():
    schedule = MealSchedule.from_dict({
        "id": 1, "meal_type": "breakfast", "hour": 7, "minute": 0,
        "is_enabled": True, "custom_message": ""
    })

    assert schedule.custom_message is None
    assert schedule.message == default_message("breakfast")
    assert "custom_message" not in schedule.to_dict()


@pytest.mark.parametrize("record,reason", [
    ({"meal_type": "lunch", "hour": 12, "minute": 0, "is_enabled": True}, "missing id"),
    ({"id": 0, "meal_type": "lunch", "hour": 12, "minute": 0, "is_enabled": True}, "non-positive id"),
    ({"id": 1, "meal_type": "lunch", "hour": 24, "minute": 0, "is_enabled": True}, "hour out of range"),
    ({"id": 1, "meal_type": "lunch", "hour": 12, "minute": 60, "is_enabled": True}, "minute out of range"),
    ({"id": 1, "meal_type": "lunch", "hour": "12", "minute": 0, "is_enabled": True}, "hour as string"),
    ({"id": True, "meal_type": "lunch", "hour": 12, "minute": 0, "is_enabled": True}, "bool id"),
    ({"id": 1, "meal_type": "", "hour": 12, "minute": 0, "is_enabled": True}, "empty meal type"),
    ({"id": 1, "meal_type": "lunch", "hour": 12, "minute": 0, "is_enabled": "yes"}, "non-bool enabled"),
    ({"id": 1, "meal_type": "lunch", "hour": 12, "minute": 0, "is_enabled": True, "custom_message": 5},
     "non-string message"),
    ([1, 2, 3], "not an object"),
])
def test_from_dict_rejects_invalid_records(record, reason):
    with pytest.raises(ScheduleValidationError):
        MealSchedule.from_dict(record)


def test_payload_carries_id_and_time():
    schedule = MealSchedule(id=5, meal_type="dinner", hour=18, minute=45)
    assert schedule.payload().to_dict() == {"id": 5, "hour": 18, "minute": 45}


def test_blank_meal_type_rejected_on_construction():
    with pytest.raises(ScheduleValidationError):
        MealSchedule(id=1, meal_type="  ", hour=7, minute=0)
