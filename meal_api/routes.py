"""
Meal Schedule Routes

Endpoints for editing meal schedules and reconciling their alarms.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from domains.meal_reminders import (
    MealReminderService,
    MealSchedule,
    OperationResult,
    ScheduleStoreError,
    ScheduleValidationError,
)

router = APIRouter(prefix="/schedules", tags=["schedules"])

# Service instance (set by the app on startup)
_service: Optional[MealReminderService] = None


def set_service(service: Optional[MealReminderService]) -> None:
    global _service
    _service = service


def service_started() -> bool:
    return _service is not None


def get_service() -> MealReminderService:
    """Get the running meal reminder service."""
    if _service is None:
        raise HTTPException(status_code=503, detail="Meal reminder service not started")
    return _service


# Request/Response models


class MealScheduleModel(BaseModel):
    """One meal schedule as sent by clients."""

    id: int = Field(..., gt=0, description="Schedule id (also the alarm and notification id)")
    meal_type: str = Field(..., min_length=1, alias="mealType", description="breakfast, lunch, dinner, ...")
    hour: int = Field(..., ge=0, le=23)
    minute: int = Field(..., ge=0, le=59)
    is_enabled: bool = Field(True, alias="isEnabled")
    custom_message: Optional[str] = Field(None, alias="customMessage")

    model_config = {"populate_by_name": True}

    def to_schedule(self) -> MealSchedule:
        return MealSchedule(
            id=self.id,
            meal_type=self.meal_type,
            hour=self.hour,
            minute=self.minute,
            is_enabled=self.is_enabled,
            custom_message=self.custom_message or None,
        )


class ApplyRequest(BaseModel):
    """Full replacement schedule list."""

    schedules: list[MealScheduleModel] = Field(default_factory=list)


class SyncRequest(BaseModel):
    """Schedule list serialized as a JSON string."""

    schedules: str = Field("[]", description="JSON array of schedule records")


class OperationResponse(BaseModel):
    """Result of an alarm operation."""

    success: bool
    message: str
    error_code: Optional[str] = None
    report: Optional[dict] = None


def _respond(result: OperationResult):
    if result.success:
        return result.to_dict()
    return JSONResponse(
        status_code=500,
        content={"success": False, "error_code": result.error_code, "message": result.message}
    )


@router.get("")
def list_schedules(service: MealReminderService = Depends(get_service)):
    """Stored schedules with their next fire time."""
    try:
        return {"schedules": service.list_schedules()}
    except ScheduleStoreError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.put("", response_model=OperationResponse)
def apply_schedules(request: ApplyRequest, service: MealReminderService = Depends(get_service)):
    """Replace all schedules and reschedule their alarms."""
    try:
        schedules = [s.to_schedule() for s in request.schedules]
    except ScheduleValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _respond(service.apply_schedules(schedules))


@router.post("/sync", response_model=OperationResponse)
def sync_schedules(request: SyncRequest, service: MealReminderService = Depends(get_service)):
    """Replace all schedules from a serialized list and reschedule their alarms."""
    return _respond(service.sync_schedules(request.schedules))


@router.post("/resync", response_model=OperationResponse)
def schedule_all(service: MealReminderService = Depends(get_service)):
    """Reschedule every alarm from the stored schedules."""
    return _respond(service.schedule_all())


@router.post("/update", response_model=OperationResponse)
def update_notifications(service: MealReminderService = Depends(get_service)):
    """Re-derive alarms after schedules were edited."""
    return _respond(service.update_notifications())


@router.delete("/{meal_id}/alarm", response_model=OperationResponse)
def cancel_schedule(meal_id: int, service: MealReminderService = Depends(get_service)):
    """Cancel one schedule's pending alarm."""
    return _respond(service.cancel_schedule(meal_id))
