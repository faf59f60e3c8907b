"""Meal reminder operations exposed to callers.

Each operation returns an OperationResult instead of raising, so the HTTP
layer (or any other caller) can report success or failure directly.
"""

from datetime import datetime
from typing import Optional

from apscheduler.schedulers.base import BaseScheduler

from logger import logger
from . import config
from .engine import SchedulingEngine, next_fire_datetime
from .errors import ScheduleStoreError, ScheduleValidationError
from .handler import handle_boot, handle_meal_fire
from .models import MealSchedule, OperationResult
from .ports import Clock, Notifier, SystemClock
from .store import ScheduleStore, SqliteScheduleStore, check_unique_ids, parse_schedules
from .wakeup import APSchedulerWakeupPort
from .notifier import build_notifier

SCHEDULE_ERROR = "SCHEDULE_ERROR"
CANCEL_ERROR = "CANCEL_ERROR"
SYNC_ERROR = "SYNC_ERROR"
UPDATE_ERROR = "UPDATE_ERROR"


class MealReminderService:
    """Ties the store, engine and notifier together."""

    def __init__(self, store: ScheduleStore, engine: SchedulingEngine, notifier: Notifier):
        self.store = store
        self.engine = engine
        self.notifier = notifier

    def apply_schedules(self, schedules: list[MealSchedule]) -> OperationResult:
        """Persist a new schedule list, then resync every wake-up."""
        try:
            check_unique_ids(schedules)
        except ScheduleValidationError as e:
            return OperationResult.error(SCHEDULE_ERROR, str(e))

        if not self.store.write(schedules):
            return OperationResult.error(SCHEDULE_ERROR, "Failed to save meal schedules")

        report = self.engine.full_resync(schedules)
        return OperationResult.ok("Alarms scheduled successfully", report)

    def sync_schedules(self, serialized: str) -> OperationResult:
        """Replace the stored list with a serialized one, then resync."""
        try:
            schedules = parse_schedules(serialized)
        except ScheduleValidationError as e:
            logger.warning(f"Rejected meal schedule sync: {e}")
            return OperationResult.error(SYNC_ERROR, str(e))

        if not self.store.write(schedules):
            return OperationResult.error(SYNC_ERROR, "Failed to save meal schedules")

        report = self.engine.full_resync(schedules)
        return OperationResult.ok("Meal schedules synced successfully", report)

    def schedule_all(self) -> OperationResult:
        """Resync from the stored list."""
        return self._resync_stored(SCHEDULE_ERROR, "Alarms scheduled successfully")

    def update_notifications(self) -> OperationResult:
        """Re-derive wake-ups after an edit, using the stored list as-is."""
        return self._resync_stored(UPDATE_ERROR, "Meal schedules updated successfully")

    def _resync_stored(self, error_code: str, message: str) -> OperationResult:
        try:
            schedules = self.store.read()
        except ScheduleStoreError as e:
            logger.error(f"Resync aborted: {e}")
            return OperationResult.error(error_code, str(e))

        report = self.engine.full_resync(schedules)
        return OperationResult.ok(message, report)

    def cancel_schedule(self, meal_id: int) -> OperationResult:
        """Cancel one schedule's pending wake-up; the stored list is untouched."""
        try:
            self.engine.cancel(meal_id)
        except Exception as e:
            logger.error(f"Failed to cancel meal reminder {meal_id}: {e}")
            return OperationResult.error(CANCEL_ERROR, str(e))
        return OperationResult.ok("Alarm cancelled successfully")

    def list_schedules(self, now: Optional[datetime] = None) -> list[dict]:
        """Stored schedules with the time each one is next due (None if disabled).

        Raises:
            ScheduleStoreError: If the store cannot be read
        """
        now = now or self.engine.clock.now()
        listing = []
        for schedule in self.store.read():
            entry = schedule.to_dict()
            entry["next_fire_at"] = (
                next_fire_datetime(now, schedule.hour, schedule.minute).isoformat()
                if schedule.is_enabled else None
            )
            listing.append(entry)
        return listing

    async def handle_fire(self, id: int, hour: int, minute: int) -> None:
        """Wake-up callback; keyword names match the wake-up payload."""
        await handle_meal_fire(id, hour, minute, self.store, self.engine, self.notifier)

    def boot(self):
        """Restore all wake-ups after a restart."""
        return handle_boot(self.store, self.engine)


def create_service(
    scheduler: BaseScheduler,
    store: Optional[ScheduleStore] = None,
    notifier: Optional[Notifier] = None,
    clock: Optional[Clock] = None
) -> MealReminderService:
    """Build a service whose wake-ups are APScheduler jobs on scheduler."""
    clock = clock or SystemClock(config.TIMEZONE)
    store = store or SqliteScheduleStore()
    notifier = notifier or build_notifier()

    wakeup = APSchedulerWakeupPort(scheduler, None, clock.now().tzinfo)
    engine = SchedulingEngine(wakeup, clock, known_ids=config.KNOWN_IDS)
    service = MealReminderService(store, engine, notifier)
    # Jobs call back into the service, which did not exist when the port was built
    wakeup.on_fire = service.handle_fire
    return service
