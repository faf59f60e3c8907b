"""Fire-event and boot handlers.

Neither handler has a caller to report to (they run from the timer and from
process startup), so every failure is logged and swallowed here.
"""

from datetime import datetime
from typing import Optional

from logger import logger
from . import config
from .engine import SchedulingEngine, from_millis
from .errors import ScheduleStoreError
from .models import ResyncReport, WakeupPayload
from .ports import Notifier
from .store import ScheduleStore


async def handle_meal_fire(
    meal_id: int,
    hour: int,
    minute: int,
    store: ScheduleStore,
    engine: SchedulingEngine,
    notifier: Notifier,
    title: Optional[str] = None,
    now: Optional[datetime] = None
) -> None:
    """Fire a meal reminder - present it if still enabled, then re-arm.

    Called by the wake-up timer with the payload the wake-up was armed with.
    Enablement is re-checked against the store rather than trusted from the
    payload. Schedules deleted since arming are dropped without re-arming.

    Args:
        meal_id: Schedule id from the payload
        hour: Target hour from the payload
        minute: Target minute from the payload
        store: Schedule store to re-read
        engine: Engine used to re-arm
        notifier: Where the reminder is presented
        title: Notification title (defaults to config)
        now: Fire time (defaults to the engine clock)
    """
    payload = WakeupPayload(id=meal_id, hour=hour, minute=minute)
    now = now or engine.clock.now()

    try:
        schedules = store.read()
    except ScheduleStoreError as e:
        # Payload alone is enough to keep the reminder cycling
        logger.error(f"Failed to read schedules for meal reminder {meal_id}, re-arming only: {e}")
        _rearm(engine, payload, now)
        return

    schedule = next((s for s in schedules if s.id == meal_id), None)
    if schedule is None:
        logger.debug(f"Meal reminder {meal_id} fired but its schedule no longer exists")
        return

    if schedule.is_enabled:
        try:
            await notifier.present(schedule.id, title or config.NOTIFICATION_TITLE, schedule.message)
            logger.info(f"Fired meal reminder {meal_id} ({schedule.meal_type})")
        except Exception as e:
            logger.error(f"Failed to present meal reminder {meal_id}: {e}")
    else:
        logger.info(f"Meal reminder {meal_id} is disabled, notification suppressed")
        if not config.REARM_WHEN_DISABLED:
            return

    _rearm(engine, payload, now)


def _rearm(engine: SchedulingEngine, payload: WakeupPayload, now: datetime) -> None:
    try:
        fire_at = engine.rearm_next(payload, now)
        logger.info(f"Re-armed meal reminder {payload.id} for {from_millis(fire_at, now.tzinfo).isoformat()}")
    except Exception as e:
        logger.error(f"Failed to re-arm meal reminder {payload.id}: {e}")


def handle_boot(store: ScheduleStore, engine: SchedulingEngine) -> Optional[ResyncReport]:
    """Rebuild every wake-up from the store after a restart.

    Safe to call more than once.

    Returns:
        The resync report, or None if nothing could be resynced
    """
    try:
        schedules = store.read()
    except ScheduleStoreError as e:
        logger.error(f"Boot resync skipped, schedule store unreadable: {e}")
        return None

    try:
        report = engine.full_resync(schedules)
    except Exception as e:
        logger.error(f"Boot resync failed: {e}")
        return None

    logger.info(f"Restored {len(report.armed)} meal reminders after restart")
    return report
