"""Scheduling engine: fire-time arithmetic and wake-up reconciliation.

The engine owns no schedule state of its own. Every resync takes the full
authoritative list, cancels every wake-up the system may have registered and
then arms one wake-up per enabled schedule, so the armed set always converges
to the enabled entries in the store.
"""

import threading
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from dateutil.tz import resolve_imaginary

from logger import logger
from .models import MealSchedule, ResyncReport, WakeupPayload
from .ports import Clock, WakeupPort


def _wall_time(day: date, hour: int, minute: int, tzinfo) -> datetime:
    """Local datetime for hour:minute on day, shifted forward out of DST gaps."""
    return resolve_imaginary(datetime(day.year, day.month, day.day, hour, minute, tzinfo=tzinfo))


def to_millis(moment: datetime) -> int:
    return round(moment.timestamp() * 1000)


def from_millis(millis: int, tzinfo) -> datetime:
    return datetime.fromtimestamp(millis / 1000, tz=tzinfo)


def next_fire_datetime(now: datetime, hour: int, minute: int, strict: bool = False) -> datetime:
    """Next occurrence of hour:minute local time at or after now.

    A target equal to now has not passed yet and fires today, unless strict is
    set. Targets are compared as instants so DST folds order correctly.
    """
    target = _wall_time(now.date(), hour, minute, now.tzinfo)
    if target.timestamp() < now.timestamp() or (strict and target.timestamp() == now.timestamp()):
        target = _wall_time(now.date() + timedelta(days=1), hour, minute, now.tzinfo)
    return target


def next_fire_time(now: datetime, hour: int, minute: int) -> int:
    """Epoch millis of the next occurrence of hour:minute (see next_fire_datetime)."""
    return to_millis(next_fire_datetime(now, hour, minute))


def following_fire_time(now: datetime, hour: int, minute: int) -> int:
    """Epoch millis of the occurrence after the one that just fired.

    Wake-ups never fire early, so the fired occurrence is the latest one at or
    before now and the next is strictly after it. A late delivery past
    midnight still targets the same calendar day as the delivery.
    """
    return to_millis(next_fire_datetime(now, hour, minute, strict=True))


class SchedulingEngine:
    """Keeps the wake-up port in step with the schedule list."""

    def __init__(self, wakeup: WakeupPort, clock: Clock, known_ids: Iterable[int] = ()):
        self.wakeup = wakeup
        self.clock = clock
        self._configured_ids = set(known_ids)
        self._armed_ids: set[int] = set()
        # Held across a whole resync so one id's cancel and arm never interleave
        # with another resync's.
        self._lock = threading.RLock()

    @property
    def known_ids(self) -> set[int]:
        """Every id this engine may have a wake-up registered for."""
        return self._configured_ids | self._armed_ids

    def full_resync(self, schedules: list[MealSchedule], now: Optional[datetime] = None) -> ResyncReport:
        """Rebuild the armed wake-up set from the authoritative schedule list.

        All cancels are issued before any arm. A port failure for one id is
        logged and recorded in the report; remaining ids are still processed.

        Args:
            schedules: Full schedule list from the store
            now: Reference time (defaults to the engine clock)

        Returns:
            ResyncReport describing what was cancelled and armed
        """
        now = now or self.clock.now()
        report = ResyncReport()

        with self._lock:
            for meal_id in sorted(self._ids_to_cancel(schedules)):
                try:
                    self.wakeup.cancel(meal_id)
                    report.cancelled.append(meal_id)
                except Exception as e:
                    logger.error(f"Failed to cancel meal reminder {meal_id}: {e}")
                    report.failed[meal_id] = f"cancel failed: {e}"

            seen = set()
            for schedule in schedules:
                if schedule.id in seen:
                    logger.warning(f"Duplicate meal schedule id {schedule.id}, keeping the first entry")
                    continue
                seen.add(schedule.id)

                if not schedule.is_enabled:
                    continue

                fire_at = next_fire_time(now, schedule.hour, schedule.minute)
                try:
                    self.wakeup.arm(schedule.id, fire_at, schedule.payload().to_dict())
                except Exception as e:
                    logger.error(f"Failed to arm meal reminder {schedule.id}: {e}")
                    report.failed[schedule.id] = f"arm failed: {e}"
                    continue
                self._armed_ids.add(schedule.id)
                report.armed[schedule.id] = fire_at

        logger.info(
            f"Resynced meal reminders: cancelled {len(report.cancelled)}, "
            f"armed {len(report.armed)}, failed {len(report.failed)}"
        )
        return report

    def _ids_to_cancel(self, schedules: list[MealSchedule]) -> set[int]:
        ids = self.known_ids | {s.id for s in schedules}
        try:
            ids |= self.wakeup.pending_ids()
        except Exception as e:
            logger.warning(f"Could not list pending wake-ups: {e}")
        return ids

    def rearm_next(self, payload: WakeupPayload, now: Optional[datetime] = None) -> int:
        """Arm the next occurrence for a wake-up that just fired.

        Returns:
            The new fire time in epoch millis

        Raises:
            Exception: Whatever the wake-up port raises
        """
        now = now or self.clock.now()
        fire_at = following_fire_time(now, payload.hour, payload.minute)
        with self._lock:
            self.wakeup.arm(payload.id, fire_at, payload.to_dict())
            self._armed_ids.add(payload.id)
        return fire_at

    def cancel(self, meal_id: int) -> None:
        """Cancel one id's wake-up without touching any other."""
        with self._lock:
            self.wakeup.cancel(meal_id)
