"""Wake-ups backed by APScheduler date-trigger jobs.

Each meal id maps to exactly one job id, and arming replaces the existing job,
so there is never more than one pending wake-up per meal. Jobs live in the
scheduler's memory job store and are lost on restart; the boot handler
re-arms them.
"""

from datetime import datetime
from typing import Awaitable, Callable, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.date import DateTrigger

from logger import logger
from . import config
from .engine import from_millis
from .ports import WakeupPort


def job_id_for(meal_id: int) -> str:
    return f"{config.JOB_ID_PREFIX}{meal_id}"


def meal_id_for(job_id: str) -> Optional[int]:
    """Inverse of job_id_for; None for jobs that are not meal reminders."""
    if not job_id.startswith(config.JOB_ID_PREFIX):
        return None
    try:
        return int(job_id[len(config.JOB_ID_PREFIX):])
    except ValueError:
        return None


class APSchedulerWakeupPort(WakeupPort):
    """WakeupPort that registers one-shot APScheduler jobs."""

    def __init__(self, scheduler: BaseScheduler, on_fire: Optional[Callable[..., Awaitable]], tzinfo):
        """
        Args:
            scheduler: APScheduler instance (started by the host)
            on_fire: Coroutine function called with the payload as kwargs
            tzinfo: Timezone used for job run dates
        """
        self.scheduler = scheduler
        self.on_fire = on_fire
        self.tzinfo = tzinfo

    def arm(self, meal_id: int, fire_at_millis: int, payload: dict) -> None:
        if self.on_fire is None:
            raise RuntimeError("No fire handler attached to the wake-up port")
        run_at = from_millis(fire_at_millis, self.tzinfo)
        self.scheduler.add_job(
            self.on_fire,
            trigger=DateTrigger(run_date=run_at),
            kwargs=dict(payload),
            id=job_id_for(meal_id),
            name=f"meal_reminder:{meal_id}",
            replace_existing=True,
            misfire_grace_time=config.MISFIRE_GRACE_SECONDS,
            coalesce=True
        )
        logger.info(f"Armed meal reminder {meal_id} for {run_at.isoformat()}")

    def cancel(self, meal_id: int) -> None:
        try:
            self.scheduler.remove_job(job_id_for(meal_id))
            logger.debug(f"Cancelled meal reminder {meal_id}")
        except JobLookupError:
            pass

    def pending_ids(self) -> set[int]:
        ids = set()
        for job in self.scheduler.get_jobs():
            meal_id = meal_id_for(job.id)
            if meal_id is not None:
                ids.add(meal_id)
        return ids

    def fire_time(self, meal_id: int) -> Optional[datetime]:
        """When the pending wake-up for meal_id is due, or None if not armed."""
        job = self.scheduler.get_job(job_id_for(meal_id))
        if job is None:
            return None
        return job.trigger.run_date
