"""Meal API - local service that owns the meal reminder alarms.

Starts the APScheduler loop, restores every alarm from the schedule store on
startup, and exposes schedule operations over REST.
Run with: uvicorn meal_api.main:app --port 8110
"""

from contextlib import asynccontextmanager
from datetime import datetime

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI

from domains.meal_reminders import create_service
from domains.meal_reminders import config as meal_config
from logger import logger
from .routes import router, service_started, set_service


@asynccontextmanager
async def lifespan(app: FastAPI):
    scheduler = AsyncIOScheduler(timezone=meal_config.TIMEZONE)
    service = create_service(scheduler)
    scheduler.start()

    # Alarms live in scheduler memory only; this process start is the boot signal
    report = service.boot()
    if report is not None and report.failed:
        logger.warning(f"Some meal reminders could not be restored: {report.failed}")

    set_service(service)
    logger.info(f"Meal API started with {len(scheduler.get_jobs())} alarms")
    try:
        yield
    finally:
        set_service(None)
        scheduler.shutdown(wait=False)
        logger.info("Meal API stopped")


app = FastAPI(
    title="Meal API",
    description="Recurring meal reminder scheduling",
    version="1.0.0",
    lifespan=lifespan
)
app.include_router(router)


# ============================================================
# Health Check
# ============================================================

@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": "Meal API",
        "scheduler": "running" if service_started() else "stopped",
        "timestamp": datetime.now().astimezone().isoformat()
    }
