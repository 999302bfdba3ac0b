"""
Background Job Scheduler

Provides scheduled task execution using APScheduler with AsyncIO support.

Usage:
    from scholarstream.core.scheduler import register_job, start_scheduler, stop_scheduler

    # Before startup:
    register_job("my_job", my_job, IntervalTrigger(hours=1))

    # In FastAPI lifespan:
    await start_scheduler()
    yield
    await stop_scheduler()
"""

import logging
from collections.abc import Callable, Coroutine
from typing import Any

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED, JobExecutionEvent
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.base import BaseTrigger

logger = logging.getLogger(__name__)

# Global scheduler instance
_scheduler: AsyncIOScheduler | None = None

# Jobs registered before the scheduler starts: {job_id: (func, trigger)}
_job_registry: dict[str, tuple[Callable[[], Coroutine[Any, Any, Any]], BaseTrigger]] = {}


class SchedulerConfig:
    """Configuration for the background scheduler."""

    TIMEZONE = "UTC"

    JOB_DEFAULTS = {
        "coalesce": True,  # Combine missed executions into one
        "max_instances": 1,
        "misfire_grace_time": 60 * 5,
    }


def _job_listener(event: JobExecutionEvent) -> None:
    """Log job execution results."""
    if event.exception:
        logger.error(
            f"Job {event.job_id} failed with exception: {event.exception}",
            exc_info=event.exception,
        )
    else:
        logger.info(f"Job {event.job_id} executed successfully")


def register_job(
    job_id: str,
    func: Callable[[], Coroutine[Any, Any, Any]],
    trigger: BaseTrigger,
) -> None:
    """
    Register a job to be scheduled.

    Jobs registered before ``start_scheduler`` are added when it starts;
    jobs registered afterwards are added immediately.
    """
    _job_registry[job_id] = (func, trigger)

    if _scheduler is not None:
        _scheduler.add_job(func, trigger=trigger, id=job_id, replace_existing=True)
        logger.info(f"Registered job: {job_id}")


async def start_scheduler() -> AsyncIOScheduler:
    """
    Create, populate and start the background scheduler.

    Returns:
        The started scheduler instance
    """
    global _scheduler

    if _scheduler is not None and _scheduler.running:
        logger.warning("Scheduler already running, returning existing instance")
        return _scheduler

    _scheduler = AsyncIOScheduler(
        timezone=SchedulerConfig.TIMEZONE,
        job_defaults=SchedulerConfig.JOB_DEFAULTS,
    )
    _scheduler.add_listener(_job_listener, EVENT_JOB_EXECUTED | EVENT_JOB_ERROR)

    for job_id, (func, trigger) in _job_registry.items():
        _scheduler.add_job(func, trigger=trigger, id=job_id, replace_existing=True)
        logger.info(f"Registered job: {job_id}")

    _scheduler.start()

    logger.info("Background job scheduler started")
    return _scheduler


async def stop_scheduler() -> None:
    """Stop the scheduler, waiting for running jobs to finish."""
    global _scheduler

    if _scheduler is None or not _scheduler.running:
        logger.debug("Scheduler not running, nothing to stop")
        return

    _scheduler.shutdown(wait=True)
    _scheduler = None

    logger.info("Background job scheduler stopped")
