"""
Applications Background Jobs

Scheduled tasks for the application payment lifecycle:
1. Release checkouts that were started but never confirmed

A checkout session left in payment status "pending" for longer than
``checkout_expiry_hours`` is returned to "unpaid" so the student can start
a new one. The job is idempotent: released rows no longer match the query.
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

from apscheduler.triggers.interval import IntervalTrigger

from scholarstream.core.config import settings
from scholarstream.core.database import async_session_maker
from scholarstream.core.scheduler import register_job
from scholarstream.modules.applications import repository

logger = logging.getLogger(__name__)

JOB_ID_RELEASE_STALE_CHECKOUTS = "applications_release_stale_checkouts"


async def release_stale_checkouts() -> dict[str, Any]:
    """
    Reset applications whose checkout session went stale.

    Returns:
        Dict with job execution summary (executed_at, threshold, released)
    """
    executed_at = datetime.now(UTC)
    threshold = executed_at - timedelta(hours=settings.checkout_expiry_hours)

    logger.info(f"Starting stale checkout job. Threshold: {threshold.isoformat()}")

    async with async_session_maker() as db:
        released = await repository.release_stale_checkouts(db, started_before=threshold)

    logger.info(f"Stale checkout job completed. Released: {released}")

    return {
        "executed_at": executed_at.isoformat(),
        "threshold": threshold.isoformat(),
        "released": released,
    }


def register_application_jobs() -> None:
    """
    Register application background jobs with the scheduler.

    Call during startup, before the scheduler is started.
    """
    register_job(
        job_id=JOB_ID_RELEASE_STALE_CHECKOUTS,
        func=release_stale_checkouts,
        trigger=IntervalTrigger(hours=1),
    )
    logger.info(f"Registered job: {JOB_ID_RELEASE_STALE_CHECKOUTS} (interval: 1 hour)")
