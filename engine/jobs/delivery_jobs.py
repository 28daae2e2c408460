"""RQ jobs that run the engine sweeps outside the web process.

Each job drives the process-wide engine with ``async_to_sync``. Sweeps
read due and pending rows from the database, so any worker can run them.
"""

from datetime import UTC, datetime, timedelta

from django.conf import settings

import django_rq
import structlog
from asgiref.sync import async_to_sync

from engine.exceptions import EngineStateError
from engine.services.smart_notification_engine import get_engine

logger = structlog.get_logger(__name__)

QUEUE_NAME = "default"


def process_due_notifications_job() -> int:
    """Deliver scheduled notifications whose time has come.

    Returns:
        Number of notifications delivered.
    """
    delivered = async_to_sync(get_engine().scheduler.run_scheduled_sweep)()
    logger.info("process_due_notifications_job_completed", delivered_count=delivered)
    return delivered


def process_digest_batches_job() -> int:
    """Deliver notifications waiting for a digest.

    Returns:
        Number of digests created.
    """
    digests = async_to_sync(get_engine().scheduler.run_batch_sweep)()
    logger.info("process_digest_batches_job_completed", digest_count=digests)
    return digests


def refresh_engine_state_job() -> None:
    """Reload profiles, patterns and priority models.

    Raises:
        EngineStateError: If loading fails, so RQ records the job as failed.
    """
    try:
        async_to_sync(get_engine().state.refresh)()
    except EngineStateError as e:
        logger.error("refresh_engine_state_job_failed", stage=e.stage, error=str(e))
        raise
    logger.info("refresh_engine_state_job_completed")


def _periodic_jobs() -> list[tuple]:
    engine_settings = get_engine().settings
    return [
        (
            process_due_notifications_job,
            engine_settings.scheduled_check_interval_seconds,
        ),
        (process_digest_batches_job, int(engine_settings.batching_window_seconds)),
        (
            refresh_engine_state_job,
            getattr(settings, "SMART_NOTIFICATION_STATE_REFRESH_SECONDS", 3600),
        ),
    ]


def schedule_periodic_jobs() -> list[str]:
    """Register the sweep and refresh jobs with rq-scheduler.

    Jobs previously registered for the same functions are cancelled first,
    so calling this on every deploy does not pile up duplicates.

    Returns:
        Ids of the scheduled jobs.
    """
    scheduler = django_rq.get_scheduler(QUEUE_NAME)
    jobs = _periodic_jobs()
    func_names = {f"{func.__module__}.{func.__name__}" for func, _ in jobs}
    for job in scheduler.get_jobs():
        if job.func_name in func_names:
            scheduler.cancel(job)

    job_ids = []
    first_run = datetime.now(UTC) + timedelta(seconds=5)
    for func, interval in jobs:
        job = scheduler.schedule(
            scheduled_time=first_run,
            func=func,
            interval=interval,
            repeat=None,
        )
        job_ids.append(job.id)
        logger.info(
            "periodic_job_scheduled",
            job=func.__name__,
            interval_seconds=interval,
            job_id=job.id,
        )
    return job_ids
