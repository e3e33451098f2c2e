"""
Celery configuration — broker, task routes, beat schedule.

Runs the stock sync on a fixed interval as an alternative to an external
cron hitting GET /sync/stock. Only one of the two is needed; both share the
same run lock, so running both never overlaps.

=============================================================================
RUNNING
=============================================================================
    celery -A stock_sync.celery_app worker -Q sync_stock --concurrency=1 -l info
    celery -A stock_sync.celery_app beat -l info

=============================================================================
ENVIRONMENT VARIABLES
=============================================================================
    SYNC_ENABLED: "true" or "false" — master on/off for the beat schedule
    SYNC_SCHEDULE_MINUTES: Minutes between runs (default: 15)
    REDIS_URL / CELERY_BROKER_URL / CELERY_RESULT_BACKEND
Version: 1.0.0
"""
import logging

from celery import Celery
from celery.schedules import crontab
from kombu import Queue

from stock_sync.core.config import settings

logging.basicConfig(level=settings.log_level, format="%(levelname)s:%(name)s:%(message)s")
logger = logging.getLogger(__name__)

SYNC_ENABLED = settings.sync_enabled
SYNC_SCHEDULE_MINUTES = settings.sync_schedule_minutes


def _build_beat_schedule() -> dict:
    """Build Celery Beat schedule based on the sync enabled/interval settings."""
    if not SYNC_ENABLED:
        return {}

    return {
        "sync-stock": {
            "task": "tasks.sync_stock.sync_stock",
            "schedule": crontab(minute=f"*/{SYNC_SCHEDULE_MINUTES}"),
            "options": {"queue": "sync_stock"},
        },
    }


def _log_sync_config() -> None:
    if not SYNC_ENABLED:
        logger.info("SYNC SCHEDULER: DISABLED (SYNC_ENABLED=false), no stock sync will be scheduled")
        return
    logger.info(f"SYNC SCHEDULER: stock sync every {SYNC_SCHEDULE_MINUTES} minute(s)")


_log_sync_config()

celery_app = Celery(
    "stock_sync",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=[
        "stock_sync.celery_app.tasks.sync_stock",
    ],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_queues=(
        Queue("sync_stock"),
        Queue("default"),
    ),
    task_default_queue="default",
    task_routes={
        "tasks.sync_stock.*": {"queue": "sync_stock"},
    },
    # One run at a time per worker; pages are strictly sequential anyway
    worker_prefetch_multiplier=1,
    beat_schedule=_build_beat_schedule(),
)
