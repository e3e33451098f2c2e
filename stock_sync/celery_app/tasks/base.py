"""
Base task class — common lifecycle logging for all workers.
Version: 1.0.0
"""
import logging
from celery import Task

logger = logging.getLogger(__name__)


class BaseTask(Task):
    """Base task with common functionality for all workers."""

    # Don't create abstract tasks
    abstract = True

    # NOTE: no autoretry. A failed stock sync is retried by the next
    # beat tick, not by Celery.
    max_retries = 0

    track_started = True

    def on_failure(self, exc, task_id, args, kwargs, einfo):
        """Called when task raises."""
        logger.error(f"Task {self.name}[{task_id}] failed: {exc}")

    def on_success(self, retval, task_id, args, kwargs):
        """Called when task succeeds."""
        logger.info(f"Task {self.name}[{task_id}] succeeded")
