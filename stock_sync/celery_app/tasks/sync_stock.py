"""
Stock sync task — scheduled KeyCRM → catalog synchronization.

Tasks:
- sync_stock: one full run, guarded by the run lock

Fetch failures are reported in the return value instead of raised, so the
beat schedule simply tries again on the next tick.
Version: 1.0.0
"""
import logging
from typing import Any, Dict

from stock_sync.celery_app.celery_config import celery_app
from stock_sync.celery_app.tasks.base import BaseTask
from stock_sync.container import get_stock_sync_service
from stock_sync.core.exceptions import FetchError, SyncInProgressError
from stock_sync.utils.run_lock import sync_run_lock
from stock_sync.utils.sync_helpers import format_sync_summary

logger = logging.getLogger(__name__)


@celery_app.task(
    bind=True,
    base=BaseTask,
    name="tasks.sync_stock.sync_stock",
)
def sync_stock(self) -> Dict[str, Any]:
    """Run one stock synchronization."""
    owner = self.request.id or "sync_stock"

    try:
        with sync_run_lock(owner):
            result = get_stock_sync_service().run()
    except SyncInProgressError:
        logger.info("Stock sync already running, skipping this tick")
        return {"status": "skipped", "reason": "in_progress"}
    except FetchError as e:
        return {"status": "failed", "error_kind": e.kind.value, "error": str(e)}

    logger.info(format_sync_summary(result))
    return {"status": "completed", **result.model_dump(mode="json")}
