"""
Sync routes — cron-triggered stock synchronization.

GET /sync/stock?secure_key=... runs one synchronization and answers with a
plain-text line, so it can be called straight from crontab/wget.
Version: 1.0.0
"""
import logging
import secrets

import redis
from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from stock_sync.container import get_config_store, get_stock_sync_service
from stock_sync.core.config import settings
from stock_sync.core.constants.sync import CONFIG_CRON_KEY
from stock_sync.core.exceptions import FetchError, StockSyncException, SyncInProgressError
from stock_sync.db.config_store import ConfigStore
from stock_sync.services.stock_sync_service import StockSyncService
from stock_sync.utils.run_lock import sync_run_lock
from stock_sync.utils.sync_helpers import format_sync_summary

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/sync", tags=["sync"])


def _is_valid_key(provided: str, expected: str) -> bool:
    if not provided or not expected:
        return False
    return secrets.compare_digest(provided.encode(), expected.encode())


@router.get("/stock", response_class=PlainTextResponse)
def trigger_stock_sync(
    secure_key: str = Query(default=""),
    config_store: ConfigStore = Depends(get_config_store),
    sync_service: StockSyncService = Depends(get_stock_sync_service),
):
    """Run one KeyCRM → catalog stock synchronization."""
    if not settings.sync_enabled:
        return PlainTextResponse("Module is disabled", status_code=503)

    try:
        if not _is_valid_key(secure_key, config_store.get(CONFIG_CRON_KEY)):
            logger.warning("Stock sync trigger rejected: invalid security key")
            return PlainTextResponse("Invalid security key", status_code=403)

        with sync_run_lock():
            result = sync_service.run()
    except SyncInProgressError as e:
        return PlainTextResponse(str(e), status_code=409)
    except FetchError as e:
        return PlainTextResponse(f"Synchronization error: {e}", status_code=502)
    except (StockSyncException, redis.RedisError) as e:
        logger.error(f"Stock sync failed: {e}")
        return PlainTextResponse(f"Synchronization error: {e}", status_code=500)

    return PlainTextResponse(format_sync_summary(result))
