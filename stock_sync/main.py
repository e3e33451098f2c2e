import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from stock_sync.core.config import settings
from stock_sync.routes import health_router, sync_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan event handler.

    On startup:
    - Make sure a cron key exists (generated on first start)
    - Log the trigger URL for the scheduler
    - Log the rate limiter backend
    """
    logger.info("=== KeyCRM Stock Sync Starting ===")

    if not settings.sync_enabled:
        logger.info("Stock sync disabled (SYNC_ENABLED=false)")

    try:
        from stock_sync.container import get_config_store
        from stock_sync.utils.sync_helpers import build_cron_url

        cron_key = get_config_store().ensure_cron_key()
        logger.info(f"Cron URL: {build_cron_url(settings.public_base_url, cron_key)}")
    except Exception as e:
        logger.warning(f"Could not prepare cron key (Supabase may be unavailable): {e}")

    try:
        from stock_sync.utils.rate_limiter import get_keycrm_rate_limiter
        status = get_keycrm_rate_limiter().get_status()
        logger.info(
            f"Rate limiter initialized: backend={status.get('backend')} "
            f"limit={status.get('limit')}/{status.get('window_seconds')}s"
        )
    except Exception as e:
        logger.warning(f"Rate limiter initialization failed: {e}")

    logger.info("=== KeyCRM Stock Sync Ready ===")

    yield

    logger.info("=== KeyCRM Stock Sync Shutting Down ===")


app = FastAPI(title="KeyCRM Stock Sync", lifespan=lifespan)
logging.basicConfig(level=settings.log_level, format="%(levelname)s:%(name)s:%(message)s")

app.include_router(health_router)
app.include_router(sync_router)
