"""
Sync helpers — cron URL building and plain-text run summaries.
Version: 1.0.0
"""
from urllib.parse import urlencode

from stock_sync.core.constants.sync import SUMMARY_TIME_FORMAT
from stock_sync.schemas.stock import SyncResult

TRIGGER_PATH = "/sync/stock"


def build_cron_url(public_base_url: str, cron_key: str) -> str:
    """Trigger URL to put in the scheduler (crontab, uptime pinger, ...)."""
    return f"{public_base_url.rstrip('/')}{TRIGGER_PATH}?{urlencode({'secure_key': cron_key})}"


def format_sync_summary(result: SyncResult) -> str:
    return (
        f"Synchronization completed successfully: "
        f"{result.timestamp.strftime(SUMMARY_TIME_FORMAT)}. "
        f"Updated products: {result.updated_count}"
    )
