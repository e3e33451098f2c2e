"""
Constants package — re-exports from domain-specific modules.

Usage:
    from stock_sync.core.constants.sync import STOCK_STATUS_FILTER
Version: 1.0.0
"""

from stock_sync.core.constants import sync
from stock_sync.core.constants.sync import (
    STOCK_STATUS_FILTER,
    FIRST_PAGE,
    CONFIG_API_KEY,
    CONFIG_CRON_KEY,
    DEFAULT_PRODUCT_ATTRIBUTE_ID,
    RATE_WINDOW_KEY,
    SYNC_LOCK_KEY,
    SUMMARY_TIME_FORMAT,
)

__all__ = [
    "sync",
    "STOCK_STATUS_FILTER",
    "FIRST_PAGE",
    "CONFIG_API_KEY",
    "CONFIG_CRON_KEY",
    "DEFAULT_PRODUCT_ATTRIBUTE_ID",
    "RATE_WINDOW_KEY",
    "SYNC_LOCK_KEY",
    "SUMMARY_TIME_FORMAT",
]
