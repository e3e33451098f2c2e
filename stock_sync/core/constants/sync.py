"""
Sync constants — KeyCRM query defaults, config keys, catalog context.

Stock sync constants.
Version: 1.0.0
"""

# Only active offers are synchronized
STOCK_STATUS_FILTER: str = "active"

FIRST_PAGE: int = 1

# Config provider keys
CONFIG_API_KEY: str = "API_KEY"
CONFIG_CRON_KEY: str = "CRON_KEY"

# Catalog writes always target the base product, not a combination
DEFAULT_PRODUCT_ATTRIBUTE_ID: int = 0

# Redis keys
RATE_WINDOW_KEY: str = "keycrm:rate_window"
SYNC_LOCK_KEY: str = "sync_lock:stock"

SUMMARY_TIME_FORMAT: str = "%Y-%m-%d %H:%M:%S"
