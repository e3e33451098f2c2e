"""
Custom exception hierarchy for the KeyCRM stock sync.

Exceptions are categorized as:
- RetryableError: Transient errors that may clear by the next scheduled run
- NonRetryableError: Permanent errors that need a config or upstream fix

Every fetch failure also carries a ``kind`` tag (FetchErrorKind) so callers
can branch on the failure kind without isinstance chains.
Version: 1.0.0
"""
from enum import Enum


class FetchErrorKind(str, Enum):
    CONFIG = "config"
    RATE_LIMIT = "rate_limit"
    TRANSPORT = "transport"
    HTTP_STATUS = "http_status"
    PARSE = "parse"
    SCHEMA = "schema"
    NO_DATA = "no_data"


class StockSyncException(Exception):
    """Base exception for the stock sync."""
    pass


class RetryableError(StockSyncException):
    """
    Base class for errors that may succeed on the next run.

    - Network timeouts
    - Rate limits
    - Temporary upstream unavailability
    """
    pass


class NonRetryableError(StockSyncException):
    """
    Base class for errors that will not clear without intervention.

    - Missing credentials
    - Malformed upstream responses
    """
    pass


# ============================================
# FETCH ERRORS - abort the whole run
# ============================================
class FetchError(StockSyncException):
    """Any failure raised while pulling stock pages from KeyCRM."""
    kind: FetchErrorKind


class ConfigError(FetchError, NonRetryableError):
    """KeyCRM API key is not configured."""
    kind = FetchErrorKind.CONFIG


class RateLimitError(FetchError, RetryableError):
    """
    Rate limit window exhausted.

    The run is aborted; the next scheduled run retries.
    """
    kind = FetchErrorKind.RATE_LIMIT

    def __init__(self, service: str = "KeyCRM", limit: int = 60, window_seconds: int = 60):
        self.service = service
        self.limit = limit
        self.window_seconds = window_seconds
        super().__init__(
            f"{service} API rate limit reached ({limit} requests per {window_seconds}s)"
        )


class TransportError(FetchError, RetryableError):
    """Connection or timeout error - typically transient."""
    kind = FetchErrorKind.TRANSPORT


class HttpStatusError(FetchError, RetryableError):
    """KeyCRM answered with a non-200 status."""
    kind = FetchErrorKind.HTTP_STATUS

    def __init__(self, status_code: int, service: str = "KeyCRM"):
        self.status_code = status_code
        self.service = service
        super().__init__(f"{service}: HTTP error {status_code}")


class ParseError(FetchError, NonRetryableError):
    """Response body is not valid JSON."""
    kind = FetchErrorKind.PARSE


class SchemaError(FetchError, NonRetryableError):
    """Response JSON lacks the ``data`` array."""
    kind = FetchErrorKind.SCHEMA


class NoDataError(FetchError, NonRetryableError):
    """All pages were fetched but no valid stock record was found."""
    kind = FetchErrorKind.NO_DATA


# ============================================
# PER-RECORD ERRORS - never abort the run
# ============================================
class UnresolvedSkuError(StockSyncException):
    """No catalog product matches the SKU."""

    def __init__(self, sku: str):
        self.sku = sku
        super().__init__(f"No catalog product for SKU {sku}")


class CatalogStoreError(StockSyncException):
    """Supabase read or write against the catalog failed."""
    pass


class SyncInProgressError(StockSyncException):
    """Another synchronization run holds the run lock."""
    pass
