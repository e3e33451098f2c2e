"""
Stock fetch service — walks KeyCRM offer stock pages into StockRecords.

Each page is gated by the rate limiter, validated, and normalized. Any
failure aborts the whole fetch and discards what was accumulated so far:
a half-fetched stock list is never handed to the catalog.
Version: 1.0.0
"""
import logging
from typing import List

from stock_sync.clients.keycrm_client import KeyCrmClient
from stock_sync.core.exceptions import ConfigError, NoDataError, RateLimitError, SchemaError
from stock_sync.schemas.stock import StockRecord
from stock_sync.utils.rate_limiter import RateLimiter
from stock_sync.utils.stock_normalize import normalize_stock_item

logger = logging.getLogger("stock_fetch")


class StockFetchService:
    def __init__(self, client: KeyCrmClient, rate_limiter: RateLimiter) -> None:
        self._client = client
        self._limiter = rate_limiter

    def fetch_all_stock(self, api_key: str) -> List[StockRecord]:
        """
        Fetch every page of active offer stocks.

        Raises a FetchError subclass on the first failure; no partial list
        is ever returned.
        """
        if not api_key:
            raise ConfigError("KeyCRM API key is not configured")

        records: List[StockRecord] = []
        next_page_url = self._client.first_stocks_page_url()
        pages = 0

        while next_page_url:
            if not self._limiter.can_make_request():
                raise RateLimitError(
                    limit=self._limiter.limit,
                    window_seconds=self._limiter.window_seconds,
                )

            body = self._client.get_json(next_page_url, api_key)

            items = body.get("data") if isinstance(body, dict) else None
            if not isinstance(items, list):
                raise SchemaError("KeyCRM: Unexpected response format - missing data array")

            skipped = 0
            for item in items:
                record = normalize_stock_item(item)
                if record is None:
                    skipped += 1
                    continue
                records.append(record)

            if skipped:
                logger.warning(
                    f"KeyCRM page {pages + 1}: skipped {skipped} item(s) missing sku or quantity"
                )

            self._limiter.record_request()
            pages += 1
            next_page_url = body.get("next_page_url")

        if not records:
            raise NoDataError("KeyCRM: No valid stock data found in response")

        logger.info(f"KeyCRM fetch complete: {len(records)} records from {pages} page(s)")
        return records
