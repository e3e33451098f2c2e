"""
KeyCRM HTTP client — authenticated GET calls against the KeyCRM open API.

Maps transport failures, non-200 responses and malformed JSON onto the
fetch error kinds. Pagination and validation live in StockFetchService.
Version: 1.0.0
"""
import json
import logging
from typing import Any, Optional
from urllib.parse import urlencode

import httpx

from stock_sync.core.config import Settings
from stock_sync.core.constants.sync import STOCK_STATUS_FILTER, FIRST_PAGE
from stock_sync.core.exceptions import HttpStatusError, ParseError, TransportError

logger = logging.getLogger("keycrm_client")


class KeyCrmClient:
    def __init__(self, settings: Settings, http_client: Optional[httpx.Client] = None) -> None:
        self._stocks_url = settings.stocks_url
        self._page_size = settings.keycrm_page_size
        self._timeout = settings.keycrm_timeout_seconds
        self._http_client = http_client

    def first_stocks_page_url(self) -> str:
        """URL of the first page of active offer stocks."""
        query = urlencode({
            "filter[status]": STOCK_STATUS_FILTER,
            "page": FIRST_PAGE,
            "perPage": self._page_size,
        })
        return f"{self._stocks_url}?{query}"

    def get_json(self, url: str, api_key: str) -> Any:
        """
        GET ``url`` with bearer auth and return the decoded JSON body.

        Raises:
            TransportError: connection failure or timeout
            HttpStatusError: status other than 200
            ParseError: body is not valid JSON
        """
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
        }

        try:
            if self._http_client is not None:
                resp = self._http_client.get(url, headers=headers)
            else:
                with httpx.Client(timeout=self._timeout) as client:
                    resp = client.get(url, headers=headers)
        except httpx.TransportError as e:
            raise TransportError(f"KeyCRM request failed: {e}") from e

        if resp.status_code != 200:
            logger.info("keycrm error status=%s body=%s", resp.status_code, resp.text[:200])
            raise HttpStatusError(resp.status_code)

        try:
            return resp.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ParseError(f"KeyCRM: Invalid JSON response. Error: {e}") from e
