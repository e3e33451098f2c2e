"""
Pytest configuration and shared fixtures for the stock sync tests.

Provides test settings, a controllable clock, mocked Supabase/Redis
clients, an in-memory catalog, and KeyCRM page builders.
Version: 1.0.0
"""
import json
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import httpx
import pytest

from stock_sync.core.constants.sync import CONFIG_API_KEY, CONFIG_CRON_KEY


STOCKS_URL = "https://keycrm.test/v1/offers/stocks"


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_settings():
    """Settings object with test defaults (no real credentials)."""
    from stock_sync.core.config import Settings
    return Settings(
        keycrm_api_base_url="https://keycrm.test/v1",
        keycrm_api_key="test-api-key",
        keycrm_page_size=50,
        keycrm_timeout_seconds=5,
        supabase_url="https://test.supabase.co",
        supabase_service_role_key="test-supabase-key",
        sync_cron_key="test-cron-key",
        sync_lock_enabled=False,
        public_base_url="https://shop.test",
    )


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------

class FakeClock:
    """Manually advanced time source for the rate limiter."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


# ---------------------------------------------------------------------------
# Supabase (mocked)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_supabase_client():
    """Mocked SupabaseClient with a chainable table builder."""
    client = MagicMock()
    mock_table = MagicMock()
    for method in ("select", "upsert", "eq", "limit"):
        getattr(mock_table, method).return_value = mock_table
    mock_table.execute.return_value = MagicMock(data=[])
    client.client.table.return_value = mock_table
    return client


# ---------------------------------------------------------------------------
# Catalog / config (in-memory)
# ---------------------------------------------------------------------------

class InMemoryCatalog:
    """Catalog double: variant and product reference maps plus stock rows."""

    def __init__(
        self,
        variants: Optional[Dict[str, int]] = None,
        products: Optional[Dict[str, int]] = None,
    ) -> None:
        self.variants = variants or {}
        self.products = products or {}
        self.quantities: Dict[int, int] = {}
        self.writes: List[tuple] = []

    def find_product_id_by_sku(self, sku: str) -> Optional[int]:
        if sku in self.variants:
            return self.variants[sku]
        return self.products.get(sku)

    def set_quantity(self, product_id: int, quantity: int) -> None:
        self.quantities[product_id] = quantity
        self.writes.append((product_id, quantity))


class InMemoryConfig:
    def __init__(self, values: Optional[Dict[str, str]] = None) -> None:
        self.values = dict(values or {})

    def get(self, key: str) -> str:
        return self.values.get(key, "")

    def set(self, key: str, value: str) -> bool:
        self.values[key] = value
        return True


@pytest.fixture
def catalog():
    return InMemoryCatalog(
        variants={"SKU-VAR-1": 11},
        products={"SKU-1": 1, "SKU-2": 2, "SKU-VAR-1": 99},
    )


@pytest.fixture
def config_provider():
    return InMemoryConfig({CONFIG_API_KEY: "test-api-key", CONFIG_CRON_KEY: "test-cron-key"})


# ---------------------------------------------------------------------------
# KeyCRM pages
# ---------------------------------------------------------------------------

def make_item(sku: Any = "SKU-1", quantity: Any = 10, reserve: Any = 0, price: Any = 99.5) -> Dict[str, Any]:
    return {"sku": sku, "price": price, "quantity": quantity, "reserve": reserve}


def make_page(items: List[Dict[str, Any]], next_page_url: Optional[str] = None) -> Dict[str, Any]:
    return {"data": items, "next_page_url": next_page_url}


def routed_transport(
    pages: Dict[int, Any],
    calls: Optional[List[httpx.Request]] = None,
    status_by_page: Optional[Dict[int, int]] = None,
) -> httpx.MockTransport:
    """
    MockTransport answering ``?page=N`` with ``pages[N]``.

    Dict/list values are JSON-encoded; str values are sent raw.
    """
    status_by_page = status_by_page or {}

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        page = int(request.url.params.get("page", "1"))
        status = status_by_page.get(page, 200)
        body = pages.get(page, {"data": [], "next_page_url": None})
        content = body if isinstance(body, str) else json.dumps(body)
        return httpx.Response(status, content=content.encode(), headers={"Content-Type": "application/json"})

    return httpx.MockTransport(handler)

