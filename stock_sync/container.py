"""
Lazy DI container — singleton access to clients, stores, and services.

Works in both FastAPI and Celery contexts.
Import individual getters to avoid circular imports.
Version: 1.0.0
"""

from functools import lru_cache

from stock_sync.core.config import settings
from stock_sync.clients.keycrm_client import KeyCrmClient
from stock_sync.clients.supabase_client import SupabaseClient
from stock_sync.db.catalog_store import CatalogStore
from stock_sync.db.config_store import ConfigStore
from stock_sync.services.stock_fetch_service import StockFetchService
from stock_sync.services.stock_sync_service import StockSyncService
from stock_sync.utils.rate_limiter import get_keycrm_rate_limiter


# -- Clients ---------------------------------------------------------------

@lru_cache(maxsize=1)
def get_supabase_client():
    return SupabaseClient(settings)


@lru_cache(maxsize=1)
def get_keycrm_client():
    return KeyCrmClient(settings)


# -- DB Stores -------------------------------------------------------------

@lru_cache(maxsize=1)
def get_catalog_store():
    return CatalogStore(settings, get_supabase_client())


@lru_cache(maxsize=1)
def get_config_store():
    return ConfigStore(settings, get_supabase_client())


# -- Sync Services ---------------------------------------------------------

@lru_cache(maxsize=1)
def get_stock_fetch_service():
    return StockFetchService(client=get_keycrm_client(), rate_limiter=get_keycrm_rate_limiter())


@lru_cache(maxsize=1)
def get_stock_sync_service():
    return StockSyncService(
        fetcher=get_stock_fetch_service(),
        catalog=get_catalog_store(),
        config=get_config_store(),
        clamp_negative=settings.stock_clamp_negative,
    )
