"""
Base store — shared Supabase client access for all stores.

Base Supabase store with shared select / upsert primitives. PostgREST
errors and transport failures both surface as CatalogStoreError.
All catalog and config stores inherit from this class.
Version: 1.0.0
"""

import logging
from typing import Any, Dict, List

import httpx
from postgrest.exceptions import APIError

from stock_sync.core.config import settings
from stock_sync.core.exceptions import CatalogStoreError
from stock_sync.clients.supabase_client import SupabaseClient

logger = logging.getLogger("base_store")


class BaseStore:
    """Base class for all Supabase stores providing shared table operations."""

    def __init__(self, supabase_client: SupabaseClient | None = None) -> None:
        self._supabase_client = supabase_client or SupabaseClient(settings)

    @property
    def _client(self):
        """Get the Supabase client instance."""
        return self._supabase_client.client

    def _upsert(
        self, table: str, rows: List[Dict[str, Any]], on_conflict: str | None = None
    ) -> None:
        """Upsert rows into a table (insert or update on conflict)."""
        if not rows:
            return
        try:
            if on_conflict:
                self._client.table(table).upsert(rows, on_conflict=on_conflict).execute()
            else:
                self._client.table(table).upsert(rows).execute()
        except (APIError, httpx.HTTPError) as e:
            logger.info("supabase error table=%s detail=%s", table, str(e))
            raise CatalogStoreError(f"Supabase upsert into {table} failed: {e}") from e

    def _select(
        self,
        table: str,
        columns: str = "*",
        filters: Dict[str, Any] | None = None,
        limit: int | None = None,
    ) -> List[Dict[str, Any]]:
        """Select rows from a table with optional equality filters."""
        try:
            query = self._client.table(table).select(columns)
            if filters:
                for key, value in filters.items():
                    query = query.eq(key, value)
            if limit is not None:
                query = query.limit(limit)
            response = query.execute()
            return response.data or []
        except (APIError, httpx.HTTPError) as e:
            logger.info("supabase error table=%s detail=%s", table, str(e))
            raise CatalogStoreError(f"Supabase select from {table} failed: {e}") from e
