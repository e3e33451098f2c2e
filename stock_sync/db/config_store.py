"""
Config store — key/value provider for credentials and the cron key.

Values saved in the Supabase ``sync_config`` table take precedence; the
environment settings are the fallback.
Version: 1.0.0
"""
import logging
import secrets
from typing import Dict, Optional

from stock_sync.clients.supabase_client import SupabaseClient
from stock_sync.core.config import Settings
from stock_sync.core.constants.sync import CONFIG_API_KEY, CONFIG_CRON_KEY
from stock_sync.core.exceptions import CatalogStoreError
from stock_sync.db.base_store import BaseStore

logger = logging.getLogger("config_store")


class ConfigStore(BaseStore):
    """get(key) -> str / set(key, value) -> bool over the sync_config table."""

    def __init__(self, settings: Settings, supabase_client: SupabaseClient | None = None) -> None:
        super().__init__(supabase_client)
        self._table = settings.sync_config_table
        self._defaults: Dict[str, Optional[str]] = {
            CONFIG_API_KEY: settings.keycrm_api_key,
            CONFIG_CRON_KEY: settings.sync_cron_key,
        }

    def get(self, key: str) -> str:
        """Return the stored value, the environment default, or ""."""
        rows = self._select(self._table, "value", filters={"key": key}, limit=1)
        if rows and rows[0].get("value"):
            return str(rows[0]["value"])
        return self._defaults.get(key) or ""

    def set(self, key: str, value: str) -> bool:
        """Store a value. Returns False if the write failed."""
        try:
            self._upsert(self._table, [{"key": key, "value": value}], on_conflict="key")
        except CatalogStoreError as e:
            logger.error("config write failed key=%s error=%s", key, e)
            return False
        return True

    def ensure_cron_key(self) -> str:
        """Return the cron key, generating and saving one if none is set."""
        cron_key = self.get(CONFIG_CRON_KEY)
        if cron_key:
            return cron_key
        cron_key = secrets.token_hex(16)
        if self.set(CONFIG_CRON_KEY, cron_key):
            logger.info("generated new sync cron key")
        return cron_key
