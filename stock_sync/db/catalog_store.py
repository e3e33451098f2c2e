"""
Catalog store — SKU resolution and stock quantity writes.

SKUs are matched against the variant reference table first, then the base
product reference table. Both are plain parameterized equality lookups;
the first hit wins. Quantities are written to the default stock context
(no combination).
Version: 1.0.0
"""
import logging
from typing import Optional

from stock_sync.clients.supabase_client import SupabaseClient
from stock_sync.core.config import Settings
from stock_sync.core.constants.sync import DEFAULT_PRODUCT_ATTRIBUTE_ID
from stock_sync.db.base_store import BaseStore

logger = logging.getLogger("catalog_store")


class CatalogStore(BaseStore):
    """Local product catalog keyed by SKU reference."""

    def __init__(self, settings: Settings, supabase_client: SupabaseClient | None = None) -> None:
        super().__init__(supabase_client)
        self._variant_table = settings.catalog_variant_table
        self._product_table = settings.catalog_product_table
        self._stock_table = settings.catalog_stock_table

    def _find_in(self, table: str, sku: str) -> Optional[int]:
        rows = self._select(table, "id_product", filters={"reference": sku}, limit=1)
        if not rows or rows[0].get("id_product") is None:
            return None
        return int(rows[0]["id_product"])

    def find_product_id_by_sku(self, sku: str) -> Optional[int]:
        """Resolve a SKU to a product id, variants first. None if no match."""
        if not sku:
            return None
        product_id = self._find_in(self._variant_table, sku)
        if product_id is None:
            product_id = self._find_in(self._product_table, sku)
        return product_id

    def set_quantity(self, product_id: int, quantity: int) -> None:
        """Write the available quantity for a product's default stock row."""
        self._upsert(
            self._stock_table,
            [{
                "id_product": int(product_id),
                "id_product_attribute": DEFAULT_PRODUCT_ATTRIBUTE_ID,
                "quantity": int(quantity),
            }],
            on_conflict="id_product,id_product_attribute",
        )
        logger.debug("stock set product_id=%s quantity=%s", product_id, quantity)
