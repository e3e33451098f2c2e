"""
Stock sync service — applies KeyCRM stock to the local catalog.

Runs the fetch, then walks the records in the order received:
resolve SKU → compute available quantity → write. A fetch failure ends
the run before any write; per-record misses and write errors only affect
the counters.
Version: 1.0.0
"""
import logging
from datetime import datetime

from stock_sync.core.constants.sync import CONFIG_API_KEY
from stock_sync.core.exceptions import CatalogStoreError, FetchError, UnresolvedSkuError
from stock_sync.db.catalog_store import CatalogStore
from stock_sync.db.config_store import ConfigStore
from stock_sync.schemas.stock import StockRecord, SyncResult
from stock_sync.services.stock_fetch_service import StockFetchService

logger = logging.getLogger("stock_sync")


class StockSyncService:
    def __init__(
        self,
        fetcher: StockFetchService,
        catalog: CatalogStore,
        config: ConfigStore,
        clamp_negative: bool = False,
    ) -> None:
        self._fetcher = fetcher
        self._catalog = catalog
        self._config = config
        self._clamp_negative = clamp_negative

    def _available(self, record: StockRecord) -> int:
        available = record.available
        if self._clamp_negative and available < 0:
            return 0
        return available

    def _apply(self, record: StockRecord) -> None:
        product_id = self._catalog.find_product_id_by_sku(record.sku)
        if product_id is None:
            raise UnresolvedSkuError(record.sku)
        self._catalog.set_quantity(product_id, self._available(record))

    def run(self) -> SyncResult:
        """
        Run one synchronization.

        Raises:
            FetchError: the KeyCRM fetch failed; nothing was written
        """
        api_key = self._config.get(CONFIG_API_KEY)

        try:
            records = self._fetcher.fetch_all_stock(api_key)
        except FetchError as e:
            logger.error(f"[{e.kind.value}] Stock fetch failed: {e}")
            raise

        updated = skipped = failed = 0

        for record in records:
            if not record.sku or record.quantity is None:
                continue
            try:
                self._apply(record)
                updated += 1
            except UnresolvedSkuError as e:
                logger.debug(str(e))
                skipped += 1
            except CatalogStoreError as e:
                logger.error(f"Error updating SKU {record.sku}: {e}")
                failed += 1

        result = SyncResult(
            updated_count=updated,
            fetched_count=len(records),
            skipped_count=skipped,
            failed_count=failed,
            timestamp=datetime.now(),
        )
        logger.info(
            f"Stock sync complete: {updated} updated, {skipped} unmatched, "
            f"{failed} failed, {len(records)} fetched"
        )
        return result
