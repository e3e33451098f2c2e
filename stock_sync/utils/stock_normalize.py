import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from stock_sync.schemas.stock import StockRecord


logger = logging.getLogger("stock_normalize")


def _to_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (ValueError, TypeError, OverflowError):
        pass
    # "3.0", "7.9", 1e3: go through Decimal so large integers keep their digits
    try:
        return int(Decimal(str(value)))
    except (InvalidOperation, ValueError, OverflowError):
        return None


def _to_non_negative(value: Any) -> int:
    val = _to_int(value)
    if val is None or val < 0:
        return 0
    return val


def _to_decimal(value: Any) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


def normalize_stock_item(item: Any) -> Optional[StockRecord]:
    """
    Turn one raw KeyCRM ``data`` item into a StockRecord.

    Returns None when ``sku`` or ``quantity`` is missing. The SKU is kept
    as sent so it matches catalog references exactly. ``reserve`` defaults
    to 0; negative or non-numeric quantities are coerced to 0.
    """
    if not isinstance(item, dict):
        return None

    raw_sku = item.get("sku")
    raw_quantity = item.get("quantity")
    if raw_sku is None or raw_quantity is None:
        return None

    sku = str(raw_sku)
    if not sku.strip():
        return None

    if _to_int(raw_quantity) is None:
        logger.info("non-numeric quantity coerced to 0 sku=%s quantity=%r", sku, raw_quantity)

    return StockRecord(
        sku=sku,
        price=_to_decimal(item.get("price")),
        quantity=_to_non_negative(raw_quantity),
        reserved=_to_non_negative(item.get("reserve")),
    )

