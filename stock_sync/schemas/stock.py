"""
Stock schemas — normalized KeyCRM stock records and sync run results.

Stock sync schemas.
Version: 1.0.0
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class StockRecord(BaseModel):
    """One KeyCRM offer after normalization. ``reserved`` is KeyCRM's ``reserve``."""
    sku: str = Field(..., min_length=1)
    price: Optional[Decimal] = None
    quantity: int = Field(..., ge=0)
    reserved: int = Field(default=0, ge=0)

    @property
    def available(self) -> int:
        # Not clamped: reserved can exceed on-hand quantity
        return self.quantity - self.reserved


class SyncResult(BaseModel):
    """Summary of one synchronization run. Reported, never persisted."""
    updated_count: int = 0
    fetched_count: int = 0
    skipped_count: int = 0
    failed_count: int = 0
    timestamp: datetime
