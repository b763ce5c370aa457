# inventory/services/stock_ledger.py

"""
STOCK LEDGER ADAPTER

The narrow interface other domains use to move stock:

    adjust(variation_id, location_id, delta, reason) -> None   (raises on failure)

Callers only pass signed deltas; they never read the level first. The
ledger is shared by every flow that moves stock, so callers must not assume
they are its only writer.
"""

from __future__ import annotations

from typing import Protocol

from inventory.conf import InventorySettings
from inventory.services.stock_adjustments import adjust_stock_level


class StockLedger(Protocol):
    def adjust(self, variation_id, location_id, delta: int, reason: str) -> None:
        ...


class DatabaseStockLedger:
    """StockLedger backed by StockLevel rows and the StockAdjustment audit table."""

    # writes run in the caller's transaction and roll back with it
    joins_transaction = True

    def __init__(self, *, user=None, config: InventorySettings | None = None):
        self.user = user
        self.config = config

    def adjust(self, variation_id, location_id, delta: int, reason: str) -> None:
        adjust_stock_level(
            variation_id=variation_id,
            location_id=location_id,
            change_amount=delta,
            reason=reason,
            user=self.user,
            config=self.config,
        )
