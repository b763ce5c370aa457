"""
PATH: inventory/services/__init__.py

Inventory services export surface.
"""

from .stock_adjustments import AdjustmentResult, StockAdjustmentError, adjust_stock_level, get_stock
from .stock_ledger import DatabaseStockLedger, StockLedger

__all__ = [
    "AdjustmentResult",
    "StockAdjustmentError",
    "adjust_stock_level",
    "get_stock",
    "DatabaseStockLedger",
    "StockLedger",
]
