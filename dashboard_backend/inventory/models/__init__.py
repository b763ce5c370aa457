"""
PATH: inventory/models/__init__.py

Inventory models export surface.
"""

from .item import InventoryItem, InventoryVariation
from .stock_adjustment import StockAdjustment
from .stock_level import StockLevel

__all__ = [
    "InventoryItem",
    "InventoryVariation",
    "StockLevel",
    "StockAdjustment",
]
