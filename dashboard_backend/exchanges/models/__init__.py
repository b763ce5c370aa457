from .exchange import InventoryExchange

__all__ = ["InventoryExchange"]
