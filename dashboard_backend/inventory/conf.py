# inventory/conf.py

"""
Typed view of settings.INVENTORY.

Services take an optional InventorySettings argument; when omitted they read
the project settings once through get_inventory_settings().
"""

from __future__ import annotations

from dataclasses import dataclass

from django.conf import settings


@dataclass(frozen=True)
class InventorySettings:
    allow_negative_stock: bool = False


def get_inventory_settings() -> InventorySettings:
    raw = getattr(settings, "INVENTORY", None) or {}
    return InventorySettings(
        allow_negative_stock=bool(raw.get("ALLOW_NEGATIVE_STOCK", False)),
    )
