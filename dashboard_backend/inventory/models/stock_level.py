# inventory/models/stock_level.py

"""
STOCK LEVEL (QUANTITY ON HAND)

One row per (variation, location).

- stock is mutated ONLY via inventory.services.stock_adjustments
- every mutation appends a StockAdjustment audit row
- a missing row means stock 0; the service creates it on first adjustment
"""

from django.db import models

from locations.models import StoreLocation

from .item import InventoryVariation


class StockLevel(models.Model):
    variation = models.ForeignKey(
        InventoryVariation,
        on_delete=models.CASCADE,
        related_name="stock_levels",
    )
    location = models.ForeignKey(
        StoreLocation,
        on_delete=models.PROTECT,
        related_name="stock_levels",
    )

    # Signed: negative stock is only reachable when
    # INVENTORY["ALLOW_NEGATIVE_STOCK"] is enabled.
    stock = models.IntegerField(default=0, help_text="Quantity on hand (service-managed only)")

    purchase_cost = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        default=None,
    )

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["location__name", "variation__sku"]
        constraints = [
            models.UniqueConstraint(
                fields=["variation", "location"],
                name="unique_stock_level_per_variation_location",
            ),
        ]

    def __str__(self):
        return f"{self.location} | {self.variation.sku} | {self.stock}"
