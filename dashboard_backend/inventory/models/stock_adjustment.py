# inventory/models/stock_adjustment.py

"""
STOCK ADJUSTMENT LEDGER

Immutable audit entry, one per stock mutation.

GUARANTEES:
- Append-only (no updates, no deletes)
- change_amount is signed and never zero
- stock_after == stock_before + change_amount
- reason carries the business reference (e.g. the exchange id), which is
  what reconciliation jobs parse
"""

import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from locations.models import StoreLocation

from .item import InventoryItem, InventoryVariation


class StockAdjustment(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    item = models.ForeignKey(
        InventoryItem, on_delete=models.CASCADE, related_name="stock_adjustments"
    )
    variation = models.ForeignKey(
        InventoryVariation, on_delete=models.CASCADE, related_name="stock_adjustments"
    )
    location = models.ForeignKey(
        StoreLocation, on_delete=models.PROTECT, related_name="stock_adjustments"
    )

    change_amount = models.IntegerField()
    reason = models.CharField(max_length=255)

    stock_before = models.IntegerField()
    stock_after = models.IntegerField()

    adjusted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="stock_adjustments",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["created_at"], name="inv_adj_created_idx"),
            models.Index(fields=["variation", "location", "created_at"], name="inv_adj_var_loc_created_idx"),
        ]

    def clean(self):
        if self.change_amount == 0:
            raise ValidationError("change_amount cannot be 0")

        if self.stock_after != self.stock_before + self.change_amount:
            raise ValidationError("stock_after must equal stock_before + change_amount")

        if self.variation_id and self.item_id:
            item_id = (
                InventoryVariation.objects.filter(id=self.variation_id)
                .values_list("item_id", flat=True)
                .first()
            )
            if item_id is not None and item_id != self.item_id:
                raise ValidationError("Variation does not belong to item")

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("StockAdjustment records are immutable")
        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("StockAdjustment records are immutable and cannot be deleted")

    def __str__(self):
        return f"{self.variation_id} @ {self.location_id} | {self.change_amount:+d} | {self.reason}"
