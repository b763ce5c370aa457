# inventory/models/item.py

import uuid

from django.core.exceptions import ValidationError
from django.db import models


class InventoryItem(models.Model):
    """
    A sellable product (e.g. "iPhone 13 Screen").

    STOCK MODEL (IMPORTANT):
    - Items do NOT store stock.
    - Stock lives on StockLevel, keyed by (variation, location).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255, db_index=True)
    sku = models.CharField(max_length=128, unique=True, null=True, blank=True)
    description = models.TextField(blank=True)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class InventoryVariation(models.Model):
    """
    A concrete stock-keeping unit of an item (colour, capacity, grade ...).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    item = models.ForeignKey(
        InventoryItem,
        on_delete=models.CASCADE,
        related_name="variations",
    )

    name = models.CharField(max_length=255)
    sku = models.CharField(max_length=128, unique=True, db_index=True)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["item__name", "name"]

    def clean(self):
        if not (self.sku or "").strip():
            raise ValidationError({"sku": "sku is required"})

    def __str__(self):
        return f"{self.item.name} / {self.name} ({self.sku})"
