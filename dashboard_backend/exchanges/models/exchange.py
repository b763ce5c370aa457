# exchanges/models/exchange.py

import uuid

from django.conf import settings
from django.db import models
from django.utils import timezone

from inventory.models import InventoryItem, InventoryVariation
from locations.models import StoreLocation

User = settings.AUTH_USER_MODEL


class InventoryExchange(models.Model):
    """
    A customer hands back one item and receives another.

    GUARANTEES:
    - status moves Pending -> Approved or Pending -> Rejected, once
    - status changes go through exchanges.services.exchange_transitions only
    - stock moves on approval only, and only when both variations are set
      and differ (-1 on new_variation, +1 on returned_variation at location)
    """

    STATUS_PENDING = "Pending"
    STATUS_APPROVED = "Approved"
    STATUS_REJECTED = "Rejected"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_APPROVED, "Approved"),
        (STATUS_REJECTED, "Rejected"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    status = models.CharField(
        max_length=16,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING,
        db_index=True,
    )
    reason = models.TextField(blank=True, default="")

    customer = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name="exchanges",
    )
    processed_by = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name="processed_exchanges",
        help_text="Staff member who took the exchange in",
    )

    returned_item = models.ForeignKey(
        InventoryItem,
        on_delete=models.PROTECT,
        related_name="returned_in_exchanges",
    )
    returned_variation = models.ForeignKey(
        InventoryVariation,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="returned_in_exchanges",
    )
    new_item = models.ForeignKey(
        InventoryItem,
        on_delete=models.PROTECT,
        related_name="issued_in_exchanges",
    )
    new_variation = models.ForeignKey(
        InventoryVariation,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="issued_in_exchanges",
    )

    location = models.ForeignKey(
        StoreLocation,
        on_delete=models.PROTECT,
        related_name="exchanges",
    )

    exchanged_at = models.DateTimeField(default=timezone.now, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-exchanged_at"]
        indexes = [
            models.Index(fields=["status", "exchanged_at"], name="exchange_status_date_idx"),
        ]

    @property
    def is_pending(self) -> bool:
        return self.status == self.STATUS_PENDING

    def __str__(self):
        return f"Exchange {self.id} ({self.status})"
