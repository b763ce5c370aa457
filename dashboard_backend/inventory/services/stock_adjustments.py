# inventory/services/stock_adjustments.py

"""
STOCK ADJUSTMENTS SERVICE

Purpose:
- Apply a signed delta to the quantity on hand of a (variation, location).
- Enforce auditability via immutable StockAdjustment rows.
- Keep StockLevel.stock service-managed only.

Rules:
- change_amount must be a non-zero integer
- a missing StockLevel row counts as stock 0 and is created on first use
- the result cannot go below zero unless INVENTORY["ALLOW_NEGATIVE_STOCK"]
- no deduplication: calling twice adjusts twice
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import transaction

from inventory.conf import InventorySettings, get_inventory_settings
from inventory.models import InventoryVariation, StockAdjustment, StockLevel
from locations.models import StoreLocation

logger = logging.getLogger(__name__)


class StockAdjustmentError(Exception):
    """Domain error for adjustment failures."""


@dataclass(frozen=True)
class AdjustmentResult:
    stock_level: StockLevel
    adjustment: StockAdjustment
    change_amount: int


def _to_int_delta(value) -> int:
    if value is None or value == "":
        raise StockAdjustmentError("change_amount is required")

    if isinstance(value, bool):
        # bool is an int subclass in Python
        raise StockAdjustmentError("change_amount must be an integer")

    try:
        delta = int(value)
    except (TypeError, ValueError):
        raise StockAdjustmentError("change_amount must be an integer")

    if delta != value and not isinstance(value, str):
        # reject 1.5 silently becoming 1
        raise StockAdjustmentError("change_amount must be an integer")

    if delta == 0:
        raise StockAdjustmentError("change_amount cannot be 0")

    return delta


def _get_variation(variation_id) -> InventoryVariation:
    try:
        return InventoryVariation.objects.select_related("item").get(pk=variation_id)
    except (InventoryVariation.DoesNotExist, ValidationError, ValueError):
        raise StockAdjustmentError(f"Variation with ID {variation_id} not found.")


def _get_location(location_id) -> StoreLocation:
    try:
        return StoreLocation.objects.get(pk=location_id)
    except (StoreLocation.DoesNotExist, ValidationError, ValueError, TypeError):
        raise StockAdjustmentError(f"Location with ID {location_id} not found.")


@transaction.atomic
def adjust_stock_level(
    *,
    variation_id,
    location_id,
    change_amount,
    reason: str,
    user=None,
    purchase_cost: Decimal | None = None,
    config: InventorySettings | None = None,
) -> AdjustmentResult:
    """
    Adjust the stock of one variation at one location with an audit row.

    change_amount:
      +N -> adds to stock on hand
      -N -> removes from stock on hand
    """
    delta = _to_int_delta(change_amount)

    reason = (reason or "").strip()
    if not reason:
        raise StockAdjustmentError("reason is required")

    config = config or get_inventory_settings()

    variation = _get_variation(variation_id)
    if not variation.item_id:
        raise StockAdjustmentError(f"Variation {variation.pk} is not linked to an item.")

    location = _get_location(location_id)

    # lock row for concurrency safety
    level, _ = StockLevel.objects.select_for_update().get_or_create(
        variation=variation,
        location=location,
        defaults={"stock": 0},
    )

    stock_before = int(level.stock or 0)
    stock_after = stock_before + delta

    if stock_after < 0 and not config.allow_negative_stock:
        raise StockAdjustmentError(
            f"Stock level for {variation.name} at {location.name} cannot be negative. "
            f"Current: {stock_before}, requested change: {delta}"
        )

    level.stock = stock_after
    update_fields = ["stock", "updated_at"]
    if purchase_cost is not None:
        level.purchase_cost = purchase_cost
        update_fields.append("purchase_cost")
    level.save(update_fields=update_fields)

    try:
        adjustment = StockAdjustment.objects.create(
            item_id=variation.item_id,
            variation=variation,
            location=location,
            change_amount=delta,
            reason=reason[:255],
            stock_before=stock_before,
            stock_after=stock_after,
            adjusted_by=user,
        )
    except ValidationError as exc:
        raise StockAdjustmentError(str(exc)) from exc

    logger.info(
        "Stock adjusted",
        extra={
            "variation_id": str(variation.pk),
            "location_id": location.pk,
            "change_amount": delta,
            "stock_after": stock_after,
        },
    )

    return AdjustmentResult(
        stock_level=level,
        adjustment=adjustment,
        change_amount=delta,
    )


def get_stock(*, variation_id, location_id) -> int:
    """Quantity on hand for a (variation, location); 0 when never stocked."""
    return int(
        StockLevel.objects.filter(variation_id=variation_id, location_id=location_id)
        .values_list("stock", flat=True)
        .first()
        or 0
    )
