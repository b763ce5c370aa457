# inventory/tests/test_stock_adjustments.py

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase, override_settings

from inventory.models import InventoryItem, InventoryVariation, StockAdjustment, StockLevel
from inventory.services import DatabaseStockLedger, StockAdjustmentError, adjust_stock_level, get_stock
from locations.models import StoreLocation

User = get_user_model()


class StockAdjustmentServiceTests(TestCase):
    """
    GUARANTEES:
    - every successful call writes exactly one audit row
    - a missing StockLevel counts as 0
    - stock cannot go negative unless configured
    - failed calls leave stock and the ledger untouched
    """

    def setUp(self):
        self.user = User.objects.create_user(
            email="manager@example.com", password="pass1234", role=User.ROLE_MANAGER
        )
        self.location = StoreLocation.objects.create(name="Main Store")
        self.item = InventoryItem.objects.create(name="Phone X")
        self.variation = InventoryVariation.objects.create(
            item=self.item, name="Phone X 128GB Black", sku="PX-128-BLK"
        )

    def test_first_adjustment_creates_stock_level(self):
        result = adjust_stock_level(
            variation_id=self.variation.id,
            location_id=self.location.id,
            change_amount=5,
            reason="Initial count",
            user=self.user,
        )

        self.assertEqual(result.stock_level.stock, 5)
        self.assertEqual(result.adjustment.stock_before, 0)
        self.assertEqual(result.adjustment.stock_after, 5)
        self.assertEqual(result.adjustment.adjusted_by, self.user)
        self.assertEqual(get_stock(variation_id=self.variation.id, location_id=self.location.id), 5)

    def test_adjustments_are_not_deduplicated(self):
        for _ in range(2):
            adjust_stock_level(
                variation_id=self.variation.id,
                location_id=self.location.id,
                change_amount=3,
                reason="Same reason",
            )

        self.assertEqual(get_stock(variation_id=self.variation.id, location_id=self.location.id), 6)
        self.assertEqual(StockAdjustment.objects.filter(reason="Same reason").count(), 2)

    def test_negative_result_is_rejected(self):
        with self.assertRaises(StockAdjustmentError):
            adjust_stock_level(
                variation_id=self.variation.id,
                location_id=self.location.id,
                change_amount=-1,
                reason="Sold",
            )

        self.assertFalse(StockAdjustment.objects.exists())
        self.assertEqual(get_stock(variation_id=self.variation.id, location_id=self.location.id), 0)

    @override_settings(INVENTORY={"ALLOW_NEGATIVE_STOCK": True})
    def test_negative_result_allowed_when_configured(self):
        adjust_stock_level(
            variation_id=self.variation.id,
            location_id=self.location.id,
            change_amount=-2,
            reason="Backorder",
        )
        self.assertEqual(get_stock(variation_id=self.variation.id, location_id=self.location.id), -2)

    def test_zero_change_is_rejected(self):
        with self.assertRaises(StockAdjustmentError):
            adjust_stock_level(
                variation_id=self.variation.id,
                location_id=self.location.id,
                change_amount=0,
                reason="Nothing",
            )

    def test_fractional_change_is_rejected(self):
        with self.assertRaises(StockAdjustmentError):
            adjust_stock_level(
                variation_id=self.variation.id,
                location_id=self.location.id,
                change_amount=1.5,
                reason="Half a phone",
            )

    def test_blank_reason_is_rejected(self):
        with self.assertRaises(StockAdjustmentError):
            adjust_stock_level(
                variation_id=self.variation.id,
                location_id=self.location.id,
                change_amount=1,
                reason="   ",
            )

    def test_unknown_variation_and_location(self):
        with self.assertRaises(StockAdjustmentError):
            adjust_stock_level(
                variation_id="00000000-0000-0000-0000-000000000000",
                location_id=self.location.id,
                change_amount=1,
                reason="Ghost",
            )
        with self.assertRaises(StockAdjustmentError):
            adjust_stock_level(
                variation_id=self.variation.id,
                location_id=999999,
                change_amount=1,
                reason="Ghost",
            )
        self.assertFalse(StockLevel.objects.exists())

    def test_adjustment_rows_are_immutable(self):
        result = adjust_stock_level(
            variation_id=self.variation.id,
            location_id=self.location.id,
            change_amount=1,
            reason="Initial count",
        )
        adjustment = result.adjustment

        adjustment.reason = "Rewritten"
        with self.assertRaises(ValidationError):
            adjustment.save()
        with self.assertRaises(ValidationError):
            adjustment.delete()


class DatabaseStockLedgerTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email="tech@example.com", role=User.ROLE_TECHNICIAN)
        self.location = StoreLocation.objects.create(name="Kiosk")
        item = InventoryItem.objects.create(name="Charger")
        self.variation = InventoryVariation.objects.create(item=item, name="USB-C 20W", sku="CH-20W")

    def test_adjust_applies_delta_and_records_user(self):
        ledger = DatabaseStockLedger(user=self.user)

        ledger.adjust(self.variation.id, self.location.id, 4, "Delivery")
        ledger.adjust(self.variation.id, self.location.id, -1, "Sold")

        self.assertEqual(get_stock(variation_id=self.variation.id, location_id=self.location.id), 3)
        self.assertCountEqual(
            StockAdjustment.objects.values_list("change_amount", flat=True),
            [4, -1],
        )
        self.assertTrue(all(a.adjusted_by == self.user for a in StockAdjustment.objects.all()))

    def test_adjust_raises_on_failure(self):
        ledger = DatabaseStockLedger()
        with self.assertRaises(StockAdjustmentError):
            ledger.adjust(self.variation.id, self.location.id, -1, "Sold")
