# exchanges/tests/helpers.py

from __future__ import annotations

from django.contrib.auth import get_user_model

from exchanges.models import InventoryExchange
from inventory.models import InventoryItem, InventoryVariation
from locations.models import StoreLocation

User = get_user_model()


class RecordingStockLedger:
    """
    In-memory StockLedger that records every call.

    fail_on holds 1-based call numbers that raise instead of succeeding.
    """

    def __init__(self, fail_on=()):
        self.fail_on = set(fail_on)
        self.calls = []

    def adjust(self, variation_id, location_id, delta, reason):
        self.calls.append((variation_id, location_id, delta, reason))
        if len(self.calls) in self.fail_on:
            raise RuntimeError("stock service unavailable")


class ExchangeFixturesMixin:
    def build_fixtures(self):
        self.location = StoreLocation.objects.create(name="Main Store")
        self.customer = User.objects.create_user(
            email="customer@example.com", first_name="Jane", last_name="Doe"
        )
        self.sales = User.objects.create_user(email="sales@example.com", role=User.ROLE_SALES)
        self.manager = User.objects.create_user(email="manager@example.com", role=User.ROLE_MANAGER)
        self.admin = User.objects.create_user(email="admin@example.com", role=User.ROLE_ADMIN)

        self.phone = InventoryItem.objects.create(name="Phone X")
        self.v1 = InventoryVariation.objects.create(
            item=self.phone, name="Phone X 128GB Black", sku="PX-128-BLK"
        )
        self.v2 = InventoryVariation.objects.create(
            item=self.phone, name="Phone X 128GB Blue", sku="PX-128-BLU"
        )

        self.charger = InventoryItem.objects.create(name="Charger")
        self.charger_20w = InventoryVariation.objects.create(
            item=self.charger, name="USB-C 20W", sku="CH-20W"
        )

    def make_exchange(self, **overrides) -> InventoryExchange:
        values = {
            "customer": self.customer,
            "processed_by": self.sales,
            "returned_item": self.phone,
            "returned_variation": self.v1,
            "new_item": self.phone,
            "new_variation": self.v2,
            "location": self.location,
            "reason": "Wrong colour",
        }
        values.update(overrides)
        return InventoryExchange.objects.create(**values)
