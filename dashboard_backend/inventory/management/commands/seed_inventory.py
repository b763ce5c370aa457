# inventory/management/commands/seed_inventory.py

from __future__ import annotations

from django.core.management.base import BaseCommand
from django.db import transaction

from inventory.models import InventoryItem, InventoryVariation
from inventory.services import adjust_stock_level, get_stock
from locations.models import StoreLocation

LOCATIONS = ["Main Store", "Mall Kiosk"]

ITEMS = [
    ("Phone X", [("PX-128-BLK", "128GB Black"), ("PX-256-BLU", "256GB Blue")]),
    ("Tablet S", [("TS-64-GRY", "64GB Grey")]),
    ("Charger", [("CH-20W", "USB-C 20W"), ("CH-65W", "USB-C 65W")]),
]


class Command(BaseCommand):
    help = "Seed store locations, items, variations and opening stock"

    def add_arguments(self, parser):
        parser.add_argument(
            "--quantity",
            type=int,
            default=10,
            help="Opening stock per variation per location (default: 10)",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        quantity = int(options.get("quantity") or 0)
        self.stdout.write(self.style.WARNING("Seeding inventory..."))

        locations = [StoreLocation.objects.get_or_create(name=name)[0] for name in LOCATIONS]

        variations = []
        for item_name, variation_specs in ITEMS:
            item, _ = InventoryItem.objects.get_or_create(name=item_name)
            for sku, name in variation_specs:
                variation, _ = InventoryVariation.objects.get_or_create(
                    sku=sku, defaults={"item": item, "name": f"{item_name} {name}"}
                )
                variations.append(variation)

        # opening stock only tops up to --quantity so re-runs stay idempotent
        for location in locations:
            for variation in variations:
                missing = quantity - get_stock(variation_id=variation.id, location_id=location.id)
                if missing > 0:
                    adjust_stock_level(
                        variation_id=variation.id,
                        location_id=location.id,
                        change_amount=missing,
                        reason="Opening stock (seed)",
                    )

        self.stdout.write(
            self.style.SUCCESS(
                f"Seeded {len(locations)} locations and {len(variations)} variations."
            )
        )
