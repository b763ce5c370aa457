"""
PATH: exchanges/migrations/0001_initial.py

MIGRATION: CREATE InventoryExchange
"""

from __future__ import annotations

import uuid

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("inventory", "0001_initial"),
        ("locations", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="InventoryExchange",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("Pending", "Pending"),
                            ("Approved", "Approved"),
                            ("Rejected", "Rejected"),
                        ],
                        db_index=True,
                        default="Pending",
                        max_length=16,
                    ),
                ),
                ("reason", models.TextField(blank=True, default="")),
                (
                    "exchanged_at",
                    models.DateTimeField(db_index=True, default=django.utils.timezone.now),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="exchanges",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "processed_by",
                    models.ForeignKey(
                        help_text="Staff member who took the exchange in",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="processed_exchanges",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "returned_item",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="returned_in_exchanges",
                        to="inventory.inventoryitem",
                    ),
                ),
                (
                    "returned_variation",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="returned_in_exchanges",
                        to="inventory.inventoryvariation",
                    ),
                ),
                (
                    "new_item",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="issued_in_exchanges",
                        to="inventory.inventoryitem",
                    ),
                ),
                (
                    "new_variation",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="issued_in_exchanges",
                        to="inventory.inventoryvariation",
                    ),
                ),
                (
                    "location",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="exchanges",
                        to="locations.storelocation",
                    ),
                ),
            ],
            options={
                "ordering": ["-exchanged_at"],
                "indexes": [
                    models.Index(
                        fields=["status", "exchanged_at"],
                        name="exchange_status_date_idx",
                    ),
                ],
            },
        ),
    ]
