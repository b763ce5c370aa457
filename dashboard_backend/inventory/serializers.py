# inventory/serializers.py

from __future__ import annotations

from rest_framework import serializers

from inventory.models import StockAdjustment, StockLevel


class StockLevelSerializer(serializers.ModelSerializer):
    variation_name = serializers.CharField(source="variation.name", read_only=True)
    variation_sku = serializers.CharField(source="variation.sku", read_only=True)
    item_name = serializers.CharField(source="variation.item.name", read_only=True)
    location_name = serializers.CharField(source="location.name", read_only=True)

    class Meta:
        model = StockLevel
        fields = [
            "id",
            "variation",
            "variation_name",
            "variation_sku",
            "item_name",
            "location",
            "location_name",
            "stock",
            "purchase_cost",
            "updated_at",
        ]
        read_only_fields = fields


class StockAdjustmentSerializer(serializers.ModelSerializer):
    adjusted_by_email = serializers.EmailField(source="adjusted_by.email", read_only=True, default=None)

    class Meta:
        model = StockAdjustment
        fields = [
            "id",
            "item",
            "variation",
            "location",
            "change_amount",
            "reason",
            "stock_before",
            "stock_after",
            "adjusted_by",
            "adjusted_by_email",
            "created_at",
        ]
        read_only_fields = fields


class StockAdjustCommandSerializer(serializers.Serializer):
    """
    Command serializer for manual stock adjustments.

    This serializer does NOT touch the database.
    """

    variation_id = serializers.UUIDField()
    location_id = serializers.IntegerField(min_value=1)
    change_amount = serializers.IntegerField()
    reason = serializers.CharField(max_length=255)
    purchase_cost = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )

    def validate_change_amount(self, value):
        if value == 0:
            raise serializers.ValidationError("change_amount cannot be 0")
        return value
