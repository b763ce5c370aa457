# exchanges/serializers.py

from __future__ import annotations

from rest_framework import serializers

from exchanges.models import InventoryExchange
from exchanges.services.exchange_lifecycle import VALID_STATUSES


class InventoryExchangeSerializer(serializers.ModelSerializer):
    """Read representation with display names for the dashboard table."""

    customer_name = serializers.SerializerMethodField()
    processed_by_name = serializers.SerializerMethodField()
    returned_item_name = serializers.CharField(source="returned_item.name", read_only=True)
    returned_variation_name = serializers.CharField(
        source="returned_variation.name", read_only=True, default=None
    )
    new_item_name = serializers.CharField(source="new_item.name", read_only=True)
    new_variation_name = serializers.CharField(source="new_variation.name", read_only=True, default=None)
    location_name = serializers.CharField(source="location.name", read_only=True)

    class Meta:
        model = InventoryExchange
        fields = [
            "id",
            "status",
            "reason",
            "customer",
            "customer_name",
            "returned_item",
            "returned_item_name",
            "returned_variation",
            "returned_variation_name",
            "new_item",
            "new_item_name",
            "new_variation",
            "new_variation_name",
            "processed_by",
            "processed_by_name",
            "location",
            "location_name",
            "exchanged_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_customer_name(self, obj) -> str:
        return obj.customer.full_name or obj.customer.email

    def get_processed_by_name(self, obj) -> str:
        return obj.processed_by.full_name or obj.processed_by.email


class ExchangeCreateSerializer(serializers.Serializer):
    """
    Command serializer for creation.

    Existence checks live in create_exchange() so the API and the
    service report the same "<entity> not found" errors.
    """

    customer = serializers.UUIDField()
    returned_item = serializers.UUIDField()
    returned_variation = serializers.UUIDField(required=False, allow_null=True)
    new_item = serializers.UUIDField()
    new_variation = serializers.UUIDField(required=False, allow_null=True)
    processed_by = serializers.UUIDField(required=False)
    location = serializers.IntegerField(min_value=1)
    reason = serializers.CharField(required=False, allow_blank=True, default="")
    exchanged_at = serializers.DateTimeField(required=False, allow_null=True)


class ExchangeUpdateSerializer(serializers.Serializer):
    """PATCH body; only supplied keys are forwarded to update_exchange()."""

    # plain CharField: unknown values are reported as INVALID_STATUS by the service
    status = serializers.CharField(required=False)
    customer = serializers.UUIDField(required=False)
    returned_item = serializers.UUIDField(required=False)
    returned_variation = serializers.UUIDField(required=False, allow_null=True)
    new_item = serializers.UUIDField(required=False)
    new_variation = serializers.UUIDField(required=False, allow_null=True)
    processed_by = serializers.UUIDField(required=False)
    location = serializers.IntegerField(required=False, min_value=1)
    reason = serializers.CharField(required=False, allow_blank=True)
    exchanged_at = serializers.DateTimeField(required=False)

    def to_service_fields(self) -> dict:
        out = {}
        for name, value in self.validated_data.items():
            if name in {"status", "reason", "exchanged_at"}:
                out[name] = value
            else:
                out[f"{name}_id"] = value
        return out


class ExchangeStatusSerializer(serializers.Serializer):
    status = serializers.CharField(help_text=f"One of: {', '.join(sorted(VALID_STATUSES))}")
    reason = serializers.CharField(required=False, allow_blank=True)
