# inventory/views.py

"""
INVENTORY VIEWSETS

- Stock levels and the adjustment ledger are READ-ONLY over REST.
- The only write path is the `adjust` action, which goes through
  adjust_stock_level() so every change is audited.
"""

from __future__ import annotations

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from inventory.models import StockAdjustment, StockLevel
from inventory.serializers import (
    StockAdjustCommandSerializer,
    StockAdjustmentSerializer,
    StockLevelSerializer,
)
from inventory.services.stock_adjustments import StockAdjustmentError, adjust_stock_level
from permissions.roles import (
    CAP_INVENTORY_ADJUST,
    CAP_INVENTORY_VIEW,
    HasCapability,
)


class StockLevelViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = StockLevel.objects.select_related("variation", "variation__item", "location")
    serializer_class = StockLevelSerializer
    filterset_fields = ["variation", "location"]

    required_capability = None

    def get_permissions(self):
        # reset per request to avoid state leaking between actions
        self.required_capability = (
            CAP_INVENTORY_ADJUST if self.action == "adjust" else CAP_INVENTORY_VIEW
        )
        return [IsAuthenticated(), HasCapability()]

    def get_serializer_class(self):
        if self.action == "adjust":
            return StockAdjustCommandSerializer
        return StockLevelSerializer

    @action(detail=False, methods=["post"], url_path="adjust")
    def adjust(self, request):
        """
        POST /api/inventory/stock-levels/adjust/
        {"variation_id": "...", "location_id": 1, "change_amount": 3, "reason": "Restock", "purchase_cost": "12.50"}
        """
        command = StockAdjustCommandSerializer(data=request.data)
        command.is_valid(raise_exception=True)
        v = command.validated_data

        try:
            result = adjust_stock_level(
                variation_id=v["variation_id"],
                location_id=v["location_id"],
                change_amount=v["change_amount"],
                reason=v["reason"],
                user=request.user,
                purchase_cost=v.get("purchase_cost"),
            )
        except StockAdjustmentError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            {
                "stock_level": StockLevelSerializer(result.stock_level).data,
                "adjustment": StockAdjustmentSerializer(result.adjustment).data,
            },
            status=status.HTTP_200_OK,
        )


class StockAdjustmentViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = StockAdjustment.objects.select_related("adjusted_by").order_by("-created_at")
    serializer_class = StockAdjustmentSerializer
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_INVENTORY_VIEW
    filterset_fields = ["variation", "location"]
