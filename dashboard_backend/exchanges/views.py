"""
======================================================
PATH: exchanges/views.py
======================================================
EXCHANGE API

Routes (DefaultRouter, prefix /api/exchanges/):
    GET    exchanges/               list (ExchangeFilter)
    POST   exchanges/               create (always Pending)
    GET    exchanges/<id>/          retrieve
    PATCH  exchanges/<id>/          update; a status key is a transition
    DELETE exchanges/<id>/          delete
    POST   exchanges/<id>/status/   {"status": "Approved" | "Rejected" | "Pending"}

Errors use the canonical shape {"error": {"code", "message"}}.
"""

from __future__ import annotations

import logging

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from exchanges.filters import ExchangeFilter
from exchanges.serializers import (
    ExchangeCreateSerializer,
    ExchangeStatusSerializer,
    ExchangeUpdateSerializer,
    InventoryExchangeSerializer,
)
from exchanges.services import (
    ExchangeNotFoundError,
    ExchangePersistError,
    ExchangeServiceError,
    InvalidExchangeStatusError,
    InvalidExchangeTransitionError,
    ReferencedEntityMissingError,
    StockAdjustmentFailedError,
    create_exchange,
    delete_exchange,
    exchange_queryset,
    get_exchange,
    update_exchange,
)
from permissions.roles import (
    CAP_EXCHANGE_APPROVE,
    CAP_EXCHANGE_CREATE,
    CAP_EXCHANGE_DELETE,
    CAP_EXCHANGE_VIEW,
    HasCapability,
    user_has_capability,
)

logger = logging.getLogger(__name__)


def error_response(*, code: str, message: str, http_status: int):
    """
    Canonical API error response.
    """
    return Response(
        {"error": {"code": code, "message": message}},
        status=http_status,
    )


# most specific first
SERVICE_ERRORS = (
    (ExchangeNotFoundError, "EXCHANGE_NOT_FOUND", status.HTTP_404_NOT_FOUND),
    (InvalidExchangeStatusError, "INVALID_STATUS", status.HTTP_400_BAD_REQUEST),
    (InvalidExchangeTransitionError, "INVALID_TRANSITION", status.HTTP_409_CONFLICT),
    (ReferencedEntityMissingError, "REFERENCED_ENTITY_MISSING", status.HTTP_400_BAD_REQUEST),
    (StockAdjustmentFailedError, "STOCK_ADJUSTMENT_FAILED", status.HTTP_409_CONFLICT),
    (ExchangePersistError, "PERSIST_FAILED", status.HTTP_500_INTERNAL_SERVER_ERROR),
    (ExchangeServiceError, "EXCHANGE_ERROR", status.HTTP_400_BAD_REQUEST),
)


def service_error_response(exc: ExchangeServiceError):
    for error_class, code, http_status in SERVICE_ERRORS:
        if isinstance(exc, error_class):
            return error_response(code=code, message=str(exc), http_status=http_status)
    raise exc


def transition_payload(result) -> dict:
    return {
        "changed": result.changed,
        "message": result.message,
        "exchange": InventoryExchangeSerializer(result.exchange).data,
        "stock_movements": [
            {
                "variation_id": str(m.variation_id),
                "location_id": m.location_id,
                "delta": m.delta,
                "reason": m.reason,
            }
            for m in result.movements
        ],
    }


# ======================================================
# EXCHANGE VIEWSET
# ======================================================
class ExchangeViewSet(
    mixins.ListModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = InventoryExchangeSerializer
    filterset_class = ExchangeFilter

    # Capability hooks used by HasCapability
    required_capability = None

    ACTION_CAPABILITIES = {
        "list": CAP_EXCHANGE_VIEW,
        "retrieve": CAP_EXCHANGE_VIEW,
        "create": CAP_EXCHANGE_CREATE,
        "partial_update": CAP_EXCHANGE_CREATE,
        "destroy": CAP_EXCHANGE_DELETE,
        "change_status": CAP_EXCHANGE_APPROVE,
    }

    def get_queryset(self):
        return exchange_queryset()

    def get_permissions(self):
        self.required_capability = self.ACTION_CAPABILITIES.get(self.action)
        return [IsAuthenticated(), HasCapability()]

    def get_serializer_class(self):
        if self.action == "create":
            return ExchangeCreateSerializer
        if self.action == "partial_update":
            return ExchangeUpdateSerializer
        if self.action == "change_status":
            return ExchangeStatusSerializer
        return InventoryExchangeSerializer

    def retrieve(self, request, pk=None):
        try:
            exchange = get_exchange(pk)
        except ExchangeServiceError as exc:
            return service_error_response(exc)
        return Response(InventoryExchangeSerializer(exchange).data)

    def create(self, request):
        command = ExchangeCreateSerializer(data=request.data)
        command.is_valid(raise_exception=True)
        v = command.validated_data

        try:
            exchange = create_exchange(
                customer_id=v["customer"],
                returned_item_id=v["returned_item"],
                returned_variation_id=v.get("returned_variation"),
                new_item_id=v["new_item"],
                new_variation_id=v.get("new_variation"),
                processed_by_id=v.get("processed_by") or request.user.pk,
                location_id=v["location"],
                reason=v.get("reason", ""),
                exchanged_at=v.get("exchanged_at"),
            )
        except ExchangeServiceError as exc:
            return service_error_response(exc)

        exchange = get_exchange(exchange.id)
        return Response(InventoryExchangeSerializer(exchange).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        command = ExchangeUpdateSerializer(data=request.data)
        command.is_valid(raise_exception=True)
        fields = command.to_service_fields()

        # moving stock needs the approve capability, whichever route is used
        if "status" in fields and not user_has_capability(request.user, CAP_EXCHANGE_APPROVE):
            return error_response(
                code="PERMISSION_DENIED",
                message="You are not allowed to change the status of an exchange.",
                http_status=status.HTTP_403_FORBIDDEN,
            )

        try:
            result = update_exchange(exchange_id=pk, user=request.user, **fields)
        except ExchangeServiceError as exc:
            return service_error_response(exc)

        return Response(transition_payload(result), status=status.HTTP_200_OK)

    def destroy(self, request, pk=None):
        try:
            delete_exchange(exchange_id=pk)
        except ExchangeServiceError as exc:
            return service_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # --------------------------------------------------
    # STATUS TRANSITION
    # --------------------------------------------------
    @action(detail=True, methods=["post"], url_path="status")
    def change_status(self, request, pk=None):
        """
        Approve, reject or re-send the current status (no stock movement).
        """
        command = ExchangeStatusSerializer(data=request.data)
        command.is_valid(raise_exception=True)
        v = command.validated_data

        fields = {"status": v["status"]}
        if "reason" in v:
            fields["reason"] = v["reason"]

        # same path as PATCH, so a reason sent with the current status is still saved
        try:
            result = update_exchange(exchange_id=pk, user=request.user, **fields)
        except ExchangeServiceError as exc:
            logger.info(
                "Exchange status change refused",
                extra={"exchange_id": str(pk), "error": exc.__class__.__name__},
            )
            return service_error_response(exc)

        return Response(transition_payload(result), status=status.HTTP_200_OK)
