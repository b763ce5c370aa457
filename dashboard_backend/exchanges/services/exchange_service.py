# exchanges/services/exchange_service.py

"""
EXCHANGE SERVICE

Create, read, update and delete exchanges.

Rules:
- creation checks every referenced row (first miss wins, by name)
- new exchanges are always Pending; stock never moves on create
- status changes are delegated to transition_exchange()
- items, parties, variations and location are frozen once an exchange
  leaves Pending, since its stock may already have moved
"""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.core.exceptions import ObjectDoesNotExist, ValidationError
from django.db import DatabaseError, transaction
from django.utils import timezone

from exchanges.models import InventoryExchange
from exchanges.services.exceptions import (
    ExchangeNotFoundError,
    ExchangePersistError,
    ExchangeServiceError,
    InvalidExchangeTransitionError,
    ReferencedEntityMissingError,
)
from exchanges.services.exchange_lifecycle import validate_status
from exchanges.services.exchange_transitions import (
    MUTABLE_FIELDS,
    TransitionResult,
    compensate_movements,
    transition_exchange,
)
from inventory.models import InventoryItem, InventoryVariation
from locations.models import StoreLocation

logger = logging.getLogger(__name__)

User = get_user_model()

REFERENCE_FIELDS = (
    "customer_id",
    "returned_item_id",
    "new_item_id",
    "processed_by_id",
    "location_id",
    "returned_variation_id",
    "new_variation_id",
)


# ======================================================
# REFERENCE RESOLUTION
# ======================================================
def _lookup(queryset, pk, *, entity: str, message: str):
    if pk is None or pk == "":
        raise ReferencedEntityMissingError(entity, message)
    try:
        return queryset.get(pk=pk)
    except (ObjectDoesNotExist, ValidationError, ValueError, TypeError):
        raise ReferencedEntityMissingError(entity, message)


def _resolve_variation(variation_id, *, item: InventoryItem, entity: str, label: str):
    if variation_id is None or variation_id == "":
        return None

    variation = _lookup(
        InventoryVariation.objects.all(),
        variation_id,
        entity=entity,
        message=f"{label} variation not found",
    )
    if variation.item_id != item.pk:
        raise ReferencedEntityMissingError(
            entity, f"{label} variation does not belong to the {label.lower()} item"
        )
    return variation


def _resolve_references(
    *,
    customer_id,
    returned_item_id,
    new_item_id,
    processed_by_id,
    location_id,
    returned_variation_id=None,
    new_variation_id=None,
) -> dict:
    customer = _lookup(User.objects.all(), customer_id, entity="customer", message="Customer not found")
    returned_item = _lookup(
        InventoryItem.objects.all(), returned_item_id, entity="returned_item", message="Returned item not found"
    )
    new_item = _lookup(InventoryItem.objects.all(), new_item_id, entity="new_item", message="New item not found")
    processed_by = _lookup(
        User.objects.staff(), processed_by_id, entity="processed_by", message="Staff member not found"
    )
    location = _lookup(StoreLocation.objects.all(), location_id, entity="location", message="Location not found")

    return {
        "customer": customer,
        "returned_item": returned_item,
        "returned_variation": _resolve_variation(
            returned_variation_id, item=returned_item, entity="returned_variation", label="Returned"
        ),
        "new_item": new_item,
        "new_variation": _resolve_variation(
            new_variation_id, item=new_item, entity="new_variation", label="New"
        ),
        "processed_by": processed_by,
        "location": location,
    }


def _same_ref(requested, current) -> bool:
    requested = None if requested in (None, "") else str(requested)
    current = None if current is None else str(current)
    return requested == current


# ======================================================
# READ
# ======================================================
def exchange_queryset():
    return InventoryExchange.objects.select_related(
        "customer",
        "processed_by",
        "returned_item",
        "returned_variation",
        "new_item",
        "new_variation",
        "location",
    ).order_by("-exchanged_at")


def get_exchange(exchange_id, *, for_update: bool = False) -> InventoryExchange:
    queryset = exchange_queryset()
    if for_update:
        queryset = InventoryExchange.objects.select_for_update()
    try:
        return queryset.get(pk=exchange_id)
    except (InventoryExchange.DoesNotExist, ValidationError, ValueError):
        raise ExchangeNotFoundError(f"Exchange {exchange_id} not found")


# ======================================================
# WRITE
# ======================================================
@transaction.atomic
def create_exchange(
    *,
    customer_id,
    returned_item_id,
    new_item_id,
    processed_by_id,
    location_id,
    returned_variation_id=None,
    new_variation_id=None,
    reason: str = "",
    exchanged_at=None,
) -> InventoryExchange:
    refs = _resolve_references(
        customer_id=customer_id,
        returned_item_id=returned_item_id,
        new_item_id=new_item_id,
        processed_by_id=processed_by_id,
        location_id=location_id,
        returned_variation_id=returned_variation_id,
        new_variation_id=new_variation_id,
    )

    exchange = InventoryExchange.objects.create(
        status=InventoryExchange.STATUS_PENDING,
        reason=(reason or "").strip(),
        exchanged_at=exchanged_at or timezone.now(),
        **refs,
    )

    logger.info(
        "Exchange created",
        extra={
            "exchange_id": str(exchange.id),
            "location_id": exchange.location_id,
            "processed_by_id": str(exchange.processed_by_id),
        },
    )
    return exchange


def update_exchange(*, exchange_id, user=None, stock_ledger=None, **fields) -> TransitionResult:
    """
    Unified update path.

    - reference fields (see REFERENCE_FIELDS) are re-validated like creation
    - reason / exchanged_at are written directly, or with the status change
    - a status different from the current one goes through transition_exchange()

    Field edits and the status change commit together. When that commit
    fails, stock moved through a ledger outside the transaction is undone
    and ExchangePersistError is raised, as transition_exchange() does.
    """
    status = fields.pop("status", None)
    if status is not None:
        status = validate_status(status)

    unknown = set(fields) - set(REFERENCE_FIELDS) - MUTABLE_FIELDS
    if unknown:
        raise ExchangeServiceError(f"Unknown exchange fields: {', '.join(sorted(unknown))}")

    transitioned = None

    try:
        with transaction.atomic():
            exchange = get_exchange(exchange_id, for_update=True)

            current = {name: getattr(exchange, name) for name in REFERENCE_FIELDS}
            requested = {name: fields[name] for name in REFERENCE_FIELDS if name in fields}
            changed_refs = sorted(
                name for name, value in requested.items() if not _same_ref(value, current[name])
            )

            if changed_refs and not exchange.is_pending:
                raise InvalidExchangeTransitionError(
                    f"Exchange {exchange.id} is '{exchange.status}'; "
                    f"cannot change {', '.join(changed_refs)}"
                )

            mutable = {name: fields[name] for name in MUTABLE_FIELDS if name in fields}

            same_status = status == exchange.status
            if same_status:
                status = None

            dirty = False
            if changed_refs:
                for name, value in _resolve_references(**{**current, **requested}).items():
                    setattr(exchange, name, value)
                dirty = True

            if status is None and mutable:
                if "reason" in mutable:
                    exchange.reason = (mutable["reason"] or "").strip()
                if mutable.get("exchanged_at") is not None:
                    exchange.exchanged_at = mutable["exchanged_at"]
                dirty = True

            if dirty:
                exchange.save()

            if status is not None:
                transitioned = transition_exchange(
                    exchange_id=exchange.id,
                    target_status=status,
                    user=user,
                    stock_ledger=stock_ledger,
                    changes=mutable,
                )

    except DatabaseError as exc:
        if transitioned is not None:
            compensate_movements(
                exchange=transitioned.exchange,
                ledger=stock_ledger,
                movements=transitioned.movements,
            )
        logger.exception("Exchange update could not be saved", extra={"exchange_id": str(exchange_id)})
        raise ExchangePersistError(f"Could not save exchange {exchange_id}") from exc

    if transitioned is not None:
        return transitioned

    if dirty:
        message = "Exchange updated"
    elif same_status:
        message = f"Status already {exchange.status}"
    else:
        message = "No changes"

    return TransitionResult(exchange=get_exchange(exchange_id), changed=dirty, message=message)


@transaction.atomic
def delete_exchange(*, exchange_id) -> None:
    exchange = get_exchange(exchange_id, for_update=True)
    status = exchange.status
    exchange.delete()

    logger.info("Exchange deleted", extra={"exchange_id": str(exchange_id), "status": status})
