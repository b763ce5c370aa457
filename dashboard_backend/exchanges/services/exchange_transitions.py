"""
======================================================
PATH: exchanges/services/exchange_transitions.py
======================================================
EXCHANGE STATUS TRANSITION HANDLER (APPLICATION SERVICE)

Purpose:
- The single entry point that changes InventoryExchange.status.
- Reconcile stock when an exchange is approved.

Flow:
1) validate the target status (no DB access on a bad value)
2) lock the exchange row; same status -> no-op result, nothing written
3) validate the transition (Pending -> Approved | Rejected only)
4) claim it: UPDATE ... WHERE status = <current>, exactly one row or conflict
5) approval with two distinct variations -> stock saga:
     new_variation      -1  "<prefix> (ID: <id>) - Outgoing"
     returned_variation +1  "<prefix> (ID: <id>) - Returned"
   a failed step undoes the applied steps ("- Compensation") and the claim
   is rolled back, so the exchange stays Pending
6) commit; if the commit fails after stock moved outside the transaction,
   the saga is compensated and ExchangePersistError is raised

Rejection never touches stock.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.utils import timezone

from exchanges.conf import ExchangeSettings, get_exchange_settings
from exchanges.models import InventoryExchange
from exchanges.services.exceptions import (
    ExchangeNotFoundError,
    ExchangePersistError,
    ExchangeServiceError,
    ExchangeTransitionConflictError,
    StockAdjustmentFailedError,
)
from exchanges.services.exchange_lifecycle import (
    should_reconcile_stock,
    validate_status,
    validate_transition,
)
from inventory.services import DatabaseStockLedger, StockLedger

logger = logging.getLogger(__name__)

KIND_OUTGOING = "Outgoing"
KIND_RETURNED = "Returned"
KIND_COMPENSATION = "Compensation"

# fields a caller may write together with the status change
MUTABLE_FIELDS = {"reason", "exchanged_at"}


@dataclass(frozen=True)
class StockMovement:
    variation_id: object
    location_id: object
    delta: int
    reason: str
    kind: str


@dataclass(frozen=True)
class TransitionResult:
    exchange: InventoryExchange
    changed: bool
    message: str
    movements: tuple[StockMovement, ...] = ()


def stock_reason(*, exchange_id, kind: str, prefix: str) -> str:
    return f"{prefix} (ID: {exchange_id}) - {kind}"


# ======================================================
# STOCK SAGA
# ======================================================
@dataclass
class ExchangeStockSaga:
    """
    Two ordered ledger calls with compensation.

    The ledger may live outside the database transaction, so a failure
    after the first call is undone by an opposite movement rather than
    by a rollback.
    """

    exchange: InventoryExchange
    ledger: StockLedger
    config: ExchangeSettings
    applied: list[StockMovement] = field(default_factory=list)

    def _movement(self, *, variation_id, delta: int, kind: str) -> StockMovement:
        return StockMovement(
            variation_id=variation_id,
            location_id=self.exchange.location_id,
            delta=delta,
            reason=stock_reason(
                exchange_id=self.exchange.id,
                kind=kind,
                prefix=self.config.stock_reason_prefix,
            ),
            kind=kind,
        )

    def planned(self) -> list[StockMovement]:
        return [
            self._movement(variation_id=self.exchange.new_variation_id, delta=-1, kind=KIND_OUTGOING),
            self._movement(variation_id=self.exchange.returned_variation_id, delta=1, kind=KIND_RETURNED),
        ]

    def _apply(self, movement: StockMovement) -> None:
        self.ledger.adjust(movement.variation_id, movement.location_id, movement.delta, movement.reason)

    def run(self) -> list[StockMovement]:
        for movement in self.planned():
            try:
                self._apply(movement)
            except Exception as exc:
                logger.warning(
                    "Exchange stock step failed",
                    extra={
                        "exchange_id": str(self.exchange.id),
                        "step": movement.kind,
                        "variation_id": str(movement.variation_id),
                        "error": str(exc),
                    },
                )
                if self.config.compensate_failed_stock:
                    self.compensate()
                raise StockAdjustmentFailedError(
                    f"Stock adjustment failed ({movement.kind}): {exc}",
                    cause=exc,
                ) from exc
            self.applied.append(movement)

        return list(self.applied)

    def compensate(self) -> list[StockMovement]:
        """Apply the opposite of every applied step, newest first."""
        done = []
        for movement in reversed(self.applied):
            undo = self._movement(
                variation_id=movement.variation_id,
                delta=-movement.delta,
                kind=KIND_COMPENSATION,
            )
            try:
                self._apply(undo)
            except Exception:
                # stock now needs manual correction; audit_exchange_stock reports it
                logger.exception(
                    "Exchange stock compensation failed",
                    extra={
                        "exchange_id": str(self.exchange.id),
                        "variation_id": str(movement.variation_id),
                        "delta": undo.delta,
                    },
                )
                continue
            done.append(undo)

        self.applied.clear()
        return done


# ======================================================
# HELPERS
# ======================================================
def _lock_exchange(exchange_id) -> InventoryExchange:
    try:
        return InventoryExchange.objects.select_for_update().get(pk=exchange_id)
    except (InventoryExchange.DoesNotExist, ValidationError, ValueError):
        raise ExchangeNotFoundError(f"Exchange {exchange_id} not found")


def _reload_exchange(exchange_id) -> InventoryExchange:
    return InventoryExchange.objects.select_related(
        "customer",
        "processed_by",
        "returned_item",
        "returned_variation",
        "new_item",
        "new_variation",
        "location",
    ).get(pk=exchange_id)


def _clean_changes(changes: dict | None) -> dict:
    changes = dict(changes or {})
    unknown = set(changes) - MUTABLE_FIELDS
    if unknown:
        raise ExchangeServiceError(f"Fields cannot be changed with the status: {', '.join(sorted(unknown))}")

    if changes.get("exchanged_at") is None:
        changes.pop("exchanged_at", None)
    if "reason" in changes:
        changes["reason"] = (changes["reason"] or "").strip()
    return changes


def _claim(*, exchange: InventoryExchange, target_status: str, fields: dict) -> None:
    """Compare-and-swap status update: only one caller can leave the current status."""
    updated = InventoryExchange.objects.filter(pk=exchange.pk, status=exchange.status).update(
        status=target_status,
        updated_at=timezone.now(),
        **fields,
    )
    if updated != 1:
        raise ExchangeTransitionConflictError(
            f"Exchange {exchange.id} is no longer '{exchange.status}'"
        )


def _ledger_joins_transaction(ledger) -> bool:
    return bool(getattr(ledger, "joins_transaction", False))


def compensate_movements(
    *,
    exchange: InventoryExchange,
    ledger: StockLedger | None,
    movements,
    config: ExchangeSettings | None = None,
) -> list[StockMovement]:
    """
    Undo stock movements whose status change was never committed.

    A ledger that writes inside the database transaction was rolled back
    with it and is left alone.
    """
    if not movements or ledger is None or _ledger_joins_transaction(ledger):
        return []

    saga = ExchangeStockSaga(
        exchange=exchange,
        ledger=ledger,
        config=config or get_exchange_settings(),
        applied=list(movements),
    )
    return saga.compensate()


# ======================================================
# PUBLIC API
# ======================================================
def transition_exchange(
    *,
    exchange_id,
    target_status,
    user=None,
    stock_ledger: StockLedger | None = None,
    changes: dict | None = None,
    config: ExchangeSettings | None = None,
) -> TransitionResult:
    """
    Move an exchange to target_status, reconciling stock on approval.

    Raises:
        InvalidExchangeStatusError, ExchangeNotFoundError,
        InvalidExchangeTransitionError (incl. ExchangeTransitionConflictError),
        StockAdjustmentFailedError, ExchangePersistError
    """
    target_status = validate_status(target_status)
    fields = _clean_changes(changes)
    config = config or get_exchange_settings()
    ledger = stock_ledger if stock_ledger is not None else DatabaseStockLedger(user=user)

    saga = None
    movements: tuple[StockMovement, ...] = ()

    try:
        with transaction.atomic():
            exchange = _lock_exchange(exchange_id)

            if exchange.status == target_status:
                return TransitionResult(
                    exchange=exchange,
                    changed=False,
                    message=f"Status already {target_status}",
                )

            validate_transition(exchange=exchange, target_status=target_status)
            _claim(exchange=exchange, target_status=target_status, fields=fields)

            if target_status == InventoryExchange.STATUS_APPROVED:
                if should_reconcile_stock(exchange):
                    saga = ExchangeStockSaga(exchange=exchange, ledger=ledger, config=config)
                    movements = tuple(saga.run())
                else:
                    logger.info(
                        "Exchange approved without stock adjustment",
                        extra={
                            "exchange_id": str(exchange.id),
                            "returned_variation_id": str(exchange.returned_variation_id),
                            "new_variation_id": str(exchange.new_variation_id),
                        },
                    )

            exchange = _reload_exchange(exchange_id)

    except DatabaseError as exc:
        # the claim rolled back; stock moved outside the transaction must be undone by hand
        if saga is not None:
            compensate_movements(
                exchange=saga.exchange, ledger=ledger, movements=saga.applied, config=config
            )
        logger.exception(
            "Exchange status could not be saved",
            extra={"exchange_id": str(exchange_id), "target_status": target_status},
        )
        raise ExchangePersistError(f"Could not save exchange {exchange_id}") from exc

    logger.info(
        "Exchange status changed",
        extra={
            "exchange_id": str(exchange.id),
            "status": exchange.status,
            "stock_movements": len(movements),
            "user_id": str(getattr(user, "pk", "") or ""),
        },
    )

    return TransitionResult(
        exchange=exchange,
        changed=True,
        message=f"Exchange {target_status.lower()}",
        movements=movements,
    )
