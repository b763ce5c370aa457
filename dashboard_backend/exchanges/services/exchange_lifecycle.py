"""
EXCHANGE LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed lifecycle transitions
for InventoryExchange entities.

DESIGN PRINCIPLES:
- No database writes
- No stock mutation
- No side effects
"""

from __future__ import annotations

from exchanges.models import InventoryExchange
from exchanges.services.exceptions import (
    InvalidExchangeStatusError,
    InvalidExchangeTransitionError,
)

# ============================================================
# STATE DEFINITIONS
# ============================================================

VALID_STATUSES = {
    InventoryExchange.STATUS_PENDING,
    InventoryExchange.STATUS_APPROVED,
    InventoryExchange.STATUS_REJECTED,
}

TERMINAL_STATES = {
    InventoryExchange.STATUS_APPROVED,
    InventoryExchange.STATUS_REJECTED,
}

ALLOWED_TRANSITIONS = {
    InventoryExchange.STATUS_PENDING: {
        InventoryExchange.STATUS_APPROVED,
        InventoryExchange.STATUS_REJECTED,
    },
}


# ============================================================
# DOMAIN RULES
# ============================================================


def validate_status(value) -> str:
    if not isinstance(value, str) or value not in VALID_STATUSES:
        raise InvalidExchangeStatusError(
            f"Invalid status '{value}'. Must be one of: {', '.join(sorted(VALID_STATUSES))}"
        )
    return value


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, exchange: InventoryExchange, target_status: str):
    if not can_transition(from_status=exchange.status, to_status=target_status):
        raise InvalidExchangeTransitionError(
            f"Exchange {exchange.id} cannot transition from "
            f"'{exchange.status}' to '{target_status}'"
        )


def should_reconcile_stock(exchange: InventoryExchange) -> bool:
    """Stock moves only when both variations are known and differ."""
    returned_id = exchange.returned_variation_id
    new_id = exchange.new_variation_id
    return returned_id is not None and new_id is not None and returned_id != new_id
