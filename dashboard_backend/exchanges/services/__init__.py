"""
PATH: exchanges/services/__init__.py

Exchange services export surface.
"""

from .exceptions import (
    ExchangeNotFoundError,
    ExchangePersistError,
    ExchangeServiceError,
    ExchangeTransitionConflictError,
    InvalidExchangeStatusError,
    InvalidExchangeTransitionError,
    ReferencedEntityMissingError,
    StockAdjustmentFailedError,
)
from .exchange_service import (
    create_exchange,
    delete_exchange,
    exchange_queryset,
    get_exchange,
    update_exchange,
)
from .exchange_transitions import StockMovement, TransitionResult, transition_exchange
from .reconciliation import find_duplicate_exchange_adjustments

__all__ = [
    "ExchangeNotFoundError",
    "ExchangePersistError",
    "ExchangeServiceError",
    "ExchangeTransitionConflictError",
    "InvalidExchangeStatusError",
    "InvalidExchangeTransitionError",
    "ReferencedEntityMissingError",
    "StockAdjustmentFailedError",
    "create_exchange",
    "delete_exchange",
    "exchange_queryset",
    "get_exchange",
    "update_exchange",
    "StockMovement",
    "TransitionResult",
    "transition_exchange",
    "find_duplicate_exchange_adjustments",
]
