# exchanges/services/exceptions.py

"""
EXCHANGE SERVICE ERRORS

Centralized domain errors for exchange services. Views map each class to an
error code and HTTP status (see exchanges/views.py).
"""

from __future__ import annotations


class ExchangeServiceError(Exception):
    """Base exception for all exchange service failures."""


class ExchangeNotFoundError(ExchangeServiceError):
    """Raised when an exchange id does not resolve to a record."""


class InvalidExchangeStatusError(ExchangeServiceError):
    """Raised when a status value is not Pending, Approved or Rejected."""


class InvalidExchangeTransitionError(ExchangeServiceError):
    """Raised when the current status cannot move to the requested one."""


class ExchangeTransitionConflictError(InvalidExchangeTransitionError):
    """Raised when another request changed the status first."""


class ReferencedEntityMissingError(ExchangeServiceError):
    """Raised when a customer, item, variation, staff member or location is missing."""

    def __init__(self, entity: str, message: str):
        super().__init__(message)
        self.entity = entity


class StockAdjustmentFailedError(ExchangeServiceError):
    """Raised when the stock ledger refuses a movement; the status is not changed."""

    def __init__(self, message: str, *, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class ExchangePersistError(ExchangeServiceError):
    """Raised when the exchange record cannot be written."""
