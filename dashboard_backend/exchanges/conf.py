# exchanges/conf.py

"""
Typed view of settings.EXCHANGES.

    EXCHANGES = {
        "COMPENSATE_FAILED_STOCK": True,
        "STOCK_REASON_PREFIX": "Stock adjustment due to exchange approval",
    }
"""

from __future__ import annotations

from dataclasses import dataclass

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

DEFAULT_STOCK_REASON_PREFIX = "Stock adjustment due to exchange approval"

# "<prefix> (ID: <uuid>) - Compensation" has to fit StockAdjustment.reason
STOCK_REASON_MAX_LENGTH = 255
LONGEST_REASON_SUFFIX = " (ID: 00000000-0000-0000-0000-000000000000) - Compensation"
MAX_STOCK_REASON_PREFIX_LENGTH = STOCK_REASON_MAX_LENGTH - len(LONGEST_REASON_SUFFIX)


@dataclass(frozen=True)
class ExchangeSettings:
    compensate_failed_stock: bool = True
    stock_reason_prefix: str = DEFAULT_STOCK_REASON_PREFIX

    def __post_init__(self):
        if len(self.stock_reason_prefix) > MAX_STOCK_REASON_PREFIX_LENGTH:
            raise ImproperlyConfigured(
                f"EXCHANGES['STOCK_REASON_PREFIX'] is {len(self.stock_reason_prefix)} characters; "
                f"the limit is {MAX_STOCK_REASON_PREFIX_LENGTH} so stock reasons keep their exchange id."
            )


def get_exchange_settings() -> ExchangeSettings:
    raw = getattr(settings, "EXCHANGES", None) or {}
    return ExchangeSettings(
        compensate_failed_stock=bool(raw.get("COMPENSATE_FAILED_STOCK", True)),
        stock_reason_prefix=(raw.get("STOCK_REASON_PREFIX") or DEFAULT_STOCK_REASON_PREFIX).strip(),
    )
