# exchanges/tests/test_conf.py

from __future__ import annotations

from django.core.exceptions import ImproperlyConfigured
from django.test import SimpleTestCase, override_settings

from exchanges.conf import (
    DEFAULT_STOCK_REASON_PREFIX,
    MAX_STOCK_REASON_PREFIX_LENGTH,
    STOCK_REASON_MAX_LENGTH,
    ExchangeSettings,
    get_exchange_settings,
)
from exchanges.services.exchange_transitions import KIND_COMPENSATION, stock_reason

SAMPLE_ID = "3f2b8c1e-9d4a-4e6b-8f0a-1c2d3e4f5a6b"


class ExchangeSettingsTests(SimpleTestCase):
    @override_settings(EXCHANGES={})
    def test_defaults(self):
        config = get_exchange_settings()

        self.assertTrue(config.compensate_failed_stock)
        self.assertEqual(config.stock_reason_prefix, DEFAULT_STOCK_REASON_PREFIX)

    @override_settings(EXCHANGES={"COMPENSATE_FAILED_STOCK": False, "STOCK_REASON_PREFIX": "  Swap  "})
    def test_values_are_read_from_settings(self):
        config = get_exchange_settings()

        self.assertFalse(config.compensate_failed_stock)
        self.assertEqual(config.stock_reason_prefix, "Swap")

    @override_settings(EXCHANGES={"STOCK_REASON_PREFIX": "x" * (MAX_STOCK_REASON_PREFIX_LENGTH + 1)})
    def test_prefix_that_would_truncate_reasons_is_refused(self):
        with self.assertRaises(ImproperlyConfigured):
            get_exchange_settings()

    def test_longest_allowed_prefix_keeps_the_full_reason(self):
        config = ExchangeSettings(stock_reason_prefix="x" * MAX_STOCK_REASON_PREFIX_LENGTH)

        reason = stock_reason(
            exchange_id=SAMPLE_ID, kind=KIND_COMPENSATION, prefix=config.stock_reason_prefix
        )

        self.assertEqual(len(reason), STOCK_REASON_MAX_LENGTH)
        self.assertTrue(reason.endswith(f"(ID: {SAMPLE_ID}) - Compensation"))
