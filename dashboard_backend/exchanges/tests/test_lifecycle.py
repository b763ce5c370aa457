# exchanges/tests/test_lifecycle.py

from django.test import SimpleTestCase

from exchanges.models import InventoryExchange
from exchanges.services.exchange_lifecycle import (
    can_transition,
    should_reconcile_stock,
    validate_status,
)
from exchanges.services.exceptions import InvalidExchangeStatusError

PENDING = InventoryExchange.STATUS_PENDING
APPROVED = InventoryExchange.STATUS_APPROVED
REJECTED = InventoryExchange.STATUS_REJECTED


class ExchangeLifecycleRuleTests(SimpleTestCase):
    def test_only_pending_can_move(self):
        self.assertTrue(can_transition(from_status=PENDING, to_status=APPROVED))
        self.assertTrue(can_transition(from_status=PENDING, to_status=REJECTED))
        self.assertFalse(can_transition(from_status=APPROVED, to_status=REJECTED))
        self.assertFalse(can_transition(from_status=REJECTED, to_status=APPROVED))
        self.assertFalse(can_transition(from_status=APPROVED, to_status=PENDING))

    def test_validate_status(self):
        self.assertEqual(validate_status("Rejected"), REJECTED)
        for bad in ("", "rejected", None, 1):
            with self.assertRaises(InvalidExchangeStatusError):
                validate_status(bad)

    def test_reconcile_guard(self):
        def exchange(returned, new):
            return InventoryExchange(returned_variation_id=returned, new_variation_id=new)

        self.assertTrue(should_reconcile_stock(exchange("a", "b")))
        self.assertFalse(should_reconcile_stock(exchange("a", "a")))
        self.assertFalse(should_reconcile_stock(exchange(None, "b")))
        self.assertFalse(should_reconcile_stock(exchange("a", None)))
