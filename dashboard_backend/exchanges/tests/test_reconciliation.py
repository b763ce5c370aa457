# exchanges/tests/test_reconciliation.py

from __future__ import annotations

from io import StringIO

from django.core.management import CommandError, call_command
from django.test import TestCase

from exchanges.models import InventoryExchange
from exchanges.services import find_duplicate_exchange_adjustments, transition_exchange
from exchanges.tests.helpers import ExchangeFixturesMixin
from inventory.services import adjust_stock_level


class ExchangeStockAuditTests(ExchangeFixturesMixin, TestCase):
    def setUp(self):
        self.build_fixtures()
        adjust_stock_level(
            variation_id=self.v2.id,
            location_id=self.location.id,
            change_amount=5,
            reason="Initial count",
        )

    def _move(self, exchange, variation, delta, kind):
        adjust_stock_level(
            variation_id=variation.id,
            location_id=self.location.id,
            change_amount=delta,
            reason=f"Stock adjustment due to exchange approval (ID: {exchange.id}) - {kind}",
        )

    def test_clean_approval_has_no_findings(self):
        exchange = self.make_exchange()
        transition_exchange(exchange_id=exchange.id, target_status=InventoryExchange.STATUS_APPROVED)

        self.assertEqual(find_duplicate_exchange_adjustments(), [])

    def test_duplicate_outgoing_is_reported(self):
        exchange = self.make_exchange()
        transition_exchange(exchange_id=exchange.id, target_status=InventoryExchange.STATUS_APPROVED)
        self._move(exchange, self.v2, -1, "Outgoing")

        findings = find_duplicate_exchange_adjustments()

        self.assertEqual(len(findings), 1)
        self.assertEqual(findings[0].exchange_id, str(exchange.id))
        self.assertEqual(findings[0].net_outgoing, 2)
        self.assertEqual(findings[0].problem, "duplicate stock adjustment")

    def test_stock_moved_for_pending_exchange_is_reported(self):
        exchange = self.make_exchange()
        self._move(exchange, self.v2, -1, "Outgoing")
        self._move(exchange, self.v1, 1, "Returned")

        findings = find_duplicate_exchange_adjustments()

        self.assertEqual(len(findings), 1)
        self.assertEqual(findings[0].status, InventoryExchange.STATUS_PENDING)

    def test_compensated_movement_nets_out(self):
        exchange = self.make_exchange()
        self._move(exchange, self.v2, -1, "Outgoing")
        self._move(exchange, self.v2, 1, "Compensation")

        self.assertEqual(find_duplicate_exchange_adjustments(), [])

    def test_unrelated_adjustments_are_ignored(self):
        adjust_stock_level(
            variation_id=self.v2.id,
            location_id=self.location.id,
            change_amount=-1,
            reason="Damaged in store",
        )
        self.assertEqual(find_duplicate_exchange_adjustments(), [])

    def test_command_reports_and_strict_fails(self):
        exchange = self.make_exchange()
        self._move(exchange, self.v2, -1, "Outgoing")

        out = StringIO()
        call_command("audit_exchange_stock", stdout=out)
        self.assertIn(str(exchange.id), out.getvalue())

        with self.assertRaises(CommandError):
            call_command("audit_exchange_stock", "--strict", stdout=StringIO())

    def test_command_on_consistent_data(self):
        out = StringIO()
        call_command("audit_exchange_stock", "--strict", stdout=out)
        self.assertIn("consistent", out.getvalue())
