# exchanges/tests/test_exchange_service.py

from __future__ import annotations

import uuid
from datetime import timedelta
from unittest import mock

from django.db import DatabaseError, connection
from django.test import TestCase, TransactionTestCase
from django.utils import timezone

from exchanges.models import InventoryExchange
from exchanges.services import (
    ExchangeNotFoundError,
    ExchangePersistError,
    ExchangeServiceError,
    InvalidExchangeStatusError,
    InvalidExchangeTransitionError,
    ReferencedEntityMissingError,
    create_exchange,
    delete_exchange,
    exchange_queryset,
    get_exchange,
    update_exchange,
)
from exchanges.tests.helpers import ExchangeFixturesMixin, RecordingStockLedger


class CreateExchangeTests(ExchangeFixturesMixin, TestCase):
    def setUp(self):
        self.build_fixtures()

    def _create(self, **overrides):
        values = {
            "customer_id": self.customer.id,
            "returned_item_id": self.phone.id,
            "returned_variation_id": self.v1.id,
            "new_item_id": self.phone.id,
            "new_variation_id": self.v2.id,
            "processed_by_id": self.sales.id,
            "location_id": self.location.id,
            "reason": "Wrong colour",
        }
        values.update(overrides)
        return create_exchange(**values)

    def test_new_exchange_is_pending_and_dated(self):
        before = timezone.now()
        exchange = self._create()

        self.assertEqual(exchange.status, InventoryExchange.STATUS_PENDING)
        self.assertGreaterEqual(exchange.exchanged_at, before)
        self.assertEqual(exchange.processed_by, self.sales)

    def test_explicit_exchanged_at_is_kept(self):
        when = timezone.now() - timedelta(days=2)
        exchange = self._create(exchanged_at=when)
        self.assertEqual(exchange.exchanged_at, when)

    def test_variations_are_optional(self):
        exchange = self._create(returned_variation_id=None, new_variation_id=None)
        self.assertIsNone(exchange.returned_variation)
        self.assertIsNone(exchange.new_variation)

    def test_each_missing_reference_is_named(self):
        cases = [
            ({"customer_id": uuid.uuid4()}, "customer", "Customer not found"),
            ({"returned_item_id": uuid.uuid4()}, "returned_item", "Returned item not found"),
            ({"new_item_id": uuid.uuid4()}, "new_item", "New item not found"),
            ({"processed_by_id": uuid.uuid4()}, "processed_by", "Staff member not found"),
            ({"location_id": 999999}, "location", "Location not found"),
            ({"new_variation_id": uuid.uuid4()}, "new_variation", "New variation not found"),
        ]
        for overrides, entity, message in cases:
            with self.subTest(entity=entity):
                with self.assertRaises(ReferencedEntityMissingError) as ctx:
                    self._create(**overrides)
                self.assertEqual(ctx.exception.entity, entity)
                self.assertEqual(str(ctx.exception), message)

        self.assertFalse(InventoryExchange.objects.exists())

    def test_first_missing_reference_wins(self):
        with self.assertRaises(ReferencedEntityMissingError) as ctx:
            self._create(customer_id=uuid.uuid4(), new_item_id=uuid.uuid4())
        self.assertEqual(ctx.exception.entity, "customer")

    def test_customer_cannot_process_an_exchange(self):
        with self.assertRaises(ReferencedEntityMissingError) as ctx:
            self._create(processed_by_id=self.customer.id)
        self.assertEqual(str(ctx.exception), "Staff member not found")

    def test_variation_must_belong_to_its_item(self):
        with self.assertRaises(ReferencedEntityMissingError) as ctx:
            self._create(new_item_id=self.charger.id, new_variation_id=self.v2.id)
        self.assertEqual(ctx.exception.entity, "new_variation")


class ReadAndDeleteExchangeTests(ExchangeFixturesMixin, TestCase):
    def setUp(self):
        self.build_fixtures()

    def test_get_exchange(self):
        exchange = self.make_exchange()
        self.assertEqual(get_exchange(exchange.id).pk, exchange.pk)

        with self.assertRaises(ExchangeNotFoundError):
            get_exchange(uuid.uuid4())
        with self.assertRaises(ExchangeNotFoundError):
            get_exchange("not-a-uuid")

    def test_queryset_is_newest_first(self):
        older = self.make_exchange(exchanged_at=timezone.now() - timedelta(days=1))
        newer = self.make_exchange()
        self.assertEqual(list(exchange_queryset()), [newer, older])

    def test_delete_exchange(self):
        exchange = self.make_exchange(status=InventoryExchange.STATUS_APPROVED)
        delete_exchange(exchange_id=exchange.id)
        self.assertFalse(InventoryExchange.objects.filter(pk=exchange.pk).exists())

        with self.assertRaises(ExchangeNotFoundError):
            delete_exchange(exchange_id=exchange.id)


class UpdateExchangeTests(ExchangeFixturesMixin, TestCase):
    def setUp(self):
        self.build_fixtures()
        self.ledger = RecordingStockLedger()

    def test_update_reason_only(self):
        exchange = self.make_exchange()

        result = update_exchange(exchange_id=exchange.id, reason="Screen flicker")

        self.assertTrue(result.changed)
        self.assertEqual(result.exchange.reason, "Screen flicker")

    def test_update_variation_while_pending(self):
        exchange = self.make_exchange()

        update_exchange(exchange_id=exchange.id, new_variation_id=self.v1.id)

        exchange.refresh_from_db()
        self.assertEqual(exchange.new_variation, self.v1)

    def test_update_revalidates_references(self):
        exchange = self.make_exchange()
        with self.assertRaises(ReferencedEntityMissingError):
            update_exchange(exchange_id=exchange.id, customer_id=uuid.uuid4())

    def test_references_are_frozen_after_approval(self):
        exchange = self.make_exchange(status=InventoryExchange.STATUS_APPROVED)

        with self.assertRaises(InvalidExchangeTransitionError):
            update_exchange(exchange_id=exchange.id, new_variation_id=self.v1.id)

        # same value is not a change
        update_exchange(exchange_id=exchange.id, new_variation_id=self.v2.id, reason="Noted")
        exchange.refresh_from_db()
        self.assertEqual(exchange.reason, "Noted")

    def test_status_is_delegated_to_the_transition_handler(self):
        exchange = self.make_exchange()

        result = update_exchange(
            exchange_id=exchange.id,
            status=InventoryExchange.STATUS_APPROVED,
            reason="Approved at counter",
            stock_ledger=self.ledger,
        )

        self.assertTrue(result.changed)
        self.assertEqual(result.exchange.status, InventoryExchange.STATUS_APPROVED)
        self.assertEqual(result.exchange.reason, "Approved at counter")
        self.assertEqual(len(self.ledger.calls), 2)

    def test_reference_change_and_approval_in_one_call(self):
        exchange = self.make_exchange(new_variation=self.v1)

        update_exchange(
            exchange_id=exchange.id,
            new_variation_id=self.v2.id,
            status=InventoryExchange.STATUS_APPROVED,
            stock_ledger=self.ledger,
        )

        self.assertEqual(self.ledger.calls[0][:3], (self.v2.id, self.location.id, -1))

    def test_same_status_update_does_not_touch_stock(self):
        exchange = self.make_exchange(status=InventoryExchange.STATUS_APPROVED)

        result = update_exchange(
            exchange_id=exchange.id,
            status=InventoryExchange.STATUS_APPROVED,
            stock_ledger=self.ledger,
        )

        self.assertFalse(result.changed)
        self.assertEqual(result.message, "Status already Approved")
        self.assertEqual(self.ledger.calls, [])

    def test_invalid_status_and_unknown_fields(self):
        exchange = self.make_exchange()

        with self.assertRaises(InvalidExchangeStatusError):
            update_exchange(exchange_id=exchange.id, status="Done")
        with self.assertRaises(ExchangeServiceError):
            update_exchange(exchange_id=exchange.id, colour="red")

    def test_missing_exchange(self):
        with self.assertRaises(ExchangeNotFoundError):
            update_exchange(exchange_id=uuid.uuid4(), reason="x")


class UpdateExchangeCommitFailureTests(ExchangeFixturesMixin, TransactionTestCase):
    """The outermost commit fails after an approval moved stock."""

    def setUp(self):
        self.build_fixtures()
        self.ledger = RecordingStockLedger()

    def _failing_first_commit(self):
        real_commit = connection.commit
        failed = []

        def commit():
            if not failed:
                failed.append(True)
                raise DatabaseError("commit failed")
            return real_commit()

        return mock.patch.object(connection, "commit", side_effect=commit)

    def test_failed_commit_on_update_compensates_stock(self):
        exchange = self.make_exchange()

        with self._failing_first_commit():
            with self.assertRaises(ExchangePersistError):
                update_exchange(
                    exchange_id=exchange.id,
                    status=InventoryExchange.STATUS_APPROVED,
                    stock_ledger=self.ledger,
                )

        self.assertEqual(
            [call[:3] for call in self.ledger.calls],
            [
                (self.v2.id, self.location.id, -1),
                (self.v1.id, self.location.id, 1),
                (self.v1.id, self.location.id, -1),
                (self.v2.id, self.location.id, 1),
            ],
        )
        self.assertTrue(self.ledger.calls[-1][3].endswith(" - Compensation"))
        exchange.refresh_from_db()
        self.assertEqual(exchange.status, InventoryExchange.STATUS_PENDING)

    def test_failed_commit_on_field_edit_is_a_persist_error(self):
        exchange = self.make_exchange()

        with self._failing_first_commit():
            with self.assertRaises(ExchangePersistError):
                update_exchange(exchange_id=exchange.id, reason="Screen flicker")

        self.assertEqual(self.ledger.calls, [])
        exchange.refresh_from_db()
        self.assertEqual(exchange.reason, "Wrong colour")
