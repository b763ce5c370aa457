# exchanges/services/reconciliation.py

"""
EXCHANGE STOCK RECONCILIATION (READ-ONLY)

Every stock movement made for an exchange carries "(ID: <exchange id>) - <kind>"
in its StockAdjustment.reason. This module tallies those rows per exchange and
reports anything an approved exchange should not have:

- more than one net Outgoing or Returned movement (double adjustment)
- net movements for an exchange that is not Approved, or no longer exists
- an Outgoing without its Returned (or the reverse)
- more compensations than movements

Nothing is corrected here; findings are for a human to act on.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from exchanges.models import InventoryExchange
from exchanges.services.exchange_transitions import (
    KIND_COMPENSATION,
    KIND_OUTGOING,
    KIND_RETURNED,
)
from inventory.models import StockAdjustment

REASON_PATTERN = re.compile(
    r"\(ID: (?P<exchange_id>[0-9a-fA-F-]{36})\) - "
    rf"(?P<kind>{KIND_OUTGOING}|{KIND_RETURNED}|{KIND_COMPENSATION})\s*$"
)


@dataclass
class ExchangeStockTally:
    exchange_id: str
    outgoing: int = 0
    returned: int = 0
    compensated_outgoing: int = 0
    compensated_returned: int = 0

    @property
    def net_outgoing(self) -> int:
        return self.outgoing - self.compensated_outgoing

    @property
    def net_returned(self) -> int:
        return self.returned - self.compensated_returned

    def add(self, *, kind: str, change_amount: int) -> None:
        if kind == KIND_OUTGOING:
            self.outgoing += 1
        elif kind == KIND_RETURNED:
            self.returned += 1
        elif change_amount > 0:
            # +1 puts back an outgoing unit
            self.compensated_outgoing += 1
        else:
            self.compensated_returned += 1


@dataclass(frozen=True)
class ExchangeStockFinding:
    exchange_id: str
    status: str | None
    net_outgoing: int
    net_returned: int
    problem: str


def tally_exchange_adjustments() -> dict[str, ExchangeStockTally]:
    tallies: dict[str, ExchangeStockTally] = {}

    rows = StockAdjustment.objects.filter(reason__contains="(ID: ").values_list(
        "reason", "change_amount"
    )
    for reason, change_amount in rows.iterator():
        match = REASON_PATTERN.search(reason or "")
        if not match:
            continue
        exchange_id = match.group("exchange_id").lower()
        tally = tallies.setdefault(exchange_id, ExchangeStockTally(exchange_id=exchange_id))
        tally.add(kind=match.group("kind"), change_amount=change_amount)

    return tallies


def _problem_for(tally: ExchangeStockTally, status: str | None) -> str | None:
    moved = tally.net_outgoing != 0 or tally.net_returned != 0

    if tally.net_outgoing < 0 or tally.net_returned < 0:
        return "more compensations than stock movements"
    if status is None:
        return "stock moved for an exchange that no longer exists" if moved else None
    if tally.net_outgoing > 1 or tally.net_returned > 1:
        return "duplicate stock adjustment"
    if moved and status != InventoryExchange.STATUS_APPROVED:
        return f"stock moved for a {status} exchange"
    if tally.net_outgoing != tally.net_returned:
        return "incomplete stock movement (outgoing and returned differ)"
    return None


def find_duplicate_exchange_adjustments() -> list[ExchangeStockFinding]:
    tallies = tally_exchange_adjustments()
    if not tallies:
        return []

    statuses = {
        str(pk): status
        for pk, status in InventoryExchange.objects.filter(pk__in=list(tallies)).values_list(
            "id", "status"
        )
    }

    findings = []
    for exchange_id in sorted(tallies):
        tally = tallies[exchange_id]
        status = statuses.get(exchange_id)
        problem = _problem_for(tally, status)
        if problem:
            findings.append(
                ExchangeStockFinding(
                    exchange_id=exchange_id,
                    status=status,
                    net_outgoing=tally.net_outgoing,
                    net_returned=tally.net_returned,
                    problem=problem,
                )
            )
    return findings
