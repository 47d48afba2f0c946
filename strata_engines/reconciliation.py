"""
strata_engines.reconciliation -- Intercompany receivable/payable pair matching.

Responsibility:
    Match each IC receivable posted by one entity against the mirrored IC
    payable posted by its counterparty, measure the gap between the two
    sides, and surface both one-sided cases: receivables with no payable
    (``missing``) and payables with no receivable (``orphan_payable``).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Imports only strata_kernel domain records and strata_config settings.

Invariants enforced:
    - Two explicit, order-preserving scans sharing one consumed-key set:
      pass 1 is anchored on receivables, pass 2 picks up orphan payables.
    - First receivable wins per ordered (entity, counterparty) pair; later
      same-direction receivables are dropped.
    - ``reconciled`` depends only on the amount gap, never on currency.
      A zero sender amount reconciles only when the gap is also zero.
    - Decimal arithmetic throughout; amounts are compared as absolute
      values.
    - Output order: pass-1 pairs in receivable order, then orphans in
      payable order.

Failure modes:
    None.  Rows of other types, or without a counterparty, are ignored.

Usage:
    from strata_engines.reconciliation import ICReconciliationMatcher

    pairs = ICReconciliationMatcher().reconcile(rows)
    gaps = [p for p in pairs if not p.reconciled]
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from strata_config import AnalysisConfig, get_default_config
from strata_engines.tracer import traced_engine
from strata_kernel.domain.records import TransactionRow
from strata_kernel.logging_config import get_logger

logger = get_logger("engines.reconciliation")

_IC_PREFIX = re.compile(r"IC Receivable - |IC Payable - ", re.IGNORECASE)

_ZERO = Decimal("0")


@dataclass(frozen=True)
class ICPair:
    """
    Reconciliation record for one directional IC relationship.

    ``from_entity`` is the sender (the receivable side) and ``to_entity``
    the receiver (the payable side), also for orphan payables where the
    sender is only implied.
    """

    id: str
    from_entity: str
    to_entity: str
    type: str
    sender_amt: Decimal
    receiver_amt: Decimal
    gap: Decimal
    reconciled: bool
    missing: bool
    orphan_payable: bool
    sender_ccy: str
    receiver_ccy: str

    @property
    def is_cross_currency(self) -> bool:
        return self.sender_ccy != self.receiver_ccy

    @property
    def is_incomplete(self) -> bool:
        """True when one side of the relationship was never posted."""
        return self.missing or self.orphan_payable

    def involves(self, entity_id: str) -> bool:
        return entity_id in (self.from_entity, self.to_entity)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "from": self.from_entity,
            "to": self.to_entity,
            "type": self.type,
            "senderAmt": self.sender_amt,
            "receiverAmt": self.receiver_amt,
            "gap": self.gap,
            "reconciled": self.reconciled,
            "missing": self.missing,
            "orphanPayable": self.orphan_payable,
            "senderCcy": self.sender_ccy,
            "receiverCcy": self.receiver_ccy,
        }


def strip_ic_prefix(description: str) -> str:
    """Drop the "IC Receivable - " / "IC Payable - " prefixes (any case)."""
    return _IC_PREFIX.sub("", description)


def is_within_tolerance(sender_amt: Decimal, gap: Decimal, tolerance: Decimal) -> bool:
    """True if ``gap`` is strictly below ``tolerance`` of the sender amount."""
    if sender_amt == _ZERO:
        return gap == _ZERO
    return gap < sender_amt * tolerance


class ICReconciliationMatcher:
    """
    Pure engine for two-sided IC matching.

    Contract:
        Total function over transaction rows.  No I/O, no database access.
    Non-goals:
        - Does not aggregate multiple same-direction rows between a pair.
        - Does not translate currencies; amounts are compared as posted.
    """

    def __init__(self, config: AnalysisConfig | None = None) -> None:
        self._config = config or get_default_config()

    @traced_engine("ic_reconciliation", "1.0", fingerprint_fields=("rows",))
    def reconcile(self, rows: Sequence[TransactionRow]) -> tuple[ICPair, ...]:
        """
        Match IC receivables to payables.

        Args:
            rows: GL lines; only IC_Receivable / IC_Payable rows with a
                counterparty take part.

        Returns:
            Receivable-anchored pairs followed by orphan-payable pairs.
        """
        receivables = [r for r in rows if r.is_ic_receivable]
        payables = [r for r in rows if r.is_ic_payable]

        # First payable per (entity, counterparty) direction
        first_payable: dict[tuple[str, str], TransactionRow] = {}
        for pay in payables:
            first_payable.setdefault((pay.entity, pay.counterparty), pay)
        receivable_directions = {(rec.entity, rec.counterparty) for rec in receivables}

        consumed: set[tuple[str, str]] = set()
        pairs: list[ICPair] = []

        # Pass 1: receivable-anchored
        for rec in receivables:
            key = (rec.entity, rec.counterparty)
            if key in consumed:
                continue
            consumed.add(key)
            payable = first_payable.get((rec.counterparty, rec.entity))
            pairs.append(self._receivable_pair(rec, payable))

        # Pass 2: orphan payables
        orphan_count = 0
        for pay in payables:
            key = (pay.counterparty, pay.entity)
            if key in consumed or key in receivable_directions:
                continue
            pairs.append(self._orphan_pair(pay))
            orphan_count += 1

        unreconciled = sum(1 for p in pairs if not p.reconciled)
        logger.info("ic_reconciliation_completed", extra={
            "receivable_count": len(receivables),
            "payable_count": len(payables),
            "pair_count": len(pairs),
            "orphan_count": orphan_count,
            "unreconciled_count": unreconciled,
        })
        return tuple(pairs)

    def _receivable_pair(
        self,
        rec: TransactionRow,
        payable: TransactionRow | None,
    ) -> ICPair:
        sender_amt = abs(rec.amount)
        receiver_amt = abs(payable.amount) if payable is not None else _ZERO
        gap = abs(sender_amt - receiver_amt)
        return ICPair(
            id=f"{rec.entity}-{rec.counterparty}",
            from_entity=rec.entity,
            to_entity=rec.counterparty,
            type=strip_ic_prefix(rec.description),
            sender_amt=sender_amt,
            receiver_amt=receiver_amt,
            gap=gap,
            reconciled=is_within_tolerance(
                sender_amt, gap, self._config.reconciliation_tolerance
            ),
            missing=payable is None,
            orphan_payable=False,
            sender_ccy=rec.currency,
            receiver_ccy=(
                payable.currency if payable is not None else self._config.unknown_currency
            ),
        )

    def _orphan_pair(self, pay: TransactionRow) -> ICPair:
        receiver_amt = abs(pay.amount)
        return ICPair(
            id=f"ORPHAN-{pay.entity}-{pay.counterparty}",
            from_entity=pay.counterparty,
            to_entity=pay.entity,
            type=strip_ic_prefix(pay.description),
            sender_amt=_ZERO,
            receiver_amt=receiver_amt,
            gap=receiver_amt,
            reconciled=False,
            missing=False,
            orphan_payable=True,
            sender_ccy=self._config.unknown_currency,
            receiver_ccy=pay.currency,
        )


def reconcile_intercompany(
    rows: Sequence[TransactionRow],
    config: AnalysisConfig | None = None,
) -> tuple[ICPair, ...]:
    """Convenience wrapper around ``ICReconciliationMatcher.reconcile``."""
    return ICReconciliationMatcher(config).reconcile(rows)
