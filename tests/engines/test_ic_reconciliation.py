"""
Tests for the IC Reconciliation Matcher.

Covers:
- Symmetric receivable/payable matching
- Relative tolerance and the zero-sender edge case
- Missing payables and orphan payables
- First-key-wins for repeated same-direction receivables
- Output ordering, filtering and idempotence
"""

from decimal import Decimal

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from builders import payable, receivable
from strata_config import AnalysisConfig
from strata_engines.reconciliation import (
    ICReconciliationMatcher,
    is_within_tolerance,
    reconcile_intercompany,
    strip_ic_prefix,
)
from strata_kernel.domain.records import TransactionRow


class TestStripPrefix:
    """Tests for IC description prefix removal."""

    @pytest.mark.parametrize("description,expected", [
        ("IC Receivable - Revenue", "Revenue"),
        ("IC Payable - Services", "Services"),
        ("ic receivable - Royalties", "Royalties"),
        ("Management Fee", "Management Fee"),
        ("", ""),
    ])
    def test_strip(self, description, expected):
        assert strip_ic_prefix(description) == expected


class TestTolerance:
    """Tests for the 0.1% relative tolerance."""

    def test_gap_below_tolerance(self):
        assert is_within_tolerance(Decimal("1000000"), Decimal("999"), Decimal("0.001"))

    def test_gap_at_tolerance_not_reconciled(self):
        assert not is_within_tolerance(Decimal("1000000"), Decimal("1000"), Decimal("0.001"))

    def test_zero_sender_zero_gap(self):
        assert is_within_tolerance(Decimal("0"), Decimal("0"), Decimal("0.001"))

    def test_zero_sender_nonzero_gap(self):
        assert not is_within_tolerance(Decimal("0"), Decimal("5"), Decimal("0.001"))


class TestMatchedPairs:
    """Tests for receivable-anchored pass."""

    def setup_method(self):
        self.matcher = ICReconciliationMatcher()

    def test_symmetric_pair_reconciled(self):
        rows = [receivable("A", "B", "1000"), payable("B", "A", "-1000")]

        pairs = self.matcher.reconcile(rows)

        assert len(pairs) == 1
        pair = pairs[0]
        assert pair.id == "A-B"
        assert pair.from_entity == "A"
        assert pair.to_entity == "B"
        assert pair.type == "Revenue"
        assert pair.sender_amt == Decimal("1000")
        assert pair.receiver_amt == Decimal("1000")
        assert pair.gap == Decimal("0")
        assert pair.reconciled is True
        assert pair.missing is False
        assert pair.orphan_payable is False

    def test_gap_beyond_tolerance(self):
        rows = [
            receivable("UST", "DEG", "1850000"),
            payable("DEG", "UST", "1802500", currency="EUR"),
        ]

        pair = self.matcher.reconcile(rows)[0]

        assert pair.gap == Decimal("47500")
        assert pair.reconciled is False
        assert pair.missing is False

    def test_cross_currency_reconciled_on_amount(self):
        """USS->UKL $2.4M vs GBP 2.4M: reconciled by amount, currency is a separate signal."""
        rows = [
            receivable("USS", "UKL", "2400000", currency="USD"),
            payable("UKL", "USS", "2400000", currency="GBP"),
        ]

        pairs = self.matcher.reconcile(rows)

        assert len(pairs) == 1
        assert pairs[0].gap == Decimal("0")
        assert pairs[0].reconciled is True
        assert pairs[0].sender_ccy == "USD"
        assert pairs[0].receiver_ccy == "GBP"
        assert pairs[0].is_cross_currency

    def test_missing_payable(self):
        rows = [receivable("UKL", "AUP", "380000", currency="GBP")]

        pairs = self.matcher.reconcile(rows)

        assert len(pairs) == 1
        pair = pairs[0]
        assert pair.missing is True
        assert pair.receiver_amt == Decimal("0")
        assert pair.gap == pair.sender_amt == Decimal("380000")
        assert pair.reconciled is False
        assert pair.receiver_ccy == "?"

    def test_same_direction_payable_is_not_a_match(self):
        """A payable posted by the sender itself does not mirror the receivable."""
        rows = [receivable("A", "B", "100"), payable("A", "B", "100")]

        pairs = self.matcher.reconcile(rows)

        assert pairs[0].missing is True
        assert pairs[1].orphan_payable is True
        assert pairs[1].id == "ORPHAN-A-B"

    def test_first_receivable_wins(self):
        rows = [
            receivable("A", "B", "100"),
            receivable("A", "B", "999"),
            payable("B", "A", "100"),
        ]

        pairs = self.matcher.reconcile(rows)

        assert len(pairs) == 1
        assert pairs[0].sender_amt == Decimal("100")
        assert pairs[0].reconciled is True

    def test_first_payable_used(self):
        rows = [
            receivable("A", "B", "100"),
            payable("B", "A", "60"),
            payable("B", "A", "100"),
        ]

        pairs = self.matcher.reconcile(rows)

        assert len(pairs) == 1
        assert pairs[0].receiver_amt == Decimal("60")

    def test_both_directions_are_separate_pairs(self):
        rows = [
            receivable("A", "B", "100"),
            receivable("B", "A", "50"),
            payable("B", "A", "100"),
            payable("A", "B", "50"),
        ]

        pairs = self.matcher.reconcile(rows)

        assert [p.id for p in pairs] == ["A-B", "B-A"]
        assert all(p.reconciled for p in pairs)

    def test_zero_amount_pair_reconciled(self):
        rows = [receivable("A", "B", "0"), payable("B", "A", "0")]

        assert self.matcher.reconcile(rows)[0].reconciled is True

    def test_negative_amounts_compared_absolute(self):
        rows = [receivable("A", "B", "-500"), payable("B", "A", "500")]

        pair = self.matcher.reconcile(rows)[0]

        assert pair.sender_amt == Decimal("500")
        assert pair.reconciled is True

    def test_configured_tolerance(self):
        config = AnalysisConfig(reconciliation_tolerance=Decimal("0.05"))
        rows = [
            receivable("UST", "DEG", "1850000"),
            payable("DEG", "UST", "1802500"),
        ]

        assert reconcile_intercompany(rows, config)[0].reconciled is True


class TestOrphanPayables:
    """Tests for the orphan payable pass."""

    def test_orphan_payable(self):
        rows = [payable("SGP", "DEG", "275000", currency="SGD", description="IC Payable - Procurement")]

        pairs = reconcile_intercompany(rows)

        assert len(pairs) == 1
        pair = pairs[0]
        assert pair.id == "ORPHAN-SGP-DEG"
        assert pair.from_entity == "DEG"
        assert pair.to_entity == "SGP"
        assert pair.type == "Procurement"
        assert pair.sender_amt == Decimal("0")
        assert pair.receiver_amt == Decimal("275000")
        assert pair.gap == pair.receiver_amt
        assert pair.reconciled is False
        assert pair.missing is False
        assert pair.orphan_payable is True
        assert pair.sender_ccy == "?"
        assert pair.receiver_ccy == "SGD"

    def test_matched_payable_not_double_counted(self):
        rows = [receivable("A", "B", "100"), payable("B", "A", "40")]

        pairs = reconcile_intercompany(rows)

        assert len(pairs) == 1
        assert not any(p.orphan_payable for p in pairs)

    def test_orphans_follow_matched_pairs(self):
        rows = [
            payable("X", "Y", "10"),
            receivable("A", "B", "100"),
            payable("Z", "W", "20"),
            payable("B", "A", "100"),
        ]

        pairs = reconcile_intercompany(rows)

        assert [p.id for p in pairs] == ["A-B", "ORPHAN-X-Y", "ORPHAN-Z-W"]


class TestFiltering:
    """Tests for rows that never take part in matching."""

    def test_other_types_ignored(self):
        rows = [
            TransactionRow(entity="A", counterparty="B", type="Revenue", amount=Decimal("10")),
            TransactionRow(entity="A", counterparty="B", type="ic_receivable", amount=Decimal("10")),
        ]

        assert reconcile_intercompany(rows) == ()

    def test_rows_without_counterparty_ignored(self):
        rows = [receivable("A", "", "100"), payable("B", "", "100")]

        assert reconcile_intercompany(rows) == ()

    def test_empty_input(self):
        assert reconcile_intercompany([]) == ()


class TestSampleDataset:
    """End-to-end matching of the bundled trial balance."""

    def test_sample_pairs(self, sample_dataset):
        pairs = reconcile_intercompany(sample_dataset.rows)

        assert [p.id for p in pairs] == [
            "USS-UKL", "UST-DEG", "USS-SGP", "UKL-AUP", "UST-JPN", "DEG-SGP",
        ]
        assert [p.reconciled for p in pairs] == [True, False, True, False, False, True]
        assert [p.missing for p in pairs] == [False, False, False, True, False, False]
        assert not any(p.orphan_payable for p in pairs)

    def test_idempotent(self, sample_dataset):
        matcher = ICReconciliationMatcher()

        assert matcher.reconcile(sample_dataset.rows) == matcher.reconcile(sample_dataset.rows)

    def test_to_dict_keys(self, sample_dataset):
        data = reconcile_intercompany(sample_dataset.rows)[0].to_dict()

        assert data["from"] == "USS"
        assert data["to"] == "UKL"
        assert data["senderAmt"] == Decimal("2400000")
        assert data["orphanPayable"] is False


_ids = st.sampled_from(["A", "B", "C", "D"])
_amounts = st.integers(min_value=-10_000, max_value=10_000)


@st.composite
def _ic_rows(draw):
    rows = []
    for _ in range(draw(st.integers(min_value=0, max_value=10))):
        entity, counterparty = draw(_ids), draw(_ids)
        factory = draw(st.sampled_from([receivable, payable]))
        rows.append(factory(entity, counterparty, draw(_amounts)))
    return rows


class TestMatcherProperties:
    """Property-based checks of pair structure."""

    @settings(max_examples=100, deadline=None)
    @given(rows=_ic_rows())
    def test_pair_invariants(self, rows):
        pairs = reconcile_intercompany(rows)

        matched_keys = {(p.from_entity, p.to_entity) for p in pairs if not p.orphan_payable}
        for pair in pairs:
            assert pair.gap == abs(pair.sender_amt - pair.receiver_amt)
            assert not (pair.missing and pair.orphan_payable)
            if pair.orphan_payable:
                assert pair.sender_amt == 0
                assert pair.reconciled is False
                # Never double-counted with a receivable-anchored pair
                assert (pair.from_entity, pair.to_entity) not in matched_keys
        assert len(matched_keys) == sum(1 for p in pairs if not p.orphan_payable)
