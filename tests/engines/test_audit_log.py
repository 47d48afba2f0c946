"""
Tests for the Audit Log Builder.

Covers:
- Entry ordering (summary, issues, pairs)
- Entry types per severity and reconciliation state
- Single shared capture timestamp from the injected clock
"""

from datetime import datetime, timezone
from decimal import Decimal

from builders import make_entity
from strata_engines.audit_log import AuditLogBuilder, LogEntryType, build_audit_log
from strata_engines.hierarchy import Issue, IssueSeverity, IssueType, validate_hierarchy
from strata_engines.reconciliation import ICPair, reconcile_intercompany


def _issue(severity: IssueSeverity) -> Issue:
    return Issue(
        id="X-1",
        type=IssueType.WRONG_PARENT,
        severity=severity,
        entity="JPN",
        title="Region / Parent Mismatch",
        desc="",
        fix="",
    )


def _orphan() -> ICPair:
    return ICPair(
        id="ORPHAN-SGP-DEG",
        from_entity="DEG",
        to_entity="SGP",
        type="Procurement",
        sender_amt=Decimal("0"),
        receiver_amt=Decimal("275000"),
        gap=Decimal("275000"),
        reconciled=False,
        missing=False,
        orphan_payable=True,
        sender_ccy="?",
        receiver_ccy="SGD",
    )


class TestAuditLogBuilder:
    """Tests for narrative construction."""

    def test_empty_run_has_summary_only(self, deterministic_clock):
        entries = build_audit_log([], [], [], clock=deterministic_clock)

        assert len(entries) == 1
        assert entries[0].action == "Hierarchy scan completed"
        assert entries[0].detail == "0 entities scanned"
        assert entries[0].type == LogEntryType.INFO

    def test_issue_types_follow_severity(self, deterministic_clock):
        issues = [_issue(IssueSeverity.HIGH), _issue(IssueSeverity.MEDIUM)]

        entries = build_audit_log([make_entity("A")], [], issues, clock=deterministic_clock)

        assert [e.type for e in entries[1:]] == [LogEntryType.ERROR, LogEntryType.WARN]
        assert entries[1].action == "Issue: Region / Parent Mismatch"
        assert entries[1].detail == "JPN"

    def test_orphan_gap_entry_has_no_missing_suffix(self, deterministic_clock):
        entries = build_audit_log([], [_orphan()], [], clock=deterministic_clock)

        assert entries[1].action == "IC gap: DEG → SGP"
        assert entries[1].detail == "Gap: $275K"
        assert entries[1].type == LogEntryType.ERROR

    def test_single_timestamp_per_run(self, deterministic_clock, sample_dataset):
        pairs = reconcile_intercompany(sample_dataset.rows)

        entries = AuditLogBuilder(deterministic_clock).build(
            sample_dataset.entities, pairs, ()
        )

        assert {e.captured_at for e in entries} == {deterministic_clock.now()}
        assert all(e.time == "17:45:09" for e in entries)

    def test_clock_read_at_build_time(self, deterministic_clock):
        builder = AuditLogBuilder(deterministic_clock)
        deterministic_clock.set_time(datetime(2024, 6, 1, 8, 0, 0, tzinfo=timezone.utc))

        entries = builder.build([], [], [])

        assert entries[0].time == "08:00:00"

    def test_each_run_gets_its_own_capture_time(self, deterministic_clock, sample_dataset):
        builder = AuditLogBuilder(deterministic_clock)
        pairs = reconcile_intercompany(sample_dataset.rows)

        first = builder.build(sample_dataset.entities, pairs, [])
        deterministic_clock.advance(75)
        second = builder.build(sample_dataset.entities, pairs, [])

        assert {e.time for e in first} == {"17:45:09"}
        assert {e.time for e in second} == {"17:46:24"}
        assert [e.detail for e in first] == [e.detail for e in second]

    def test_sample_narrative(self, deterministic_clock, sample_dataset):
        issues = validate_hierarchy(sample_dataset.entities)
        pairs = reconcile_intercompany(sample_dataset.rows)

        entries = build_audit_log(
            sample_dataset.entities, pairs, issues, clock=deterministic_clock
        )

        assert [(e.action, e.detail, e.type.value) for e in entries] == [
            ("Hierarchy scan completed", "12 entities scanned", "info"),
            ("Issue: Region / Parent Mismatch", "JPN", "error"),
            ("IC reconciled: USS → UKL", "$2.40M", "info"),
            ("IC gap: UST → DEG", "Gap: $48K", "error"),
            ("IC reconciled: USS → SGP", "$620K", "info"),
            ("IC gap: UKL → AUP", "Gap: $380K (MISSING)", "error"),
            ("IC gap: UST → JPN", "Gap: $21K", "error"),
            ("IC reconciled: DEG → SGP", "$275K", "info"),
        ]

    def test_entry_to_dict(self, deterministic_clock):
        entry = build_audit_log([], [], [], clock=deterministic_clock)[0]

        assert entry.to_dict() == {
            "time": "17:45:09",
            "action": "Hierarchy scan completed",
            "detail": "0 entities scanned",
            "type": "info",
        }
