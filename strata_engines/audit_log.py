"""
strata_engines.audit_log -- Chronological narrative of one analysis run.

Responsibility:
    Restate the hierarchy issues and IC pairs already computed for a run as
    an ordered list of log entries for display and export.

Architecture position:
    Engines -- pure calculation layer.  The capture time comes from an
    injected ``Clock``; the engine never reads the system time itself.

Invariants enforced:
    - Reporting view only: never re-derives or alters an issue or pair.
    - One capture timestamp per run, read once and shared by every entry.
    - Order: scan summary, then issues, then pairs, each in input order.

Failure modes:
    None.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from strata_engines.hierarchy import Issue, IssueSeverity
from strata_engines.reconciliation import ICPair
from strata_engines.tracer import traced_engine
from strata_kernel.domain.clock import Clock, SystemClock
from strata_kernel.domain.formatting import format_amount
from strata_kernel.domain.records import Entity


class LogEntryType(str, Enum):
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


@dataclass(frozen=True)
class LogEntry:
    """One line of the audit narrative."""

    captured_at: datetime
    action: str
    detail: str
    type: LogEntryType

    @property
    def time(self) -> str:
        """Wall-clock capture time as HH:MM:SS."""
        return self.captured_at.strftime("%H:%M:%S")

    def to_dict(self) -> dict[str, Any]:
        return {
            "time": self.time,
            "action": self.action,
            "detail": self.detail,
            "type": self.type.value,
        }


class AuditLogBuilder:
    """Builds the audit narrative from finished engine outputs."""

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or SystemClock()

    @traced_engine("audit_log", "1.0")
    def build(
        self,
        entities: Sequence[Entity],
        pairs: Sequence[ICPair],
        issues: Sequence[Issue],
    ) -> tuple[LogEntry, ...]:
        captured_at = self._clock.now()

        entries = [LogEntry(
            captured_at=captured_at,
            action="Hierarchy scan completed",
            detail=f"{len(entities)} entities scanned",
            type=LogEntryType.INFO,
        )]
        for issue in issues:
            entries.append(LogEntry(
                captured_at=captured_at,
                action=f"Issue: {issue.title}",
                detail=issue.entity,
                type=(
                    LogEntryType.ERROR
                    if issue.severity == IssueSeverity.HIGH
                    else LogEntryType.WARN
                ),
            ))
        for pair in pairs:
            entries.append(_pair_entry(pair, captured_at))
        return tuple(entries)


def _pair_entry(pair: ICPair, captured_at: datetime) -> LogEntry:
    route = f"{pair.from_entity} → {pair.to_entity}"
    if pair.reconciled:
        return LogEntry(
            captured_at=captured_at,
            action=f"IC reconciled: {route}",
            detail=format_amount(pair.sender_amt),
            type=LogEntryType.INFO,
        )
    suffix = " (MISSING)" if pair.missing else ""
    return LogEntry(
        captured_at=captured_at,
        action=f"IC gap: {route}",
        detail=f"Gap: {format_amount(pair.gap)}{suffix}",
        type=LogEntryType.ERROR,
    )


def build_audit_log(
    entities: Sequence[Entity],
    pairs: Sequence[ICPair],
    issues: Sequence[Issue],
    clock: Clock | None = None,
) -> tuple[LogEntry, ...]:
    """Convenience wrapper around ``AuditLogBuilder.build``."""
    return AuditLogBuilder(clock).build(entities, pairs, issues)
