"""
strata_services.analysis_service -- One end-to-end analysis run.

Responsibility:
    Runs the four engines over an immutable input snapshot in dependency
    order and bundles their outputs into an ``AnalysisResult``.

Architecture position:
    Services -- orchestration over pure engines.  Owns the clock and the
    run-scoped log context; holds no state between runs.

Invariants enforced:
    - Data flows forward only: validator and matcher see raw records, the
      scorer sees the matcher's pairs, the log builder sees everything.
    - Re-running with the same inputs and clock yields an equal result;
      nothing accumulates across runs.

Failure modes:
    None beyond those of the engines (which have none for well-formed
    records).  Ingestion errors are raised before this service is called.

Usage:
    from strata_services import AnalysisService

    result = AnalysisService().run(entities, rows)
    for profile in result.profiles[:3]:
        print(profile.entity, profile.score)
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any
from uuid import uuid4

from strata_config import AnalysisConfig, compute_checksum, get_default_config
from strata_engines import (
    AuditLogBuilder,
    HierarchyValidator,
    ICPair,
    ICReconciliationMatcher,
    Issue,
    LogEntry,
    RiskProfile,
    RiskScorer,
)
from strata_kernel.domain.clock import Clock, SystemClock
from strata_kernel.domain.records import Entity, TransactionRow
from strata_kernel.logging_config import LogContext, get_logger

logger = get_logger("services.analysis")


@dataclass(frozen=True)
class AnalysisResult:
    """Inputs and every derived collection of one run."""

    entities: tuple[Entity, ...]
    rows: tuple[TransactionRow, ...]
    issues: tuple[Issue, ...]
    pairs: tuple[ICPair, ...]
    profiles: tuple[RiskProfile, ...]
    audit_log: tuple[LogEntry, ...]

    @property
    def unreconciled_pairs(self) -> tuple[ICPair, ...]:
        return tuple(p for p in self.pairs if not p.reconciled)

    @property
    def total_gap(self) -> Decimal:
        return sum((p.gap for p in self.pairs), Decimal("0"))

    @property
    def highest_risk(self) -> RiskProfile | None:
        return self.profiles[0] if self.profiles else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "entities": [e.to_dict() for e in self.entities],
            "issues": [i.to_dict() for i in self.issues],
            "icPairs": [p.to_dict() for p in self.pairs],
            "riskScores": [r.to_dict() for r in self.profiles],
            "auditLog": [entry.to_dict() for entry in self.audit_log],
        }


class AnalysisService:
    """
    Runs hierarchy validation, IC reconciliation, risk scoring and audit
    log building as one unit.

    Contract:
        ``run`` is a pure function of its arguments, the config and the
        clock reading.
    """

    def __init__(self, config: AnalysisConfig | None = None, clock: Clock | None = None):
        self._config = config or get_default_config()
        self._clock = clock or SystemClock()
        self._validator = HierarchyValidator(self._config)
        self._matcher = ICReconciliationMatcher(self._config)
        self._scorer = RiskScorer(self._config)
        self._log_builder = AuditLogBuilder(self._clock)

    @property
    def config(self) -> AnalysisConfig:
        return self._config

    def run(
        self,
        entities: Sequence[Entity],
        rows: Sequence[TransactionRow],
    ) -> AnalysisResult:
        """Analyse one hierarchy/trial-balance snapshot."""
        entities = tuple(entities)
        rows = tuple(rows)
        run_id = str(uuid4())

        with LogContext.bind(run_id=run_id, config_checksum=compute_checksum(self._config)[:16]):
            t0 = time.monotonic()
            logger.info("analysis_started", extra={
                "entity_count": len(entities),
                "row_count": len(rows),
            })

            issues = self._validator.validate(entities)
            pairs = self._matcher.reconcile(rows)
            profiles = self._scorer.score(entities, rows, pairs)
            audit_log = self._log_builder.build(entities, pairs, issues)

            result = AnalysisResult(
                entities=entities,
                rows=rows,
                issues=issues,
                pairs=pairs,
                profiles=profiles,
                audit_log=audit_log,
            )
            logger.info("analysis_completed", extra={
                "issue_count": len(issues),
                "pair_count": len(pairs),
                "unreconciled_count": len(result.unreconciled_pairs),
                "total_gap": result.total_gap,
                "profile_count": len(profiles),
                "duration_ms": round((time.monotonic() - t0) * 1000, 2),
            })
        return result
