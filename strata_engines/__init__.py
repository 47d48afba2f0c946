"""
Module: strata_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the analysis
    engines.  This is the canonical import surface for strata_services.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import strata_kernel and strata_config.
    MUST NOT import strata_ingestion or strata_services.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()``; the audit log builder
      takes an injected Clock.
    - Decimal-only arithmetic for amounts; floats are never introduced.
    - Determinism: identical inputs always produce identical outputs,
      including order.

Data flow:
    entities -> HierarchyValidator -> issues
    rows     -> ICReconciliationMatcher -> pairs
    entities + rows + pairs -> RiskScorer -> profiles
    entities + pairs + issues -> AuditLogBuilder -> log entries

Usage:
    from strata_engines import reconcile_intercompany, validate_hierarchy

    issues = validate_hierarchy(entities)
    pairs = reconcile_intercompany(rows)
"""

from strata_engines.audit_log import (
    AuditLogBuilder,
    LogEntry,
    LogEntryType,
    build_audit_log,
)
from strata_engines.hierarchy import (
    HierarchyValidator,
    Issue,
    IssueSeverity,
    IssueType,
    normalize_name,
    validate_hierarchy,
)
from strata_engines.reconciliation import (
    ICPair,
    ICReconciliationMatcher,
    reconcile_intercompany,
    strip_ic_prefix,
)
from strata_engines.risk import RiskProfile, RiskScorer, score_entities
from strata_engines.tracer import traced_engine

__all__ = [
    "AuditLogBuilder",
    "LogEntry",
    "LogEntryType",
    "build_audit_log",
    "HierarchyValidator",
    "Issue",
    "IssueSeverity",
    "IssueType",
    "normalize_name",
    "validate_hierarchy",
    "ICPair",
    "ICReconciliationMatcher",
    "reconcile_intercompany",
    "strip_ic_prefix",
    "RiskProfile",
    "RiskScorer",
    "score_entities",
    "traced_engine",
]
