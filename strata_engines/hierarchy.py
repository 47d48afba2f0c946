"""
strata_engines.hierarchy -- Structural integrity checks for the legal-entity tree.

Responsibility:
    Scan the entity collection for duplicate names (potential redundant
    roll-ups), parent references that do not resolve, and entities
    parented under a Regional entity of a different region.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Imports only strata_kernel domain records and strata_config settings.

Invariants enforced:
    - Determinism: identical inputs produce identical issues in identical
      order; no internal state or clock access.
    - Ordering: all duplicate-name issues (in name-group discovery order),
      then per-entity parent issues (in input order).
    - One ``redundant_rollup`` issue per duplicate-name group, not per
      duplicate.
    - ``invalid_parent`` and ``wrong_parent`` are mutually exclusive for
      an entity: an unresolved parent skips the region check.

Failure modes:
    None.  Empty input yields an empty tuple.

Usage:
    from strata_engines.hierarchy import HierarchyValidator

    issues = HierarchyValidator().validate(entities)
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from strata_config import AnalysisConfig, get_default_config
from strata_engines.tracer import traced_engine
from strata_kernel.domain.records import Entity
from strata_kernel.logging_config import get_logger

logger = get_logger("engines.hierarchy")

_WHITESPACE = re.compile(r"\s+")


class IssueType(str, Enum):
    """Category of a hierarchy finding."""

    REDUNDANT_ROLLUP = "redundant_rollup"  # Same entity appears twice
    INVALID_PARENT = "invalid_parent"  # Parent id does not resolve
    WRONG_PARENT = "wrong_parent"  # Region differs from Regional parent


class IssueSeverity(str, Enum):
    """Severity of a hierarchy finding."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class Issue:
    """
    A structural finding in the hierarchy.

    ``id`` is derived from the implicated entity ids, so two findings that
    key identically collapse to the same id.
    """

    id: str
    type: IssueType
    severity: IssueSeverity
    entity: str
    title: str
    desc: str
    fix: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "severity": self.severity.value,
            "entity": self.entity,
            "title": self.title,
            "desc": self.desc,
            "fix": self.fix,
        }


def normalize_name(name: str) -> str:
    """Case-fold, collapse internal whitespace and trim."""
    return _WHITESPACE.sub(" ", name.casefold()).strip()


class HierarchyValidator:
    """
    Pure engine for hierarchy integrity checks.

    Contract:
        Total function over entity records.  No I/O, no database access.
    Non-goals:
        - Does not detect duplicate ids; only duplicate names.
        - Does not detect parent cycles.
    """

    def __init__(self, config: AnalysisConfig | None = None) -> None:
        self._config = config or get_default_config()

    @traced_engine("hierarchy", "1.0", fingerprint_fields=("entities",))
    def validate(self, entities: Sequence[Entity]) -> tuple[Issue, ...]:
        """
        Return every structural issue in the hierarchy.

        Args:
            entities: The full entity collection.

        Returns:
            Duplicate-name issues followed by parent issues.
        """
        issues = list(self._duplicate_names(entities))

        # First entity wins when ids repeat
        by_id: dict[str, Entity] = {}
        for entity in entities:
            by_id.setdefault(entity.id, entity)

        for entity in entities:
            if entity.parent is None:
                continue
            parent = by_id.get(entity.parent)
            if parent is None:
                issues.append(_invalid_parent_issue(entity))
            elif self._is_region_mismatch(entity, parent):
                issues.append(_wrong_parent_issue(entity, parent))

        if issues:
            logger.info("hierarchy_issues_detected", extra={
                "entity_count": len(entities),
                "issue_count": len(issues),
            })
        return tuple(issues)

    def _duplicate_names(self, entities: Sequence[Entity]) -> list[Issue]:
        groups: dict[str, list[str]] = {}
        for entity in entities:
            groups.setdefault(normalize_name(entity.name), []).append(entity.id)

        issues: list[Issue] = []
        for name, ids in groups.items():
            if len(ids) < 2:
                continue
            issues.append(Issue(
                id=f"DUP-{'-'.join(ids)}",
                type=IssueType.REDUNDANT_ROLLUP,
                severity=IssueSeverity.HIGH,
                entity=ids[1],  # first id is treated as canonical
                title="Potential Duplicate Entity",
                desc=(
                    f'"{name}" appears {len(ids)} times ({", ".join(ids)}). '
                    f"This may cause double-counting in IC eliminations."
                ),
                fix=(
                    f"Review {' and '.join(ids)}: archive the redundant entity "
                    f"and remap its transactions."
                ),
            ))
        return issues

    def _is_region_mismatch(self, entity: Entity, parent: Entity) -> bool:
        """Only a declared Regional parent with a specific region is checked."""
        return (
            bool(entity.region)
            and bool(parent.region)
            and parent.region != self._config.global_region
            and parent.type == self._config.regional_type
            and entity.region != parent.region
        )


def _invalid_parent_issue(entity: Entity) -> Issue:
    return Issue(
        id=f"INV-{entity.id}",
        type=IssueType.INVALID_PARENT,
        severity=IssueSeverity.HIGH,
        entity=entity.id,
        title="Invalid Parent Reference",
        desc=(
            f'"{entity.name}" references parent "{entity.parent}" '
            f"which does not exist in the hierarchy."
        ),
        fix=f"Assign a valid parent to {entity.name} or add the missing parent entity.",
    )


def _wrong_parent_issue(entity: Entity, parent: Entity) -> Issue:
    return Issue(
        id=f"RGN-{entity.id}",
        type=IssueType.WRONG_PARENT,
        severity=IssueSeverity.HIGH,
        entity=entity.id,
        title="Region / Parent Mismatch",
        desc=(
            f'"{entity.name}" is in region {entity.region} but sits under '
            f'"{parent.name}" ({parent.region}). This misclassifies revenue '
            f"and costs in the wrong regional P&L."
        ),
        fix=f"Re-parent {entity.name} to the correct regional entity for {entity.region}.",
    )


def validate_hierarchy(
    entities: Sequence[Entity],
    config: AnalysisConfig | None = None,
) -> tuple[Issue, ...]:
    """Convenience wrapper around ``HierarchyValidator.validate``."""
    return HierarchyValidator(config).validate(entities)
