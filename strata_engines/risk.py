"""
strata_engines.risk -- Per-entity consolidation risk scoring.

Responsibility:
    Combine each operating entity's IC reconciliation exposure (mismatched
    pairs, cross-currency pairs, missing/orphaned sides, total gap) into a
    single 0-100 score, ranked highest first.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Consumes ``ICPair`` output from ``strata_engines.reconciliation``.

Invariants enforced:
    - Only entities whose type is one of ``AnalysisConfig.operating_types``
      are scored ("Operating" and "operating" by default, nothing else).
    - Component scores fx_risk and ic_complexity are capped at
      ``component_cap``; the total is clamped to [0, ``score_cap``].
    - Monotonic: raising any component never lowers the score.
    - Stable ranking: ties keep the filtered input order.

Failure modes:
    None.  No operating entities yields an empty tuple.

Usage:
    from strata_engines.risk import RiskScorer

    profiles = RiskScorer().score(entities, rows, pairs)
    worst = profiles[0] if profiles else None
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from strata_config import AnalysisConfig, get_default_config
from strata_engines.reconciliation import ICPair
from strata_engines.tracer import traced_engine
from strata_kernel.domain.formatting import risk_band
from strata_kernel.domain.records import Entity, TransactionRow
from strata_kernel.logging_config import get_logger

logger = get_logger("engines.risk")


@dataclass(frozen=True)
class RiskProfile:
    """Risk summary for one operating entity."""

    id: str
    entity: str  # display name
    score: int
    churn: int
    fx_risk: int
    ic_complexity: int
    ic_mismatches: int
    total_gap: Decimal

    @property
    def band(self) -> str:
        return risk_band(self.score)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "entity": self.entity,
            "score": self.score,
            "churn": self.churn,
            "fxRisk": self.fx_risk,
            "icComplexity": self.ic_complexity,
            "icMismatches": self.ic_mismatches,
            "totalGap": self.total_gap,
        }


class RiskScorer:
    """
    Pure engine for entity risk scoring.

    Contract:
        score = min(cap, mismatches*18 + fx_risk*8 + complexity*5
        + churn*15 + gap_bonus), weights taken from ``AnalysisConfig``.
    Non-goals:
        - Does not score Holding or Regional entities.
        - Does not read raw GL rows; every factor derives from IC pairs and
          the entity's own currency.
    """

    def __init__(self, config: AnalysisConfig | None = None) -> None:
        self._config = config or get_default_config()

    @traced_engine("risk", "1.0", fingerprint_fields=("entities", "pairs"))
    def score(
        self,
        entities: Sequence[Entity],
        rows: Sequence[TransactionRow],
        pairs: Sequence[ICPair],
    ) -> tuple[RiskProfile, ...]:
        """
        Score every operating entity.

        Args:
            entities: Full entity collection; non-operating ones are skipped.
            rows: The GL rows the pairs were derived from.
            pairs: Output of the IC reconciliation matcher.

        Returns:
            Profiles sorted by descending score (stable).
        """
        profiles = [
            self._profile(entity, pairs)
            for entity in entities
            if self._config.is_operating(entity.type)
        ]
        # list.sort is stable
        profiles.sort(key=lambda p: p.score, reverse=True)

        logger.info("risk_scoring_completed", extra={
            "scored_count": len(profiles),
            "row_count": len(rows),
            "max_score": profiles[0].score if profiles else None,
        })
        return tuple(profiles)

    def _profile(self, entity: Entity, pairs: Sequence[ICPair]) -> RiskProfile:
        cfg = self._config
        entity_pairs = [p for p in pairs if p.involves(entity.id)]

        ic_mismatches = sum(1 for p in entity_pairs if not p.reconciled)
        ic_complexity = min(cfg.component_cap, len(entity_pairs))
        multi_ccy = sum(1 for p in entity_pairs if p.is_cross_currency)
        foreign = 1 if entity.currency != cfg.base_currency else 0
        fx_risk = min(cfg.component_cap, multi_ccy + foreign)
        churn = sum(1 for p in entity_pairs if p.is_incomplete)
        total_gap = sum((p.gap for p in entity_pairs), Decimal("0"))

        raw = (
            ic_mismatches * cfg.mismatch_weight
            + fx_risk * cfg.fx_weight
            + ic_complexity * cfg.complexity_weight
            + churn * cfg.churn_weight
            + cfg.gap_bonus(total_gap)
        )
        return RiskProfile(
            id=entity.id,
            entity=entity.name,
            score=clamp_score(raw, cfg.score_cap),
            churn=churn,
            fx_risk=fx_risk,
            ic_complexity=ic_complexity,
            ic_mismatches=ic_mismatches,
            total_gap=total_gap,
        )


def clamp_score(raw: int, cap: int = 100) -> int:
    """Round and clamp a raw score into [0, cap]."""
    return max(0, min(cap, int(round(raw))))


def score_entities(
    entities: Sequence[Entity],
    rows: Sequence[TransactionRow],
    pairs: Sequence[ICPair],
    config: AnalysisConfig | None = None,
) -> tuple[RiskProfile, ...]:
    """Convenience wrapper around ``RiskScorer.score``."""
    return RiskScorer(config).score(entities, rows, pairs)
