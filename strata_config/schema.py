"""
AnalysisConfig schema.

Every constant the engines consult lives here: the reconciliation
tolerance, the categorical literals that scope the hierarchy and risk
checks, and the risk score weights.  YAML override files are parsed into
this type by the loader.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class AnalysisConfig:
    """Frozen settings for one analysis run.

    ``operating_types`` is the explicit normalization rule for the risk
    scorer's entity filter: only these exact spellings count as operating
    entities.
    """

    # Reconciliation
    reconciliation_tolerance: Decimal = Decimal("0.001")  # relative to sender amount
    unknown_currency: str = "?"

    # Hierarchy
    global_region: str = "Global"
    regional_type: str = "Regional"

    # Risk scoring
    base_currency: str = "USD"
    operating_types: tuple[str, ...] = ("Operating", "operating")
    mismatch_weight: int = 18
    fx_weight: int = 8
    complexity_weight: int = 5
    churn_weight: int = 15
    component_cap: int = 5
    score_cap: int = 100
    # (total gap strictly above, bonus), highest threshold first
    gap_bonus_bands: tuple[tuple[Decimal, int], ...] = (
        (Decimal("500000"), 15),
        (Decimal("100000"), 8),
    )

    def is_operating(self, entity_type: str) -> bool:
        return entity_type in self.operating_types

    def gap_bonus(self, total_gap: Decimal) -> int:
        for threshold, bonus in self.gap_bonus_bands:
            if total_gap > threshold:
                return bonus
        return 0
