"""
strata_services.context_brief -- Flatten an analysis into a textual brief.

Responsibility:
    Render entities, issues, IC pairs and risk profiles as plain text for
    an external conversational agent.  Read-only: nothing is recomputed.

Invariants enforced:
    - Deterministic: the same inputs always render the same text.
    - Amounts use ``format_amount`` ("$2.40M").
"""

from __future__ import annotations

from collections.abc import Sequence

from strata_engines.hierarchy import Issue
from strata_engines.reconciliation import ICPair
from strata_engines.risk import RiskProfile
from strata_kernel.domain.formatting import format_amount
from strata_kernel.domain.records import Entity


def pair_status(pair: ICPair) -> str:
    if pair.reconciled:
        return "RECONCILED"
    if pair.missing:
        return "MISSING PAYABLE"
    if pair.orphan_payable:
        return "ORPHAN PAYABLE"
    return "GAP"


def _entity_line(e: Entity) -> str:
    return (
        f"- {e.name} ({e.id}): {e.type}, parent: {e.parent or 'ROOT'}, "
        f"region: {e.region}, currency: {e.currency}"
    )


def _issue_line(i: Issue) -> str:
    return f"- {i.title} [{i.severity.value}]: {i.desc} FIX: {i.fix}"


def _pair_line(p: ICPair) -> str:
    return (
        f"- {p.from_entity} → {p.to_entity}: {p.type}, "
        f"Sender: {format_amount(p.sender_amt)}, "
        f"Receiver: {format_amount(p.receiver_amt)}, "
        f"Gap: {format_amount(p.gap)}, Status: {pair_status(p)}"
    )


def _profile_line(r: RiskProfile) -> str:
    return (
        f"- {r.entity} ({r.id}): {r.score}/100 [{r.band}]: "
        f"IC mismatches: {r.ic_mismatches}, FX risk: {r.fx_risk}/5, "
        f"IC complexity: {r.ic_complexity}/5, churn: {r.churn}"
    )


def build_context_brief(
    entities: Sequence[Entity],
    pairs: Sequence[ICPair],
    issues: Sequence[Issue],
    profiles: Sequence[RiskProfile],
) -> str:
    """Render the four analysis collections as a sectioned text brief."""
    sections = [
        f"CURRENT HIERARCHY ({len(entities)} entities):",
        "\n".join(_entity_line(e) for e in entities),
        "",
        f"DETECTED HIERARCHY ISSUES ({len(issues)}):",
        "\n".join(_issue_line(i) for i in issues) if issues else "None",
        "",
        f"IC RECONCILIATION ({len(pairs)} pairs):",
        "\n".join(_pair_line(p) for p in pairs) if pairs else "No IC data uploaded",
        "",
        "RISK SCORES:",
        "\n".join(_profile_line(r) for r in profiles) if profiles else "No risk data",
    ]
    return "\n".join(sections)
