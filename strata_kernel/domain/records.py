"""
Records -- Immutable input records for the analysis engines.

Responsibility:
    Defines the two record types the ingestion layer produces and every
    engine consumes: ``Entity`` (a node in the legal-entity tree) and
    ``TransactionRow`` (one intercompany GL line).

Architecture position:
    Kernel > Domain -- pure data definitions, zero I/O.

Invariants enforced:
    - Frozen dataclasses: records are never mutated after ingestion.
    - Amounts are ``Decimal`` -- NEVER ``float``.
    - Entity id uniqueness is NOT enforced here.  Duplicate names are
      reported by the hierarchy validator; duplicate ids pass through.

Failure modes:
    None.  Field trimming and defaulting happen at the ingestion boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

IC_RECEIVABLE = "IC_Receivable"
IC_PAYABLE = "IC_Payable"


@dataclass(frozen=True, slots=True)
class Entity:
    """A legal entity in the consolidation hierarchy.

    ``parent`` is None for a root.  ``type`` is an open enumeration
    (Holding, Regional, Operating, ...).
    """

    id: str
    name: str
    parent: str | None = None
    type: str = "Operating"
    region: str = ""
    currency: str = "USD"

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "parent": self.parent,
            "type": self.type,
            "region": self.region,
            "currency": self.currency,
        }


@dataclass(frozen=True, slots=True)
class TransactionRow:
    """One GL line posted by ``entity`` against ``counterparty``."""

    entity: str
    counterparty: str = ""
    description: str = ""
    type: str = ""
    amount: Decimal = Decimal("0")
    currency: str = ""

    @property
    def is_ic_receivable(self) -> bool:
        """True for a receivable with a named counterparty."""
        return self.type == IC_RECEIVABLE and bool(self.counterparty)

    @property
    def is_ic_payable(self) -> bool:
        """True for a payable with a named counterparty."""
        return self.type == IC_PAYABLE and bool(self.counterparty)

    def to_dict(self) -> dict[str, Any]:
        return {
            "entity": self.entity,
            "counterparty": self.counterparty,
            "description": self.description,
            "type": self.type,
            "amount": self.amount,
            "currency": self.currency,
        }
