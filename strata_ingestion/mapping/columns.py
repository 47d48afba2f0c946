"""
Column aliasing: pure resolution of source headers to record fields.

Headers are compared case-insensitively after trimming, against a fixed
alias list per field.  The first header (in source order) that matches
any alias wins.  ZERO I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from strata_kernel.exceptions import MissingColumnError


@dataclass(frozen=True)
class ColumnSpec:
    """A record field and the source header spellings that map to it."""

    field: str
    label: str  # Name used in error messages
    aliases: frozenset[str]
    required: bool = False


HIERARCHY_COLUMNS: tuple[ColumnSpec, ...] = (
    ColumnSpec("id", "EntityID", frozenset({
        "entityid", "id", "entity id", "entity_id", "code", "entitycode",
    }), required=True),
    ColumnSpec("name", "EntityName", frozenset({
        "entityname", "name", "entity name", "entity_name", "description",
    }), required=True),
    ColumnSpec("parent", "ParentID", frozenset({
        "parentid", "parent id", "parent_id", "parent", "parentcode", "parent code",
    })),
    ColumnSpec("type", "EntityType", frozenset({
        "entitytype", "type", "entity type", "entity_type",
    })),
    ColumnSpec("region", "Region", frozenset({"region"})),
    ColumnSpec("currency", "Currency", frozenset({
        "currency", "ccy", "functional currency",
    })),
)

TRANSACTION_COLUMNS: tuple[ColumnSpec, ...] = (
    ColumnSpec("entity", "Entity", frozenset({
        "entity", "entity id", "entityid",
    }), required=True),
    ColumnSpec("counterparty", "CounterpartyEntity", frozenset({
        "counterpartyentity", "counterparty", "counterparty entity",
        "ic counterparty", "icpartner",
    })),
    ColumnSpec("description", "AccountDescription", frozenset({
        "accountdescription", "description", "account description",
        "accountname", "account name",
    })),
    ColumnSpec("type", "AccountType", frozenset({
        "accounttype", "type", "account type", "account_type",
    })),
    ColumnSpec("amount", "Amount", frozenset({
        "amount", "balance", "value", "net amount",
    }), required=True),
    ColumnSpec("currency", "Currency", frozenset({"currency", "ccy"})),
)


def find_column(header: Sequence[str], aliases: frozenset[str]) -> str | None:
    """Return the first header matching an alias, or None."""
    for column in header:
        if column.strip().lower() in aliases:
            return column
    return None


def resolve_columns(
    header: Sequence[str],
    specs: Sequence[ColumnSpec],
    source: str,
) -> dict[str, str | None]:
    """
    Map each spec's field to its source header.

    Returns:
        field -> header name, or None for an absent optional column.

    Raises:
        MissingColumnError: naming every required column that is absent.
    """
    resolved = {spec.field: find_column(header, spec.aliases) for spec in specs}
    missing = tuple(
        spec.label for spec in specs if spec.required and resolved[spec.field] is None
    )
    if missing:
        raise MissingColumnError(source, missing, tuple(header))
    return resolved
