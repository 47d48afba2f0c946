"""
strata_ingestion.parsers -- Build engine input records from source rows.

Responsibility:
    Turn raw header-keyed rows (from ``CsvSourceAdapter``) into immutable
    ``Entity`` and ``TransactionRow`` records: resolve aliased headers,
    trim cells, apply field defaults, coerce amounts.

Architecture position:
    Ingestion -- the only layer that raises on malformed input.  Engines
    never see a partially-invalid record.

Invariants enforced:
    - Required columns (hierarchy: id + name; transactions: entity +
      amount) must resolve, else ``MissingColumnError`` names them.
    - A source with no data rows raises ``EmptySourceError``.
    - Entity defaults: type "Operating", currency "USD", parent None,
      region "".  Transaction optional fields default to "".
    - Entities without id or name, and rows without entity, are dropped.
    - Unparseable amounts become 0 (logged, never raised).

Usage:
    from strata_ingestion import load_hierarchy_csv, load_transactions_csv

    entities = load_hierarchy_csv(Path("hierarchy.csv"))
    rows = load_transactions_csv(Path("trial_balance.csv"))
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from strata_ingestion.adapters.csv_adapter import CsvSourceAdapter
from strata_ingestion.mapping.coercion import clean_text, coerce_amount
from strata_ingestion.mapping.columns import (
    HIERARCHY_COLUMNS,
    TRANSACTION_COLUMNS,
    resolve_columns,
)
from strata_kernel.domain.records import Entity, TransactionRow
from strata_kernel.exceptions import EmptySourceError, SourceDecodeError
from strata_kernel.logging_config import get_logger

logger = get_logger("ingestion.parsers")

SAMPLES_DIR = Path(__file__).parent / "samples"

HIERARCHY_SOURCE = "Hierarchy"
TRANSACTIONS_SOURCE = "Trial balance"


def _cell(row: dict[str, Any], column: str | None, default: str = "") -> str:
    if column is None:
        return default
    return clean_text(row.get(column), default)


def _materialize(
    records: Iterable[dict[str, Any]],
    source: str,
    encoding: str = "utf-8",
) -> list[dict[str, Any]]:
    try:
        rows = list(records)
    except UnicodeDecodeError as e:
        raise SourceDecodeError(source, encoding) from e
    if not rows:
        raise EmptySourceError(source)
    return rows


def parse_hierarchy(
    records: Iterable[dict[str, Any]],
    *,
    encoding: str = "utf-8",
) -> tuple[Entity, ...]:
    """
    Parse hierarchy rows into entities.

    Raises:
        EmptySourceError: no data rows.
        MissingColumnError: no id-like or name-like column.
        SourceDecodeError: file bytes are not valid ``encoding``.
    """
    rows = _materialize(records, HIERARCHY_SOURCE, encoding)
    cols = resolve_columns(tuple(rows[0].keys()), HIERARCHY_COLUMNS, HIERARCHY_SOURCE)

    entities: list[Entity] = []
    for row in rows:
        entity_id = _cell(row, cols["id"])
        name = _cell(row, cols["name"])
        if not entity_id or not name:
            continue
        entities.append(Entity(
            id=entity_id,
            name=name,
            parent=_cell(row, cols["parent"]) or None,
            type=_cell(row, cols["type"], "Operating"),
            region=_cell(row, cols["region"]),
            currency=_cell(row, cols["currency"], "USD"),
        ))

    logger.info("hierarchy_parsed", extra={
        "row_count": len(rows),
        "entity_count": len(entities),
        "dropped_count": len(rows) - len(entities),
    })
    return tuple(entities)


def parse_transactions(
    records: Iterable[dict[str, Any]],
    *,
    encoding: str = "utf-8",
) -> tuple[TransactionRow, ...]:
    """
    Parse trial-balance rows into transaction rows.

    Raises:
        EmptySourceError: no data rows.
        MissingColumnError: no entity-like or amount-like column.
        SourceDecodeError: file bytes are not valid ``encoding``.
    """
    rows = _materialize(records, TRANSACTIONS_SOURCE, encoding)
    cols = resolve_columns(tuple(rows[0].keys()), TRANSACTION_COLUMNS, TRANSACTIONS_SOURCE)

    parsed: list[TransactionRow] = []
    for index, row in enumerate(rows, start=1):
        entity = _cell(row, cols["entity"])
        if not entity:
            continue
        raw_amount = row.get(cols["amount"])
        amount, ok = coerce_amount(raw_amount)
        if not ok:
            logger.warning("amount_coerced_to_zero", extra={
                "source_row": index,
                "entity": entity,
                "raw_amount": str(raw_amount),
            })
        parsed.append(TransactionRow(
            entity=entity,
            counterparty=_cell(row, cols["counterparty"]),
            description=_cell(row, cols["description"]),
            type=_cell(row, cols["type"]),
            amount=amount,
            currency=_cell(row, cols["currency"]),
        ))

    logger.info("transactions_parsed", extra={
        "row_count": len(rows),
        "parsed_count": len(parsed),
    })
    return tuple(parsed)


# -----------------------------------------------------------------------------
# File / text convenience loaders
# -----------------------------------------------------------------------------


def load_hierarchy_csv(path: Path, options: dict[str, Any] | None = None) -> tuple[Entity, ...]:
    options = options or {}
    return parse_hierarchy(
        CsvSourceAdapter().read(Path(path), options),
        encoding=options.get("encoding", "utf-8"),
    )


def load_transactions_csv(
    path: Path,
    options: dict[str, Any] | None = None,
) -> tuple[TransactionRow, ...]:
    options = options or {}
    return parse_transactions(
        CsvSourceAdapter().read(Path(path), options),
        encoding=options.get("encoding", "utf-8"),
    )


def hierarchy_from_text(text: str, options: dict[str, Any] | None = None) -> tuple[Entity, ...]:
    return parse_hierarchy(CsvSourceAdapter().read_text(text, options or {}))


def transactions_from_text(
    text: str,
    options: dict[str, Any] | None = None,
) -> tuple[TransactionRow, ...]:
    return parse_transactions(CsvSourceAdapter().read_text(text, options or {}))


@dataclass(frozen=True)
class SampleDataset:
    """The bundled demo hierarchy and trial balance."""

    entities: tuple[Entity, ...]
    rows: tuple[TransactionRow, ...]


def load_sample_dataset() -> SampleDataset:
    """Load the bundled sample hierarchy and trial balance."""
    return SampleDataset(
        entities=load_hierarchy_csv(SAMPLES_DIR / "hierarchy.csv"),
        rows=load_transactions_csv(SAMPLES_DIR / "trial_balance.csv"),
    )
