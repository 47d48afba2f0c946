"""Header aliasing and value coercion for hierarchy and trial-balance sources."""

from strata_ingestion.mapping.coercion import clean_text, coerce_amount
from strata_ingestion.mapping.columns import (
    HIERARCHY_COLUMNS,
    TRANSACTION_COLUMNS,
    ColumnSpec,
    find_column,
    resolve_columns,
)

__all__ = [
    "HIERARCHY_COLUMNS",
    "TRANSACTION_COLUMNS",
    "ColumnSpec",
    "clean_text",
    "coerce_amount",
    "find_column",
    "resolve_columns",
]
