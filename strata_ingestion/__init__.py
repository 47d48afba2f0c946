"""
strata_ingestion -- CSV ingestion boundary for the analysis engines.

Reads delimited hierarchy and trial-balance exports, resolves their
headers through case-insensitive aliases, and produces the immutable
``Entity`` / ``TransactionRow`` records the engines consume.  Every
ingestion failure is raised here, before any record reaches an engine.
"""

from strata_ingestion.parsers import (
    SampleDataset,
    hierarchy_from_text,
    load_hierarchy_csv,
    load_sample_dataset,
    load_transactions_csv,
    parse_hierarchy,
    parse_transactions,
    transactions_from_text,
)

__all__ = [
    "SampleDataset",
    "hierarchy_from_text",
    "load_hierarchy_csv",
    "load_sample_dataset",
    "load_transactions_csv",
    "parse_hierarchy",
    "parse_transactions",
    "transactions_from_text",
]
