"""Source adapters: read files or text into one dict per record."""

from strata_ingestion.adapters.base import SourceAdapter, SourceProbe
from strata_ingestion.adapters.csv_adapter import CsvSourceAdapter

__all__ = ["CsvSourceAdapter", "SourceAdapter", "SourceProbe"]
