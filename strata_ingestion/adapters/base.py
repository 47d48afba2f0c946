"""
Adapter contract for hierarchy and trial-balance sources.

An adapter turns a file (or in-memory text) into header-keyed dicts, one
per data row, with every cell left as the source spelled it.  Header
aliasing and type coercion happen later, in ``strata_ingestion.mapping``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Protocol, runtime_checkable


@runtime_checkable
class SourceAdapter(Protocol):

    def read(self, source_path: Path, options: dict[str, Any]) -> Iterator[dict[str, Any]]:
        """Stream the data rows of a file."""
        ...

    def read_text(self, text: str, options: dict[str, Any]) -> Iterator[dict[str, Any]]:
        """Stream the data rows of pasted or uploaded text."""
        ...

    def probe(self, source_path: Path, options: dict[str, Any]) -> "SourceProbe":
        """Header and row count of a file, plus its first few rows."""
        ...


@dataclass(frozen=True)
class SourceProbe:
    """What a quick look at a source file found."""

    row_count: int
    columns: tuple[str, ...]
    sample_rows: tuple[dict[str, Any], ...]
    encoding: str | None = None
    delimiter: str | None = None
    skipped_rows: int = 0  # preamble lines before the header
