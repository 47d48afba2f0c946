"""
CSV source adapter.

Built on csv.DictReader.  Options: ``delimiter`` (default ","),
``encoding`` (default utf-8, read as utf-8-sig so an Excel BOM never
leaks into the first header), ``quoting`` (name or csv constant) and
``skip_rows`` (preamble lines above the header).

Rows shorter than the header are padded with ""; cells beyond the
header are dropped; blank lines are skipped.
"""

from __future__ import annotations

import csv
import io
from itertools import islice
from pathlib import Path
from typing import Any, Iterable, Iterator

from strata_ingestion.adapters.base import SourceProbe

_QUOTING = {
    "minimal": csv.QUOTE_MINIMAL,
    "all": csv.QUOTE_ALL,
    "none": csv.QUOTE_NONE,
}

_PROBE_SAMPLE = 5
_BOM = "\ufeff"


def _encoding(options: dict[str, Any]) -> str:
    encoding = options.get("encoding", "utf-8")
    return "utf-8-sig" if encoding.lower() in ("utf-8", "utf8") else encoding


def _quoting(options: dict[str, Any]) -> int:
    quoting = options.get("quoting", "minimal")
    if isinstance(quoting, int):
        return quoting
    return _QUOTING.get(str(quoting).lower(), csv.QUOTE_MINIMAL)


def _reader(lines: Iterable[str], options: dict[str, Any]) -> csv.DictReader:
    skip_rows = int(options.get("skip_rows", 0))
    return csv.DictReader(
        islice(lines, skip_rows, None),
        delimiter=options.get("delimiter", ","),
        quoting=_quoting(options),
        restval="",
    )


def _rows(reader: csv.DictReader) -> Iterator[dict[str, Any]]:
    for row in reader:
        row.pop(None, None)  # overflow cells
        yield row


class CsvSourceAdapter:
    """Read delimited files or text as one dict per data row."""

    def read(self, source_path: Path, options: dict[str, Any]) -> Iterator[dict[str, Any]]:
        with source_path.open("r", encoding=_encoding(options), newline="") as f:
            yield from _rows(_reader(f, options))

    def read_text(self, text: str, options: dict[str, Any]) -> Iterator[dict[str, Any]]:
        buffer = io.StringIO(text.removeprefix(_BOM), newline="")
        yield from _rows(_reader(buffer, options))

    def probe(self, source_path: Path, options: dict[str, Any]) -> SourceProbe:
        encoding = _encoding(options)
        with source_path.open("r", encoding=encoding, newline="") as f:
            reader = _reader(f, options)
            rows = _rows(reader)
            sample = tuple(islice(rows, _PROBE_SAMPLE))
            row_count = len(sample) + sum(1 for _ in rows)
            columns = tuple(reader.fieldnames or ())

        return SourceProbe(
            row_count=row_count,
            columns=columns,
            sample_rows=sample,
            encoding=encoding,
            delimiter=options.get("delimiter", ","),
            skipped_rows=int(options.get("skip_rows", 0)),
        )
