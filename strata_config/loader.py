"""
Configuration Loader (``strata_config.loader``).

Responsibility
--------------
Loads a YAML override file and parses it into an ``AnalysisConfig``.
Keys absent from the file keep their defaults.

Invariants enforced
-------------------
* Unknown keys are rejected; no silent typos.
* Every value is converted to the type of the default it replaces
  (``Decimal`` for amounts and tolerances, ``int`` for weights, tuples
  for sequences).  Non-finite numbers and fractional weights are
  rejected rather than rounded.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Unknown key  -> ``UnknownConfigKeyError``.
* Unconvertible value  -> ``InvalidConfigValueError``.
"""

from __future__ import annotations

import dataclasses
import hashlib
import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from strata_config.schema import AnalysisConfig
from strata_kernel.exceptions import InvalidConfigValueError, UnknownConfigKeyError


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        InvalidConfigValueError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise InvalidConfigValueError(str(path), data, "top level must be a mapping")
    return data


def _to_decimal(key: str, value: Any) -> Decimal:
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        raise InvalidConfigValueError(key, value, "expected a number") from None
    if not number.is_finite():
        raise InvalidConfigValueError(key, value, "expected a finite number")
    return number


def _to_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidConfigValueError(key, value, "expected an integer")
    if isinstance(value, float) and not value.is_integer():
        raise InvalidConfigValueError(key, value, "expected a whole number")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidConfigValueError(key, value, "expected an integer") from None


def _to_str_tuple(key: str, value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, (list, tuple)):
        raise InvalidConfigValueError(key, value, "expected a list of strings")
    return tuple(str(v) for v in value)


def parse_gap_bonus_bands(value: Any) -> tuple[tuple[Decimal, int], ...]:
    """Parse gap bonus bands from ``[[threshold, bonus], ...]`` or
    ``[{above: threshold, bonus: n}, ...]``.

    Bands are returned sorted by descending threshold so the first match
    is the largest.
    """
    key = "gap_bonus_bands"
    if not isinstance(value, (list, tuple)):
        raise InvalidConfigValueError(key, value, "expected a list of bands")
    bands: list[tuple[Decimal, int]] = []
    for item in value:
        if isinstance(item, dict):
            if "above" not in item or "bonus" not in item:
                raise InvalidConfigValueError(key, item, "band needs 'above' and 'bonus'")
            threshold, bonus = item["above"], item["bonus"]
        elif isinstance(item, (list, tuple)) and len(item) == 2:
            threshold, bonus = item
        else:
            raise InvalidConfigValueError(key, item, "band must be a pair")
        bands.append((_to_decimal(key, threshold), _to_int(key, bonus)))
    bands.sort(key=lambda band: band[0], reverse=True)
    return tuple(bands)


def parse_config(data: dict[str, Any], base: AnalysisConfig | None = None) -> AnalysisConfig:
    """
    Apply a dict of overrides on top of ``base`` (defaults when None).

    Raises:
        UnknownConfigKeyError: if ``data`` names a key that is not a field.
        InvalidConfigValueError: if a value cannot be converted.
    """
    base = base or AnalysisConfig()
    known = {f.name for f in dataclasses.fields(AnalysisConfig)}
    unknown = tuple(sorted(k for k in data if k not in known))
    if unknown:
        raise UnknownConfigKeyError(unknown)

    overrides: dict[str, Any] = {}
    for key, value in data.items():
        default = getattr(base, key)
        if key == "gap_bonus_bands":
            overrides[key] = parse_gap_bonus_bands(value)
        elif isinstance(default, Decimal):
            overrides[key] = _to_decimal(key, value)
        elif isinstance(default, int):
            overrides[key] = _to_int(key, value)
        elif isinstance(default, tuple):
            overrides[key] = _to_str_tuple(key, value)
        else:
            overrides[key] = str(value)
    return dataclasses.replace(base, **overrides)


def load_config(path: Path) -> AnalysisConfig:
    """Load an ``AnalysisConfig`` from a YAML override file."""
    return parse_config(load_yaml_file(Path(path)))


def compute_checksum(config: AnalysisConfig) -> str:
    """
    Compute SHA-256 checksum of the canonical JSON serialization.

    Postconditions:
        - Identical configs always produce identical checksums.
    """
    canonical = json.dumps(dataclasses.asdict(config), sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
