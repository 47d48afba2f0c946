"""
strata_config -- analysis settings.

Responsibility:
    Provides the ``AnalysisConfig`` every engine reads its constants from.
    ``get_default_config()`` returns the built-in settings;
    ``load_config()`` applies a YAML override file on top of them.

Architecture position:
    Configuration -- sits above ``strata_kernel`` and below
    ``strata_engines`` / ``strata_services``.  The kernel MUST NEVER
    import from ``strata_config``.

Failure modes:
    - ``FileNotFoundError`` -- override file does not exist.
    - ``UnknownConfigKeyError`` / ``InvalidConfigValueError`` -- malformed
      override file.
"""

from __future__ import annotations

from strata_config.loader import compute_checksum, load_config, parse_config
from strata_config.schema import AnalysisConfig

_DEFAULT_CONFIG = AnalysisConfig()


def get_default_config() -> AnalysisConfig:
    """Return the built-in analysis settings."""
    return _DEFAULT_CONFIG


__all__ = [
    "AnalysisConfig",
    "compute_checksum",
    "get_default_config",
    "load_config",
    "parse_config",
]
