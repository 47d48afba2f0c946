"""
Typed Exception Hierarchy for Strata.

The analysis engines are total functions and raise nothing for
well-formed records.  Every failure surfaces at a boundary: ingestion
(malformed source files) or configuration (malformed overrides).

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    StrataError (base)
    |
    +-- IngestionError
    |   +-- EmptySourceError
    |   +-- MissingColumnError
    |   +-- SourceDecodeError
    |
    +-- ConfigError
        +-- UnknownConfigKeyError
        +-- InvalidConfigValueError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Ingestion       | EMPTY_SOURCE                | Source has a header but no data rows
                | MISSING_COLUMN              | Required column absent (after aliasing)
                | SOURCE_DECODE               | File bytes are not valid in its encoding
----------------|-----------------------------|-----------------------------------------
Config          | UNKNOWN_CONFIG_KEY          | Override file names an unknown setting
                | INVALID_CONFIG_VALUE        | Override value has the wrong shape

===============================================================================
HANDLING PATTERN
===============================================================================

    try:
        entities = load_hierarchy_csv(path)
    except MissingColumnError as e:
        print(f"{e.source}: missing {', '.join(e.columns)}")
    except IngestionError as e:
        log.error("ingestion_failed", extra={"code": e.code})
"""


class StrataError(Exception):
    """
    Base exception for all Strata errors.

    All subclasses carry a ``code`` class attribute for machine-readable
    error identification.
    """

    code: str = "STRATA_ERROR"


# Ingestion exceptions


class IngestionError(StrataError):
    """Base exception for source parsing errors."""

    code: str = "INGESTION_ERROR"


class EmptySourceError(IngestionError):
    """Source contained no data rows."""

    code: str = "EMPTY_SOURCE"

    def __init__(self, source: str):
        self.source = source
        super().__init__(f"No data found in {source} CSV")


class MissingColumnError(IngestionError):
    """A required column could not be resolved from the source header."""

    code: str = "MISSING_COLUMN"

    def __init__(self, source: str, columns: tuple[str, ...], header: tuple[str, ...] = ()):
        self.source = source
        self.columns = columns
        self.header = header
        super().__init__(
            f"{source} CSV must have {' and '.join(columns)} columns "
            f"(found: {', '.join(header) or 'none'})"
        )


class SourceDecodeError(IngestionError):
    """Source file could not be decoded with the requested encoding."""

    code: str = "SOURCE_DECODE"

    def __init__(self, source: str, encoding: str):
        self.source = source
        self.encoding = encoding
        super().__init__(f"{source} CSV is not valid {encoding} text")


# Configuration exceptions


class ConfigError(StrataError):
    """Base exception for configuration errors."""

    code: str = "CONFIG_ERROR"


class UnknownConfigKeyError(ConfigError):
    """Override file contains keys that do not name a setting."""

    code: str = "UNKNOWN_CONFIG_KEY"

    def __init__(self, keys: tuple[str, ...]):
        self.keys = keys
        super().__init__(f"Unknown configuration keys: {', '.join(keys)}")


class InvalidConfigValueError(ConfigError):
    """Override value could not be converted to the setting's type."""

    code: str = "INVALID_CONFIG_VALUE"

    def __init__(self, key: str, value: object, reason: str):
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid value for {key}: {value!r} ({reason})")
