"""
Structured JSON logging for Strata.

Every record under the ``strata`` logger is written as one JSON object per
line.  Run-scoped fields (``run_id``, ``source``, ``config_checksum``) are
held in a context variable and merged into each record, so engine code
logs plain events and still carries the identity of the analysis run
that triggered it.

Usage:
    from strata_kernel.logging_config import LogContext, get_logger

    logger = get_logger("engines.risk")
    with LogContext.bind(run_id=run_id):
        logger.info("risk_scoring_completed", extra={"scored_count": 8})
"""

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

_ROOT_NAME = "strata"

# ---------------------------------------------------------------------------
# Run context
# ---------------------------------------------------------------------------

_CONTEXT_FIELDS = ("run_id", "source", "config_checksum")

_context: ContextVar[dict[str, str]] = ContextVar("strata_log_context", default={})


def _checked(fields: dict[str, str | None]) -> dict[str, str]:
    unknown = sorted(set(fields) - set(_CONTEXT_FIELDS))
    if unknown:
        raise TypeError(f"Unknown log context fields: {', '.join(unknown)}")
    return {k: v for k, v in fields.items() if v is not None}


class LogContext:
    """Run-scoped log fields, isolated per thread and per asyncio task."""

    @staticmethod
    def set(
        *,
        run_id: str | None = None,
        source: str | None = None,
        config_checksum: str | None = None,
    ) -> None:
        """Merge the given fields into the current context; None leaves a field as is."""
        updates = _checked(
            {"run_id": run_id, "source": source, "config_checksum": config_checksum}
        )
        _context.set({**_context.get(), **updates})

    @staticmethod
    def get_all() -> dict[str, str]:
        return dict(_context.get())

    @staticmethod
    def clear() -> None:
        _context.set({})

    @staticmethod
    @contextmanager
    def bind(**fields: str | None) -> Iterator[None]:
        """Apply fields for the duration of a ``with`` block, then restore."""
        token = _context.set({**_context.get(), **_checked(fields)})
        try:
            yield
        finally:
            _context.reset(token)


# ---------------------------------------------------------------------------
# JSON formatting
# ---------------------------------------------------------------------------

# Attributes every LogRecord has; anything else arrived via ``extra``
_RESERVED = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


def _json_default(value: Any) -> Any:
    if isinstance(value, (UUID, Decimal)):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return str(value)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        fields["exc_code"] = code
    # StrataError subclasses keep their structured arguments as attributes
    for name, value in vars(exc).items():
        if not name.startswith("_"):
            fields[f"exc_{name}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """One JSON object per record: envelope, run context, extras, exception."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        for name, value in vars(record).items():
            if name not in _RESERVED:
                payload.setdefault(name, value)

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_json_default)


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


def get_logger(name: str) -> logging.Logger:
    """Return ``strata.<name>``."""
    return logging.getLogger(f"{_ROOT_NAME}.{name}")


_setup_lock = threading.Lock()
_installed: logging.Handler | None = None


def configure_logging(
    *,
    level: int | str = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Attach a JSON handler to the ``strata`` logger.

    Only the first call has an effect until ``reset_logging()``.  ``level``
    may be a number or a level name ("DEBUG", "warning").  Records do not
    propagate to the root logger.
    """
    global _installed
    with _setup_lock:
        if _installed is not None:
            return
        if isinstance(level, str):
            level = logging.getLevelName(level.upper())
            if not isinstance(level, int):
                level = logging.INFO
        _installed = handler or logging.StreamHandler(stream or sys.stderr)
        _installed.setFormatter(StructuredFormatter())

        root = logging.getLogger(_ROOT_NAME)
        root.setLevel(level)
        root.propagate = False
        root.addHandler(_installed)


def reset_logging() -> None:
    """Remove every handler from the ``strata`` logger. For tests."""
    global _installed
    with _setup_lock:
        _installed = None
        root = logging.getLogger(_ROOT_NAME)
        root.handlers.clear()
        root.setLevel(logging.WARNING)
        root.propagate = True
