"""
strata_engines.tracer -- ``@traced_engine`` decorator.

Each decorated engine call logs one ``STRATA_ENGINE_TRACE`` record naming
the engine and its version, a fingerprint of the inputs that determine
the result, the number of results and the elapsed time.  Two runs over
the same records produce the same fingerprint, which is how a trace line
is tied back to the data it was computed from.

The decorator reads arguments and the return value only; engines stay
free of I/O apart from this log record.
"""

from __future__ import annotations

import dataclasses
import functools
import hashlib
import inspect
import time
from collections.abc import Callable, Mapping
from decimal import Decimal
from enum import Enum
from typing import Any

from strata_kernel.logging_config import get_logger

_logger = get_logger("engines.tracer")

TRACE_MESSAGE = "STRATA_ENGINE_TRACE"
_FINGERPRINT_LENGTH = 16


def _canonicalize(value: Any) -> str:
    """Stable text form of a value: sorted mapping keys, dataclass fields in order."""
    if value is None:
        return "null"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (str, int, float, Decimal)):
        return str(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        fields = ",".join(
            f"{f.name}:{_canonicalize(getattr(value, f.name))}"
            for f in dataclasses.fields(value)
        )
        return f"{{{fields}}}"
    if isinstance(value, Mapping):
        items = ",".join(f"{k}:{_canonicalize(v)}" for k, v in sorted(value.items()))
        return f"{{{items}}}"
    if isinstance(value, (list, tuple)):
        return f"[{','.join(_canonicalize(v) for v in value)}]"
    return str(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: dict[str, Any],
) -> str:
    """SHA-256 prefix over the named arguments; an absent argument hashes as null."""
    canonical = "|".join(
        f"{name}={_canonicalize(arguments.get(name))}" for name in fingerprint_fields
    )
    digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
    return digest[:_FINGERPRINT_LENGTH]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """
    Decorate an engine entry point with trace logging.

    Args:
        engine_name: Engine identifier, e.g. "ic_reconciliation".
        engine_version: Version of the engine's rules, e.g. "1.0".
        fingerprint_fields: Parameter names hashed into the input
            fingerprint.  Positional and keyword calls bind identically.
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            fingerprint = ""
            if fingerprint_fields:
                bound = signature.bind_partial(*args, **kwargs).arguments
                fingerprint = compute_input_fingerprint(fingerprint_fields, dict(bound))

            started = time.perf_counter()
            result = func(*args, **kwargs)
            elapsed_ms = (time.perf_counter() - started) * 1000

            _logger.info(TRACE_MESSAGE, extra={
                "trace_type": TRACE_MESSAGE,
                "engine_name": engine_name,
                "engine_version": engine_version,
                "function": func.__qualname__,
                "input_fingerprint": fingerprint,
                "result_count": len(result) if isinstance(result, tuple) else None,
                "duration_ms": round(elapsed_ms, 2),
            })
            return result

        return wrapper

    return decorator
