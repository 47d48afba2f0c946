"""
Pytest fixtures for the Strata test suite.

Provides:
- Structured logging setup and a JSON log capture fixture
- The bundled sample dataset
- A deterministic clock for audit log timestamps
"""

import json
import logging
from datetime import datetime, timezone
from io import StringIO

import pytest

from strata_ingestion import load_sample_dataset
from strata_kernel.domain.clock import DeterministicClock
from strata_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture strata logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            AnalysisService().run(entities, rows)
            logs = captured_logs()
            assert any(r["message"] == "analysis_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("strata")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


@pytest.fixture
def sample_dataset():
    return load_sample_dataset()


@pytest.fixture
def deterministic_clock():
    return DeterministicClock(datetime(2024, 3, 31, 17, 45, 9, tzinfo=timezone.utc))
