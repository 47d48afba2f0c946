"""
Pure domain layer.

This module contains the input records and value helpers shared by every
engine, with NO dependencies on:
- File or network I/O
- Configuration loading
- Wall-clock time (except SystemClock)

All domain objects are immutable and deterministic.
"""

from strata_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from strata_kernel.domain.formatting import format_amount, risk_band
from strata_kernel.domain.records import (
    IC_PAYABLE,
    IC_RECEIVABLE,
    Entity,
    TransactionRow,
)

__all__ = [
    "Clock",
    "DeterministicClock",
    "SystemClock",
    "format_amount",
    "risk_band",
    "IC_PAYABLE",
    "IC_RECEIVABLE",
    "Entity",
    "TransactionRow",
]
