"""
Strata Kernel

Shared foundation for the entity hierarchy and intercompany analysis engines:
- Immutable input records (entities, GL transaction rows)
- Deterministic amount formatting
- Injectable clock
- Typed exceptions
- Structured JSON logging
"""

__version__ = "0.1.0"
