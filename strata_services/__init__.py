"""
strata_services -- orchestration over the pure analysis engines.

``AnalysisService`` runs one analysis end to end; ``build_context_brief``
flattens its result into text for downstream consumers.
"""

from strata_services.analysis_service import AnalysisResult, AnalysisService
from strata_services.context_brief import build_context_brief, pair_status

__all__ = [
    "AnalysisResult",
    "AnalysisService",
    "build_context_brief",
    "pair_status",
]
