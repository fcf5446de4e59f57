"""
IIR scoring module.

The IIR (relevance/urgency index, 0-100) is meant to come from an external
model. Until one is wired in, the scorer answers "pending" (None).

Public API:
- IScoringService: Interface for IIR computation
- IIRCalculationData: Scorer input built from a case
- IIRLevel, iir_level: Banding used for display
"""

from .interfaces import IScoringService
from .models import IIRCalculationData, IIRLevel
from .service import ScoringService, iir_level, get_scoring_service, reset_scoring_service

__all__ = [
    "IScoringService",
    "IIRCalculationData",
    "IIRLevel",
    "ScoringService",
    "iir_level",
    "get_scoring_service",
    "reset_scoring_service",
]
