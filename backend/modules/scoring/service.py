"""
Placeholder IIR scoring service.

No scoring model is integrated yet: compute_iir reports "pending" and the
affected-people estimate is always 0.
"""

import logging
from typing import Optional

from .interfaces import IScoringService
from .models import IIRCalculationData, IIRLevel

logger = logging.getLogger(__name__)


class ScoringService(IScoringService):
    """Scorer that never produces a score."""

    async def compute_iir(self, data: IIRCalculationData) -> Optional[int]:
        logger.info(f"IIR requested for '{data.title}'; no scoring model, returning pending")
        return None

    async def estimate_affected_people(self, data: IIRCalculationData) -> int:
        logger.debug("Affected people estimation requested; no model, returning 0")
        return 0


def iir_level(iir: Optional[int]) -> IIRLevel:
    """
    Band an IIR value for display.

    None is pending; 80 and above is critical, 60 high, 40 moderate,
    anything lower is low.
    """
    if iir is None:
        return IIRLevel.PENDING
    if iir >= 80:
        return IIRLevel.CRITICAL
    if iir >= 60:
        return IIRLevel.HIGH
    if iir >= 40:
        return IIRLevel.MODERATE
    return IIRLevel.LOW


# Module-level instance getter
_service_instance: Optional[ScoringService] = None


def get_scoring_service() -> ScoringService:
    """Get the scoring service singleton."""
    global _service_instance
    if _service_instance is None:
        _service_instance = ScoringService()
    return _service_instance


def reset_scoring_service() -> None:
    """Reset the scoring service singleton (for testing)."""
    global _service_instance
    _service_instance = None
