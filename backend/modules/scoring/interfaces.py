"""
Scoring module interface.

Callers depend on IScoringService so a real model-backed scorer can
replace the placeholder without touching them.
"""

from typing import Optional, Protocol, runtime_checkable

from .models import IIRCalculationData


@runtime_checkable
class IScoringService(Protocol):
    """Interface for IIR computation."""

    async def compute_iir(self, data: IIRCalculationData) -> Optional[int]:
        """
        Compute the IIR of a case.

        Args:
            data: Case attributes relevant to scoring

        Returns:
            An integer in [0, 100], or None if the score is not available
        """
        ...

    async def estimate_affected_people(self, data: IIRCalculationData) -> int:
        """Estimate how many people an issue affects."""
        ...
