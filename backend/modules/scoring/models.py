"""
Scoring module data models.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import Field

from shared.models import CamelModel
from modules.cases.models import Case, Location


class IIRLevel(str, Enum):
    """Display band of an IIR value."""

    PENDING = "pending"
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


class IIRCalculationData(CamelModel):
    """Everything the scorer may look at for one case."""

    title: str
    description: str
    category: str
    priority: str
    location: Location
    affected_people: Optional[int] = Field(None, ge=0, description="Estimated people affected")
    supports: int = Field(default=0, ge=0)
    created_at: datetime

    @classmethod
    def from_case(cls, case: Case, affected_people: Optional[int] = None) -> "IIRCalculationData":
        return cls(
            title=case.title,
            description=case.description,
            category=case.category.value,
            priority=case.priority.value,
            location=case.location,
            affected_people=affected_people,
            supports=case.supports,
            created_at=case.created_at,
        )
