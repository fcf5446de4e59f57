"""
Cases module data models.

These models define the reported issues, their comments and the
lightweight user held by the application state store.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from shared.models import CamelModel


class CaseCategory(str, Enum):
    """Infrastructure area a case belongs to."""

    WATER = "water"
    ROAD = "road"
    SEWAGE = "sewage"
    ENERGY = "energy"
    OTHER = "other"


class CaseStatus(str, Enum):
    """Moderation workflow status."""

    PENDING = "pending"          # Reported, not yet handled
    IN_PROGRESS = "in_progress"  # Being worked on
    RESOLVED = "resolved"        # Fixed
    REJECTED = "rejected"        # Dismissed by a moderator


class CasePriority(str, Enum):
    """Urgency of a case."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Location(BaseModel):
    """Where the issue is."""

    lat: float = Field(..., ge=-90, le=90, description="Latitude")
    lng: float = Field(..., ge=-180, le=180, description="Longitude")
    address: Optional[str] = Field(None, description="Human-readable address")


class NewCase(CamelModel):
    """Fields supplied by the reporter when opening a case."""

    title: str = Field(..., description="Short summary")
    description: str = Field(default="", description="Full description")
    category: CaseCategory = Field(default=CaseCategory.OTHER)
    status: CaseStatus = Field(default=CaseStatus.PENDING)
    priority: CasePriority = Field(default=CasePriority.MEDIUM)
    location: Location
    image: Optional[str] = Field(None, description="Inline-encoded image (data URL)")
    iir: Optional[int] = Field(
        None,
        ge=0,
        le=100,
        description="Relevance/urgency score, None while pending",
    )


class Case(NewCase):
    """A reported civic issue."""

    id: str = Field(..., description="Case ID")
    supports: int = Field(default=0, ge=0, description="Community support count")
    created_at: datetime = Field(..., description="When the case was reported")
    updated_at: datetime = Field(..., description="Last modification time")
    user_id: str = Field(..., description="Reporter's user ID")
    user_name: str = Field(..., description="Reporter's display name")


class CaseUpdate(BaseModel):
    """
    Partial update for a case.

    Only the fields that were explicitly set are applied. Identity,
    authorship, timestamps and the support count cannot be changed this
    way; they are ignored if present, so a whole Case snapshot can be
    passed back in.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[CaseCategory] = None
    status: Optional[CaseStatus] = None
    priority: Optional[CasePriority] = None
    location: Optional[Location] = None
    image: Optional[str] = None
    iir: Optional[int] = Field(None, ge=0, le=100)


class Comment(CamelModel):
    """A community comment on a case. Append-only."""

    id: str = Field(..., description="Comment ID")
    case_id: str = Field(..., description="Case the comment refers to (not checked)")
    user_id: str = Field(..., description="Author's user ID")
    user_name: str = Field(..., description="Author's display name")
    text: str = Field(..., description="Comment body")
    created_at: datetime = Field(..., description="When the comment was posted")


class CurrentUser(CamelModel):
    """The user the state store acts on behalf of."""

    id: str = Field(..., description="User ID")
    name: str = Field(..., description="Display name")
    is_admin: bool = Field(default=False, description="Whether moderation is allowed")


class CaseReport(CamelModel):
    """Aggregated view of all cases for moderators."""

    total_cases: int = Field(..., description="Number of cases")
    by_status: dict[CaseStatus, int] = Field(..., description="Case count per status")
    by_priority: dict[CasePriority, int] = Field(..., description="Case count per priority")
    avg_iir: Optional[float] = Field(
        None,
        alias="avgIIR",
        description="Mean IIR over scored cases, None if none is scored",
    )
