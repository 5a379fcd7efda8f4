"""Report models for waste sightings and their lifecycle."""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, computed_field

DESCRIPTION_MAX_LENGTH = 200
HIGH_PRIORITY_SEVERITY = 4


class WasteCategory(str, Enum):
    ROADSIDE = "roadside"
    BIN_OVERFLOW = "bin-overflow"
    PLASTIC = "plastic"
    WET = "wet"
    CONSTRUCTION = "construction"
    OTHER = "other"


class ReportStatus(str, Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"


class Location(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None


class ReportDraft(BaseModel):
    """Citizen submission. Required fields are checked by the store, not here."""

    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[WasteCategory] = None
    severity: Optional[int] = None
    location: Optional[Location] = None
    image_url: Optional[str] = None
    ai_analysis: Optional[str] = None


class WasteReport(BaseModel):
    id: str
    token: str
    title: str
    description: str = ""
    category: WasteCategory
    severity: int = Field(ge=1, le=5)
    location: Location
    image_url: str
    resolved_image_url: Optional[str] = None
    status: ReportStatus = ReportStatus.PENDING
    timestamp: datetime
    ai_analysis: Optional[str] = None

    @computed_field
    @property
    def is_high_priority(self) -> bool:
        return self.severity >= HIGH_PRIORITY_SEVERITY


class StatusUpdate(BaseModel):
    status: ReportStatus
    resolved_image_url: Optional[str] = None


class TrackingOut(BaseModel):
    """Citizen-facing view of a report looked up by token."""

    report: WasteReport
    progress_step: int
    total_steps: int = 5
    high_priority: bool
