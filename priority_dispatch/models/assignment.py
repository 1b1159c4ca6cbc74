"""Scoring breakdown and assignment records."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from priority_dispatch.models.driver import DriverCandidate, utc_now


class AssignmentReason(str, Enum):
    """Why a driver earned its place in the ranking."""

    PRIORITY_DRIVER = "priority_driver"
    ADVERTISING_DRIVER = "advertising_driver"
    AVAILABLE_DRIVER = "available_driver"
    HIGH_RATING = "high_rating"
    PROXIMITY_BASED = "proximity_based"


class ResponseStatus(str, Enum):
    """Driver answer to an order offer."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    TIMEOUT = "timeout"


class PriorityFactors(BaseModel):
    """Per-driver score components for one order."""

    priority_level_bonus: float = 0
    advertising_bonus: float = 0
    rating_bonus: float = 0
    availability_bonus: float = 0
    proximity_bonus: float = 0
    recent_activity_penalty: float = 0
    reject_penalty: float = 0
    base_score: float = 0


class RankedEntry(BaseModel):
    """A driver's position in a ranking."""

    driver: DriverCandidate
    priority_score: float
    factors: PriorityFactors
    assignment_reason: AssignmentReason


class UpgradeDecision(BaseModel):
    """Recommendation on promoting a driver to priority."""

    should_upgrade: bool
    reason: str


class OrderAssignment(BaseModel):
    """One offer of an order to a driver."""

    order_id: int
    driver_id: int
    assigned_at: datetime = Field(default_factory=utc_now)
    response_status: ResponseStatus = ResponseStatus.PENDING
    response_time: int | None = Field(default=None, ge=0, description="Seconds")
    priority_score: int = 0
    assignment_reason: str | None = None

    @property
    def is_open(self) -> bool:
        """Check if the driver has not answered yet."""
        return self.response_status == ResponseStatus.PENDING
