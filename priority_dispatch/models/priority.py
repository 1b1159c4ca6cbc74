"""Priority audit and statistics models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from priority_dispatch.models.driver import utc_now


class PriorityChangeReason(str, Enum):
    """Reasons recorded when a driver's priority level changes."""

    MANUAL_UPGRADE = "manual_upgrade"
    MANUAL_DOWNGRADE = "manual_downgrade"
    RATING_AND_TRIPS_EXCELLENCE = "rating_and_trips_excellence"
    VOLUME_AND_QUALITY = "volume_and_quality"
    PRIORITY_EXPIRED = "priority_expired"


class DriverPriorityLog(BaseModel):
    """Audit entry for a priority level change."""

    driver_id: int
    previous_level: str
    new_level: str
    reason: str
    changed_at: datetime = Field(default_factory=utc_now)
    # None means the change was made by the system
    changed_by: int | None = None


class PriorityStats(BaseModel):
    """Fleet-wide priority counters."""

    total: int = 0
    priority: int = 0
    normal: int = 0
    advertising: int = 0
    high_rating: int = 0
    available: int = 0
