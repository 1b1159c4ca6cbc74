"""Driver models."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


class DriverStatus(str, Enum):
    """Account states of a driver."""

    ACTIVE = "active"
    SUSPENDED = "suspended"
    PENDING = "pending"


class VehicleType(str, Enum):
    """Vehicle categories a driver can operate."""

    MOTOR = "motor"
    MOBIL = "mobil"
    PICKUP = "pickup"


class PriorityLevel(str, Enum):
    """Dispatch priority tiers."""

    PRIORITY = "priority"
    NORMAL = "normal"


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(moment: datetime) -> datetime:
    """Return an aware UTC datetime, treating naive values as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


class Driver(BaseModel):
    """
    Snapshot of the driver attributes that matter for dispatch.

    ``status``, ``vehicle_type`` and ``priority_level`` are kept as plain
    strings so values the store does not know about are excluded from
    ranking instead of failing validation.
    """

    id: int
    full_name: str | None = None
    status: str = DriverStatus.ACTIVE.value
    vehicle_type: str
    priority_level: str = PriorityLevel.NORMAL.value

    # Performance
    rating: float = Field(default=0.0, ge=0, le=5)
    total_orders: int = Field(default=0, ge=0)
    completion_rate: int = Field(default=100, ge=0, le=100)
    consecutive_rejects: int = Field(default=0, ge=0)
    response_time: int = Field(default=300, ge=0)
    priority_score: int = Field(default=0, ge=0, le=100)

    is_advertising: bool = False

    # Timing
    last_order_date: datetime | None = None
    priority_expiry_date: datetime | None = None

    @property
    def is_active(self) -> bool:
        """Check if the driver account can receive orders."""
        return self.status == DriverStatus.ACTIVE

    @property
    def is_priority(self) -> bool:
        """Check if the driver holds priority status."""
        return self.priority_level == PriorityLevel.PRIORITY

    def is_priority_expired(self, now: datetime | None = None) -> bool:
        """Check if priority status has passed its expiry date."""
        if not self.is_priority or self.priority_expiry_date is None:
            return False
        now = as_utc(now) if now else utc_now()
        return as_utc(self.priority_expiry_date) <= now


class DriverCandidate(Driver):
    """Driver annotated with live data for a single ranking call."""

    distance: float = Field(description="Km from driver to pickup")
    is_available: bool = False
