"""Data models for driver priority dispatch."""

from priority_dispatch.models.assignment import (
    AssignmentReason,
    OrderAssignment,
    PriorityFactors,
    RankedEntry,
    ResponseStatus,
    UpgradeDecision,
)
from priority_dispatch.models.driver import (
    Driver,
    DriverCandidate,
    DriverStatus,
    PriorityLevel,
    VehicleType,
)
from priority_dispatch.models.order import Order, OrderStatus
from priority_dispatch.models.priority import (
    DriverPriorityLog,
    PriorityChangeReason,
    PriorityStats,
)

__all__ = [
    # Driver
    "Driver",
    "DriverCandidate",
    "DriverStatus",
    "PriorityLevel",
    "VehicleType",
    # Order
    "Order",
    "OrderStatus",
    # Assignment
    "AssignmentReason",
    "OrderAssignment",
    "PriorityFactors",
    "RankedEntry",
    "ResponseStatus",
    "UpgradeDecision",
    # Priority
    "DriverPriorityLog",
    "PriorityChangeReason",
    "PriorityStats",
]
