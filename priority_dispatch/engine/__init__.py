"""Driver priority scoring and ranking."""

from priority_dispatch.engine.ranking import (
    PriorityEngine,
    calculate_priority_score,
    get_optimal_driver_assignment,
    get_priority_engine,
    get_required_vehicle_type,
    rank_drivers_for_order,
)
from priority_dispatch.engine.scoring import (
    assignment_reason_for,
    should_upgrade_to_priority,
    update_driver_priority_score,
)
from priority_dispatch.engine.vehicle import (
    VehiclePolicy,
    declared_vehicle_or_distance,
    required_vehicle_for_distance,
)

__all__ = [
    "PriorityEngine",
    "get_priority_engine",
    # Ranking
    "rank_drivers_for_order",
    "get_optimal_driver_assignment",
    "get_required_vehicle_type",
    # Scoring
    "calculate_priority_score",
    "assignment_reason_for",
    "should_upgrade_to_priority",
    "update_driver_priority_score",
    # Vehicle policies
    "VehiclePolicy",
    "required_vehicle_for_distance",
    "declared_vehicle_or_distance",
]
