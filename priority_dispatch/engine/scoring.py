"""
Scoring rules for driver priority.

Two independent scores live here:

1. ``calculate_priority_score``: order-aware, seven additive components,
   unbounded. Drives ranking for a specific order.
2. ``update_driver_priority_score``: order-agnostic display score clamped to
   0-100, used for sorting and monitoring outside the assignment flow.

Both weight the same signals differently on purpose; keep them separate.
All functions are pure and never touch storage.
"""

import math
from datetime import datetime

from priority_dispatch.models.assignment import (
    AssignmentReason,
    PriorityFactors,
    UpgradeDecision,
)
from priority_dispatch.models.driver import Driver, DriverCandidate, as_utc, utc_now
from priority_dispatch.models.order import Order
from priority_dispatch.models.priority import PriorityChangeReason

PRIORITY_LEVEL_BONUS = 50
ADVERTISING_BONUS = 30
AVAILABILITY_BONUS = 20
MAX_PROXIMITY_BONUS = 20
PROXIMITY_POINTS_PER_KM = 2
PROXIMITY_RADIUS_KM = 10.0
REJECT_PENALTY_PER_REJECT = 5

# Hours assumed when a driver has never had an order
DEFAULT_HOURS_SINCE_LAST_ORDER = 24.0

# (minimum rating, bonus), checked top-down
RATING_BONUS_TIERS: list[tuple[float, int]] = [
    (4.9, 25),
    (4.7, 20),
    (4.5, 15),
    (4.0, 10),
]

# (hours strictly below, penalty), checked top-down
RECENT_ACTIVITY_TIERS: list[tuple[float, int]] = [
    (1.0, -15),
    (3.0, -10),
]

# Display score
DISPLAY_RATING_WEIGHT = 8
DISPLAY_COMPLETION_BASELINE = 80
DISPLAY_COMPLETION_DIVISOR = 5
DISPLAY_REJECT_WEIGHT = 2
DISPLAY_ADVERTISING_BONUS = 15
DISPLAY_PRIORITY_BONUS = 25
DISPLAY_MIN = 0
DISPLAY_MAX = 100

# (minimum total orders, bonus), checked top-down
TRIP_VOLUME_TIERS: list[tuple[int, int]] = [
    (500, 20),
    (200, 15),
    (100, 10),
    (50, 5),
]

# (min rating, min total orders, min completion rate, reason), checked top-down
UPGRADE_CRITERIA: list[tuple[float, int, int, PriorityChangeReason]] = [
    (4.9, 100, 95, PriorityChangeReason.RATING_AND_TRIPS_EXCELLENCE),
    (4.8, 200, 98, PriorityChangeReason.VOLUME_AND_QUALITY),
]
CRITERIA_NOT_MET = "criteria_not_met"


def round_half_up(value: float) -> int:
    """Round to the nearest int with halves going up, unlike ``round``."""
    return int(math.floor(value + 0.5))


def rating_bonus(rating: float) -> int:
    """Tiered bonus for customer rating."""
    for minimum, bonus in RATING_BONUS_TIERS:
        if rating >= minimum:
            return bonus
    return 0


def proximity_bonus(distance: float, radius_km: float = PROXIMITY_RADIUS_KM) -> float:
    """Bonus shrinking by 2 points per km, zero outside the radius."""
    # Negative distances are bad input; score them as zero km
    distance = max(distance, 0.0)
    if distance > radius_km:
        return 0.0
    return max(0.0, MAX_PROXIMITY_BONUS - distance * PROXIMITY_POINTS_PER_KM)


def hours_since(moment: datetime | None, now: datetime | None = None) -> float:
    """Hours elapsed since ``moment``; missing moments count as a full day."""
    if moment is None:
        return DEFAULT_HOURS_SINCE_LAST_ORDER
    now = as_utc(now) if now else utc_now()
    return (now - as_utc(moment)).total_seconds() / 3600


def recent_activity_penalty(last_order_date: datetime | None, now: datetime | None = None) -> int:
    """Penalty for drivers who were given an order in the last few hours."""
    hours = hours_since(last_order_date, now)
    for limit, penalty in RECENT_ACTIVITY_TIERS:
        if hours < limit:
            return penalty
    return 0


def calculate_priority_score(
    driver: DriverCandidate,
    order: Order,
    now: datetime | None = None,
    proximity_radius_km: float = PROXIMITY_RADIUS_KM,
) -> PriorityFactors:
    """
    Calculate the priority score of a driver for an order.

    Higher score means higher priority. The score is the plain sum of the
    components and may be negative.

    Args:
        driver: Candidate with distance to pickup and availability
        order: Order being dispatched
        now: Reference time for the recent activity penalty
        proximity_radius_km: Radius inside which proximity earns points

    Returns:
        PriorityFactors with every component and the total
    """
    factors = PriorityFactors(
        priority_level_bonus=PRIORITY_LEVEL_BONUS if driver.is_priority else 0,
        advertising_bonus=ADVERTISING_BONUS if driver.is_advertising else 0,
        rating_bonus=rating_bonus(driver.rating),
        availability_bonus=AVAILABILITY_BONUS if driver.is_available else 0,
        proximity_bonus=proximity_bonus(driver.distance, proximity_radius_km),
        recent_activity_penalty=recent_activity_penalty(driver.last_order_date, now),
        reject_penalty=-REJECT_PENALTY_PER_REJECT * driver.consecutive_rejects,
    )
    factors.base_score = (
        factors.priority_level_bonus
        + factors.advertising_bonus
        + factors.rating_bonus
        + factors.availability_bonus
        + factors.proximity_bonus
        + factors.recent_activity_penalty
        + factors.reject_penalty
    )
    return factors


def assignment_reason_for(factors: PriorityFactors) -> AssignmentReason:
    """Pick the dominant reason behind a score, first match wins."""
    if factors.priority_level_bonus > 0:
        return AssignmentReason.PRIORITY_DRIVER
    if factors.advertising_bonus > 0:
        return AssignmentReason.ADVERTISING_DRIVER
    if factors.availability_bonus > 0:
        return AssignmentReason.AVAILABLE_DRIVER
    if factors.rating_bonus >= 20:
        return AssignmentReason.HIGH_RATING
    return AssignmentReason.PROXIMITY_BASED


def should_upgrade_to_priority(driver: Driver) -> UpgradeDecision:
    """
    Recommend whether a driver's history earns priority status.

    Only recommends; applying the upgrade and logging it is up to the caller.
    """
    for min_rating, min_orders, min_completion, reason in UPGRADE_CRITERIA:
        if (
            driver.rating >= min_rating
            and driver.total_orders >= min_orders
            and driver.completion_rate >= min_completion
        ):
            return UpgradeDecision(should_upgrade=True, reason=reason.value)

    return UpgradeDecision(should_upgrade=False, reason=CRITERIA_NOT_MET)


def trip_volume_bonus(total_orders: int) -> int:
    """Tiered bonus for lifetime completed orders."""
    for minimum, bonus in TRIP_VOLUME_TIERS:
        if total_orders >= minimum:
            return bonus
    return 0


def update_driver_priority_score(driver: Driver) -> int:
    """Order-agnostic display score, clamped to 0-100 and rounded half up."""
    score = driver.rating * DISPLAY_RATING_WEIGHT
    score += trip_volume_bonus(driver.total_orders)
    score += (driver.completion_rate - DISPLAY_COMPLETION_BASELINE) / DISPLAY_COMPLETION_DIVISOR
    score -= driver.consecutive_rejects * DISPLAY_REJECT_WEIGHT

    if driver.is_advertising:
        score += DISPLAY_ADVERTISING_BONUS
    if driver.is_priority:
        score += DISPLAY_PRIORITY_BONUS

    clamped = max(DISPLAY_MIN, min(DISPLAY_MAX, score))
    return round_half_up(clamped)
