"""Ranking and grouping of candidate drivers for an order."""

from datetime import datetime

from priority_dispatch.config import get_settings
from priority_dispatch.engine import scoring
from priority_dispatch.engine.scoring import assignment_reason_for
from priority_dispatch.engine.vehicle import VehiclePolicy, required_vehicle_for_distance
from priority_dispatch.models.assignment import PriorityFactors, RankedEntry
from priority_dispatch.models.driver import DriverCandidate
from priority_dispatch.models.order import Order
from priority_dispatch.utils.logging import DispatchLogger


class PriorityEngine:
    """
    Ranks candidate drivers for an order.

    Holds configuration only, so one instance can serve any number of
    concurrent callers.

    Responsibilities:
    - Filter out drivers that cannot take the order
    - Score the rest and order them by score
    - Regroup the ranking into the priority/available/advertising/other order
    """

    def __init__(
        self,
        vehicle_policy: VehiclePolicy | None = None,
        max_candidate_distance_km: float | None = None,
        proximity_radius_km: float | None = None,
    ):
        settings = get_settings()
        self.vehicle_policy = vehicle_policy or required_vehicle_for_distance
        self.max_candidate_distance_km = (
            settings.max_candidate_distance_km
            if max_candidate_distance_km is None
            else max_candidate_distance_km
        )
        self.proximity_radius_km = (
            settings.proximity_radius_km if proximity_radius_km is None else proximity_radius_km
        )
        self.logger = DispatchLogger("priority_engine")

    def get_required_vehicle_type(self, order: Order) -> str:
        """Vehicle category the order needs under the configured policy."""
        return self.vehicle_policy(order)

    def calculate_priority_score(
        self,
        driver: DriverCandidate,
        order: Order,
        now: datetime | None = None,
    ) -> PriorityFactors:
        """Score one driver for one order."""
        return scoring.calculate_priority_score(
            driver, order, now=now, proximity_radius_km=self.proximity_radius_km
        )

    def is_eligible(self, driver: DriverCandidate, required_vehicle_type: str) -> bool:
        """Check the hard gates: active account, matching vehicle, within radius."""
        return (
            driver.is_active
            and driver.vehicle_type == required_vehicle_type
            and driver.distance <= self.max_candidate_distance_km
        )

    def rank_drivers_for_order(
        self,
        drivers: list[DriverCandidate],
        order: Order,
        now: datetime | None = None,
    ) -> list[RankedEntry]:
        """
        Rank eligible drivers by descending priority score.

        Equal scores keep their input order. An empty list means no driver
        can take the order; it is not an error.

        Args:
            drivers: Candidates with distance to pickup and availability
            order: Order being dispatched
            now: Reference time for the recent activity penalty

        Returns:
            Ranked entries, best first
        """
        required_vehicle_type = self.get_required_vehicle_type(order)

        ranked = []
        for driver in drivers:
            if not self.is_eligible(driver, required_vehicle_type):
                continue

            factors = self.calculate_priority_score(driver, order, now=now)
            ranked.append(
                RankedEntry(
                    driver=driver,
                    priority_score=factors.base_score,
                    factors=factors,
                    assignment_reason=assignment_reason_for(factors),
                )
            )

        # list.sort is stable, so ties stay in input order
        ranked.sort(key=lambda entry: entry.priority_score, reverse=True)

        self.logger.log_ranking(
            order_id=order.id,
            candidates=len(drivers),
            ranked=len(ranked),
            required_vehicle_type=required_vehicle_type,
        )

        return ranked

    def get_optimal_driver_assignment(
        self,
        drivers: list[DriverCandidate],
        order: Order,
        now: datetime | None = None,
    ) -> list[RankedEntry]:
        """
        Order drivers for sequential offers.

        Priority drivers come first regardless of score, then available
        drivers who are not advertising, then advertising drivers, then
        everyone else. Each group keeps its score order. Use
        ``rank_drivers_for_order`` when strict score order is needed.
        """
        ranked = self.rank_drivers_for_order(drivers, order, now=now)

        priority_drivers = []
        available_drivers = []
        advertising_drivers = []
        other_drivers = []

        for entry in ranked:
            driver = entry.driver
            if driver.is_priority:
                priority_drivers.append(entry)
            elif driver.is_advertising:
                advertising_drivers.append(entry)
            elif driver.is_available:
                available_drivers.append(entry)
            else:
                other_drivers.append(entry)

        return priority_drivers + available_drivers + advertising_drivers + other_drivers


_default_engine: PriorityEngine | None = None


def get_priority_engine() -> PriorityEngine:
    """Get the shared engine built from settings."""
    global _default_engine

    if _default_engine is None:
        _default_engine = PriorityEngine()

    return _default_engine


def get_required_vehicle_type(order: Order) -> str:
    """Vehicle category the order needs under the default policy."""
    return get_priority_engine().get_required_vehicle_type(order)


def rank_drivers_for_order(
    drivers: list[DriverCandidate],
    order: Order,
    now: datetime | None = None,
) -> list[RankedEntry]:
    """Rank drivers with the shared engine."""
    return get_priority_engine().rank_drivers_for_order(drivers, order, now=now)


def get_optimal_driver_assignment(
    drivers: list[DriverCandidate],
    order: Order,
    now: datetime | None = None,
) -> list[RankedEntry]:
    """Group drivers for sequential offers with the shared engine."""
    return get_priority_engine().get_optimal_driver_assignment(drivers, order, now=now)


def calculate_priority_score(
    driver: DriverCandidate,
    order: Order,
    now: datetime | None = None,
) -> PriorityFactors:
    """Score one driver with the shared engine's proximity radius."""
    return get_priority_engine().calculate_priority_score(driver, order, now=now)
