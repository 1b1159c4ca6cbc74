"""Policies deciding which vehicle category an order needs."""

from typing import Callable

from priority_dispatch.models.driver import VehicleType
from priority_dispatch.models.order import Order

VehiclePolicy = Callable[[Order], str]

# (exclusive lower bound in km, vehicle), checked top-down
DISTANCE_VEHICLE_TIERS: list[tuple[float, VehicleType]] = [
    (20.0, VehicleType.PICKUP),
    (10.0, VehicleType.MOBIL),
]


def required_vehicle_for_distance(order: Order) -> str:
    """Infer the vehicle from trip length: >20 km pickup, >10 km mobil, else motor."""
    for threshold, vehicle in DISTANCE_VEHICLE_TIERS:
        if order.distance > threshold:
            return vehicle.value
    return VehicleType.MOTOR.value


def declared_vehicle_or_distance(order: Order) -> str:
    """Use the vehicle declared on the order, falling back to trip length."""
    if order.required_vehicle_type:
        return order.required_vehicle_type
    return required_vehicle_for_distance(order)
