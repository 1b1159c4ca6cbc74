"""Order models."""

from enum import Enum

from pydantic import BaseModel, Field


class OrderStatus(str, Enum):
    """Order status progression."""

    PENDING = "pending"
    ASSIGNED = "assigned"
    PICKED_UP = "picked_up"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class Order(BaseModel):
    """Order fields the dispatcher needs."""

    id: int
    order_number: str | None = None
    status: str = OrderStatus.PENDING.value

    # Trip length, used to infer the vehicle category
    distance: float = Field(ge=0, description="Trip distance in km")

    # Only honoured by the declared vehicle policy
    required_vehicle_type: str | None = None
