"""Pytest configuration and fixtures."""

from datetime import datetime, timezone
from typing import Any, AsyncGenerator, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from priority_dispatch.engine import PriorityEngine
from priority_dispatch.main import app
from priority_dispatch.models.driver import Driver, DriverCandidate
from priority_dispatch.models.order import Order


@pytest_asyncio.fixture
async def test_client() -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# Sample data fixtures


@pytest.fixture
def now() -> datetime:
    """Fixed reference time so scores do not depend on the clock."""
    return datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine() -> PriorityEngine:
    """Engine with the default distance-based vehicle policy."""
    return PriorityEngine(max_candidate_distance_km=15.0, proximity_radius_km=10.0)


@pytest.fixture
def make_candidate() -> Callable[..., DriverCandidate]:
    """
    Factory for candidates that score zero on every factor.

    Defaults: active motor driver, normal level, rating 0, unavailable,
    11 km away (outside the proximity radius, inside the ranking radius).
    """

    def _make(driver_id: int = 1, **overrides: Any) -> DriverCandidate:
        data: dict[str, Any] = {
            "id": driver_id,
            "full_name": f"Driver {driver_id}",
            "status": "active",
            "vehicle_type": "motor",
            "priority_level": "normal",
            "rating": 0.0,
            "is_advertising": False,
            "is_available": False,
            "distance": 11.0,
        }
        data.update(overrides)
        return DriverCandidate(**data)

    return _make


@pytest.fixture
def make_driver() -> Callable[..., Driver]:
    """Factory for plain driver snapshots."""

    def _make(driver_id: int = 1, **overrides: Any) -> Driver:
        data: dict[str, Any] = {
            "id": driver_id,
            "full_name": f"Driver {driver_id}",
            "vehicle_type": "motor",
        }
        data.update(overrides)
        return Driver(**data)

    return _make


@pytest.fixture
def motor_order() -> Order:
    """Short trip that needs a motorbike."""
    return Order(id=100, order_number="ORD-100", distance=5.0)


@pytest.fixture
def sample_driver(make_driver: Callable[..., Driver]) -> Driver:
    """Create a sample driver with a strong history."""
    return make_driver(
        1,
        rating=4.95,
        total_orders=150,
        completion_rate=97,
    )
