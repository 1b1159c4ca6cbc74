"""Tests for the priority dispatch HTTP API."""

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from httpx import AsyncClient


def _driver(driver_id: int, **overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": driver_id,
        "status": "active",
        "vehicle_type": "motor",
        "distance": 11.0,
    }
    data.update(overrides)
    return data


@pytest.mark.asyncio
async def test_health(test_client: AsyncClient) -> None:
    """Test the health endpoint."""
    response = await test_client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_rank(test_client: AsyncClient) -> None:
    """Test ranking drivers over HTTP."""
    payload = {
        "order": {"id": 1, "distance": 4.0},
        "drivers": [
            _driver(1, is_available=True),
            _driver(2, priority_level="priority", consecutive_rejects=20),
            _driver(3, status="suspended", priority_level="priority"),
            _driver(4, vehicle_type="pickup"),
        ],
    }

    response = await test_client.post("/api/v1/priority/rank", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert [entry["driver"]["id"] for entry in body] == [1, 2]
    assert body[0]["priority_score"] == 20
    assert body[0]["assignment_reason"] == "available_driver"
    assert body[1]["factors"]["reject_penalty"] == -100


@pytest.mark.asyncio
async def test_optimal_puts_priority_first(test_client: AsyncClient) -> None:
    """Test the grouped ordering over HTTP."""
    payload = {
        "order": {"id": 1, "distance": 4.0},
        "drivers": [
            _driver(1, is_available=True),
            _driver(2, priority_level="priority", consecutive_rejects=20),
        ],
    }

    response = await test_client.post("/api/v1/priority/optimal", json=payload)

    assert [entry["driver"]["id"] for entry in response.json()] == [2, 1]


@pytest.mark.asyncio
async def test_rank_with_no_drivers(test_client: AsyncClient) -> None:
    """Test that an empty ranking is a normal response."""
    response = await test_client.post(
        "/api/v1/priority/rank", json={"order": {"id": 9, "distance": 30.0}}
    )

    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_score(test_client: AsyncClient) -> None:
    """Test scoring a single driver."""
    payload = {
        "order": {"id": 1, "distance": 4.0},
        "driver": _driver(1, rating=4.9, is_advertising=True, distance=5.0),
    }

    response = await test_client.post("/api/v1/priority/score", json=payload)

    factors = response.json()
    assert factors["rating_bonus"] == 25
    assert factors["advertising_bonus"] == 30
    assert factors["proximity_bonus"] == 10
    assert factors["base_score"] == 65


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "distance,expected", [(25.0, "pickup"), (15.0, "mobil"), (5.0, "motor")]
)
async def test_required_vehicle(test_client: AsyncClient, distance, expected) -> None:
    """Test vehicle inference over HTTP."""
    response = await test_client.post(
        "/api/v1/priority/required-vehicle", json={"id": 4, "distance": distance}
    )

    assert response.json() == {"order_id": 4, "vehicle_type": expected}


@pytest.mark.asyncio
async def test_upgrade_check(test_client: AsyncClient) -> None:
    """Test the upgrade recommendation endpoint."""
    response = await test_client.post(
        "/api/v1/priority/upgrade-check",
        json={"id": 1, "vehicle_type": "motor", "rating": 4.95, "total_orders": 150, "completion_rate": 97},
    )

    assert response.json() == {
        "should_upgrade": True,
        "reason": "rating_and_trips_excellence",
    }


@pytest.mark.asyncio
async def test_display_score(test_client: AsyncClient) -> None:
    """Test the display score endpoint."""
    response = await test_client.post(
        "/api/v1/priority/display-score",
        json={"id": 8, "vehicle_type": "motor", "rating": 0, "completion_rate": 0, "consecutive_rejects": 1000},
    )

    assert response.json() == {"driver_id": 8, "priority_score": 0}


@pytest.mark.asyncio
async def test_stats(test_client: AsyncClient) -> None:
    """Test the priority statistics endpoint."""
    payload = {
        "drivers": [
            {"id": 1, "vehicle_type": "motor", "priority_level": "priority", "rating": 4.9},
            {"id": 2, "vehicle_type": "mobil", "is_advertising": True, "status": "suspended"},
        ]
    }

    response = await test_client.post("/api/v1/priority/stats", json=payload)

    assert response.json() == {
        "total": 2,
        "priority": 1,
        "normal": 1,
        "advertising": 1,
        "high_rating": 1,
        "available": 1,
    }


@pytest.mark.asyncio
async def test_upgrade_and_downgrade(test_client: AsyncClient) -> None:
    """Test manual priority changes over HTTP."""
    response = await test_client.post(
        "/api/v1/drivers/priority/upgrade",
        json={"driver": {"id": 3, "vehicle_type": "motor"}, "changed_by": 42},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["driver"]["priority_level"] == "priority"
    assert body["driver"]["priority_expiry_date"] is not None
    assert body["log"]["reason"] == "manual_upgrade"
    assert body["log"]["changed_by"] == 42

    response = await test_client.post(
        "/api/v1/drivers/priority/downgrade",
        json={"driver": body["driver"]},
    )

    body = response.json()
    assert body["driver"]["priority_level"] == "normal"
    assert body["driver"]["priority_expiry_date"] is None
    assert body["log"]["previous_level"] == "priority"


@pytest.mark.asyncio
async def test_upgrade_with_past_expiry(test_client: AsyncClient) -> None:
    """Test that an expiry in the past is rejected."""
    response = await test_client.post(
        "/api/v1/drivers/priority/upgrade",
        json={"driver": {"id": 3, "vehicle_type": "motor"}, "expiry_date": "2000-01-01T00:00:00Z"},
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_expire_sweep(test_client: AsyncClient) -> None:
    """Test downgrading lapsed priority drivers."""
    past = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()
    future = (datetime.now(timezone.utc) + timedelta(days=1)).isoformat()
    payload = {
        "drivers": [
            {"id": 1, "vehicle_type": "motor", "priority_level": "priority", "priority_expiry_date": past},
            {"id": 2, "vehicle_type": "motor", "priority_level": "priority", "priority_expiry_date": future},
        ]
    }

    response = await test_client.post("/api/v1/drivers/priority/expire", json=payload)

    body = response.json()
    assert [d["priority_level"] for d in body["drivers"]] == ["normal", "priority"]
    assert len(body["logs"]) == 1
    assert body["logs"][0]["reason"] == "priority_expired"


@pytest.mark.asyncio
async def test_advertising_toggle(test_client: AsyncClient) -> None:
    """Test switching the advertising boost."""
    response = await test_client.post(
        "/api/v1/drivers/advertising",
        json={"driver": {"id": 5, "vehicle_type": "motor"}, "is_advertising": True},
    )

    assert response.json()["is_advertising"] is True


@pytest.mark.asyncio
async def test_out_of_range_rating_is_rejected(test_client: AsyncClient) -> None:
    """Test that invalid snapshots never reach the engine."""
    response = await test_client.post(
        "/api/v1/priority/upgrade-check", json={"id": 1, "vehicle_type": "motor", "rating": 6.0}
    )

    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.parametrize("endpoint", ["/api/v1/priority/rank", "/api/v1/priority/optimal"])
@pytest.mark.parametrize("missing", ["distance", "vehicle_type"])
async def test_candidate_with_missing_fields_is_rejected(
    test_client: AsyncClient, endpoint, missing
) -> None:
    """Test that a candidate without location or vehicle is not ranked."""
    incomplete = _driver(2)
    del incomplete[missing]
    payload = {
        "order": {"id": 1, "distance": 4.0},
        "drivers": [_driver(1, distance=3.0), incomplete],
    }

    response = await test_client.post(endpoint, json=payload)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_order_without_distance_is_rejected(test_client: AsyncClient) -> None:
    """Test that vehicle inference needs a trip distance."""
    response = await test_client.post("/api/v1/priority/required-vehicle", json={"id": 4})

    assert response.status_code == 422
