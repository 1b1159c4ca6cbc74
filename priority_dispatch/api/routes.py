"""API routes for driver priority dispatch."""

from datetime import datetime

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from priority_dispatch.engine import (
    get_priority_engine,
    should_upgrade_to_priority,
    update_driver_priority_score,
)
from priority_dispatch.exceptions import PriorityChangeError
from priority_dispatch.models import (
    Driver,
    DriverCandidate,
    DriverPriorityLog,
    Order,
    PriorityChangeReason,
    PriorityFactors,
    PriorityStats,
    RankedEntry,
    UpgradeDecision,
)
from priority_dispatch.services import (
    downgrade_driver,
    expire_priority,
    priority_stats,
    set_advertising,
    upgrade_driver,
)
from priority_dispatch.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


# Request/Response Models


class RankRequest(BaseModel):
    """Order plus the candidate drivers around its pickup point."""

    order: Order
    drivers: list[DriverCandidate] = Field(default_factory=list)


class ScoreRequest(BaseModel):
    """Single driver scored against an order."""

    order: Order
    driver: DriverCandidate


class RequiredVehicleResponse(BaseModel):
    """Vehicle category an order needs."""

    order_id: int
    vehicle_type: str


class DisplayScoreResponse(BaseModel):
    """Order-agnostic 0-100 score of a driver."""

    driver_id: int
    priority_score: int


class DriversRequest(BaseModel):
    """A batch of drivers."""

    drivers: list[Driver] = Field(default_factory=list)


class UpgradeRequest(BaseModel):
    """Manual promotion of a driver to priority."""

    driver: Driver
    reason: str = PriorityChangeReason.MANUAL_UPGRADE.value
    expiry_date: datetime | None = None
    changed_by: int | None = None


class DowngradeRequest(BaseModel):
    """Manual return of a driver to normal level."""

    driver: Driver
    reason: str = PriorityChangeReason.MANUAL_DOWNGRADE.value
    changed_by: int | None = None


class AdvertisingRequest(BaseModel):
    """Switch a driver's advertising boost on or off."""

    driver: Driver
    is_advertising: bool


class PriorityChangeResponse(BaseModel):
    """Updated driver plus the audit entry the caller should store."""

    driver: Driver
    log: DriverPriorityLog | None = None


class PriorityExpiryResponse(BaseModel):
    """Drivers after the expiry sweep and the audit entries it produced."""

    drivers: list[Driver]
    logs: list[DriverPriorityLog] = Field(default_factory=list)


# Ranking endpoints


@router.post("/priority/rank", response_model=list[RankedEntry])
async def rank_drivers(request: RankRequest) -> list[RankedEntry]:
    """
    Rank eligible drivers for an order by score.

    An empty list means no driver can take the order.
    """
    ranked = get_priority_engine().rank_drivers_for_order(request.drivers, request.order)

    if not ranked:
        logger.info("no_eligible_drivers", order_id=request.order.id)

    return ranked


@router.post("/priority/optimal", response_model=list[RankedEntry])
async def optimal_assignment(request: RankRequest) -> list[RankedEntry]:
    """Drivers in the order offers should be made."""
    ranked = get_priority_engine().get_optimal_driver_assignment(
        request.drivers, request.order
    )

    if not ranked:
        logger.info("no_eligible_drivers", order_id=request.order.id)

    return ranked


@router.post("/priority/score", response_model=PriorityFactors)
async def score_driver(request: ScoreRequest) -> PriorityFactors:
    """Score breakdown of one driver for one order."""
    return get_priority_engine().calculate_priority_score(request.driver, request.order)


@router.post("/priority/required-vehicle", response_model=RequiredVehicleResponse)
async def required_vehicle(order: Order) -> RequiredVehicleResponse:
    """Vehicle category the order needs."""
    return RequiredVehicleResponse(
        order_id=order.id,
        vehicle_type=get_priority_engine().get_required_vehicle_type(order),
    )


@router.post("/priority/upgrade-check", response_model=UpgradeDecision)
async def upgrade_check(driver: Driver) -> UpgradeDecision:
    """Whether the driver's history earns priority status."""
    return should_upgrade_to_priority(driver)


@router.post("/priority/display-score", response_model=DisplayScoreResponse)
async def display_score(driver: Driver) -> DisplayScoreResponse:
    """Order-agnostic display score of a driver."""
    return DisplayScoreResponse(
        driver_id=driver.id,
        priority_score=update_driver_priority_score(driver),
    )


@router.post("/priority/stats", response_model=PriorityStats)
async def stats(request: DriversRequest) -> PriorityStats:
    """Priority counters over a batch of drivers."""
    return priority_stats(request.drivers)


# Admin endpoints


@router.post("/drivers/priority/upgrade", response_model=PriorityChangeResponse)
async def upgrade(request: UpgradeRequest) -> PriorityChangeResponse:
    """Promote a driver to priority."""
    try:
        driver, log = upgrade_driver(
            request.driver,
            reason=request.reason,
            expiry_date=request.expiry_date,
            changed_by=request.changed_by,
        )
    except PriorityChangeError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    return PriorityChangeResponse(driver=driver, log=log)


@router.post("/drivers/priority/downgrade", response_model=PriorityChangeResponse)
async def downgrade(request: DowngradeRequest) -> PriorityChangeResponse:
    """Return a driver to normal level."""
    driver, log = downgrade_driver(
        request.driver,
        reason=request.reason,
        changed_by=request.changed_by,
    )
    return PriorityChangeResponse(driver=driver, log=log)


@router.post("/drivers/priority/expire", response_model=PriorityExpiryResponse)
async def expire(request: DriversRequest) -> PriorityExpiryResponse:
    """Downgrade every driver whose priority has lapsed."""
    drivers = []
    logs = []

    for driver in request.drivers:
        updated, log = expire_priority(driver)
        drivers.append(updated)
        if log:
            logs.append(log)

    logger.info("priority_expiry_sweep", drivers=len(drivers), expired=len(logs))

    return PriorityExpiryResponse(drivers=drivers, logs=logs)


@router.post("/drivers/advertising", response_model=Driver)
async def advertising(request: AdvertisingRequest) -> Driver:
    """Switch a driver's advertising boost."""
    return set_advertising(request.driver, request.is_advertising)
