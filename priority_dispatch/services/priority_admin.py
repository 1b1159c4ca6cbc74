"""Priority level administration: manual changes, auto-upgrade, expiry, stats."""

from datetime import datetime, timedelta

from priority_dispatch.config import get_settings
from priority_dispatch.engine.scoring import (
    should_upgrade_to_priority,
    update_driver_priority_score,
)
from priority_dispatch.exceptions import PriorityChangeError
from priority_dispatch.models.driver import Driver, PriorityLevel, as_utc, utc_now
from priority_dispatch.models.priority import (
    DriverPriorityLog,
    PriorityChangeReason,
    PriorityStats,
)
from priority_dispatch.utils.logging import DispatchLogger

logger = DispatchLogger("priority_admin")


def _change_level(
    driver: Driver,
    new_level: PriorityLevel,
    reason: str,
    expiry_date: datetime | None,
    changed_by: int | None,
    now: datetime,
) -> tuple[Driver, DriverPriorityLog | None]:
    """Copy the driver with a new level; log only when the level differs."""
    updated = driver.model_copy(
        update={"priority_level": new_level.value, "priority_expiry_date": expiry_date}
    )

    if driver.priority_level == new_level:
        return updated, None

    entry = DriverPriorityLog(
        driver_id=driver.id,
        previous_level=driver.priority_level,
        new_level=new_level.value,
        reason=reason,
        changed_at=now,
        changed_by=changed_by,
    )
    logger.log_priority_change(
        driver_id=driver.id,
        previous_level=entry.previous_level,
        new_level=entry.new_level,
        reason=reason,
        changed_by=changed_by,
    )
    return updated, entry


def upgrade_driver(
    driver: Driver,
    reason: str = PriorityChangeReason.MANUAL_UPGRADE.value,
    expiry_date: datetime | None = None,
    changed_by: int | None = None,
    now: datetime | None = None,
) -> tuple[Driver, DriverPriorityLog | None]:
    """
    Promote a driver to priority.

    Args:
        driver: Driver to promote
        reason: Reason written to the audit log
        expiry_date: When priority lapses, defaults to now + priority_duration_days
        changed_by: Admin id, None for system changes
        now: Reference time

    Returns:
        Updated driver copy and the audit entry (None if already priority)
    """
    now = as_utc(now) if now else utc_now()

    if expiry_date is None:
        expiry_date = now + timedelta(days=get_settings().priority_duration_days)
    elif as_utc(expiry_date) <= now:
        raise PriorityChangeError("Priority expiry date must be in the future")

    return _change_level(driver, PriorityLevel.PRIORITY, reason, expiry_date, changed_by, now)


def downgrade_driver(
    driver: Driver,
    reason: str = PriorityChangeReason.MANUAL_DOWNGRADE.value,
    changed_by: int | None = None,
    now: datetime | None = None,
) -> tuple[Driver, DriverPriorityLog | None]:
    """Return a driver to normal level and clear the expiry date."""
    now = as_utc(now) if now else utc_now()
    return _change_level(driver, PriorityLevel.NORMAL, reason, None, changed_by, now)


def apply_auto_upgrade(
    driver: Driver,
    now: datetime | None = None,
) -> tuple[Driver, DriverPriorityLog | None]:
    """Promote a normal driver whose history meets the upgrade criteria."""
    if driver.is_priority:
        return driver, None

    decision = should_upgrade_to_priority(driver)
    if not decision.should_upgrade:
        return driver, None

    return upgrade_driver(driver, reason=decision.reason, now=now)


def expire_priority(
    driver: Driver,
    now: datetime | None = None,
) -> tuple[Driver, DriverPriorityLog | None]:
    """Downgrade a driver whose priority has passed its expiry date."""
    if not driver.is_priority_expired(now):
        return driver, None

    return downgrade_driver(driver, reason=PriorityChangeReason.PRIORITY_EXPIRED.value, now=now)


def set_advertising(driver: Driver, is_advertising: bool) -> Driver:
    """Copy the driver with the advertising flag set."""
    return driver.model_copy(update={"is_advertising": is_advertising})


def refresh_priority_score(driver: Driver) -> Driver:
    """Copy the driver with its stored display score recomputed."""
    return driver.model_copy(update={"priority_score": update_driver_priority_score(driver)})


def priority_stats(drivers: list[Driver]) -> PriorityStats:
    """Count drivers per priority bucket."""
    high_rating_threshold = get_settings().high_rating_threshold
    stats = PriorityStats(total=len(drivers))

    for driver in drivers:
        if driver.is_priority:
            stats.priority += 1
        elif driver.priority_level == PriorityLevel.NORMAL:
            stats.normal += 1
        if driver.is_advertising:
            stats.advertising += 1
        if driver.rating >= high_rating_threshold:
            stats.high_rating += 1
        if driver.is_active:
            stats.available += 1

    return stats
