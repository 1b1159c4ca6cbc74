"""Caller-side services built on the priority engine."""

from priority_dispatch.services.assignment import AssignmentSession
from priority_dispatch.services.priority_admin import (
    apply_auto_upgrade,
    downgrade_driver,
    expire_priority,
    priority_stats,
    refresh_priority_score,
    set_advertising,
    upgrade_driver,
)

__all__ = [
    "AssignmentSession",
    "upgrade_driver",
    "downgrade_driver",
    "apply_auto_upgrade",
    "expire_priority",
    "set_advertising",
    "refresh_priority_score",
    "priority_stats",
]
