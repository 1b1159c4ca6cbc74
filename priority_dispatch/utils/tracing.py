"""Assignment tracing for a single order."""

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Generator

from priority_dispatch.models.driver import utc_now
from priority_dispatch.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class TraceEvent:
    """Individual event while dispatching an order."""

    timestamp: datetime
    event_type: str
    order_id: int
    driver_id: int | None = None
    duration_ms: float | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


class AssignmentTracer:
    """Traces offers and answers while an order is being dispatched."""

    def __init__(self, order_id: int):
        self.order_id = order_id
        self.events: list[TraceEvent] = []
        self.start_time = time.time()

    def add_event(
        self,
        event_type: str,
        driver_id: int | None = None,
        duration_ms: float | None = None,
        **metadata: Any,
    ) -> None:
        """Add a trace event."""
        event = TraceEvent(
            timestamp=utc_now(),
            event_type=event_type,
            order_id=self.order_id,
            driver_id=driver_id,
            duration_ms=duration_ms,
            metadata=metadata,
        )
        self.events.append(event)

        logger.debug(
            "trace_event",
            order_id=self.order_id,
            event_type=event_type,
            driver_id=driver_id,
            duration_ms=duration_ms,
            **metadata,
        )

    @contextmanager
    def trace_operation(
        self, operation: str, driver_id: int | None = None, **metadata: Any
    ) -> Generator[None, None, None]:
        """Context manager to trace an operation with timing."""
        start = time.time()
        try:
            yield
        finally:
            duration_ms = (time.time() - start) * 1000
            self.add_event(operation, driver_id, duration_ms=duration_ms, **metadata)

    def get_trace_summary(self) -> dict[str, Any]:
        """Get a summary of the trace."""
        total_duration = (time.time() - self.start_time) * 1000

        event_counts: dict[str, int] = {}
        drivers_contacted: list[int] = []
        for event in self.events:
            event_counts[event.event_type] = event_counts.get(event.event_type, 0) + 1
            if event.driver_id is not None and event.driver_id not in drivers_contacted:
                drivers_contacted.append(event.driver_id)

        return {
            "order_id": self.order_id,
            "total_duration_ms": total_duration,
            "total_events": len(self.events),
            "event_counts": event_counts,
            "drivers_contacted": drivers_contacted,
            "events": [
                {
                    "timestamp": event.timestamp.isoformat(),
                    "event_type": event.event_type,
                    "driver_id": event.driver_id,
                    "duration_ms": event.duration_ms,
                    "metadata": event.metadata,
                }
                for event in self.events
            ],
        }
