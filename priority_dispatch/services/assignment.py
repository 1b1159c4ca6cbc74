"""Sequential offering of an order down a ranked driver list."""

from datetime import datetime

from priority_dispatch.config import get_settings
from priority_dispatch.engine.ranking import PriorityEngine, get_priority_engine
from priority_dispatch.engine.scoring import round_half_up
from priority_dispatch.exceptions import AssignmentStateError
from priority_dispatch.models.assignment import OrderAssignment, RankedEntry, ResponseStatus
from priority_dispatch.models.driver import DriverCandidate, as_utc, utc_now
from priority_dispatch.models.order import Order
from priority_dispatch.utils.logging import DispatchLogger
from priority_dispatch.utils.tracing import AssignmentTracer

logger = DispatchLogger("assignment_session")


class AssignmentSession:
    """
    Offers one order to drivers one at a time.

    The session only keeps bookkeeping for a single order: which driver
    holds the current offer, how each driver answered, and which driver
    updates the caller should persist. Guarding against two sessions
    assigning the same order is left to the persistence layer.

    Not thread-safe; use one session per order.
    """

    def __init__(
        self,
        order: Order,
        ranked: list[RankedEntry],
        timeout_seconds: int | None = None,
        tracer: AssignmentTracer | None = None,
    ):
        self.order = order
        self.ranked = list(ranked)
        self.timeout_seconds = (
            get_settings().offer_timeout_seconds if timeout_seconds is None else timeout_seconds
        )
        self.tracer = tracer or AssignmentTracer(order.id)

        self._assignments: list[OrderAssignment] = []
        self._next_index = 0
        self._current: OrderAssignment | None = None
        self._accepted: OrderAssignment | None = None

    @classmethod
    def from_candidates(
        cls,
        order: Order,
        drivers: list[DriverCandidate],
        engine: PriorityEngine | None = None,
        timeout_seconds: int | None = None,
        now: datetime | None = None,
    ) -> "AssignmentSession":
        """Build a session from raw candidates using the grouped offer order."""
        engine = engine or get_priority_engine()
        tracer = AssignmentTracer(order.id)

        with tracer.trace_operation("drivers_ranked", candidates=len(drivers)):
            ranked = engine.get_optimal_driver_assignment(drivers, order, now=now)

        return cls(order, ranked, timeout_seconds=timeout_seconds, tracer=tracer)

    @property
    def current(self) -> OrderAssignment | None:
        """Offer waiting for an answer, if any."""
        return self._current

    @property
    def accepted(self) -> OrderAssignment | None:
        """Offer the order was accepted under, if any."""
        return self._accepted

    @property
    def remaining(self) -> int:
        """Drivers not offered yet."""
        return len(self.ranked) - self._next_index

    @property
    def exhausted(self) -> bool:
        """Check if every driver was offered the order and none accepted."""
        return self._accepted is None and self._current is None and self.remaining == 0

    @property
    def assignments(self) -> list[OrderAssignment]:
        """All offers made so far, oldest first."""
        return list(self._assignments)

    def offer_next(self, now: datetime | None = None) -> OrderAssignment | None:
        """
        Offer the order to the next driver in line.

        Returns:
            The pending assignment record, or None when no drivers are left

        Raises:
            AssignmentStateError: If the order was accepted or an offer is still open
        """
        if self._accepted is not None:
            raise AssignmentStateError(f"Order {self.order.id} was already accepted")
        if self._current is not None:
            raise AssignmentStateError(
                f"Order {self.order.id} still waits on driver {self._current.driver_id}"
            )
        if self.remaining == 0:
            self.tracer.add_event("drivers_exhausted")
            return None

        entry = self.ranked[self._next_index]
        self._next_index += 1

        assignment = OrderAssignment(
            order_id=self.order.id,
            driver_id=entry.driver.id,
            assigned_at=as_utc(now) if now else utc_now(),
            priority_score=round_half_up(entry.priority_score),
            assignment_reason=entry.assignment_reason.value,
        )
        self._assignments.append(assignment)
        self._current = assignment

        logger.log_offer(
            order_id=self.order.id,
            driver_id=entry.driver.id,
            priority_score=entry.priority_score,
            assignment_reason=assignment.assignment_reason,
            position=self._next_index,
        )
        self.tracer.add_event(
            "order_offered",
            entry.driver.id,
            priority_score=entry.priority_score,
            assignment_reason=assignment.assignment_reason,
        )

        return assignment

    def respond(
        self,
        status: ResponseStatus | str,
        now: datetime | None = None,
    ) -> OrderAssignment:
        """
        Record the current driver's answer.

        Args:
            status: Either accepted or rejected
            now: Time the answer arrived

        Returns:
            The closed assignment record

        Raises:
            AssignmentStateError: If no offer is open or the status is not an answer
        """
        try:
            status = ResponseStatus(status)
        except ValueError as e:
            raise AssignmentStateError(f"Unknown driver answer: {status!r}") from e
        if status not in (ResponseStatus.ACCEPTED, ResponseStatus.REJECTED):
            raise AssignmentStateError(
                f"Drivers answer with accepted or rejected, got {status.value}"
            )
        if self._current is None:
            raise AssignmentStateError(f"Order {self.order.id} has no open offer")

        return self._close(status, as_utc(now) if now else utc_now())

    def expire_if_due(self, now: datetime | None = None) -> OrderAssignment | None:
        """Mark the open offer as timed out once the timeout has passed."""
        if self._current is None:
            return None

        now = as_utc(now) if now else utc_now()
        elapsed = (now - as_utc(self._current.assigned_at)).total_seconds()
        if elapsed < self.timeout_seconds:
            return None

        return self._close(ResponseStatus.TIMEOUT, now)

    def _close(self, status: ResponseStatus, now: datetime) -> OrderAssignment:
        """Close the open offer with a final status."""
        assignment = self._current
        elapsed = (now - as_utc(assignment.assigned_at)).total_seconds()

        assignment.response_status = status
        assignment.response_time = max(0, round_half_up(elapsed))
        self._current = None

        if status == ResponseStatus.ACCEPTED:
            self._accepted = assignment

        logger.log_response(
            order_id=self.order.id,
            driver_id=assignment.driver_id,
            response_status=status.value,
            response_time=assignment.response_time,
        )
        self.tracer.add_event(
            f"offer_{status.value}",
            assignment.driver_id,
            response_time=assignment.response_time,
        )

        return assignment

    def driver_updates(self) -> list[DriverCandidate]:
        """
        Driver copies carrying the counter changes this session caused.

        Rejections bump ``consecutive_rejects``. The accepting driver has the
        counter reset and ``last_order_date`` set to the offer time. Timeouts
        change nothing.
        """
        drivers = {entry.driver.id: entry.driver for entry in self.ranked}
        updates = []

        for assignment in self._assignments:
            driver = drivers[assignment.driver_id]
            if assignment.response_status == ResponseStatus.REJECTED:
                updates.append(
                    driver.model_copy(
                        update={"consecutive_rejects": driver.consecutive_rejects + 1}
                    )
                )
            elif assignment.response_status == ResponseStatus.ACCEPTED:
                updates.append(
                    driver.model_copy(
                        update={
                            "consecutive_rejects": 0,
                            "last_order_date": assignment.assigned_at,
                        }
                    )
                )

        return updates
