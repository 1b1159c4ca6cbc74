"""Run a sample fleet through ranking, offers and priority housekeeping."""

import random
from datetime import timedelta

from priority_dispatch.engine import get_priority_engine
from priority_dispatch.models.driver import DriverCandidate, utc_now
from priority_dispatch.models.order import Order
from priority_dispatch.services import (
    AssignmentSession,
    apply_auto_upgrade,
    priority_stats,
    refresh_priority_score,
)
from priority_dispatch.utils.logging import setup_logging


def build_fleet() -> list[DriverCandidate]:
    """Sample drivers around a pickup point."""
    now = utc_now()

    return [
        DriverCandidate(
            id=1,
            full_name="Budi Santoso",
            vehicle_type="motor",
            priority_level="priority",
            priority_expiry_date=now + timedelta(days=12),
            rating=4.8,
            total_orders=320,
            completion_rate=96,
            consecutive_rejects=3,
            distance=6.5,
            is_available=False,
        ),
        DriverCandidate(
            id=2,
            full_name="Siti Rahayu",
            vehicle_type="motor",
            rating=4.95,
            total_orders=150,
            completion_rate=97,
            distance=1.2,
            is_available=True,
        ),
        DriverCandidate(
            id=3,
            full_name="Agus Wijaya",
            vehicle_type="motor",
            is_advertising=True,
            rating=4.6,
            total_orders=80,
            completion_rate=91,
            last_order_date=now - timedelta(minutes=40),
            distance=3.4,
            is_available=True,
        ),
        DriverCandidate(
            id=4,
            full_name="Dewi Lestari",
            vehicle_type="motor",
            rating=4.3,
            total_orders=45,
            completion_rate=88,
            distance=9.0,
            is_available=False,
        ),
        DriverCandidate(
            id=5,
            full_name="Rudi Hartono",
            vehicle_type="mobil",
            rating=4.9,
            total_orders=600,
            completion_rate=99,
            distance=2.0,
            is_available=True,
        ),
        DriverCandidate(
            id=6,
            full_name="Joko Susilo",
            vehicle_type="motor",
            status="suspended",
            rating=4.7,
            distance=0.5,
            is_available=True,
        ),
    ]


def print_ranking(session: AssignmentSession) -> None:
    """Print the offer order with score breakdowns."""
    print("\nOffer order:")
    for position, entry in enumerate(session.ranked, 1):
        f = entry.factors
        print(
            f"  {position}. #{entry.driver.id} {entry.driver.full_name:<14} "
            f"score={entry.priority_score:>6.1f} reason={entry.assignment_reason.value:<18} "
            f"[lvl {f.priority_level_bonus:+.0f} ads {f.advertising_bonus:+.0f} "
            f"rat {f.rating_bonus:+.0f} avl {f.availability_bonus:+.0f} "
            f"prx {f.proximity_bonus:+.1f} act {f.recent_activity_penalty:+.0f} "
            f"rej {f.reject_penalty:+.0f}]"
        )


def run_offers(session: AssignmentSession, rng: random.Random) -> None:
    """Offer the order down the list with random answers."""
    print("\nOffers:")
    now = utc_now()

    while True:
        assignment = session.offer_next(now=now)
        if assignment is None:
            print("  ✗ No driver accepted the order")
            return

        answer = rng.choice(["accepted", "rejected", "timeout"])
        if answer == "timeout":
            now += timedelta(seconds=session.timeout_seconds)
            session.expire_if_due(now=now)
        else:
            now += timedelta(seconds=rng.randint(3, 25))
            session.respond(answer, now=now)

        print(
            f"  → driver #{assignment.driver_id}: {assignment.response_status.value} "
            f"after {assignment.response_time}s"
        )

        if session.accepted:
            print(f"  ✓ Order {session.order.id} assigned to driver #{assignment.driver_id}")
            return


def main(seed: int = 7) -> None:
    """Run the whole sample."""
    setup_logging()
    rng = random.Random(seed)

    print("\n" + "=" * 60)
    print("  Driver Priority Dispatch - Sample Run")
    print("=" * 60)

    fleet = build_fleet()
    order = Order(id=1001, order_number="ORD-1001", distance=7.5)

    engine = get_priority_engine()
    print(f"\nOrder {order.order_number}: {order.distance} km, needs '{engine.get_required_vehicle_type(order)}'")

    session = AssignmentSession.from_candidates(order, fleet, engine=engine)
    print_ranking(session)
    run_offers(session, rng)

    print("\nDriver updates to persist:")
    for driver in session.driver_updates():
        print(f"  #{driver.id}: consecutive_rejects={driver.consecutive_rejects}")

    print("\nPriority housekeeping:")
    for driver in fleet:
        upgraded, log = apply_auto_upgrade(refresh_priority_score(driver))
        line = f"  #{driver.id} display score {upgraded.priority_score:>3}"
        if log:
            line += f"  ↑ upgraded ({log.reason})"
        print(line)

    print(f"\nStats: {priority_stats(fleet).model_dump()}")
    print("=" * 60 + "\n")


if __name__ == "__main__":
    main()
