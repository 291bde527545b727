"""Concurrent bookings against the same days.

Both requests pass the availability check before either reserves anything,
so the conditional write alone decides the winner.
"""

import threading
from datetime import date

from stayhub.domain.booking import BookingCoordinator
from stayhub.domain.errors import UnavailableError

from .helpers import renter


class BarrierStore:
    """Delegates to a real store, holding every get_range until both callers arrive."""

    def __init__(self, store, parties: int = 2):
        self._store = store
        self._barrier = threading.Barrier(parties, timeout=5)

    def get_range(self, listing_id, start, end):
        result = self._store.get_range(listing_id, start, end)
        self._barrier.wait()
        return result

    def __getattr__(self, name):
        return getattr(self._store, name)


def _race(coordinator, requests):
    results = {}

    def _run(user_id, start, end):
        try:
            results[user_id] = coordinator.create_order(
                listing_id="STAY#beach",
                user_id=user_id,
                start_date=start,
                end_date=end,
                caller=renter(user_id),
            )
        except UnavailableError as exc:
            results[user_id] = exc

    threads = [threading.Thread(target=_run, args=req) for req in requests]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)
    return results


class TestConcurrentCreate:
    def test_exactly_one_wins_identical_range(self, seeded_store, order_ledger, listing_directory):
        coordinator = BookingCoordinator(
            availability=BarrierStore(seeded_store),
            orders=order_ledger,
            listings=listing_directory,
        )

        results = _race(
            coordinator,
            [
                ("user-1", date(2024, 6, 1), date(2024, 6, 3)),
                ("user-2", date(2024, 6, 1), date(2024, 6, 3)),
            ],
        )

        winners = [r for r in results.values() if not isinstance(r, UnavailableError)]
        losers = [r for r in results.values() if isinstance(r, UnavailableError)]
        assert len(winners) == 1
        assert len(losers) == 1

        # Only the winner's order survives and every day is held once
        orders = order_ledger.list_by_listing("STAY#beach")
        assert [o.id for o in orders] == [winners[0].id]
        for day in (1, 2, 3):
            assert seeded_store.get_day("STAY#beach", date(2024, 6, day)).is_available is False

    def test_loser_releases_days_it_already_won(self, seeded_store, order_ledger, listing_directory):
        coordinator = BookingCoordinator(
            availability=BarrierStore(seeded_store),
            orders=order_ledger,
            listings=listing_directory,
        )

        # Overlap only on June 3
        results = _race(
            coordinator,
            [
                ("user-1", date(2024, 6, 1), date(2024, 6, 3)),
                ("user-2", date(2024, 6, 3), date(2024, 6, 5)),
            ],
        )

        winners = [r for r in results.values() if not isinstance(r, UnavailableError)]
        assert len(winners) == 1
        winner = winners[0]

        held = {d for d in winner.days()}
        for day in range(1, 6):
            d = date(2024, 6, day)
            assert seeded_store.get_day("STAY#beach", d).is_available is (d not in held)
        assert len(order_ledger.list_by_listing("STAY#beach")) == 1
