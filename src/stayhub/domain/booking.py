"""Booking coordinator - order lifecycle against the availability calendar.

Create, update and cancel each run as a sequence of independent store calls:

    check (read every day) -> write order -> flip availability day by day

The check phase covers the whole range before anything is written, so a
conflict on day N never leaves days 1..N-1 reserved. Flipping a day to
unavailable is a conditional write; if it loses a race, the days already
flipped in the same call are released, the order write is undone and the
caller gets UnavailableError.

Known gap: compensation is best-effort. If a compensating write itself fails,
the failure is logged and the calendar needs an external reconciliation pass.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Callable

from stayhub.domain.dates import MAX_RANGE_DAYS, expand_days, keyed_days
from stayhub.domain.errors import (
    ForbiddenError,
    NotFoundError,
    StorageError,
    UnavailableError,
)
from stayhub.domain.models import (
    AvailabilityRecord,
    CallerIdentity,
    Order,
    OrderChange,
)
from stayhub.domain.ports import AvailabilityStore, ListingDirectory, OrderLedger
from stayhub.infra.time import utc_now

logger = logging.getLogger(__name__)


def _new_order_id() -> str:
    return str(uuid.uuid4())


class BookingCoordinator:
    """Orchestrates order operations over the availability and order stores."""

    def __init__(
        self,
        *,
        availability: AvailabilityStore,
        orders: OrderLedger,
        listings: ListingDirectory,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = _new_order_id,
    ) -> None:
        self._availability = availability
        self._orders = orders
        self._listings = listings
        self._clock = clock
        self._id_factory = id_factory

    # ── Create ────────────────────────────────────────────

    def create_order(
        self,
        *,
        listing_id: str,
        user_id: str,
        start_date: date,
        end_date: date,
        caller: CallerIdentity,
    ) -> Order:
        """Reserve [start_date, end_date] on a listing for the calling user.

        Raises:
            ForbiddenError: caller is not the renter.
            InvalidInputError: end_date before start_date, or a range longer
                than MAX_RANGE_DAYS.
            NotFoundError: listing does not exist.
            UnavailableError: some day is missing, unavailable, or lost a race.
            StorageError: a store call failed.
        """
        if caller.id != user_id:
            raise ForbiddenError("User is not authorized to create order")

        days = expand_days(start_date, end_date, max_days=MAX_RANGE_DAYS)
        host_id = self._listings.get_host(listing_id)

        records = self._require_available(listing_id, days)
        total = sum((records[d].price for d in days), Decimal("0"))

        order = Order(
            id=self._id_factory(),
            user_id=user_id,
            host_id=host_id,
            listing_id=listing_id,
            start_date=start_date,
            end_date=end_date,
            total_amount=total,
            created_at=self._clock(),
        )
        self._orders.insert(order)

        self._reserve_days(
            listing_id,
            days,
            order_id=order.id,
            undo_order=lambda: self._orders.delete(order.id),
        )

        logger.info(
            "order created",
            extra={
                "extra_fields": {
                    "order_id": order.id,
                    "listing_id": listing_id,
                    "start_date": start_date.isoformat(),
                    "end_date": end_date.isoformat(),
                    "nights": len(days),
                },
            },
        )
        return order

    # ── Update ────────────────────────────────────────────

    def update_order(
        self,
        order_id: str,
        change: OrderChange,
        *,
        caller: CallerIdentity,
    ) -> Order:
        """Replace an order's listing and date range.

        Days are diffed as (listing, day) pairs: added pairs are reserved on
        the new listing, removed pairs are released on the old one, pairs in
        both ranges are left untouched. The total is recomputed over the full
        new range from current prices.
        """
        existing = self._load(order_id)
        if caller.id != existing.user_id:
            raise ForbiddenError("User is not authorized to update order")

        new_days = expand_days(change.start_date, change.end_date, max_days=MAX_RANGE_DAYS)
        old_keys = keyed_days(existing.listing_id, existing.start_date, existing.end_date)
        new_keys = keyed_days(change.listing_id, change.start_date, change.end_date)
        added = sorted(d for _, d in new_keys - old_keys)
        removed = sorted(d for _, d in old_keys - new_keys)

        self._require_available(change.listing_id, added)

        prices = self._availability.get_range(
            change.listing_id, change.start_date, change.end_date
        )
        total = sum((prices[d].price for d in new_days if d in prices), Decimal("0"))

        updated = replace(
            existing,
            listing_id=change.listing_id,
            start_date=change.start_date,
            end_date=change.end_date,
            total_amount=total,
            updated_at=self._clock(),
        )
        self._orders.replace(updated)

        self._reserve_days(
            change.listing_id,
            added,
            order_id=order_id,
            undo_order=lambda: self._orders.replace(existing),
        )
        self._release_days(existing.listing_id, removed, order_id=order_id)

        logger.info(
            "order updated",
            extra={
                "extra_fields": {
                    "order_id": order_id,
                    "listing_id": change.listing_id,
                    "previous_listing_id": existing.listing_id,
                    "days_reserved": len(added),
                    "days_released": len(removed),
                },
            },
        )
        return updated

    # ── Cancel ────────────────────────────────────────────

    def cancel_order(self, order_id: str, *, caller: CallerIdentity) -> None:
        """Delete an order and release its days. Renter or host may cancel."""
        order = self._load(order_id)
        if caller.id not in (order.user_id, order.host_id):
            raise ForbiddenError("User is not authorized to delete this order")

        self._orders.delete(order_id)
        self._release_days(order.listing_id, order.days(), order_id=order_id)

        logger.info(
            "order cancelled",
            extra={
                "extra_fields": {
                    "order_id": order_id,
                    "listing_id": order.listing_id,
                    "cancelled_by": "host" if caller.id == order.host_id else "user",
                },
            },
        )

    # ── Reads ─────────────────────────────────────────────

    def get_order(self, order_id: str, *, caller: CallerIdentity) -> Order:
        order = self._load(order_id)
        if caller.id not in (order.user_id, order.host_id):
            raise ForbiddenError("User is not authorized to view this order")
        return order

    def list_orders_by_user(self, user_id: str, *, caller: CallerIdentity) -> list[Order]:
        if caller.id != user_id:
            raise ForbiddenError("User is not authorized to view these orders")
        return self._orders.list_by_user(user_id)

    def list_orders_by_listing(
        self, listing_id: str, *, caller: CallerIdentity
    ) -> list[Order]:
        host_id = self._listings.get_host(listing_id)
        if caller.id != host_id:
            raise ForbiddenError("User is not authorized to view orders for this listing")
        return self._orders.list_by_listing(listing_id)

    # ── Internals ─────────────────────────────────────────

    def _load(self, order_id: str) -> Order:
        order = self._orders.get(order_id)
        if order is None:
            raise NotFoundError("Order not found", {"order_id": order_id})
        return order

    def _require_available(
        self, listing_id: str, days: list[date]
    ) -> dict[date, AvailabilityRecord]:
        """Read every day first; raise before any write if one is not bookable."""
        if not days:
            return {}

        records = self._availability.get_range(listing_id, min(days), max(days))
        for day in days:
            record = records.get(day)
            if record is None or not record.is_available:
                raise UnavailableError(
                    "Listing is not available for the selected date range",
                    {"listing_id": listing_id, "date": day.isoformat()},
                )
        return records

    def _reserve_days(
        self,
        listing_id: str,
        days: list[date],
        *,
        order_id: str,
        undo_order: Callable[[], None],
    ) -> None:
        """Conditionally reserve each day; on any failure undo this call's writes."""
        reserved: list[date] = []
        for day in days:
            try:
                won = self._availability.reserve_day(listing_id, day)
            except StorageError:
                self._compensate(listing_id, reserved, order_id=order_id, undo_order=undo_order)
                raise

            if not won:
                logger.warning(
                    "reservation lost conditional write",
                    extra={
                        "extra_fields": {
                            "order_id": order_id,
                            "listing_id": listing_id,
                            "date": day.isoformat(),
                        },
                    },
                )
                self._compensate(listing_id, reserved, order_id=order_id, undo_order=undo_order)
                raise UnavailableError(
                    "Listing is not available for the selected date range",
                    {"listing_id": listing_id, "date": day.isoformat()},
                )
            reserved.append(day)

    def _compensate(
        self,
        listing_id: str,
        reserved: list[date],
        *,
        order_id: str,
        undo_order: Callable[[], None],
    ) -> None:
        """Best-effort rollback: release flipped days, then undo the order write."""
        failed: list[str] = []
        for day in reserved:
            try:
                self._availability.release_day(listing_id, day)
            except StorageError:
                failed.append(day.isoformat())

        try:
            undo_order()
            order_restored = True
        except StorageError:
            order_restored = False

        if failed or not order_restored:
            logger.error(
                "compensation incomplete, reconciliation required",
                extra={
                    "extra_fields": {
                        "order_id": order_id,
                        "listing_id": listing_id,
                        "unreleased_dates": failed,
                        "order_restored": order_restored,
                    },
                },
            )

    def _release_days(self, listing_id: str, days: list[date], *, order_id: str) -> None:
        for i, day in enumerate(days):
            try:
                self._availability.release_day(listing_id, day)
            except StorageError:
                logger.error(
                    "release failed after order write, reconciliation required",
                    extra={
                        "extra_fields": {
                            "order_id": order_id,
                            "listing_id": listing_id,
                            "pending_dates": [d.isoformat() for d in days[i:]],
                        },
                    },
                )
                raise
