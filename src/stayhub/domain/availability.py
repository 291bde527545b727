"""Host-facing availability management.

Hosts open, close and price individual days of their own listings. Writes go
through the same AvailabilityStore the booking coordinator reserves against.
A day inside a live order's range cannot be reopened; its price can still
change.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from stayhub.domain.dates import MAX_RANGE_DAYS, expand_days
from stayhub.domain.errors import ForbiddenError, InvalidInputError, UnavailableError
from stayhub.domain.models import AvailabilityRecord, CallerIdentity, ListingRef
from stayhub.domain.ports import AvailabilityStore, ListingDirectory, OrderLedger

logger = logging.getLogger(__name__)


class AvailabilityService:
    def __init__(
        self,
        *,
        availability: AvailabilityStore,
        orders: OrderLedger,
        listings: ListingDirectory,
        host_group: str,
    ) -> None:
        self._availability = availability
        self._orders = orders
        self._listings = listings
        self._host_group = host_group

    def _require_owner(self, listing_id: str, caller: CallerIdentity) -> None:
        if not caller.in_group(self._host_group):
            raise ForbiddenError("User is not authorized to update availability")
        if self._listings.get_host(listing_id) != caller.id:
            raise ForbiddenError("User does not own this listing")

    def _holding_order_id(self, listing_id: str, day: date) -> str | None:
        for order in self._orders.list_by_listing(listing_id):
            if order.start_date <= day <= order.end_date:
                return order.id
        return None

    def set_day(
        self,
        listing_id: str,
        day: date,
        *,
        is_available: bool,
        price: Decimal,
        caller: CallerIdentity,
    ) -> AvailabilityRecord:
        """Upsert one calendar day for a listing the caller hosts.

        Raises:
            UnavailableError: is_available is true but an order holds the day.
        """
        ListingRef.parse(listing_id)
        if price < 0:
            raise InvalidInputError("price must be >= 0")

        self._require_owner(listing_id, caller)

        if is_available:
            order_id = self._holding_order_id(listing_id, day)
            if order_id is not None:
                raise UnavailableError(
                    "Day is held by an order and cannot be reopened",
                    {"listing_id": listing_id, "date": day.isoformat(), "order_id": order_id},
                )

        record = self._availability.put_day(
            listing_id, day, is_available=is_available, price=price
        )
        logger.info(
            "availability set",
            extra={
                "extra_fields": {
                    "listing_id": listing_id,
                    "date": day.isoformat(),
                    "is_available": is_available,
                },
            },
        )
        return record

    def get_calendar(
        self,
        listing_id: str,
        start_date: date,
        end_date: date,
        *,
        caller: CallerIdentity,
    ) -> list[AvailabilityRecord]:
        """Records of a listing for [start_date, end_date], date ascending."""
        days = expand_days(start_date, end_date, max_days=MAX_RANGE_DAYS)

        self._require_owner(listing_id, caller)

        records = self._availability.get_range(listing_id, start_date, end_date)
        return [records[d] for d in days if d in records]
