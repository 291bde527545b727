"""In-process implementations of the store protocols.

Used with STORE_BACKEND=memory for local runs and throughout the test suite.
A single lock guards each store so reserve_day behaves as a conditional write
under concurrent callers, like the guarded UPDATE in Postgres.
"""

from __future__ import annotations

import threading
from datetime import date
from decimal import Decimal

from stayhub.domain.errors import NotFoundError
from stayhub.domain.models import (
    AvailabilityRecord,
    ListingProjection,
    ListingRef,
    ListingType,
    Order,
)


class InMemoryAvailabilityStore:
    def __init__(self) -> None:
        self._records: dict[tuple[str, date], AvailabilityRecord] = {}
        self._types: dict[str, ListingType] = {}
        self._lock = threading.Lock()

    def get_day(self, listing_id: str, day: date) -> AvailabilityRecord | None:
        with self._lock:
            return self._records.get((listing_id, day))

    def get_range(
        self, listing_id: str, start: date, end: date
    ) -> dict[date, AvailabilityRecord]:
        with self._lock:
            return {
                day: rec
                for (lid, day), rec in sorted(self._records.items())
                if lid == listing_id and start <= day <= end
            }

    def put_day(
        self, listing_id: str, day: date, *, is_available: bool, price: Decimal
    ) -> AvailabilityRecord:
        ref = ListingRef.parse(listing_id)
        record = AvailabilityRecord(
            listing_id=listing_id, day=day, is_available=is_available, price=Decimal(price)
        )
        with self._lock:
            self._types[listing_id] = ref.listing_type
            self._records[(listing_id, day)] = record
        return record

    def reserve_day(self, listing_id: str, day: date) -> bool:
        with self._lock:
            current = self._records.get((listing_id, day))
            if current is None or not current.is_available:
                return False
            self._records[(listing_id, day)] = AvailabilityRecord(
                listing_id=listing_id, day=day, is_available=False, price=current.price
            )
            return True

    def release_day(self, listing_id: str, day: date) -> None:
        with self._lock:
            current = self._records.get((listing_id, day))
            if current is None:
                return
            self._records[(listing_id, day)] = AvailabilityRecord(
                listing_id=listing_id, day=day, is_available=True, price=current.price
            )

    def query_window(
        self,
        listing_type: ListingType,
        start: date,
        end: date,
        *,
        min_price: Decimal,
        max_price: Decimal | None,
    ) -> list[AvailabilityRecord]:
        with self._lock:
            matches = [
                rec
                for (lid, day), rec in self._records.items()
                if self._types.get(lid) is listing_type
                and start <= day <= end
                and rec.is_available
                and rec.price >= min_price
                and (max_price is None or rec.price <= max_price)
            ]
        return sorted(matches, key=lambda r: (r.day, r.price))


class InMemoryOrderLedger:
    def __init__(self) -> None:
        self._orders: dict[str, Order] = {}
        self._lock = threading.Lock()

    def get(self, order_id: str) -> Order | None:
        with self._lock:
            return self._orders.get(order_id)

    def insert(self, order: Order) -> None:
        with self._lock:
            if order.id in self._orders:
                raise ValueError(f"Duplicate order id: {order.id}")
            self._orders[order.id] = order

    def replace(self, order: Order) -> None:
        with self._lock:
            if order.id not in self._orders:
                raise NotFoundError("Order not found", {"order_id": order.id})
            self._orders[order.id] = order

    def delete(self, order_id: str) -> None:
        with self._lock:
            self._orders.pop(order_id, None)

    def list_by_user(self, user_id: str) -> list[Order]:
        with self._lock:
            found = [o for o in self._orders.values() if o.user_id == user_id]
        return sorted(found, key=lambda o: (o.start_date, o.id))

    def list_by_listing(self, listing_id: str) -> list[Order]:
        with self._lock:
            found = [o for o in self._orders.values() if o.listing_id == listing_id]
        return sorted(found, key=lambda o: (o.start_date, o.id))


class InMemoryListingDirectory:
    def __init__(self) -> None:
        self._hosts: dict[str, str] = {}
        self._projections: dict[str, ListingProjection] = {}

    def add_listing(
        self,
        listing_id: str,
        *,
        host_id: str,
        city: str | None = None,
        image: str | None = None,
    ) -> None:
        ListingRef.parse(listing_id)
        self._hosts[listing_id] = host_id
        self._projections[listing_id] = ListingProjection(
            listing_id=listing_id, city=city, image=image
        )

    def get_host(self, listing_id: str) -> str:
        host_id = self._hosts.get(listing_id)
        if host_id is None:
            raise NotFoundError("Listing not found", {"listing_id": listing_id})
        return host_id

    def get_projections(self, listing_ids: list[str]) -> list[ListingProjection]:
        return [self._projections[lid] for lid in sorted(listing_ids) if lid in self._projections]
