"""Store and collaborator interfaces consumed by the domain services.

Each method is an independent unit of work: no multi-call transaction is
assumed. Implementations raise StorageError when the backing store fails.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Protocol

from stayhub.domain.models import (
    AvailabilityRecord,
    ListingProjection,
    ListingType,
    Order,
)


class AvailabilityStore(Protocol):
    def get_day(self, listing_id: str, day: date) -> AvailabilityRecord | None: ...

    def get_range(
        self, listing_id: str, start: date, end: date
    ) -> dict[date, AvailabilityRecord]: ...

    def put_day(
        self, listing_id: str, day: date, *, is_available: bool, price: Decimal
    ) -> AvailabilityRecord: ...

    def reserve_day(self, listing_id: str, day: date) -> bool:
        """Flip an available day to unavailable. False if it was not available."""
        ...

    def release_day(self, listing_id: str, day: date) -> None:
        """Mark a day available again, keeping its price. No-op if absent."""
        ...

    def query_window(
        self,
        listing_type: ListingType,
        start: date,
        end: date,
        *,
        min_price: Decimal,
        max_price: Decimal | None,
    ) -> list[AvailabilityRecord]:
        """Available records of one listing type in [start, end] within the price band,
        ordered by (date, price)."""
        ...


class OrderLedger(Protocol):
    def get(self, order_id: str) -> Order | None: ...

    def insert(self, order: Order) -> None: ...

    def replace(self, order: Order) -> None:
        """Overwrite an existing order. Raises NotFoundError if it is gone."""
        ...

    def delete(self, order_id: str) -> None: ...

    def list_by_user(self, user_id: str) -> list[Order]: ...

    def list_by_listing(self, listing_id: str) -> list[Order]: ...


class ListingDirectory(Protocol):
    def get_host(self, listing_id: str) -> str:
        """Host of a listing. Raises NotFoundError if the listing does not exist."""
        ...

    def get_projections(self, listing_ids: list[str]) -> list[ListingProjection]: ...
