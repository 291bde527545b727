"""Domain types for the availability calendar and the order ledger."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from stayhub.domain.dates import expand_days
from stayhub.domain.errors import InvalidInputError


class ListingType(str, Enum):
    """Kind of listing. Stored ids carry the type as a ``TYPE#`` prefix."""

    STAY = "STAY"
    EXPR = "EXPR"

    @property
    def id_prefix(self) -> str:
        return f"{self.value}#"


@dataclass(frozen=True)
class ListingRef:
    """A listing id with its type resolved once."""

    listing_id: str
    listing_type: ListingType

    @classmethod
    def parse(cls, listing_id: str) -> ListingRef:
        """Resolve the listing type from a stored listing id.

        Raises:
            InvalidInputError: If the id has no known type prefix.
        """
        prefix, sep, rest = listing_id.partition("#")
        if not sep or not rest:
            raise InvalidInputError(f"Malformed listing id: {listing_id!r}")
        try:
            listing_type = ListingType(prefix)
        except ValueError:
            raise InvalidInputError(f"Unknown listing type in id: {listing_id!r}")
        return cls(listing_id=listing_id, listing_type=listing_type)


@dataclass(frozen=True)
class AvailabilityRecord:
    listing_id: str
    day: date
    is_available: bool
    price: Decimal

    def to_dict(self) -> dict:
        return {
            "listing_id": self.listing_id,
            "date": self.day.isoformat(),
            "is_available": self.is_available,
            "price": self.price,
        }


@dataclass(frozen=True)
class Order:
    """A confirmed reservation of an inclusive day range on one listing."""

    id: str
    user_id: str
    host_id: str
    listing_id: str
    start_date: date
    end_date: date
    total_amount: Decimal
    created_at: datetime
    updated_at: datetime | None = None

    def days(self) -> list[date]:
        return expand_days(self.start_date, self.end_date)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "host_id": self.host_id,
            "listing_id": self.listing_id,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "total_amount": self.total_amount,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class OrderChange:
    """The fields an order update may replace. Nothing else is updatable."""

    listing_id: str
    start_date: date
    end_date: date


@dataclass(frozen=True)
class CallerIdentity:
    """Identity resolved from a bearer credential."""

    id: str
    groups: frozenset[str] = field(default_factory=frozenset)

    def in_group(self, group: str) -> bool:
        return group in self.groups


@dataclass(frozen=True)
class ListingProjection:
    listing_id: str
    city: str | None
    image: str | None


@dataclass(frozen=True)
class SearchHit:
    listing_id: str
    city: str | None
    image: str | None
    average_price: Decimal

    def to_dict(self) -> dict:
        return {
            "listing_id": self.listing_id,
            "city": self.city,
            "image": self.image,
            "average_price": self.average_price,
        }
