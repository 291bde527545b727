"""Listing search over the availability calendar.

A listing qualifies when at least one day in the window is available and
priced inside the band. Its average price is taken over those matching days
only, not over the whole requested window.
"""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from stayhub.domain.errors import InvalidInputError
from stayhub.domain.models import ListingType, SearchHit
from stayhub.domain.ports import AvailabilityStore, ListingDirectory

_CENT = Decimal("0.01")


def _average(prices: list[Decimal]) -> Decimal:
    return (sum(prices, Decimal("0")) / len(prices)).quantize(_CENT, rounding=ROUND_HALF_UP)


class SearchEngine:
    """Read-only search. Never mutates either store."""

    def __init__(
        self,
        *,
        availability: AvailabilityStore,
        listings: ListingDirectory,
    ) -> None:
        self._availability = availability
        self._listings = listings

    def search(
        self,
        *,
        listing_type: ListingType,
        start_date: date,
        end_date: date,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
    ) -> list[SearchHit]:
        if end_date < start_date:
            raise InvalidInputError("end_date must be on or after start_date")

        low = min_price if min_price is not None else Decimal("0")
        if low < 0:
            raise InvalidInputError("min_price must be >= 0")
        if max_price is not None and max_price < low:
            raise InvalidInputError("max_price must be >= min_price")

        records = self._availability.query_window(
            listing_type,
            start_date,
            end_date,
            min_price=low,
            max_price=max_price,
        )

        prices_by_listing: dict[str, list[Decimal]] = {}
        for record in records:
            prices_by_listing.setdefault(record.listing_id, []).append(record.price)

        if not prices_by_listing:
            return []

        projections = self._listings.get_projections(sorted(prices_by_listing))
        hits = [
            SearchHit(
                listing_id=p.listing_id,
                city=p.city,
                image=p.image,
                average_price=_average(prices_by_listing[p.listing_id]),
            )
            for p in projections
            if p.listing_id in prices_by_listing
        ]
        return sorted(hits, key=lambda h: h.listing_id)
