"""Listings repository - read-only view of listing metadata.

Listing CRUD is owned elsewhere; this adapter only answers the two questions
the booking engine asks: who hosts a listing, and how to display it.
"""

from stayhub.domain.errors import NotFoundError
from stayhub.domain.models import ListingProjection
from stayhub.infra.db import fetchall, fetchone, txn


class PgListingDirectory:
    """ListingDirectory backed by the listings table."""

    def get_host(self, listing_id: str) -> str:
        with txn() as cur:
            row = fetchone(
                cur,
                "SELECT host_id FROM listings WHERE id = %s",
                (listing_id,),
            )
        if row is None:
            raise NotFoundError("Listing not found", {"listing_id": listing_id})
        return row[0]

    def get_projections(self, listing_ids: list[str]) -> list[ListingProjection]:
        if not listing_ids:
            return []
        with txn() as cur:
            rows = fetchall(
                cur,
                "SELECT id, city, image FROM listings WHERE id = ANY(%s) ORDER BY id",
                (list(listing_ids),),
            )
        return [ListingProjection(listing_id=r[0], city=r[1], image=r[2]) for r in rows]
