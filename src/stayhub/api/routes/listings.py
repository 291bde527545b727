"""Listing-scoped endpoints.

GET /listings/search                      public search by type, window, price band
GET /listings/{listing_id}/orders         host's view of a listing's orders
GET /listings/{listing_id}/availability   host calendar read
PUT /listings/{listing_id}/availability   host sets one day's availability and price
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Depends, Path, Query
from pydantic import BaseModel, Field

from stayhub.api.auth import get_current_caller
from stayhub.api.services import Services, get_services
from stayhub.domain.models import CallerIdentity, ListingType

router = APIRouter(prefix="/listings", tags=["listings"])


class SetAvailabilityRequest(BaseModel):
    date: date
    is_available: bool
    price: Decimal = Field(ge=0)


@router.get("/search")
def search_listings(
    listing_type: ListingType = Query(..., alias="type"),
    start_date: date = Query(...),
    end_date: date = Query(...),
    min_price: Decimal | None = Query(None, ge=0),
    max_price: Decimal | None = Query(None, ge=0),
    services: Services = Depends(get_services),
) -> dict:
    hits = services.search.search(
        listing_type=listing_type,
        start_date=start_date,
        end_date=end_date,
        min_price=min_price,
        max_price=max_price,
    )
    return {"items": [h.to_dict() for h in hits]}


@router.get("/{listing_id}/orders")
def list_listing_orders(
    listing_id: str = Path(..., min_length=1),
    caller: CallerIdentity = Depends(get_current_caller),
    services: Services = Depends(get_services),
) -> list[dict]:
    orders = services.bookings.list_orders_by_listing(listing_id, caller=caller)
    return [o.to_dict() for o in orders]


@router.get("/{listing_id}/availability")
def get_availability(
    start_date: date,
    end_date: date,
    listing_id: str = Path(..., min_length=1),
    caller: CallerIdentity = Depends(get_current_caller),
    services: Services = Depends(get_services),
) -> list[dict]:
    records = services.availability.get_calendar(
        listing_id, start_date, end_date, caller=caller
    )
    return [r.to_dict() for r in records]


@router.put("/{listing_id}/availability")
def set_availability(
    body: SetAvailabilityRequest,
    listing_id: str = Path(..., min_length=1),
    caller: CallerIdentity = Depends(get_current_caller),
    services: Services = Depends(get_services),
) -> dict:
    record = services.availability.set_day(
        listing_id,
        body.date,
        is_available=body.is_available,
        price=body.price,
        caller=caller,
    )
    return {"message": "Availability updated successfully", "availability": record.to_dict()}
