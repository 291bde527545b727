"""Service wiring for the API.

Stores are built once per app by build_services() and handed to the domain
services through their constructors; routes reach them via request.app.state.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from stayhub.config import Settings
from stayhub.domain.availability import AvailabilityService
from stayhub.domain.booking import BookingCoordinator
from stayhub.domain.ports import AvailabilityStore, ListingDirectory, OrderLedger
from stayhub.domain.search import SearchEngine


@dataclass
class Services:
    bookings: BookingCoordinator
    search: SearchEngine
    availability: AvailabilityService


def wire_services(
    *,
    availability: AvailabilityStore,
    orders: OrderLedger,
    listings: ListingDirectory,
    host_group: str,
) -> Services:
    return Services(
        bookings=BookingCoordinator(
            availability=availability, orders=orders, listings=listings
        ),
        search=SearchEngine(availability=availability, listings=listings),
        availability=AvailabilityService(
            availability=availability,
            orders=orders,
            listings=listings,
            host_group=host_group,
        ),
    )


def build_services(settings: Settings) -> Services:
    """Build stores for the configured backend and wire the domain services."""
    if settings.store_backend == "memory":
        from stayhub.infra.memory import (
            InMemoryAvailabilityStore,
            InMemoryListingDirectory,
            InMemoryOrderLedger,
        )

        return wire_services(
            availability=InMemoryAvailabilityStore(),
            orders=InMemoryOrderLedger(),
            listings=InMemoryListingDirectory(),
            host_group=settings.host_group,
        )

    from stayhub.infra.repositories.availability_repository import PgAvailabilityStore
    from stayhub.infra.repositories.listings_repository import PgListingDirectory
    from stayhub.infra.repositories.orders_repository import PgOrderLedger

    return wire_services(
        availability=PgAvailabilityStore(),
        orders=PgOrderLedger(),
        listings=PgListingDirectory(),
        host_group=settings.host_group,
    )


def get_services(request: Request) -> Services:
    """FastAPI dependency: the services wired into this app."""
    return request.app.state.services
