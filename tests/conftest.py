"""Shared pytest fixtures for the booking engine tests."""
import sys
sys.dont_write_bytecode = True

from datetime import date  # noqa: E402

import pytest  # noqa: E402

from stayhub.api.services import wire_services  # noqa: E402
from stayhub.domain.booking import BookingCoordinator  # noqa: E402
from stayhub.infra.memory import (  # noqa: E402
    InMemoryAvailabilityStore,
    InMemoryListingDirectory,
    InMemoryOrderLedger,
)

from .helpers import FIXED_NOW, seed_days  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_oidc_jwks_cache():
    """Reset the module-level JWKS cache so keys never leak between tests."""
    import stayhub.api.auth as auth_module

    auth_module._jwks_cache = None
    auth_module._jwks_cache_time = 0
    yield
    auth_module._jwks_cache = None
    auth_module._jwks_cache_time = 0


@pytest.fixture
def availability_store():
    return InMemoryAvailabilityStore()


@pytest.fixture
def order_ledger():
    return InMemoryOrderLedger()


@pytest.fixture
def listing_directory():
    directory = InMemoryListingDirectory()
    directory.add_listing("STAY#beach", host_id="host-1", city="Lisbon", image="beach.jpg")
    directory.add_listing("STAY#loft", host_id="host-2", city="Porto", image="loft.jpg")
    directory.add_listing("EXPR#surf", host_id="host-1", city="Lisbon", image="surf.jpg")
    return directory


@pytest.fixture
def seeded_store(availability_store):
    """June 2024 calendar: beach and loft open for the first ten days."""
    seed_days(availability_store, "STAY#beach", date(2024, 6, 1), [100] * 10)
    seed_days(availability_store, "STAY#loft", date(2024, 6, 1), [80] * 10)
    seed_days(availability_store, "EXPR#surf", date(2024, 6, 1), [40] * 10)
    return availability_store


@pytest.fixture
def coordinator(seeded_store, order_ledger, listing_directory):
    ids = iter(f"order-{n}" for n in range(1, 1000))
    return BookingCoordinator(
        availability=seeded_store,
        orders=order_ledger,
        listings=listing_directory,
        clock=lambda: FIXED_NOW,
        id_factory=lambda: next(ids),
    )


@pytest.fixture
def services(seeded_store, order_ledger, listing_directory):
    return wire_services(
        availability=seeded_store,
        orders=order_ledger,
        listings=listing_directory,
        host_group="hosts",
    )
