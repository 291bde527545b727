"""Clock used to stamp orders."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Timezone-aware current time in UTC; the default BookingCoordinator clock."""
    return datetime.now(timezone.utc)
