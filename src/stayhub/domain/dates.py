"""Day-set helpers. Ranges are inclusive on both ends."""

from datetime import date, timedelta

from stayhub.domain.errors import InvalidInputError

# Longest range a single request may cover (orders and calendar reads)
MAX_RANGE_DAYS = 366


def expand_days(start: date, end: date, max_days: int | None = None) -> list[date]:
    """Expand [start, end] into the inclusive list of calendar days.

    A one-day range (start == end) yields exactly one day. With ``max_days``
    the span is checked before any day is built.

    Raises:
        InvalidInputError: If end is before start, or the range is longer
            than max_days.
    """
    if end < start:
        raise InvalidInputError("end_date must be on or after start_date")
    if max_days is not None and (end - start).days + 1 > max_days:
        raise InvalidInputError(f"max range: {max_days} days")

    days = []
    current = start
    while current <= end:
        days.append(current)
        current += timedelta(days=1)
    return days


def keyed_days(listing_id: str, start: date, end: date) -> set[tuple[str, date]]:
    """Day-set of a range, keyed by listing so moves between listings diff correctly."""
    return {(listing_id, d) for d in expand_days(start, end)}
