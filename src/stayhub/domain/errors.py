"""Booking error taxonomy.

Every failure surfaced to a caller is a BookingError subclass carrying a stable
machine-readable ``kind`` plus a human-readable message. Only the kind is part
of the contract; messages may change.
"""


class BookingError(Exception):
    """Base class for all booking engine errors."""

    kind = "booking_error"

    def __init__(self, message: str, meta: dict | None = None):
        self.message = message
        self.meta = meta or {}
        super().__init__(message)


class InvalidInputError(BookingError):
    """Missing or malformed fields (e.g. end date before start date)."""

    kind = "invalid_input"


class AuthError(BookingError):
    """Credential missing, malformed, expired or not verifiable."""

    kind = "auth_error"


class ForbiddenError(BookingError):
    """Caller is authenticated but not entitled to act on the resource."""

    kind = "forbidden"


class NotFoundError(BookingError):
    """Listing or order does not exist."""

    kind = "not_found"


class UnavailableError(BookingError):
    """One or more requested days are not bookable."""

    kind = "unavailable"


class StorageError(BookingError):
    """An underlying store call failed."""

    kind = "storage_error"
