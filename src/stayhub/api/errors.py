"""Map booking errors to JSON responses.

Body shape: {"kind": <stable kind>, "detail": <message>}.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from stayhub.domain.errors import BookingError, InvalidInputError
from stayhub.observability.logging import get_logger

logger = get_logger(__name__)

STATUS_BY_KIND = {
    "invalid_input": 400,
    "auth_error": 401,
    "forbidden": 403,
    "not_found": 404,
    "unavailable": 409,
    "storage_error": 503,
}


def _error_response(kind: str, detail: str) -> JSONResponse:
    status_code = STATUS_BY_KIND.get(kind, 500)
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(
        status_code=status_code,
        content={"kind": kind, "detail": detail},
        headers=headers,
    )


async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    if exc.kind == "storage_error":
        # The message is generic; the driver error stays in the log only
        logger.error(
            "storage error",
            exc_info=exc,
            extra={"extra_fields": {"path": request.url.path}},
        )
    return _error_response(exc.kind, exc.message)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    fields = [".".join(str(p) for p in err.get("loc", ())) for err in exc.errors()]
    detail = "Missing or malformed fields: " + ", ".join(fields) if fields else "Invalid request"
    return _error_response(InvalidInputError.kind, detail)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BookingError, booking_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
