"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI, Request, Response

from stayhub.api.errors import install_error_handlers
from stayhub.api.services import Services, build_services
from stayhub.config import load_settings
from stayhub.observability.correlation import (
    CORRELATION_ID_HEADER,
    generate_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from stayhub.observability.logging import configure_logging

from .routers import public


def create_app(services: Services | None = None) -> FastAPI:
    """Create the FastAPI app.

    Args:
        services: Pre-wired services (tests inject in-memory stores here).
                  If None, they are built from the environment settings.

    Returns:
        Configured FastAPI application.
    """
    configure_logging()

    if services is None:
        services = build_services(load_settings())

    app = FastAPI(
        title="Stayhub Booking Engine",
        docs_url=None,
        redoc_url=None,
    )
    app.state.services = services

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next) -> Response:
        cid = request.headers.get(CORRELATION_ID_HEADER) or generate_correlation_id()
        token = set_correlation_id(cid)
        try:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = cid
            return response
        finally:
            reset_correlation_id(token)

    install_error_handlers(app)
    app.include_router(public.router)

    return app
