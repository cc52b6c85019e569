"""FastAPI application factory.

Domain exceptions become ``{"error": "<reason>"}`` bodies: validation
failures 400, missing entities 404, authorization 401/403. Anything else
is logged with its traceback and answered with a generic 500.
"""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from storefront.domain.exceptions import (
    AuthorizationError,
    DomainException,
    EntityNotFoundError,
)
from storefront.infrastructure.api import coupon_routes, inventory_routes, order_routes, wishlist_routes
from storefront.infrastructure.settings import Settings, load_settings

logger = logging.getLogger(__name__)


def _status_for(exc: DomainException) -> int:
    if isinstance(exc, EntityNotFoundError):
        return 404
    if isinstance(exc, AuthorizationError):
        return 403 if exc.authenticated else 401
    return 400


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(DomainException)
    async def domain_error(request: Request, exc: DomainException) -> JSONResponse:
        status = _status_for(exc)
        logger.warning("%s %s rejected (%d): %s", request.method, request.url.path, status, exc)
        return JSONResponse(status_code=status, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def schema_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(part) for part in first.get("loc", ())[1:])
        message = first.get("msg", "Invalid request")
        return JSONResponse(
            status_code=400,
            content={"error": f"{field}: {message}" if field else message},
        )

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def register_middleware(app: FastAPI) -> None:

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s -> %d (%.1f ms)",
            request.method, request.url.path, response.status_code, elapsed_ms,
        )
        return response


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the app; settings are loaded here once when not given."""
    app = FastAPI(title="Storefront back-office")
    app.state.settings = settings or load_settings()

    register_exception_handlers(app)
    register_middleware(app)

    app.include_router(inventory_routes.router)
    app.include_router(coupon_routes.router)
    app.include_router(order_routes.router)
    app.include_router(wishlist_routes.router)

    @app.get("/health", tags=["health"])
    def health() -> dict:
        return {"status": "ok"}

    return app
