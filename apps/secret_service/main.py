"""
FastAPI application for the one-time secret service.

Clients encrypt in the browser and deposit only ciphertext + iv; the service
stores it until it is read once or its TTL runs out.

Configuration via environment variables (see config/settings.py):
- CENDRE_SECRET_BACKEND: auto | memory | redis
- CENDRE_REDIS_URL: Redis connection string
- CENDRE_RATE_LIMIT_MAX_REQUESTS / CENDRE_RATE_LIMIT_WINDOW_SECONDS

Example:
    Start the service:
        $ uvicorn apps.secret_service.main:app --host 0.0.0.0 --port 8080

    Store and read a secret:
        $ curl -X POST localhost:8080/api/secrets \\
            -H 'content-type: application/json' \\
            -d '{"ciphertext": "...", "iv": "...", "ttl_secs": 3600}'
        $ curl localhost:8080/api/secret/<id>
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.settings import Settings, get_settings
from libs.core.common.clock import SYSTEM_CLOCK, Clock
from libs.core.common.logging import configure_logging
from libs.rate_limit import RateLimiter
from libs.secrets import BackendError, SecretStore, create_secret_store

from .dependencies import enforce_rate_limit
from .middleware import SecurityHeadersMiddleware, apply_security_headers
from .routes import router
from .schemas import ERROR_INTERNAL, ERROR_INVALID_BODY, ERROR_STORAGE

logger = logging.getLogger(__name__)


# =============================================================================
# Application Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Select the storage backend at startup and release it on shutdown.

    A store injected through ``create_app`` is used as-is and left open.
    """
    settings: Settings = app.state.settings
    owns_store = app.state.secret_store is None

    if app.state.configure_log_output:
        configure_logging(
            service_name="secret_service",
            log_level=settings.log_level,
            json_output=settings.log_json,
        )

    if owns_store:
        app.state.secret_store = create_secret_store(settings=settings, clock=app.state.clock)

    store: SecretStore = app.state.secret_store
    logger.info(
        "Secret service ready",
        extra={
            "backend": store.backend_name,
            "rate_limit_max_requests": app.state.rate_limiter.max_requests_per_window,
            "rate_limit_window_seconds": app.state.rate_limiter.window_seconds,
        },
    )

    try:
        yield
    finally:
        logger.info("Secret service shutting down...")
        if owns_store:
            store.close()
            app.state.secret_store = None


# =============================================================================
# Error Handlers
# =============================================================================


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    response = _error(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    # Pydantic error details can echo the submitted payload, so they are not returned or logged
    logger.info(
        "Rejected malformed request body",
        extra={"path": request.url.path, "error_count": len(exc.errors())},
    )
    return _error(status.HTTP_400_BAD_REQUEST, ERROR_INVALID_BODY)


async def backend_error_handler(request: Request, exc: BackendError) -> JSONResponse:
    logger.error(
        f"storage error on {request.method} {request.url.path}: {exc}",
        extra={"backend": exc.backend},
    )
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, ERROR_STORAGE)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler for unexpected errors."""
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}",
        exc_info=exc,
    )
    response = _error(status.HTTP_500_INTERNAL_SERVER_ERROR, ERROR_INTERNAL)
    # Runs outside the middleware stack, so headers are applied here
    apply_security_headers(response.headers)
    return response


async def metrics_endpoint(request: Request) -> Response:
    """Prometheus metrics endpoint."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


# =============================================================================
# FastAPI Application
# =============================================================================


def create_app(
    settings: Settings | None = None,
    store: SecretStore | None = None,
    rate_limiter: RateLimiter | None = None,
    clock: Clock = SYSTEM_CLOCK,
    configure_log_output: bool = False,
) -> FastAPI:
    """
    Build the secret service application.

    Args:
        settings: Configuration (default: cached get_settings())
        store: Pre-built store; when None the lifespan selects one at startup
        rate_limiter: Pre-built limiter; when None one is built from settings
        clock: Time source for the limiter and a lifespan-created store
        configure_log_output: Install the service log handler at startup

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="Cendre Secret API",
        description="One-time, time-limited storage for client-encrypted secrets",
        version="1.0.0",
        lifespan=lifespan,
        dependencies=[Depends(enforce_rate_limit)],
    )

    app.state.settings = settings
    app.state.clock = clock
    app.state.secret_store = store
    app.state.configure_log_output = configure_log_output
    # RateLimiter defines __len__, so an empty limiter is falsy
    if rate_limiter is None:
        rate_limiter = RateLimiter(
            max_requests_per_window=settings.rate_limit_max_requests,
            window_seconds=settings.rate_limit_window_seconds,
            clock=clock,
        )
    app.state.rate_limiter = rate_limiter

    app.add_middleware(SecurityHeadersMiddleware)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(BackendError, backend_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, global_exception_handler)

    app.include_router(router)
    # Plain Starlette route: exact path, outside the app-wide rate limit
    app.add_route("/metrics", metrics_endpoint, methods=["GET"], include_in_schema=False)

    return app


settings = get_settings()
app = create_app(settings, configure_log_output=True)


# =============================================================================
# Main Entry Point
# =============================================================================


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "apps.secret_service.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
