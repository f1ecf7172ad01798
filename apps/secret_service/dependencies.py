"""
FastAPI dependencies for the secret service.

The store and limiter live on ``app.state`` (set by ``create_app`` or the
lifespan) so tests can inject their own instances.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from libs.rate_limit import GLOBAL_IDENTITY, RateLimiter
from libs.secrets import SecretStore

from .schemas import ERROR_RATE_LIMITED, ERROR_STORAGE_UNAVAILABLE


def get_secret_store(request: Request) -> SecretStore:
    """
    Return the store selected at startup.

    Raises:
        HTTPException 503: Store not initialised (lifespan has not run)
    """
    store: SecretStore | None = getattr(request.app.state, "secret_store", None)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=ERROR_STORAGE_UNAVAILABLE,
        )
    return store


def get_rate_limiter(request: Request) -> RateLimiter:
    limiter: RateLimiter = request.app.state.rate_limiter
    return limiter


def client_identity(request: Request) -> str:
    """Rate-limit identity: the client address, or a shared fallback."""
    if request.client and request.client.host:
        return request.client.host
    return GLOBAL_IDENTITY


def enforce_rate_limit(
    request: Request,
    limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
) -> None:
    """
    Reject the request with 429 once the client exhausts its window.

    Raises:
        HTTPException 429: Rate limit exceeded
    """
    if not limiter.check(client_identity(request)):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=ERROR_RATE_LIMITED,
        )


SecretStoreDep = Annotated[SecretStore, Depends(get_secret_store)]
