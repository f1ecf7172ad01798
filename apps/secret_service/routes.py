"""
FastAPI routes for the secret service.

Endpoints:
- GET /health - Backend liveness (store.ping)
- POST /api/secrets - Store a client-encrypted secret, returns its id
- GET /api/secret/{secret_id} - Read a secret once; 404 afterwards

Handlers are synchronous so FastAPI runs them in its worker thread pool
(thread-per-request); the store and limiter are thread-safe.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import PlainTextResponse
from prometheus_client import Counter

from libs.secrets import MAX_TTL_SECS, MIN_TTL_SECS, BackendError

from .dependencies import SecretStoreDep
from .schemas import (
    ERROR_EMPTY_PAYLOAD,
    ERROR_NOT_FOUND,
    ERROR_STORAGE_UNAVAILABLE,
    ERROR_TTL_RANGE,
    CreateSecretRequest,
    CreateSecretResponse,
    ErrorResponse,
    SecretResponse,
)

logger = logging.getLogger(__name__)

secret_store_operations_total = Counter(
    "secret_store_operations_total",
    "Secret store operations by outcome",
    ["backend", "operation", "outcome"],
)


# =============================================================================
# Router Setup
# =============================================================================


router = APIRouter(tags=["Secrets"])


@router.get("/health", response_class=PlainTextResponse, tags=["Health"])
def health_check(store: SecretStoreDep) -> PlainTextResponse:
    """Return "ok" when the storage backend answers its liveness probe."""
    try:
        store.ping()
    except BackendError as e:
        logger.error("Health check failed", extra={"backend": store.backend_name, "error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=ERROR_STORAGE_UNAVAILABLE,
        ) from e
    return PlainTextResponse("ok")


@router.post(
    "/api/secrets",
    response_model=CreateSecretResponse,
    responses={400: {"model": ErrorResponse}, 429: {"model": ErrorResponse}},
)
def create_secret(payload: CreateSecretRequest, store: SecretStoreDep) -> CreateSecretResponse:
    """Store an encrypted secret and return its id."""
    if not payload.ciphertext.strip() or not payload.iv.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=ERROR_EMPTY_PAYLOAD)

    if not MIN_TTL_SECS <= payload.ttl_secs <= MAX_TTL_SECS:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=ERROR_TTL_RANGE)

    try:
        secret = store.store_secret(payload.ciphertext, payload.iv, payload.ttl_secs)
    except BackendError:
        secret_store_operations_total.labels(
            backend=store.backend_name, operation="store", outcome="error"
        ).inc()
        raise

    secret_store_operations_total.labels(
        backend=store.backend_name, operation="store", outcome="ok"
    ).inc()
    logger.info("created secret", extra={"secret_id": secret.id, "ttl_secs": secret.ttl_secs})
    return CreateSecretResponse(id=secret.id)


@router.get(
    "/api/secret/{secret_id}",
    response_model=SecretResponse,
    responses={404: {"model": ErrorResponse}, 429: {"model": ErrorResponse}},
)
def get_secret(secret_id: str, store: SecretStoreDep) -> SecretResponse:
    """Return a secret exactly once; unknown, read and expired ids all 404."""
    try:
        secret = store.get_and_delete_secret(secret_id)
    except BackendError:
        secret_store_operations_total.labels(
            backend=store.backend_name, operation="read", outcome="error"
        ).inc()
        raise

    if secret is None:
        secret_store_operations_total.labels(
            backend=store.backend_name, operation="read", outcome="absent"
        ).inc()
        logger.info("secret not found", extra={"secret_id": secret_id})
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ERROR_NOT_FOUND)

    secret_store_operations_total.labels(
        backend=store.backend_name, operation="read", outcome="ok"
    ).inc()
    logger.info("read secret", extra={"secret_id": secret.id})
    return SecretResponse(
        id=secret.id,
        ciphertext=secret.ciphertext,
        iv=secret.iv,
        ttl_secs=secret.ttl_secs,
    )
