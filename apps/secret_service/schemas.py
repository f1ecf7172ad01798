"""
Request/Response schemas for the secret service API.

Defines Pydantic models for API validation and serialization.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# =============================================================================
# Request Models
# =============================================================================


class CreateSecretRequest(BaseModel):
    """Body of POST /api/secrets. Ciphertext and iv are opaque to the server."""

    ciphertext: str = Field(..., description="Client-encrypted payload")
    iv: str = Field(..., description="Client initialisation vector")
    ttl_secs: int = Field(..., description="Lifetime in seconds (1..86400)")

    model_config = {
        "json_schema_extra": {
            "example": {
                "ciphertext": "3q2+7w==",
                "iv": "AAECAwQFBgcICQoL",
                "ttl_secs": 3600,
            }
        }
    }


# =============================================================================
# Response Models
# =============================================================================


class CreateSecretResponse(BaseModel):
    """Response for POST /api/secrets."""

    id: str = Field(..., description="URL-safe secret identifier")


class SecretResponse(BaseModel):
    """Response for GET /api/secret/{id}; served at most once per secret."""

    id: str = Field(..., description="Secret identifier")
    ciphertext: str = Field(..., description="Client-encrypted payload")
    iv: str = Field(..., description="Client initialisation vector")
    ttl_secs: int = Field(..., description="Lifetime the secret was created with")


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error message")

    model_config = {"json_schema_extra": {"example": {"error": "secret not found"}}}


# =============================================================================
# Error Messages
# =============================================================================


ERROR_EMPTY_PAYLOAD = "ciphertext and iv must be non-empty strings"
ERROR_TTL_RANGE = "ttl_secs must be between 1 and 86400 seconds"
ERROR_INVALID_BODY = "invalid request body"
ERROR_NOT_FOUND = "secret not found"
ERROR_RATE_LIMITED = "too many requests"
ERROR_STORAGE = "internal storage error"
ERROR_STORAGE_UNAVAILABLE = "storage unavailable"
ERROR_INTERNAL = "internal server error"
