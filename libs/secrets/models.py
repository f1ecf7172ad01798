"""
Secret record stored by the one-time secret service.

A ``Secret`` is an opaque ciphertext/iv pair encrypted by the client. The
server only tracks when it was created, how long it may live and whether it
has been read.

Lifecycle:
    - Created by ``SecretStore.store_secret`` with a fresh random id
    - Read at most once via ``SecretStore.get_and_delete_secret``
    - Unretrievable once read or once ``now >= expires_at``

Records are frozen; ``mark_read`` returns a copy with ``read_at`` stamped.

Example:
    >>> secret = Secret.create("ctext", "iv-val", ttl_secs=60, now=clock.now())
    >>> secret.is_expired_at(secret.created_at)
    False
    >>> secret.mark_read(clock.now()).read_at is not None
    True
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Any

MIN_TTL_SECS = 1
MAX_TTL_SECS = 24 * 60 * 60

# 16 random bytes -> 22 base64url characters, no padding
SECRET_ID_BYTES = 16


def generate_secret_id() -> str:
    """Return a URL-safe, padding-free id carrying 128 bits of entropy."""
    return secrets.token_urlsafe(SECRET_ID_BYTES)


def _parse_timestamp(value: Any, field_name: str) -> datetime:
    if not isinstance(value, str):
        raise TypeError(f"{field_name} must be an ISO-8601 string")
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        raise ValueError(f"{field_name} must be timezone-aware")
    return parsed


@dataclass(frozen=True)
class Secret:
    """
    Encrypted secret with TTL and one-time-read bookkeeping.

    Attributes:
        id: URL-safe random identifier
        ciphertext: Client-encrypted payload (opaque to the server)
        iv: Client-side initialisation vector (opaque to the server)
        created_at: UTC creation time
        ttl_secs: Lifetime in seconds (1..86400)
        read_at: Time of the single successful read, or None
    """

    id: str
    ciphertext: str
    iv: str
    created_at: datetime
    ttl_secs: int
    read_at: datetime | None = None

    def __post_init__(self) -> None:
        if isinstance(self.ttl_secs, bool) or not isinstance(self.ttl_secs, int):
            raise TypeError("ttl_secs must be an integer")
        if not MIN_TTL_SECS <= self.ttl_secs <= MAX_TTL_SECS:
            raise ValueError(
                f"ttl_secs must be between {MIN_TTL_SECS} and {MAX_TTL_SECS} seconds"
            )

    @classmethod
    def create(cls, ciphertext: str, iv: str, ttl_secs: int, now: datetime) -> Secret:
        """Build a new unread secret with a freshly generated id."""
        return cls(
            id=generate_secret_id(),
            ciphertext=ciphertext,
            iv=iv,
            created_at=now,
            ttl_secs=ttl_secs,
        )

    @property
    def expires_at(self) -> datetime:
        return self.created_at + timedelta(seconds=self.ttl_secs)

    def is_expired_at(self, now: datetime) -> bool:
        """True once ``now`` reaches ``expires_at`` (the boundary itself is expired)."""
        return now >= self.expires_at

    def mark_read(self, when: datetime) -> Secret:
        return replace(self, read_at=when)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON document stored by external backends."""
        return {
            "id": self.id,
            "ciphertext": self.ciphertext,
            "iv": self.iv,
            "created_at": self.created_at.isoformat(),
            "ttl_secs": self.ttl_secs,
            "read_at": self.read_at.isoformat() if self.read_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Secret:
        """
        Rebuild a secret from its stored document.

        Raises:
            KeyError: A required field is missing
            TypeError: The document is not an object or a field has the wrong type
            ValueError: A timestamp or ttl is malformed
        """
        if not isinstance(data, dict):
            raise TypeError(f"secret document must be an object, got {type(data).__name__}")
        read_at = data.get("read_at")
        for field_name in ("id", "ciphertext", "iv"):
            if not isinstance(data[field_name], str):
                raise TypeError(f"{field_name} must be a string")
        return cls(
            id=data["id"],
            ciphertext=data["ciphertext"],
            iv=data["iv"],
            created_at=_parse_timestamp(data["created_at"], "created_at"),
            ttl_secs=data["ttl_secs"],
            read_at=_parse_timestamp(read_at, "read_at") if read_at is not None else None,
        )

    def __repr__(self) -> str:
        # Payload fields stay out of reprs so they never reach logs or tracebacks
        return (
            f"Secret(id={self.id!r}, created_at={self.created_at.isoformat()}, "
            f"ttl_secs={self.ttl_secs}, read_at={self.read_at!r})"
        )
