"""
One-time secret storage library.

Stores client-encrypted blobs that can be read exactly once before their TTL
runs out. The server never sees plaintext.

Architecture (Abstract Factory Pattern):
    - SecretStore: Abstract interface (store.py)
    - Backend implementations: InMemorySecretStore, RedisSecretStore
    - Factory: create_secret_store() selects the backend once at startup
    - Secret: frozen record with TTL and read bookkeeping (models.py)

Quick Start:
    >>> from libs.secrets import create_secret_store
    >>> store = create_secret_store()  # Reads CENDRE_SECRET_BACKEND / CENDRE_REDIS_URL
    >>> secret = store.store_secret("ctext", "iv-val", ttl_secs=60)
    >>> store.get_and_delete_secret(secret.id)  # returns the secret once
    >>> store.get_and_delete_secret(secret.id)  # None from now on

Security Requirements:
    - Ciphertext and iv are NEVER logged (only ids and ttl)
    - "Never existed", "already read" and "expired" are indistinguishable
"""

from libs.core.common.clock import SYSTEM_CLOCK, Clock, SystemClock
from libs.secrets.exceptions import BackendError
from libs.secrets.factory import create_secret_store
from libs.secrets.keys import SecretKeys
from libs.secrets.memory_backend import InMemorySecretStore
from libs.secrets.models import MAX_TTL_SECS, MIN_TTL_SECS, Secret, generate_secret_id
from libs.secrets.redis_backend import RedisSecretStore
from libs.secrets.store import SecretStore

__all__ = [
    # Core interface
    "SecretStore",
    "Secret",
    # Factory (recommended for most use cases)
    "create_secret_store",
    # Backend implementations
    "InMemorySecretStore",
    "RedisSecretStore",
    # Supporting types
    "Clock",
    "SystemClock",
    "SYSTEM_CLOCK",
    "SecretKeys",
    "generate_secret_id",
    "MIN_TTL_SECS",
    "MAX_TTL_SECS",
    # Exceptions (callers should catch these)
    "BackendError",
]
