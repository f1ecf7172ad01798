"""
Redis-backed SecretStore.

Secrets are stored as JSON documents under ``SecretKeys.secret(id, prefix)``
with a native key expiry of ``ttl_secs`` seconds (``SET ... EX``). Redis owns
expiry; reads additionally apply the same lazy expiry check as the in-memory
backend so both backends behave identically under an injected clock.

One-time reads:
    ``GET`` and ``DEL`` are queued in a single MULTI/EXEC transaction, so the
    read and the delete happen in one atomic round trip. A concurrent reader
    either runs before (and takes the secret) or after (and sees nothing).

Errors:
    Every ``redis.exceptions.RedisError`` and every malformed stored document
    is wrapped in ``BackendError``. No retries happen here; the factory only
    retries the initial connection at startup.

Example:
    >>> store = RedisSecretStore.from_url("redis://localhost:6379/0")
    >>> secret = store.store_secret("ctext", "iv-val", 60)
    >>> store.get_and_delete_secret(secret.id).ciphertext
    'ctext'
"""

from __future__ import annotations

import json
import logging
from typing import Any, cast

import redis
from redis.exceptions import RedisError

from libs.core.common.clock import SYSTEM_CLOCK, Clock
from libs.secrets.exceptions import BackendError
from libs.secrets.keys import DEFAULT_SECRET_PREFIX, SecretKeys
from libs.secrets.models import Secret
from libs.secrets.store import SecretStore

logger = logging.getLogger(__name__)


class RedisSecretStore(SecretStore):
    """
    Secret store delegating persistence and expiry to Redis.

    Attributes:
        key_prefix: Namespace prepended to every secret id

    Thread Safety:
        The redis-py client draws a connection per command from its pool,
        so one store instance can be shared across request threads.
    """

    backend_name = "redis"

    def __init__(
        self,
        client: redis.Redis,
        key_prefix: str = DEFAULT_SECRET_PREFIX,
        clock: Clock = SYSTEM_CLOCK,
    ) -> None:
        super().__init__(clock)
        self._redis = client
        self.key_prefix = key_prefix

    @classmethod
    def from_url(
        cls,
        redis_url: str,
        key_prefix: str = DEFAULT_SECRET_PREFIX,
        clock: Clock = SYSTEM_CLOCK,
        socket_timeout: float = 5.0,
    ) -> RedisSecretStore:
        """
        Build a store from a Redis URL.

        No connection is opened here; call ``ping()`` to verify reachability.

        Raises:
            BackendError: The URL cannot be parsed
        """
        try:
            client = redis.Redis.from_url(
                redis_url,
                decode_responses=True,
                socket_connect_timeout=socket_timeout,
                socket_timeout=socket_timeout,
            )
        except ValueError as e:
            raise BackendError(f"Invalid Redis URL: {e}", backend=cls.backend_name) from e
        return cls(client, key_prefix=key_prefix, clock=clock)

    def _key(self, secret_id: str) -> str:
        return SecretKeys.secret(secret_id, prefix=self.key_prefix)

    def store_secret(self, ciphertext: str, iv: str, ttl_secs: int) -> Secret:
        secret = Secret.create(ciphertext, iv, ttl_secs, now=self._clock.now())
        key = self._key(secret.id)

        try:
            payload = json.dumps(secret.to_dict())
        except (TypeError, ValueError) as e:
            raise BackendError(
                f"Failed to serialize secret: {e}", backend=self.backend_name
            ) from e

        try:
            self._redis.set(key, payload, ex=secret.ttl_secs)
        except RedisError as e:
            logger.error(f"Redis SET failed for secret '{secret.id}': {e}")
            raise BackendError(str(e), backend=self.backend_name) from e

        return secret

    def get_and_delete_secret(self, secret_id: str) -> Secret | None:
        key = self._key(secret_id)

        try:
            with self._redis.pipeline(transaction=True) as pipe:
                pipe.get(key)
                pipe.delete(key)
                results = cast(list[Any], pipe.execute())
        except RedisError as e:
            logger.error(f"Redis GET/DEL failed for secret '{secret_id}': {e}")
            raise BackendError(str(e), backend=self.backend_name) from e

        raw = results[0]
        if raw is None:
            return None

        try:
            secret = Secret.from_dict(json.loads(raw))
        except (KeyError, TypeError, ValueError) as e:
            # json.JSONDecodeError is a ValueError
            logger.error(
                "Stored secret document is malformed",
                extra={"secret_id": secret_id, "error_type": type(e).__name__},
            )
            raise BackendError(
                f"Failed to deserialize secret: {type(e).__name__}",
                backend=self.backend_name,
            ) from e

        now = self._clock.now()
        if secret.is_expired_at(now):
            return None

        return secret.mark_read(now)

    def ping(self) -> None:
        try:
            self._redis.ping()
        except RedisError as e:
            raise BackendError(f"Redis PING failed: {e}", backend=self.backend_name) from e

    def close(self) -> None:
        try:
            self._redis.close()
        except RedisError as e:
            logger.warning(f"Error closing Redis client: {e}")
