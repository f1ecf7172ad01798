"""
Factory for creating SecretStore instances from configuration.

Backend selection (settings.secret_backend / CENDRE_SECRET_BACKEND):
    - "memory" → InMemorySecretStore
    - "redis"  → RedisSecretStore (redis_url required, must answer PING)
    - "auto"   → RedisSecretStore when redis_url is set and reachable,
                 otherwise InMemorySecretStore (default)

Selection happens ONCE at process startup. The initial PING is retried with
exponential backoff (tenacity); after that no retries or failover happen at
call time and backend errors propagate to the caller.

Example Usage:
    >>> store = create_secret_store(backend="memory")
    >>> isinstance(store, InMemorySecretStore)
    True

    >>> store = create_secret_store(backend="auto", redis_url="redis://unreachable:6379/0")
    WARNING Redis unavailable at startup; falling back to in-memory secret store
    >>> isinstance(store, InMemorySecretStore)
    True
"""

import logging
from typing import Final

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from config.settings import Settings, get_settings
from libs.core.common.clock import SYSTEM_CLOCK, Clock
from libs.secrets.exceptions import BackendError
from libs.secrets.memory_backend import InMemorySecretStore
from libs.secrets.redis_backend import RedisSecretStore
from libs.secrets.store import SecretStore

logger = logging.getLogger(__name__)

VALID_BACKENDS: Final[tuple[str, ...]] = ("auto", "memory", "redis")


def _connect_redis(redis_url: str, settings: Settings, clock: Clock) -> RedisSecretStore:
    """
    Build a RedisSecretStore and verify it answers PING.

    Retries PING up to ``settings.redis_connect_attempts`` times.

    Raises:
        BackendError: Redis still unreachable after all attempts
    """
    store = RedisSecretStore.from_url(
        redis_url,
        key_prefix=settings.redis_key_prefix,
        clock=clock,
        socket_timeout=settings.redis_socket_timeout_seconds,
    )

    retrying = Retrying(
        stop=stop_after_attempt(settings.redis_connect_attempts),
        wait=wait_exponential(multiplier=settings.redis_connect_backoff_seconds, max=5),
        retry=retry_if_exception_type(BackendError),
        reraise=True,
    )
    try:
        retrying(store.ping)
    except BackendError:
        store.close()
        raise

    return store


def create_secret_store(
    backend: str | None = None,
    redis_url: str | None = None,
    settings: Settings | None = None,
    clock: Clock = SYSTEM_CLOCK,
) -> SecretStore:
    """
    Create the SecretStore selected by configuration.

    Args:
        backend: Backend override ("auto", "memory", "redis").
                 If None, uses settings.secret_backend.
        redis_url: Redis URL override. If None, uses settings.redis_url.
        settings: Settings instance (default: cached get_settings()).
        clock: Time source handed to the store.

    Returns:
        SecretStore: Ready-to-use backend instance.

    Raises:
        ValueError: Unknown backend name.
        BackendError: backend="redis" and Redis is missing or unreachable.
    """
    if settings is None:
        settings = get_settings()
    selected = (backend if backend is not None else settings.secret_backend).lower().strip()
    url = redis_url if redis_url is not None else settings.redis_url

    if selected not in VALID_BACKENDS:
        raise ValueError(
            f"Invalid secret backend: '{selected}'. Valid options: {', '.join(VALID_BACKENDS)}"
        )

    if selected == "memory":
        logger.info("Using in-memory secret store")
        return InMemorySecretStore(clock=clock)

    if not url:
        if selected == "redis":
            raise BackendError("redis_url must be set for the Redis backend", backend="redis")
        logger.info("Redis URL not set; using in-memory secret store")
        return InMemorySecretStore(clock=clock)

    try:
        store = _connect_redis(url, settings, clock)
    except BackendError as e:
        if selected == "redis":
            raise
        logger.warning(
            "Redis unavailable at startup; falling back to in-memory secret store",
            extra={"error": str(e)},
        )
        return InMemorySecretStore(clock=clock)

    logger.info("Using Redis secret store", extra={"key_prefix": store.key_prefix})
    return store
