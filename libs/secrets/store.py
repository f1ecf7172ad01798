"""
Abstract SecretStore interface for pluggable storage backends.

Architecture:
    SecretStore (ABC)
    ├── InMemorySecretStore - process-local dict (memory_backend.py)
    └── RedisSecretStore - Redis with native key expiry (redis_backend.py)

Backend selection happens once at startup (factory.py); callers only ever
see this interface.

Contract (every backend):
    - store_secret never silently drops a write: it persists the record or
      raises BackendError with nothing stored
    - get_and_delete_secret returns None for "never existed", "already read"
      and "expired" alike, so callers cannot tell them apart
    - Two racing get_and_delete_secret calls for one id: exactly one gets the
      secret, the other gets None
    - Expiry is checked lazily on read against the injected clock, in
      addition to any native expiry the backend offers

Usage Example:
    >>> from libs.secrets import create_secret_store
    >>> with create_secret_store() as store:
    ...     secret = store.store_secret("ctext", "iv-val", ttl_secs=60)
    ...     store.get_and_delete_secret(secret.id).read_at is not None
    True
"""

from abc import ABC, abstractmethod
from types import TracebackType

from libs.core.common.clock import SYSTEM_CLOCK, Clock
from libs.secrets.exceptions import BackendError  # noqa: F401 - Used in docstrings
from libs.secrets.models import Secret


class SecretStore(ABC):
    """
    Abstract base class for one-time secret storage backends.

    Thread Safety:
        Implementations MUST be safe under arbitrary interleaving of
        concurrent callers (thread-per-request serving).

    Security:
        NEVER log ciphertext or iv. Secret ids and ttl are safe to log.
    """

    backend_name: str = "abstract"

    def __init__(self, clock: Clock = SYSTEM_CLOCK) -> None:
        self._clock = clock

    @property
    def clock(self) -> Clock:
        return self._clock

    @abstractmethod
    def store_secret(self, ciphertext: str, iv: str, ttl_secs: int) -> Secret:
        """
        Persist a new secret and return the full record, including its id.

        Args:
            ciphertext: Client-encrypted payload
            iv: Client initialisation vector
            ttl_secs: Lifetime in seconds (1..86400)

        Returns:
            The stored Secret (read_at is None)

        Raises:
            BackendError: Backend unreachable or serialization failed
            ValueError: ttl_secs outside 1..86400
        """

    @abstractmethod
    def get_and_delete_secret(self, secret_id: str) -> Secret | None:
        """
        Atomically fetch and remove a secret so it can only be read once.

        Args:
            secret_id: Id returned by store_secret

        Returns:
            The secret with read_at stamped, or None when it never existed,
            was already read or has expired

        Raises:
            BackendError: Backend unreachable or stored document unreadable
        """

    @abstractmethod
    def ping(self) -> None:
        """
        Lightweight liveness check with no effect on stored data.

        Raises:
            BackendError: Backend unreachable
        """

    def close(self) -> None:  # noqa: B027 - Intentionally optional hook with default no-op
        """Release backend resources (default no-op)."""

    def __enter__(self) -> "SecretStore":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(backend={self.backend_name!r})"
