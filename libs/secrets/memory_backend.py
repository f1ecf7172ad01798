"""
In-process SecretStore backend.

Holds secrets in a dict guarded by a single ``threading.Lock``. Every store
operation mutates the map, so one exclusive lock covers all access; the only
read-only caller, ``__len__``, is serialized with writers on purpose.

TTL is enforced lazily: an expired entry is dropped the first time anyone
looks it up. There is no background sweep, so secrets that are written and
never looked up again stay in memory until the process exits.

Intended for local development, tests and single-instance deployments
without Redis. Contents do not survive a restart.
"""

import logging
import threading

from libs.core.common.clock import SYSTEM_CLOCK, Clock
from libs.secrets.models import Secret
from libs.secrets.store import SecretStore

logger = logging.getLogger(__name__)


class InMemorySecretStore(SecretStore):
    """
    Thread-safe dict-backed secret store.

    Example:
        >>> store = InMemorySecretStore()
        >>> secret = store.store_secret("ctext", "iv-val", 60)
        >>> store.get_and_delete_secret(secret.id) is not None
        True
        >>> store.get_and_delete_secret(secret.id) is None
        True
    """

    backend_name = "memory"

    def __init__(self, clock: Clock = SYSTEM_CLOCK) -> None:
        super().__init__(clock)
        self._secrets: dict[str, Secret] = {}
        self._lock = threading.Lock()

    def store_secret(self, ciphertext: str, iv: str, ttl_secs: int) -> Secret:
        secret = Secret.create(ciphertext, iv, ttl_secs, now=self._clock.now())
        with self._lock:
            self._secrets[secret.id] = secret
        return secret

    def get_and_delete_secret(self, secret_id: str) -> Secret | None:
        with self._lock:
            secret = self._secrets.pop(secret_id, None)
            if secret is None:
                return None

            now = self._clock.now()
            if secret.is_expired_at(now):
                logger.debug("Dropped expired secret", extra={"secret_id": secret_id})
                return None

            return secret.mark_read(now)

    def ping(self) -> None:
        # Nothing to verify beyond having been constructed
        return None

    def close(self) -> None:
        with self._lock:
            self._secrets.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._secrets)
