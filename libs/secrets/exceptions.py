"""
Secret store exceptions.

A single error kind covers every storage-layer failure (connection failures,
timeouts, serialization failures). A missing, already-read or expired secret
is NOT an error: stores return ``None`` for all three.

Messages MUST NOT include ciphertext or iv values; only secret ids and
backend names are safe to log.
"""


class BackendError(Exception):
    """
    Raised when the storage backend cannot complete an operation.

    Attributes:
        message: Human-readable cause (never contains secret payloads)
        backend: Backend label ("memory", "redis") when known

    Example:
        >>> try:
        ...     store.ping()
        ... except BackendError as e:
        ...     logger.error("storage unavailable", extra={"backend": e.backend})
    """

    def __init__(self, message: str, backend: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.backend = backend

    def __str__(self) -> str:
        if self.backend:
            return f"{self.message} (backend: {self.backend})"
        return self.message
