"""
Redis key formats for the secret store.

Usage:
    from libs.secrets.keys import SecretKeys

    key = SecretKeys.secret("q3Jx0y5p2mEw7u9H1aZcVg")
    # Returns: "secret:q3Jx0y5p2mEw7u9H1aZcVg"

    # Tests isolate their keys with a custom prefix
    key = SecretKeys.secret("abc", prefix="test:secret:")
    # Returns: "test:secret:abc"
"""

DEFAULT_SECRET_PREFIX = "secret:"


class SecretKeys:
    """Centralized Redis key format definitions for stored secrets."""

    @staticmethod
    def secret(secret_id: str, prefix: str = DEFAULT_SECRET_PREFIX) -> str:
        """
        Generate Redis key for a stored secret.

        Format: "{prefix}{secret_id}"

        Examples:
            >>> SecretKeys.secret("abc")
            'secret:abc'

        Used By:
            - RedisSecretStore (SET EX on store, GET+DEL on read)
        """
        return f"{prefix}{secret_id}"
