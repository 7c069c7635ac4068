"""Redis-backed key-value store."""

import redis

from pdfchat.errors import StorePersistenceError


class RedisKeyValueStore:
    """KeyValueStore using plain Redis strings (GET / SET / SCAN)."""

    def __init__(self, redis_client: redis.Redis) -> None:
        """Initialize store.

        Args:
            redis_client: Redis client created with decode_responses=True
        """
        self._redis = redis_client

    @classmethod
    def from_url(cls, url: str) -> "RedisKeyValueStore":
        return cls(redis.from_url(url, decode_responses=True))  # type: ignore[no-untyped-call]

    def get(self, key: str) -> str | None:
        """Get a value."""
        try:
            value = self._redis.get(key)
        except redis.RedisError as e:
            raise StorePersistenceError(f"Redis read failed: {type(e).__name__}") from e
        if value is None:
            return None
        return value if isinstance(value, str) else value.decode("utf-8")

    def set(self, key: str, value: str) -> None:
        """Set a value."""
        try:
            self._redis.set(key, value)
        except redis.RedisError as e:
            raise StorePersistenceError(f"Redis write failed: {type(e).__name__}") from e

    def keys(self, prefix: str = "") -> list[str]:
        """List keys matching prefix (SCAN order)."""
        try:
            keys = list(self._redis.scan_iter(match=f"{prefix}*"))
        except redis.RedisError as e:
            raise StorePersistenceError(f"Redis scan failed: {type(e).__name__}") from e
        return [k if isinstance(k, str) else k.decode("utf-8") for k in keys]
