"""Repository protocol interfaces for data access."""

from typing import Protocol


class KeyValueStore(Protocol):
    """Synchronous string key-value store backing the history store.

    Scoped to one user profile. Writes are last-writer-wins; no quota
    handling is performed. Backend failures surface as
    StorePersistenceError.
    """

    def get(self, key: str) -> str | None:
        """Get a value.

        Args:
            key: Store key

        Returns:
            Stored string or None if absent
        """
        ...

    def set(self, key: str, value: str) -> None:
        """Set a value.

        Args:
            key: Store key
            value: String value

        Raises:
            StorePersistenceError: If the write cannot be made durable
        """
        ...

    def keys(self, prefix: str = "") -> list[str]:
        """List keys starting with prefix, in store iteration order.

        Args:
            prefix: Key prefix filter

        Returns:
            Matching keys
        """
        ...
