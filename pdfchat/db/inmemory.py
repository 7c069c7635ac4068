"""In-memory implementations of repository interfaces."""


class InMemoryKeyValueStore:
    """In-memory implementation of KeyValueStore."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        """Get a value."""
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        """Set a value."""
        self._values[key] = value

    def keys(self, prefix: str = "") -> list[str]:
        """List keys in insertion order."""
        return [key for key in self._values if key.startswith(prefix)]
