"""JSON-file key-value store - the local, per-profile persistent backend."""

import json
import logging
import os
import tempfile
from pathlib import Path

from pdfchat.errors import StorePersistenceError

logger = logging.getLogger(__name__)


class JsonFileKeyValueStore:
    """KeyValueStore persisted as a single JSON object on disk.

    The whole map is held in memory and rewritten atomically (temp file +
    rename) on every ``set``. A missing or unreadable file starts empty.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._values: dict[str, str] = self._read()

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable store file {self._path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring store file {self._path}: top level is not an object")
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".store-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._values, f, ensure_ascii=False)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> str | None:
        """Get a value."""
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        """Set a value and flush the file."""
        self._values[key] = value
        try:
            self._write()
        except OSError as e:
            raise StorePersistenceError(f"Cannot write {self._path}: {e.strerror or e}") from e

    def keys(self, prefix: str = "") -> list[str]:
        """List keys in file order."""
        return [key for key in self._values if key.startswith(prefix)]
