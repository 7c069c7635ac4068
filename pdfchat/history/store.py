"""Per-document chat history keyed by content fingerprint.

Layout in the key-value store:

- ``{prefix}:history:{fingerprint}`` - JSON HistoryEntry
- ``{prefix}:recent`` - JSON list of fingerprints, most recently saved first

Every entry written is also kept in an in-memory mirror. If the backing
store fails, the failure is logged and the mirror keeps serving reads for
the rest of the session (durability is lost, the session keeps working).
"""

import json
import logging
from collections.abc import Sequence

from pydantic import ValidationError

from pdfchat.config import Settings
from pdfchat.db.filestore import JsonFileKeyValueStore
from pdfchat.db.inmemory import InMemoryKeyValueStore
from pdfchat.db.redis_store import RedisKeyValueStore
from pdfchat.db.repositories import KeyValueStore
from pdfchat.errors import StorePersistenceError
from pdfchat.models.chat import ChatMessage
from pdfchat.models.history import HistoryEntry, RecentDocument

logger = logging.getLogger(__name__)


class HistoryStore:
    """Fingerprint-keyed store of {display name, transcript, summary}."""

    def __init__(self, store: KeyValueStore, key_prefix: str = "pdfchat") -> None:
        self._store = store
        self._entry_prefix = f"{key_prefix}:history:"
        self._recent_key = f"{key_prefix}:recent"
        self._entries: dict[str, HistoryEntry] = {}
        self._order: list[str] | None = None

    def _read(self, key: str) -> str | None:
        try:
            return self._store.get(key)
        except StorePersistenceError as e:
            logger.error(f"History store read failed for {key}: {e}")
            return None

    def _write(self, key: str, value: str) -> None:
        try:
            self._store.set(key, value)
        except StorePersistenceError as e:
            logger.error(f"History store write failed for {key}, keeping in memory only: {e}")

    def _recent_order(self) -> list[str]:
        if self._order is None:
            order: list[str] = []
            raw = self._read(self._recent_key)
            if raw:
                try:
                    data = json.loads(raw)
                except ValueError:
                    logger.warning("Ignoring corrupt recent-documents index")
                    data = []
                if isinstance(data, list):
                    order = [fp for fp in data if isinstance(fp, str)]
            self._order = order
        return list(self._order)

    def load(self, fingerprint: str) -> HistoryEntry:
        """Load the entry for a fingerprint (empty defaults if absent)."""
        entry = self._entries.get(fingerprint)
        if entry is None:
            raw = self._read(self._entry_prefix + fingerprint)
            if raw is None:
                return HistoryEntry()
            try:
                entry = HistoryEntry.model_validate_json(raw)
            except ValidationError as e:
                logger.warning(
                    f"Ignoring corrupt history entry {fingerprint}: {e.error_count()} error(s)"
                )
                return HistoryEntry()
            self._entries[fingerprint] = entry
        return entry.model_copy(update={"transcript": list(entry.transcript)})

    def exists(self, fingerprint: str) -> bool:
        """True when an entry has been saved for the fingerprint."""
        if fingerprint in self._entries:
            return True
        return self._read(self._entry_prefix + fingerprint) is not None

    def save(
        self,
        fingerprint: str,
        display_name: str,
        transcript: Sequence[ChatMessage],
        summary: str,
    ) -> None:
        """Upsert an entry and move it to the front of the recent index.

        Saving the same state twice yields the same stored representation
        and the same index position.
        """
        entry = HistoryEntry(display_name=display_name, transcript=list(transcript), summary=summary)
        self._entries[fingerprint] = entry

        order = self._recent_order()
        if fingerprint in order:
            order.remove(fingerprint)
        order.insert(0, fingerprint)
        self._order = order

        self._write(self._entry_prefix + fingerprint, entry.model_dump_json())
        self._write(self._recent_key, json.dumps(order))

    def update(
        self,
        fingerprint: str,
        *,
        display_name: str | None = None,
        transcript: Sequence[ChatMessage] | None = None,
        summary: str | None = None,
    ) -> HistoryEntry:
        """Save only the given fields, keeping the stored values of the rest."""
        current = self.load(fingerprint)
        self.save(
            fingerprint,
            display_name if display_name is not None else current.display_name,
            transcript if transcript is not None else current.transcript,
            summary if summary is not None else current.summary,
        )
        return self.load(fingerprint)

    def recent_documents(self, active_fingerprint: str | None = None) -> list[RecentDocument]:
        """Project all entries into the recently opened list.

        Fingerprints missing from the ordered index (written by another
        process sharing the store) follow in store iteration order.
        """
        order = self._recent_order()
        try:
            stored = [key[len(self._entry_prefix):] for key in self._store.keys(self._entry_prefix)]
        except StorePersistenceError as e:
            logger.error(f"History store scan failed: {e}")
            stored = []
        for fingerprint in [*stored, *self._entries]:
            if fingerprint not in order:
                order.append(fingerprint)

        recent: list[RecentDocument] = []
        for fingerprint in order:
            if not self.exists(fingerprint):
                continue
            entry = self.load(fingerprint)
            recent.append(
                RecentDocument(
                    fingerprint=fingerprint,
                    display_name=entry.display_name or fingerprint[:12],
                    active=fingerprint == active_fingerprint,
                )
            )
        return recent


def build_history_store(settings: Settings) -> HistoryStore:
    """Create the history store for the configured backend."""
    store: KeyValueStore
    if settings.history_backend == "redis":
        if not settings.redis_url:
            raise ValueError("history_backend=redis requires redis_url")
        store = RedisKeyValueStore.from_url(settings.redis_url)
    elif settings.history_backend == "file":
        store = JsonFileKeyValueStore(settings.history_path)
    else:
        store = InMemoryKeyValueStore()
    return HistoryStore(store, key_prefix=settings.history_key_prefix)
