"""Session state coordinator.

Sequences document open -> fingerprint -> history recall -> page extraction
and summarization -> chat, as explicit transitions:

- ``open_document``: validate, fingerprint, load, then commit (replace the
  active document, recall its history)
- ``document_handle_ready``: reset paging, start page-1 extraction and
  summarization
- ``change_page``: extract the requested page into its own cache slot
- ``close_document``: drop every document-scoped value

Background results are applied only while their fingerprint is still the
active one; anything arriving for a replaced document is discarded. No
transition raises: failures end in a defined state plus a message on
``state.last_error`` or ``state.page_warning``.
"""

import asyncio
import logging
from collections.abc import Coroutine
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pdfchat.config import Settings
from pdfchat.docs.extraction import extract_page
from pdfchat.docs.fingerprint import fingerprint_file, read_document_file
from pdfchat.docs.renderer import DocumentHandle, DocumentRenderer, PypdfRenderer
from pdfchat.errors import DocumentLoadError, FingerprintError, PageExtractionError
from pdfchat.history.store import HistoryStore, build_history_store
from pdfchat.llm.client import RemoteModel, create_relay_model
from pdfchat.models.chat import ChatMessage
from pdfchat.models.docs import DocumentFile
from pdfchat.models.history import HistoryEntry, RecentDocument
from pdfchat.orchestration.chat import ChatOrchestrator, ChatTurnResult
from pdfchat.orchestration.prompts import DocumentContext
from pdfchat.orchestration.state import Conversation, PageTextCache, SessionState
from pdfchat.orchestration.summarizer import (
    SummarizationController,
    SummaryOutcome,
    SummaryState,
)
from pdfchat.utils.logging import StructuredChatLogger

logger = logging.getLogger(__name__)

INVALID_FILE_MESSAGE = "Please select a valid PDF file."


@dataclass(frozen=True)
class OpenResult:
    """Outcome of open_document."""

    ok: bool
    fingerprint: str | None = None
    recovered: bool = False
    superseded: bool = False
    error: str | None = None


def page_warning_message(page_number: int) -> str:
    return (
        f"Failed to extract text from page {page_number}. "
        "Some PDFs may not allow text extraction."
    )


class SessionCoordinator:
    """Owns the session state and drives every document/chat transition."""

    def __init__(
        self,
        renderer: DocumentRenderer,
        history: HistoryStore,
        model: RemoteModel,
        *,
        chat_logger: StructuredChatLogger | None = None,
    ) -> None:
        chat_logger = chat_logger or StructuredChatLogger()
        self.renderer = renderer
        self.history = history
        self.summarizer = SummarizationController(model, history, chat_logger)
        self.chat = ChatOrchestrator(model, history, chat_logger)

        self.state = SessionState()
        self.page_cache = PageTextCache()
        self.conversation = Conversation(fingerprint=None)
        self._conversations: dict[str, Conversation] = {}
        self._handle: DocumentHandle | None = None
        self._open_seq = 0
        self._pending_pages: set[tuple[str, int]] = set()
        self._tasks: set[asyncio.Task[Any]] = set()

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def handle(self) -> DocumentHandle | None:
        return self._handle

    @property
    def transcript(self) -> list[ChatMessage]:
        return list(self.conversation.transcript)

    @property
    def summary(self) -> str:
        return self.conversation.summary

    @property
    def current_page_text(self) -> str | None:
        """Cached text of the active page, None while not yet extracted."""
        return self.page_cache.get(self.state.page_number)

    def recent_documents(self) -> list[RecentDocument]:
        return self.history.recent_documents(active_fingerprint=self.state.fingerprint)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def open_path(self, path: Path | str) -> OpenResult:
        """Read a file from disk and open it."""
        self._open_seq += 1
        seq = self._open_seq
        try:
            file = await read_document_file(path)
        except FingerprintError as e:
            return self._fail_open(seq, f"Could not read the file: {e}")
        return await self._open(file, seq)

    async def open_document(self, file: DocumentFile) -> OpenResult:
        """Open a document, replacing the active one on success.

        On any failure the previously active document stays as it was.
        """
        self._open_seq += 1
        return await self._open(file, self._open_seq)

    async def _open(self, file: DocumentFile, seq: int) -> OpenResult:
        if not file.looks_like_pdf():
            return self._fail_open(seq, INVALID_FILE_MESSAGE)

        try:
            fingerprint = await fingerprint_file(file)
        except FingerprintError as e:
            return self._fail_open(seq, f"Could not read the file: {e}")

        try:
            handle = await self.renderer.load(file)
        except DocumentLoadError as e:
            return self._fail_open(seq, str(e), fingerprint)

        if seq != self._open_seq:
            logger.info(f"Discarding superseded open of {file.name}")
            return OpenResult(ok=False, fingerprint=fingerprint, superseded=True)

        self._reset_document()

        recovered = self.history.exists(fingerprint)
        entry = self.history.load(fingerprint)

        self.state.fingerprint = fingerprint
        self.state.display_name = file.name
        self.state.page_number = 1
        self.state.last_error = None
        self.conversation = self._conversation_for(fingerprint, file.name, entry)

        if not recovered or entry.display_name != file.name:
            self.history.update(fingerprint, display_name=file.name)

        logger.info(
            f"Opened {file.name} ({fingerprint[:12]}), "
            f"{'recovered' if recovered else 'new'} history with {len(entry.transcript)} message(s)"
        )
        self.document_handle_ready(handle)
        return OpenResult(ok=True, fingerprint=fingerprint, recovered=recovered)

    def _conversation_for(self, fingerprint: str, display_name: str, entry: HistoryEntry) -> Conversation:
        """Return the live conversation of a document, creating it from history.

        A document reopened while one of its turns is still in flight gets the
        same Conversation back, so the late reply and newer turns share one
        transcript and neither overwrites the other in the store.
        """
        conversation = self._conversations.get(fingerprint)
        if conversation is None:
            conversation = Conversation(
                fingerprint=fingerprint,
                display_name=display_name,
                transcript=entry.transcript,
                summary=entry.summary,
            )
            self._conversations[fingerprint] = conversation
        else:
            conversation.display_name = display_name
            conversation.summary = entry.summary or conversation.summary
        return conversation

    def _fail_open(self, seq: int, message: str, fingerprint: str | None = None) -> OpenResult:
        if seq != self._open_seq:
            return OpenResult(ok=False, fingerprint=fingerprint, superseded=True)
        logger.warning(f"Open failed: {message}")
        self.state.last_error = message
        return OpenResult(ok=False, fingerprint=fingerprint, error=message)

    def document_handle_ready(self, handle: DocumentHandle) -> None:
        """Adopt a loaded handle for the active document.

        Starts extraction of page 1 and, if eligible, summarization in the
        background.
        """
        fingerprint = self.state.fingerprint
        if fingerprint is None:
            logger.warning("Ignoring document handle: no active document")
            return

        self._handle = handle
        self.state.page_count = handle.page_count
        self.state.page_number = 1
        self.state.page_warning = None
        self.page_cache.clear()

        if handle.page_count >= 1:
            self._spawn(self._extract(fingerprint, handle, 1))
        self.request_summary()

    def request_summary(self) -> None:
        """Start summarization of the active document when eligible."""
        fingerprint = self.state.fingerprint
        handle = self._handle
        if fingerprint is None or handle is None:
            return
        if not self.summarizer.should_summarize(fingerprint, self.conversation.summary):
            self.state.summarizing = self.summarizer.state(fingerprint) == SummaryState.summarizing
            return
        self.state.summarizing = True
        self._spawn(self._summarize(fingerprint, handle, self.conversation.summary))

    async def change_page(self, page_number: int) -> bool:
        """Move to a page and extract its text.

        Returns:
            False if the page is out of range or no document is loaded
        """
        fingerprint = self.state.fingerprint
        handle = self._handle
        if fingerprint is None or handle is None:
            return False
        if not 1 <= page_number <= self.state.page_count:
            return False

        self.state.page_number = page_number
        await self._extract(fingerprint, handle, page_number)
        return True

    def close_document(self) -> None:
        """Drop the active document; in-flight opens are invalidated."""
        self._open_seq += 1
        self._reset_document()

    def _reset_document(self) -> None:
        self._handle = None
        self.page_cache.clear()
        self.conversation = Conversation(fingerprint=None)
        self.state.fingerprint = None
        self.state.display_name = ""
        self.state.page_number = 1
        self.state.page_count = 0
        self.state.page_warning = None
        self.state.summarizing = False
        self._refresh_extracting()

    async def send_message(self, text: str) -> ChatTurnResult | None:
        """Run a chat turn against the then-current document context."""
        if not text.strip():
            return None

        self.state.last_error = None
        result = await self.chat.run_turn(text, self.conversation, self._document_context())
        if result is not None and result.error:
            self.state.last_error = result.error
        return result

    async def wait_idle(self) -> None:
        """Wait for background extraction and summarization to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _document_context(self) -> DocumentContext | None:
        fingerprint = self.state.fingerprint
        if fingerprint is None:
            return None
        return DocumentContext(
            fingerprint=fingerprint,
            display_name=self.state.display_name,
            page_number=self.state.page_number,
            page_count=self.state.page_count,
            page_text=self.page_cache.get(self.state.page_number) or "",
            summary=self.conversation.summary,
        )

    def _is_active(self, fingerprint: str) -> bool:
        return self.state.fingerprint == fingerprint

    def _refresh_extracting(self) -> None:
        active = self.state.fingerprint
        self.state.extracting = any(fp == active for fp, _ in self._pending_pages)

    async def _extract(self, fingerprint: str, handle: DocumentHandle, page_number: int) -> None:
        key = (fingerprint, page_number)
        self._pending_pages.add(key)
        self._refresh_extracting()
        warning: str | None = None
        try:
            text = await extract_page(handle, page_number)
        except PageExtractionError as e:
            logger.warning(f"Page extraction failed for {fingerprint[:12]} {e}")
            text = ""
            warning = page_warning_message(page_number)
        finally:
            self._pending_pages.discard(key)
            self._refresh_extracting()

        if not self._is_active(fingerprint):
            logger.debug(f"Discarding page {page_number} text for inactive document")
            return

        self.page_cache.put(page_number, text)
        # Warnings only describe the page being viewed
        if page_number == self.state.page_number:
            self.state.page_warning = warning

    async def _summarize(self, fingerprint: str, handle: DocumentHandle, cached: str) -> None:
        outcome: SummaryOutcome = await self.summarizer.summarize(fingerprint, handle, cached)

        conversation = self._conversations.get(fingerprint)
        if outcome.status == "summarized" and conversation is not None:
            conversation.summary = outcome.summary

        if not self._is_active(fingerprint):
            logger.debug("Discarding summary outcome for inactive document")
            return

        self.state.summarizing = False
        if outcome.status == "summarized":
            self.conversation.summary = outcome.summary
        elif outcome.status == "failed":
            self.state.last_error = outcome.error

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Background task failed", exc_info=task.exception())


def build_session_coordinator(settings: Settings) -> SessionCoordinator:
    """Wire a coordinator with the pypdf renderer, configured history store and relay client."""
    return SessionCoordinator(
        renderer=PypdfRenderer(),
        history=build_history_store(settings),
        model=create_relay_model(settings),
    )
