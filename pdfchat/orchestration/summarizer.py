"""One-shot whole-document summarization, memoized per fingerprint.

State per fingerprint::

    no_summary -> summarizing -> summarized
    no_summary -> summarizing -> (failure) -> no_summary

A run starts only when a handle is loaded, the fingerprint has no cached
summary and no run is in flight for it. The state flips to ``summarizing``
before the first await, so repeated triggers on the event loop cannot start
a second run.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Literal

from pdfchat.docs.extraction import extract_all
from pdfchat.docs.renderer import DocumentHandle
from pdfchat.errors import SummarizationError
from pdfchat.history.store import HistoryStore
from pdfchat.llm.client import RemoteModel
from pdfchat.orchestration.prompts import build_summary_prompt
from pdfchat.utils.logging import StructuredChatLogger
from pdfchat.utils.metrics import summaries_total

logger = logging.getLogger(__name__)


class SummaryState(str, Enum):
    """Summarization state of one document."""

    no_summary = "no_summary"
    summarizing = "summarizing"
    summarized = "summarized"


@dataclass(frozen=True)
class SummaryOutcome:
    """Result of a summarization trigger."""

    status: Literal["skipped", "empty", "summarized", "failed"]
    summary: str = ""
    error: str | None = None


class SummarizationController:
    """Runs the summary request at most once per fingerprint."""

    def __init__(
        self,
        model: RemoteModel,
        history: HistoryStore,
        chat_logger: StructuredChatLogger | None = None,
    ) -> None:
        self._model = model
        self._history = history
        self._log = chat_logger or StructuredChatLogger()
        self._states: dict[str, SummaryState] = {}

    def state(self, fingerprint: str) -> SummaryState:
        return self._states.get(fingerprint, SummaryState.no_summary)

    def should_summarize(self, fingerprint: str, cached_summary: str) -> bool:
        """True when no summary is cached and no run is in flight or done."""
        if cached_summary.strip():
            return False
        return self.state(fingerprint) == SummaryState.no_summary

    async def summarize(
        self,
        fingerprint: str,
        handle: DocumentHandle | None,
        cached_summary: str = "",
    ) -> SummaryOutcome:
        """Summarize the document if eligible and persist the result.

        Args:
            fingerprint: Document fingerprint
            handle: Loaded document handle (None means not loaded yet)
            cached_summary: Summary already known for the fingerprint

        Returns:
            SummaryOutcome; never raises for extraction or model failures
        """
        if handle is None or not self.should_summarize(fingerprint, cached_summary):
            return SummaryOutcome(status="skipped", summary=cached_summary)

        self._states[fingerprint] = SummaryState.summarizing
        start = time.perf_counter()
        text = ""

        try:
            text = await extract_all(handle)
            if not text.strip():
                # Scanned/image-only PDFs: nothing to summarize, not an error
                self._states[fingerprint] = SummaryState.summarized
                self._finish(fingerprint, "empty", start, 0)
                return SummaryOutcome(status="empty")

            summary = (await self._model.generate(build_summary_prompt(text))).strip()
            if not summary:
                raise SummarizationError("the model returned an empty summary")

            self._states[fingerprint] = SummaryState.summarized
            self._history.update(fingerprint, summary=summary)
            self._finish(fingerprint, "summarized", start, len(text))
            return SummaryOutcome(status="summarized", summary=summary)
        except Exception as e:
            reason = str(e) or type(e).__name__
            logger.error(f"Summarization failed for {fingerprint[:12]}: {reason}")
            self._states[fingerprint] = SummaryState.no_summary
            self._finish(fingerprint, "failed", start, len(text), error_reason=reason)
            return SummaryOutcome(
                status="failed", error=f"Failed to generate document summary: {reason}"
            )
        finally:
            # Cancelled runs must not block later triggers
            if self._states.get(fingerprint) == SummaryState.summarizing:
                self._states[fingerprint] = SummaryState.no_summary

    def _finish(
        self,
        fingerprint: str,
        outcome: str,
        start: float,
        text_chars: int,
        error_reason: str | None = None,
    ) -> None:
        latency_ms = (time.perf_counter() - start) * 1000
        self._log.log_summary(fingerprint, outcome, latency_ms, text_chars, error_reason)
        summaries_total.labels(outcome=outcome).inc()
