"""Chat turn orchestration: prompt assembly, remote call, transcript updates."""

import logging
import time
from dataclasses import dataclass

from pdfchat.history.store import HistoryStore
from pdfchat.llm.client import RemoteModel
from pdfchat.models.chat import ChatMessage
from pdfchat.orchestration.prompts import DocumentContext, build_chat_prompt
from pdfchat.orchestration.state import Conversation
from pdfchat.utils.logging import StructuredChatLogger
from pdfchat.utils.metrics import chat_turns_total

logger = logging.getLogger(__name__)

UNKNOWN_MODEL_ERROR = "An unknown error occurred with the AI."


@dataclass(frozen=True)
class ChatTurnResult:
    """Outcome of one chat turn."""

    user_message: ChatMessage
    assistant_message: ChatMessage
    prompt: str
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ChatOrchestrator:
    """Runs chat turns against the remote model.

    Owns the remote model (and through it the model session) for the
    lifetime of the application.
    """

    def __init__(
        self,
        model: RemoteModel,
        history: HistoryStore,
        chat_logger: StructuredChatLogger | None = None,
    ) -> None:
        self.model = model
        self._history = history
        self._log = chat_logger or StructuredChatLogger()

    async def run_turn(
        self,
        text: str,
        conversation: Conversation,
        context: DocumentContext | None,
    ) -> ChatTurnResult | None:
        """Run one chat turn.

        The user message is appended before the remote call. A failed call
        becomes an assistant message carrying the reason, so the user's
        question is never lost. The transcript is persisted either way.

        Args:
            text: User input (blank input is ignored)
            conversation: Conversation the turn belongs to
            context: Document data for the prompt, None when no document is open

        Returns:
            ChatTurnResult, or None for blank input
        """
        if not text.strip():
            return None

        user_message = ChatMessage.from_user(text)
        conversation.transcript.append(user_message)

        prompt = build_chat_prompt(text, context)
        start = time.perf_counter()
        error: str | None = None

        try:
            reply = await self.model.generate(prompt)
            assistant_message = ChatMessage.from_assistant(reply)
        except Exception as e:
            reason = str(e) or UNKNOWN_MODEL_ERROR
            logger.error(f"Remote model call failed: {reason}")
            assistant_message = ChatMessage.from_assistant(f"Sorry, I encountered an error: {reason}")
            error = f"AI Error: {reason}"

        conversation.transcript.append(assistant_message)
        self._persist(conversation)

        outcome = "success" if error is None else "error"
        latency_ms = (time.perf_counter() - start) * 1000
        self._log.log_turn(conversation.fingerprint, outcome, latency_ms, len(prompt), error)
        chat_turns_total.labels(outcome=outcome).inc()

        return ChatTurnResult(
            user_message=user_message,
            assistant_message=assistant_message,
            prompt=prompt,
            error=error,
        )

    def _persist(self, conversation: Conversation) -> None:
        # Chat without a document is not keyed by any fingerprint
        if conversation.fingerprint is None:
            return
        self._history.update(
            conversation.fingerprint,
            display_name=conversation.display_name or None,
            transcript=conversation.transcript,
        )
