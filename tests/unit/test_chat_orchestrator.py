"""Tests for chat turn orchestration."""

from unittest.mock import AsyncMock

import pytest

from pdfchat.errors import RemoteModelError
from pdfchat.history.store import HistoryStore
from pdfchat.models.chat import Sender
from pdfchat.orchestration.chat import ChatOrchestrator
from pdfchat.orchestration.prompts import DocumentContext
from pdfchat.orchestration.state import Conversation


def _context() -> DocumentContext:
    return DocumentContext(
        fingerprint="fp1",
        display_name="paper.pdf",
        page_number=3,
        page_count=10,
        page_text="Results show X.",
        summary="Study of X.",
    )


@pytest.mark.asyncio
async def test_turn_appends_both_messages(model: AsyncMock, history: HistoryStore) -> None:
    """A successful turn appends the question then the answer and persists them."""
    conversation = Conversation(fingerprint="fp1", display_name="paper.pdf")
    orchestrator = ChatOrchestrator(model, history)

    result = await orchestrator.run_turn("What does page 3 say?", conversation, _context())

    assert result is not None and result.ok
    assert [m.sender for m in conversation.transcript] == [Sender.user, Sender.assistant]
    assert conversation.transcript[1].text == "Model answer."
    assert "Results show X." in result.prompt
    assert "Study of X." in result.prompt
    stored = history.load("fp1")
    assert stored.transcript == conversation.transcript
    assert stored.display_name == "paper.pdf"


@pytest.mark.asyncio
async def test_failure_becomes_assistant_message(model: AsyncMock, history: HistoryStore) -> None:
    """A failed call is recorded as an assistant message carrying the reason."""
    model.generate.side_effect = RemoteModelError("quota exceeded")
    conversation = Conversation(fingerprint="fp1", display_name="paper.pdf")
    orchestrator = ChatOrchestrator(model, history)

    result = await orchestrator.run_turn("Summarize", conversation, _context())

    assert result is not None and not result.ok
    assert result.error == "AI Error: quota exceeded"
    assert conversation.transcript[0].text == "Summarize"
    assert conversation.transcript[1].sender == Sender.assistant
    assert "quota exceeded" in conversation.transcript[1].text
    assert len(history.load("fp1").transcript) == 2


@pytest.mark.asyncio
async def test_blank_input_is_ignored(model: AsyncMock, history: HistoryStore) -> None:
    """Whitespace-only input does nothing."""
    conversation = Conversation(fingerprint="fp1")

    result = await ChatOrchestrator(model, history).run_turn("   ", conversation, _context())

    assert result is None
    assert conversation.transcript == []
    model.generate.assert_not_awaited()


@pytest.mark.asyncio
async def test_no_document_sends_raw_text(model: AsyncMock, history: HistoryStore) -> None:
    """Without a document the prompt is the user's text and nothing is stored."""
    conversation = Conversation(fingerprint=None)

    result = await ChatOrchestrator(model, history).run_turn("Hello", conversation, None)

    assert result is not None
    model.generate.assert_awaited_once_with("Hello")
    assert len(conversation.transcript) == 2
    assert history.recent_documents() == []
