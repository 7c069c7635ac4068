"""Tests for chat and summary prompt builders."""

from pdfchat.orchestration.prompts import (
    SUMMARY_PLACEHOLDER,
    DocumentContext,
    build_chat_prompt,
    build_summary_prompt,
    page_placeholder,
)


def _context(**overrides: object) -> DocumentContext:
    values: dict[str, object] = {
        "fingerprint": "abc",
        "display_name": "paper.pdf",
        "page_number": 3,
        "page_count": 10,
        "page_text": "Results show X.",
        "summary": "Study of X.",
    }
    values.update(overrides)
    return DocumentContext(**values)  # type: ignore[arg-type]


def test_no_document_sends_question_verbatim() -> None:
    """Without a document the prompt is the raw user text."""
    assert build_chat_prompt("  hello there ", None) == "  hello there "


def test_sections_in_order() -> None:
    """Summary, current page and question appear in that order."""
    prompt = build_chat_prompt("What does page 3 say?", _context())

    summary_at = prompt.index("Study of X.")
    page_at = prompt.index("Results show X.")
    question_at = prompt.index("What does page 3 say?")

    assert summary_at < page_at < question_at
    assert "page 3 of 10" in prompt
    assert '"paper.pdf"' in prompt


def test_question_is_included_literally() -> None:
    """The user's text is embedded without alteration."""
    question = "Explain   *this*\nplease"

    prompt = build_chat_prompt(question, _context())

    assert prompt.endswith(question)


def test_placeholders_for_missing_summary_and_page() -> None:
    """Empty summary and page text are replaced by explicit placeholders."""
    prompt = build_chat_prompt("Q?", _context(summary="", page_text="  "))

    assert SUMMARY_PLACEHOLDER in prompt
    assert page_placeholder(3) in prompt


def test_summary_prompt_requests_structure() -> None:
    """The summary request names the digest sections and embeds the text."""
    prompt = build_summary_prompt("Full document text.")

    for section in ("Objective", "Methodology", "Results", "Conclusion"):
        assert section in prompt
    assert "headers" in prompt
    assert "Full document text." in prompt
