"""Prompt builders for chat turns and document summaries."""

from dataclasses import dataclass

SUMMARY_PLACEHOLDER = (
    "(No summary is available for this document yet. "
    "It may still be generating or could not be created.)"
)


@dataclass(frozen=True)
class DocumentContext:
    """Document data captured for one chat turn."""

    fingerprint: str
    display_name: str
    page_number: int
    page_count: int
    page_text: str
    summary: str


def page_placeholder(page_number: int) -> str:
    return (
        f"(No text could be extracted from page {page_number}. "
        "The page may be a scanned image or extraction is still in progress.)"
    )


def build_chat_prompt(question: str, context: DocumentContext | None) -> str:
    """Compose the prompt for one chat turn.

    Without a document the prompt is the user's text unmodified. With a
    document it embeds, in order, the summary, the current page text and the
    literal question, each in its own delimited section.
    """
    if context is None:
        return question

    lines = [f'Context from PDF document "{context.display_name}".', ""]

    lines.append("## Document Summary")
    lines.append(context.summary.strip() if context.summary.strip() else SUMMARY_PLACEHOLDER)
    lines.append("")

    lines.append(f"## Current Page (page {context.page_number} of {context.page_count})")
    if context.page_text.strip():
        lines.append("---")
        lines.append(context.page_text.strip())
        lines.append("---")
    else:
        lines.append(page_placeholder(context.page_number))
    lines.append("")

    lines.append("## User's Question")
    lines.append(question)

    return "\n".join(lines)


def build_summary_prompt(document_text: str) -> str:
    """Compose the request for a structured whole-document digest."""
    return f"""You are given the full extracted text of a PDF document.
Write a structured summary of it in markdown with these sections, where applicable:

1. Objective - what the document sets out to do
2. Methodology - how it goes about it
3. Results - the main findings or content
4. Conclusion - what it concludes or recommends

Omit a section if the document has nothing for it. Ignore running headers,
footers and page numbers that repeat across pages. Do not invent details
that are not in the text.

## Document Text
---
{document_text.strip()}
---"""
