"""Persisted per-document history models."""

from pydantic import BaseModel, Field

from pdfchat.models.chat import ChatMessage


class HistoryEntry(BaseModel):
    """Per-fingerprint record of display name, transcript and summary.

    An empty summary means "not yet generated".
    """

    display_name: str = ""
    transcript: list[ChatMessage] = Field(default_factory=list)
    summary: str = ""


class RecentDocument(BaseModel):
    """Projection of a history entry for the recently opened list."""

    fingerprint: str
    display_name: str
    active: bool = False
