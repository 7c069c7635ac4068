"""Session state model for the document chat coordinator."""

from dataclasses import dataclass, field

from pdfchat.models.chat import ChatMessage


@dataclass
class SessionState:
    """State of the open document and chat session.

    Owned by SessionCoordinator; other components only see snapshots.
    """

    fingerprint: str | None = None
    display_name: str = ""
    page_number: int = 1
    page_count: int = 0
    extracting: bool = False
    summarizing: bool = False
    last_error: str | None = None
    page_warning: str | None = None

    @property
    def has_document(self) -> bool:
        return self.fingerprint is not None


@dataclass
class PageTextCache:
    """Ephemeral page number -> extracted text map for the open document."""

    pages: dict[int, str] = field(default_factory=dict)

    def get(self, page_number: int) -> str | None:
        return self.pages.get(page_number)

    def put(self, page_number: int, text: str) -> None:
        self.pages[page_number] = text

    def clear(self) -> None:
        self.pages.clear()


@dataclass
class Conversation:
    """Transcript and summary of the document a chat turn belongs to.

    A document switch replaces the coordinator's Conversation object, so a
    turn still in flight keeps appending to the conversation it started in.
    """

    fingerprint: str | None
    display_name: str = ""
    transcript: list[ChatMessage] = field(default_factory=list)
    summary: str = ""
