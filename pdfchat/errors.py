"""Error kinds surfaced by the document chat core.

None of these are fatal: the session coordinator catches every one of them
and turns it into a visible message on the session state.
"""


class PdfChatError(Exception):
    """Base class for document chat errors."""

    pass


class FingerprintError(PdfChatError):
    """Document bytes could not be read or hashed."""

    pass


class DocumentLoadError(PdfChatError):
    """Input is not a loadable PDF document."""

    pass


class PageExtractionError(PdfChatError):
    """Text extraction failed for a single page."""

    def __init__(self, page_number: int, reason: str) -> None:
        super().__init__(f"page {page_number}: {reason}")
        self.page_number = page_number
        self.reason = reason


class SummarizationError(PdfChatError):
    """Whole-document summary could not be generated."""

    pass


class RemoteModelError(PdfChatError):
    """Remote model call failed; message is safe to show to the user."""

    pass


class StorePersistenceError(PdfChatError):
    """Key-value store write failed."""

    pass
