"""PDF parsing capability used by text extraction.

The core only depends on the ``DocumentRenderer`` / ``DocumentHandle`` /
``PageHandle`` protocols. ``PypdfRenderer`` is the default implementation;
pypdf is synchronous, so parsing and text extraction run in worker threads
and reader access is serialized per handle.
"""

import asyncio
import threading
from io import BytesIO
from typing import Any, Protocol

from pypdf import PdfReader, PasswordType
from pypdf.errors import PyPdfError

from pdfchat.errors import DocumentLoadError
from pdfchat.models.docs import DocumentFile


class PageHandle(Protocol):
    """A single loaded page."""

    async def get_text(self) -> list[str]:
        """Return the page's text runs in content order."""
        ...


class DocumentHandle(Protocol):
    """A loaded document."""

    @property
    def page_count(self) -> int:
        """Number of pages (pages are numbered from 1)."""
        ...

    async def get_page(self, page_number: int) -> PageHandle:
        """Fetch a page by 1-based number."""
        ...


class DocumentRenderer(Protocol):
    """Loads documents into handles."""

    async def load(self, file: DocumentFile) -> DocumentHandle:
        """Parse a document.

        Raises:
            DocumentLoadError: If the file is not a valid document
        """
        ...


class PypdfPage:
    """pypdf-backed page handle."""

    def __init__(self, page: Any, lock: threading.Lock) -> None:
        self._page = page
        self._lock = lock

    def _collect_runs(self) -> list[str]:
        runs: list[str] = []

        def visitor(text: str, cm: Any, tm: Any, font_dict: Any, font_size: Any) -> None:
            if text and text.strip():
                runs.append(text.strip())

        with self._lock:
            self._page.extract_text(visitor_text=visitor)
        return runs

    async def get_text(self) -> list[str]:
        return await asyncio.to_thread(self._collect_runs)


class PypdfDocument:
    """pypdf-backed document handle."""

    def __init__(self, reader: PdfReader, page_count: int) -> None:
        self._reader = reader
        self._page_count = page_count
        self._lock = threading.Lock()

    @property
    def page_count(self) -> int:
        return self._page_count

    def _page_at(self, page_number: int) -> Any:
        if not 1 <= page_number <= self._page_count:
            raise IndexError(f"page {page_number} out of range 1..{self._page_count}")
        with self._lock:
            return self._reader.pages[page_number - 1]

    async def get_page(self, page_number: int) -> PypdfPage:
        page = await asyncio.to_thread(self._page_at, page_number)
        return PypdfPage(page, self._lock)


def _parse(content: bytes) -> PypdfDocument:
    reader = PdfReader(BytesIO(content))
    if reader.is_encrypted and reader.decrypt("") == PasswordType.NOT_DECRYPTED:
        raise DocumentLoadError("The PDF is password protected.")
    return PypdfDocument(reader, len(reader.pages))


class PypdfRenderer:
    """DocumentRenderer implementation backed by pypdf."""

    async def load(self, file: DocumentFile) -> PypdfDocument:
        try:
            return await asyncio.to_thread(_parse, file.content)
        except DocumentLoadError:
            raise
        except (PyPdfError, ValueError, KeyError, OSError) as e:
            raise DocumentLoadError(
                "Error loading PDF. The file might be corrupted or not a valid PDF."
            ) from e
