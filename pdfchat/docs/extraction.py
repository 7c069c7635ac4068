"""Page and whole-document text extraction."""

import logging

from pdfchat.docs.renderer import DocumentHandle
from pdfchat.errors import PageExtractionError

logger = logging.getLogger(__name__)

PAGE_SEPARATOR = "\n\n"


async def extract_page(handle: DocumentHandle, page_number: int) -> str:
    """Extract one page's text as a single whitespace-joined string.

    A page with no extractable text yields "" (some PDFs disallow
    extraction or are scanned images).

    Args:
        handle: Loaded document handle
        page_number: 1-based page number

    Returns:
        Flattened page text, possibly empty

    Raises:
        PageExtractionError: On I/O or parse failures
    """
    try:
        page = await handle.get_page(page_number)
        runs = await page.get_text()
    except PageExtractionError:
        raise
    except Exception as e:
        raise PageExtractionError(page_number, str(e) or type(e).__name__) from e

    return " ".join(run for run in runs if run)


async def extract_all(handle: DocumentHandle) -> str:
    """Extract every page once, in order, joined with blank lines.

    Pages that fail to extract contribute an empty string so one bad page
    does not discard the rest of the document.
    """
    pages: list[str] = []
    for page_number in range(1, handle.page_count + 1):
        try:
            pages.append(await extract_page(handle, page_number))
        except PageExtractionError as e:
            logger.warning(f"Skipping page {page_number} during full extraction: {e.reason}")
            pages.append("")
    return PAGE_SEPARATOR.join(pages)
