"""Content-derived document fingerprints.

The fingerprint is the only key into the history store. It is a pure
function of the file bytes: the file name and modification time never
participate, so the same bytes reopened under another name resolve to the
same history entry.
"""

import asyncio
import hashlib
from pathlib import Path

from pdfchat.errors import FingerprintError
from pdfchat.models.docs import DocumentFile


def fingerprint(content: bytes) -> str:
    """Return the hex SHA-256 digest of document bytes.

    Raises:
        FingerprintError: If the content is not a bytes-like object
    """
    try:
        return hashlib.sha256(content).hexdigest()
    except TypeError as e:
        raise FingerprintError(f"Cannot fingerprint {type(content).__name__}") from e


async def fingerprint_file(file: DocumentFile) -> str:
    """Fingerprint a document off the event loop."""
    return await asyncio.to_thread(fingerprint, file.content)


async def read_document_file(path: Path | str) -> DocumentFile:
    """Read a document from disk.

    Raises:
        FingerprintError: If the file cannot be read
    """
    path = Path(path)
    try:
        content = await asyncio.to_thread(path.read_bytes)
    except OSError as e:
        raise FingerprintError(f"Cannot read {path.name}: {e.strerror or e}") from e
    return DocumentFile(name=path.name, content=content)
