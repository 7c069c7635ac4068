"""Tests for content-derived document fingerprints."""

from pathlib import Path

import pytest

from pdfchat.docs.fingerprint import fingerprint, fingerprint_file, read_document_file
from pdfchat.errors import FingerprintError
from pdfchat.models import DocumentFile


def test_fingerprint_is_deterministic() -> None:
    """Same bytes always produce the same fingerprint."""
    content = b"%PDF-1.4 some bytes"
    assert fingerprint(content) == fingerprint(content)
    assert len(fingerprint(content)) == 64


def test_fingerprint_differs_for_different_bytes() -> None:
    """Changing a single byte changes the fingerprint."""
    assert fingerprint(b"%PDF-1.4 a") != fingerprint(b"%PDF-1.4 b")


@pytest.mark.asyncio
async def test_fingerprint_ignores_file_name() -> None:
    """The file name never participates in the fingerprint."""
    a = DocumentFile(name="report.pdf", content=b"%PDF-1.4 shared")
    b = DocumentFile(name="report-copy.pdf", content=b"%PDF-1.4 shared")

    assert await fingerprint_file(a) == await fingerprint_file(b)


def test_fingerprint_rejects_non_bytes() -> None:
    """Unhashable content is reported as FingerprintError."""
    with pytest.raises(FingerprintError):
        fingerprint("not bytes")  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_read_document_file(tmp_path: Path) -> None:
    """Reading a file keeps its name and bytes."""
    path = tmp_path / "paper.pdf"
    path.write_bytes(b"%PDF-1.4 body")

    file = await read_document_file(path)

    assert file.name == "paper.pdf"
    assert file.content == b"%PDF-1.4 body"


@pytest.mark.asyncio
async def test_read_document_file_missing(tmp_path: Path) -> None:
    """An unreadable path raises FingerprintError."""
    with pytest.raises(FingerprintError, match="missing.pdf"):
        await read_document_file(tmp_path / "missing.pdf")


def test_looks_like_pdf() -> None:
    """Files are accepted by extension or by the %PDF- header."""
    assert DocumentFile(name="a.PDF", content=b"").looks_like_pdf()
    assert DocumentFile(name="noext", content=b"%PDF-1.7\n...").looks_like_pdf()
    assert not DocumentFile(name="notes.txt", content=b"hello").looks_like_pdf()
