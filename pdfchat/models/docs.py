"""Document input models."""

from dataclasses import dataclass

PDF_MAGIC = b"%PDF-"


@dataclass(frozen=True)
class DocumentFile:
    """A file the user asked to open: its name and raw bytes."""

    name: str
    content: bytes

    def looks_like_pdf(self) -> bool:
        """True when the name or the leading bytes mark the file as a PDF."""
        if self.name.lower().endswith(".pdf"):
            return True
        if not isinstance(self.content, (bytes, bytearray)):
            return False
        return bytes(self.content[:1024]).lstrip().startswith(PDF_MAGIC)
