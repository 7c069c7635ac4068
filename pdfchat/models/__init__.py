"""Models package - re-exports for convenience."""

from pdfchat.models.chat import ChatMessage, Sender
from pdfchat.models.docs import DocumentFile
from pdfchat.models.history import HistoryEntry, RecentDocument
from pdfchat.models.relay import ErrorResponse, GenerateRequest, GenerateResponse

__all__ = [
    # Chat
    "ChatMessage",
    "Sender",
    # Docs
    "DocumentFile",
    # History
    "HistoryEntry",
    "RecentDocument",
    # Relay
    "GenerateRequest",
    "GenerateResponse",
    "ErrorResponse",
]
