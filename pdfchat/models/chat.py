"""Chat transcript models."""

from datetime import datetime, timezone
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class Sender(str, Enum):
    """Author of a chat message."""

    user = "user"
    assistant = "assistant"


class ChatMessage(BaseModel):
    """Single chat message. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    text: str
    sender: Sender
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_user(cls, text: str) -> "ChatMessage":
        return cls(text=text, sender=Sender.user)

    @classmethod
    def from_assistant(cls, text: str) -> "ChatMessage":
        return cls(text=text, sender=Sender.assistant)
