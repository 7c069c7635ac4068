"""Wire models for the model relay (POST /api/generate)."""

from pydantic import BaseModel


class GenerateRequest(BaseModel):
    """Relay request body.

    ``prompt`` is optional at the schema level so a missing prompt gets the
    relay's own 400 error body instead of a validation 422.
    """

    prompt: str | None = None


class GenerateResponse(BaseModel):
    """Successful relay response."""

    text: str


class ErrorResponse(BaseModel):
    """Failed relay response (non-2xx)."""

    error: str
