"""Model relay endpoint - POST /api/generate.

Holds the provider credential server-side: the client sends a composed
prompt and receives ``{"text": ...}`` or a non-2xx ``{"error": ...}``.
"""

import logging
import time
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from pdfchat.llm.provider import (
    ContentBlockedError,
    EmptyProviderResponseError,
    ModelProvider,
    get_model_provider,
)
from pdfchat.models.relay import ErrorResponse, GenerateRequest, GenerateResponse
from pdfchat.utils.metrics import PrometheusRelayMetrics

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

_metrics = PrometheusRelayMetrics()

PROMPT_REQUIRED = "Prompt is required in the request body."
INVALID_RESPONSE = "The AI did not return a valid response. Check server logs."
PROVIDER_FAILED = "Failed to communicate with the AI."


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@router.post(
    "/generate",
    response_model=GenerateResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def generate(
    request: GenerateRequest,
    provider: Annotated[ModelProvider, Depends(get_model_provider)],
) -> GenerateResponse | JSONResponse:
    """Forward a prompt to the model provider.

    Returns:
        200 {"text"} on success
        400 {"error"} for a missing prompt or a prompt blocked by the safety gate
        500 {"error"} when the provider fails or returns no text
    """
    prompt = request.prompt
    if not prompt or not prompt.strip():
        _metrics.inc_error("missing_prompt")
        return _error(status.HTTP_400_BAD_REQUEST, PROMPT_REQUIRED)

    start = time.perf_counter()
    try:
        text = await provider.generate(prompt)
    except ContentBlockedError as e:
        _metrics.inc_error("blocked")
        _metrics.record_latency("blocked", (time.perf_counter() - start) * 1000)
        return _error(status.HTTP_400_BAD_REQUEST, str(e))
    except EmptyProviderResponseError:
        _metrics.inc_error("empty_response")
        _metrics.record_latency("error", (time.perf_counter() - start) * 1000)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, INVALID_RESPONSE)
    except Exception as e:
        logger.exception(f"Error communicating with model provider {provider.name}")
        _metrics.inc_error(type(e).__name__)
        _metrics.record_latency("error", (time.perf_counter() - start) * 1000)
        message = getattr(e, "message", None) or str(e) or PROVIDER_FAILED
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, message)

    _metrics.record_latency("success", (time.perf_counter() - start) * 1000)
    return GenerateResponse(text=text)
