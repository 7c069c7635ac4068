"""Health check endpoints.

- /health: liveness, always ok
- /healthz: model provider in use and Redis reachability when the history
  store is configured to use Redis
"""

import json
from typing import Any

import redis
from fastapi import APIRouter, Response

from pdfchat.config import Settings, get_settings
from pdfchat.llm.provider import get_model_provider

router = APIRouter()


async def check_provider() -> tuple[bool, str]:
    """Report which model provider the relay serves.

    Returns:
        (is_ok, provider_name); the stub provider is usable but degraded
    """
    provider = get_model_provider()
    return (provider.name != "stub", provider.name)


async def check_redis(settings: Settings) -> tuple[bool, str]:
    """Check Redis connectivity.

    Returns:
        (is_ok, status_message)
    """
    if settings.history_backend != "redis" or not settings.redis_url:
        return (True, "not_configured")

    try:
        client = redis.from_url(settings.redis_url, decode_responses=True)  # type: ignore[no-untyped-call]
        client.ping()
        return (True, "ok")
    except Exception as e:
        return (False, f"error: {type(e).__name__}")


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check for Docker/k8s.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/healthz", response_model=None)
async def healthz() -> dict[str, Any] | Response:
    """Health check endpoint.

    Returns:
        200 with component status; "degraded" when serving the stub provider
        503 if a configured Redis is unreachable
    """
    settings = get_settings()

    provider_ok, provider_name = await check_provider()
    redis_ok, redis_status = await check_redis(settings)

    response_body = {
        "status": "ok" if provider_ok and redis_ok else "degraded",
        "components": {
            "provider": provider_name,
            "redis": redis_status,
        },
    }

    if not redis_ok:
        return Response(
            content=json.dumps(response_body),
            status_code=503,
            media_type="application/json",
        )

    return response_body
