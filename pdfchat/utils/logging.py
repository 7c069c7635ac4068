"""Logging setup and structured logging for chat turns and summaries."""

import logging
from typing import Any

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def _short(fingerprint: str | None) -> str | None:
    return fingerprint[:12] if fingerprint else None


class StructuredChatLogger:
    """Structured logger for chat turns and summarization runs."""

    def log_turn(
        self,
        fingerprint: str | None,
        outcome: str,
        latency_ms: float,
        prompt_chars: int,
        error_reason: str | None = None,
    ) -> None:
        """Log a completed chat turn with structured data."""
        log_data: dict[str, Any] = {
            "fingerprint": _short(fingerprint),
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
            "prompt_chars": prompt_chars,
        }

        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Chat turn - {outcome}"

        if outcome == "success":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})

    def log_summary(
        self,
        fingerprint: str,
        outcome: str,
        latency_ms: float,
        text_chars: int,
        error_reason: str | None = None,
    ) -> None:
        """Log a summarization run with structured data."""
        log_data: dict[str, Any] = {
            "fingerprint": _short(fingerprint),
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
            "text_chars": text_chars,
        }

        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Summarization - {outcome}"

        if outcome == "failed":
            logger.warning(log_msg, extra={"structured": log_data})
        else:
            logger.info(log_msg, extra={"structured": log_data})
