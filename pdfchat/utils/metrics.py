"""Prometheus metrics for the relay and the chat core."""

from prometheus_client import Counter, Histogram

# Relay metrics
relay_generate_latency_ms = Histogram(
    "relay_generate_latency_ms",
    "Relay /api/generate latency in milliseconds",
    ["outcome"],
    buckets=[100, 250, 500, 1000, 2000, 4000, 8000, 16000, 32000],
)

relay_generate_errors_total = Counter(
    "relay_generate_errors_total",
    "Total relay generation errors",
    ["reason"],
)

# Chat core metrics
chat_turns_total = Counter(
    "chat_turns_total",
    "Total chat turns by outcome",
    ["outcome"],
)

summaries_total = Counter(
    "summaries_total",
    "Total summarization runs by outcome",
    ["outcome"],
)


class PrometheusRelayMetrics:
    """Prometheus-based relay metrics implementation."""

    def record_latency(self, outcome: str, latency_ms: float) -> None:
        """Record relay generation latency."""
        relay_generate_latency_ms.labels(outcome=outcome).observe(latency_ms)

    def inc_error(self, reason: str) -> None:
        """Increment error counter."""
        relay_generate_errors_total.labels(reason=reason).inc()
