"""Monitoring and metrics instrumentation for Chat Relay.

Exports custom Prometheus metrics for operational monitoring and alerting.
"""

from chat_relay.monitoring.metrics import (
    chat_requests_total,
    llm_latency_seconds,
    llm_tokens_total,
    rate_limit_rejections_total,
    retry_exhausted_total,
    upstream_retries_total,
)

__all__ = [
    "chat_requests_total",
    "rate_limit_rejections_total",
    "upstream_retries_total",
    "retry_exhausted_total",
    "llm_latency_seconds",
    "llm_tokens_total",
]
