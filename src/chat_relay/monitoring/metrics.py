"""Custom Prometheus metrics for Chat Relay.

These metrics are exposed at /metrics endpoint and should be scraped by Prometheus.
Alert rules should be configured for:
- upstream_retries_total (sustained upstream rate limiting)
- retry_exhausted_total (callers receiving errors after all retries)
- rate_limit_rejections_total (abusive clients)
"""

from prometheus_client import Counter, Histogram

# === Gateway Metrics ===

chat_requests_total = Counter(
    "chat_requests_total",
    "Total /chat requests by outcome",
    ["status"],
)
"""
Chat requests counter.

Labels:
- status: success, invalid, error
"""

rate_limit_rejections_total = Counter(
    "rate_limit_rejections_total",
    "Requests rejected by the per-address quota",
)

# === Retry Metrics ===

upstream_retries_total = Counter(
    "upstream_retries_total",
    "Upstream calls retried after backoff",
    ["reason"],
)
"""
Retry counter.

Labels:
- reason: rate_limited

Alert thresholds:
- WARN: retry rate > 10% of total requests
- CRITICAL: retry rate > 30% of total requests
"""

retry_exhausted_total = Counter(
    "retry_exhausted_total",
    "Requests that failed after consuming every attempt",
)

# === LLM Performance Metrics ===

llm_latency_seconds = Histogram(
    "llm_latency_seconds",
    "Upstream completion latency in seconds",
    ["model", "success"],
    buckets=[0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
)
"""
Upstream latency histogram.

Labels:
- model: Model name (e.g., gpt-3.5-turbo)
- success: true (completion returned), false (call failed)
"""

llm_tokens_total = Counter(
    "llm_tokens_total",
    "Total tokens consumed by model and type",
    ["model", "token_type"],
)
"""
Token consumption counter.

Labels:
- model: Model name
- token_type: prompt (input tokens), completion (output tokens)

Used for cost estimation.
"""
