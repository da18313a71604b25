"""Prometheus metrics for score distribution, profile fallbacks, savings rules and notifications"""

from prometheus_client import Counter, Histogram

# Scoring metrics
score_counter = Counter(
    "capstack_score_total",
    "Scores computed",
    ["kind", "band"],  # kind: health | income | survival; band: grade or risk tier
)

default_profile_counter = Counter(
    "capstack_default_profile_total",
    "Requests served from the default profile",
    ["kind"],
)

# Savings discipline metrics
blocked_transaction_counter = Counter(
    "capstack_blocked_transactions_total",
    "Transactions blocked by the discipline protocol",
)

auto_saved_amount_counter = Counter(
    "capstack_auto_saved_amount_total",
    "Total amount moved to savings by auto-save",
)

# Notification webhook metrics
webhook_latency_histogram = Histogram(
    "webhook_latency_seconds",
    "Notification webhook response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

webhook_failure_counter = Counter(
    "webhook_failures_total",
    "Failed webhook deliveries",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_score(kind: str, band: str, used_default_profile: bool) -> None:
    """Record score metrics for monitoring grade distribution and fallback rate"""
    score_counter.labels(kind=kind, band=band).inc()
    if used_default_profile:
        default_profile_counter.labels(kind=kind).inc()
