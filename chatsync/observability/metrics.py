"""
Prometheus Metrics for the chat coordinator.

DEPENDENCY:
    pip install prometheus-client

DATA FLOW:
    This file                  presentation/api/metrics.py         Observability Stack
    ─────────                  ────────────────────────────         ───────────────────
    Define metrics ──────────► /metrics endpoint ──────────────►   Prometheus scraper
"""

from prometheus_client import (
    Gauge,
    Histogram,
    Counter,
    generate_latest,
    CONTENT_TYPE_LATEST,
)


# =============================================================================
# METRICS DEFINITIONS
# =============================================================================
MESSAGES_SENT_TOTAL = Counter(
    "chat_messages_sent_total",
    "Messages written by the dispatcher",
    ["kind"],
)

ASSISTANT_RESPONSES_TOTAL = Counter(
    "chat_assistant_responses_total",
    "Assistant orchestration outcomes",
    ["outcome"],
)

LLM_RETRIES_TOTAL = Counter(
    "chat_llm_retries_total",
    "Rate-limited generative calls that were retried after backoff",
)

LLM_REQUEST_LATENCY = Histogram(
    "chat_llm_request_duration_seconds",
    "Latency of generative service calls in seconds",
    ["model", "outcome"],
    buckets=[0.25, 0.5, 1, 2, 5, 10, 20, 40],
)

SUBSCRIPTION_ERRORS_TOTAL = Counter(
    "chat_subscription_errors_total",
    "Live stream errors reported to the synchronization manager",
    ["stream"],
)

ACTIVE_SUBSCRIPTIONS = Gauge(
    "chat_active_subscriptions",
    "Live store subscriptions currently held by synchronization managers",
)


# =============================================================================
# LABEL CONSTANTS
# =============================================================================
class AssistantOutcome:
    """Outcome labels for chat_assistant_responses_total."""

    REPLIED = "replied"
    RATE_LIMITED = "rate_limited"
    FAILED = "failed"
    WRITE_FAILED = "write_failed"


# =============================================================================
# RECORDING FUNCTIONS
# =============================================================================
def increment_messages_sent(kind: str):
    MESSAGES_SENT_TOTAL.labels(kind=kind).inc()


def increment_assistant_outcome(outcome: str):
    ASSISTANT_RESPONSES_TOTAL.labels(outcome=outcome).inc()


def increment_llm_retries():
    LLM_RETRIES_TOTAL.inc()


def observe_llm_latency(model: str, outcome: str, duration: float):
    LLM_REQUEST_LATENCY.labels(model=model, outcome=outcome).observe(duration)


def increment_subscription_error(stream: str):
    SUBSCRIPTION_ERRORS_TOTAL.labels(stream=stream).inc()


def increment_active_subscriptions():
    ACTIVE_SUBSCRIPTIONS.inc()


def decrement_active_subscriptions():
    ACTIVE_SUBSCRIPTIONS.dec()


# =============================================================================
# HELPER FOR /metrics ENDPOINT
# =============================================================================
def get_metrics_content():
    """
    Generate Prometheus metrics output.

    Returns:
        Tuple of (content_bytes, content_type_string)
    """
    return generate_latest(), CONTENT_TYPE_LATEST


__all__ = [
    "increment_messages_sent",
    "increment_assistant_outcome",
    "increment_llm_retries",
    "observe_llm_latency",
    "increment_subscription_error",
    "increment_active_subscriptions",
    "decrement_active_subscriptions",
    "get_metrics_content",
    "AssistantOutcome",
]
