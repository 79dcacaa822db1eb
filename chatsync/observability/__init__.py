"""Observability package for the chat coordinator."""

from chatsync.observability.metrics import (
    increment_messages_sent,
    increment_assistant_outcome,
    increment_llm_retries,
    observe_llm_latency,
    increment_subscription_error,
    increment_active_subscriptions,
    decrement_active_subscriptions,
    get_metrics_content,
    AssistantOutcome,
)

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
