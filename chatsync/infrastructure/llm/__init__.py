"""LLM adapters."""

from chatsync.infrastructure.llm.gemini_client import GeminiClient

__all__ = ["GeminiClient"]
