"""
GenerativeClient Port - external text-generation service.
Implementation: chatsync/infrastructure/llm/gemini_client.py
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class GenerationRequest:
    prompt: str
    system_instruction: str
    web_grounding: bool = False


@dataclass(frozen=True)
class GenerationResult:
    # None when the response carried no candidate text
    text: Optional[str]


class GenerativeClient(ABC):
    @abstractmethod
    async def generate(self, request: GenerationRequest) -> GenerationResult:
        """
        Single completion call, no retries.

        Raises:
            RateLimitedError: service answered 429
            ExternalServiceFailure: any other non-2xx status or transport error
        """

    async def close(self) -> None:
        """Release HTTP resources."""
