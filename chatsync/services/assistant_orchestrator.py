"""
Assistant Orchestrator.

Turns a message sent into an assistant thread into an assistant reply:

    respond(thread_id, prompt)
      → generate (persona + prompt, optional web grounding)
      → 429? sleep next_delay(attempt) and retry, up to max_attempts
      → anything else failing? give up silently
      → success: append reply as the assistant

respond() never raises. Failures are logged and counted; nothing is written
to the conversation, and the triggering message is never touched.
This is the only writer of assistant-attributed messages.
"""

import asyncio
import logging
from typing import Optional

from tenacity import AsyncRetrying, RetryCallState, retry_if_exception_type, stop_after_attempt

from chatsync.application.common.context import AppContext
from chatsync.domain.entities.identity import ASSISTANT_ID
from chatsync.domain.exceptions import ExternalServiceFailure, RateLimitedError
from chatsync.domain.ports.generative_client import GenerationRequest, GenerationResult
from chatsync.domain.value_objects.conversation_ref import ConversationRef
from chatsync.observability.metrics import (
    AssistantOutcome,
    increment_assistant_outcome,
    increment_llm_retries,
)
from chatsync.prompts import AssistantPrompts
from chatsync.services.retry_policy import BackoffPolicy

logger = logging.getLogger(__name__)


class AssistantOrchestrator:
    def __init__(self, context: AppContext):
        self._llm = context.llm
        self._messages = context.messages
        self._tasks = context.tasks
        self._sleep = context.sleep
        self._rng = context.rng
        self._web_grounding = context.settings.web_grounding
        self._policy = BackoffPolicy(
            max_attempts=context.settings.max_attempts,
            base=context.settings.backoff_base,
        )

    def schedule(self, thread_id: str, prompt_text: str) -> asyncio.Task:
        """Run respond() in the background; the caller does not wait for it."""
        return self._tasks.spawn(
            self.respond(thread_id, prompt_text), name=f"assistant-reply:{thread_id}"
        )

    async def respond(self, thread_id: str, prompt_text: str) -> None:
        request = GenerationRequest(
            prompt=prompt_text,
            system_instruction=AssistantPrompts.PERSONA_SYSTEM,
            web_grounding=self._web_grounding,
        )
        result = await self._generate_with_backoff(thread_id, request)
        if result is None:
            return

        try:
            await self._messages.add(
                ConversationRef.thread(thread_id),
                result.text or AssistantPrompts.NO_RESPONSE,
                ASSISTANT_ID,
            )
        except Exception as e:
            logger.error(f"[Assistant] Failed to write reply to {thread_id}: {e}")
            increment_assistant_outcome(AssistantOutcome.WRITE_FAILED)
            return

        increment_assistant_outcome(AssistantOutcome.REPLIED)
        logger.info(f"[Assistant] Replied in {thread_id}")

    def _wait(self, retry_state: RetryCallState) -> float:
        # attempt_number is 1-based and counts the attempt that just failed
        return self._policy.delay(retry_state.attempt_number - 1, self._rng)

    @staticmethod
    def _before_sleep(retry_state: RetryCallState) -> None:
        increment_llm_retries()
        logger.info(
            f"[Assistant] Rate limited (attempt {retry_state.attempt_number}), "
            f"retrying in {retry_state.next_action.sleep:.2f}s"
        )

    async def _generate_with_backoff(
        self, thread_id: str, request: GenerationRequest
    ) -> Optional[GenerationResult]:
        retrying = AsyncRetrying(
            sleep=self._sleep,
            stop=stop_after_attempt(self._policy.max_attempts),
            wait=self._wait,
            retry=retry_if_exception_type(RateLimitedError),
            before_sleep=self._before_sleep,
            reraise=True,
        )
        try:
            return await retrying(self._llm.generate, request)
        except RateLimitedError:
            logger.warning(
                f"[Assistant] Still rate limited after {self._policy.max_attempts} attempts "
                f"for {thread_id}, giving up"
            )
            increment_assistant_outcome(AssistantOutcome.RATE_LIMITED)
        except ExternalServiceFailure as e:
            logger.warning(f"[Assistant] Generation failed for {thread_id}: {e}")
            increment_assistant_outcome(AssistantOutcome.FAILED)
        except Exception as e:
            logger.exception(f"[Assistant] Unexpected error for {thread_id}: {e}")
            increment_assistant_outcome(AssistantOutcome.FAILED)
        return None
