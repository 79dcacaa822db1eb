"""
DraftReply Query - suggest a one-sentence answer to the last message in a thread.

Only drafts when the last message came from another human; otherwise returns
the "Couldn't draft a reply." sentinel without calling the model. Never writes
to the store.
"""

import logging
from dataclasses import dataclass

from chatsync.application.common.interfaces import Query, QueryHandler
from chatsync.domain.exceptions import ExternalServiceFailure
from chatsync.domain.ports.generative_client import GenerationRequest, GenerativeClient
from chatsync.domain.ports.repositories import MessageRepository
from chatsync.domain.value_objects.conversation_ref import ConversationRef
from chatsync.domain.value_objects.user_id import UserId
from chatsync.prompts import AssistantPrompts
from chatsync.services.profile_directory import ProfileDirectory

logger = logging.getLogger(__name__)


@dataclass
class DraftResult:
    conversation_id: str
    text: str


@dataclass(frozen=True)
class DraftReplyQuery(Query[DraftResult]):
    thread_id: str
    requester_id: UserId


class DraftReplyHandler(QueryHandler[DraftResult]):
    def __init__(
        self,
        message_repository: MessageRepository,
        directory: ProfileDirectory,
        llm: GenerativeClient,
    ):
        self._messages = message_repository
        self._directory = directory
        self._llm = llm

    async def execute(self, query: DraftReplyQuery) -> DraftResult:
        try:
            return await self._draft(query.thread_id, query.requester_id.value)
        except ExternalServiceFailure as e:
            logger.warning(f"[Drafter] Failed for thread {query.thread_id}: {e}")
        except Exception as e:
            logger.exception(f"[Drafter] Unexpected error for thread {query.thread_id}: {e}")
        return DraftResult(query.thread_id, AssistantPrompts.DRAFT_SENTINEL)

    async def _draft(self, thread_id: str, requester: str) -> DraftResult:
        last = await self._messages.latest(ConversationRef.thread(thread_id), 1)
        if not last or last[0].sender_id == requester or last[0].is_from_assistant:
            return DraftResult(thread_id, AssistantPrompts.DRAFT_SENTINEL)

        message = last[0]
        names = await self._directory.display_names([requester, message.sender_id])
        me = names.get(requester, "Me")
        other = names.get(message.sender_id, "Contact")

        request = GenerationRequest(
            prompt=AssistantPrompts.draft_prompt(message.text, me),
            system_instruction=AssistantPrompts.draft_system(me, other),
        )
        result = await self._llm.generate(request)
        return DraftResult(thread_id, (result.text or AssistantPrompts.DRAFT_MISSING).strip())
