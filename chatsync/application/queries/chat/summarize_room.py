"""
SummarizeRoom Query - one-paragraph summary of a room's recent history.

Steps:
1. Load the latest SUMMARY_WINDOW messages and put them in chronological order
2. Nothing to summarize -> fixed text, no external call
3. Render "[HH:MM] name: text" lines and ask the model once (no grounding)
4. Map every failure to a user-facing fallback string

Read-only: the summary is never written to the store. The result carries the
room id so a client can drop it if the user has moved on.
"""

import logging
from dataclasses import dataclass

from chatsync.application.common.interfaces import Query, QueryHandler
from chatsync.domain.entities.message import Message
from chatsync.domain.exceptions import ExternalServiceFailure
from chatsync.domain.ports.generative_client import GenerationRequest, GenerativeClient
from chatsync.domain.ports.repositories import MessageRepository
from chatsync.domain.value_objects.conversation_ref import ConversationRef
from chatsync.prompts import AssistantPrompts
from chatsync.services.profile_directory import ProfileDirectory

logger = logging.getLogger(__name__)


@dataclass
class SummaryResult:
    conversation_id: str
    text: str


@dataclass(frozen=True)
class SummarizeRoomQuery(Query[SummaryResult]):
    room_id: str


def format_transcript(messages: list[Message], names: dict[str, str]) -> str:
    lines = []
    for message in messages:
        stamp = message.timestamp.strftime("%H:%M") if message.timestamp else "Time"
        sender = names.get(message.sender_id, "Unknown")
        lines.append(f"[{stamp}] {sender}: {message.text}")
    return "\n".join(lines)


class SummarizeRoomHandler(QueryHandler[SummaryResult]):
    def __init__(
        self,
        message_repository: MessageRepository,
        directory: ProfileDirectory,
        llm: GenerativeClient,
        window: int = 30,
    ):
        self._messages = message_repository
        self._directory = directory
        self._llm = llm
        self._window = window

    async def execute(self, query: SummarizeRoomQuery) -> SummaryResult:
        try:
            return await self._summarize(query.room_id)
        except ExternalServiceFailure as e:
            logger.warning(f"[Summarizer] Failed for room {query.room_id}: {e}")
        except Exception as e:
            logger.exception(f"[Summarizer] Unexpected error for room {query.room_id}: {e}")
        return SummaryResult(query.room_id, AssistantPrompts.SUMMARY_ERROR)

    async def _summarize(self, room_id: str) -> SummaryResult:
        recent = await self._messages.latest(ConversationRef.room(room_id), self._window)
        if not recent:
            return SummaryResult(room_id, AssistantPrompts.NO_MESSAGES_TO_SUMMARIZE)
        recent.reverse()

        names = await self._directory.display_names(m.sender_id for m in recent)
        request = GenerationRequest(
            prompt=AssistantPrompts.summary_prompt(format_transcript(recent, names), len(recent)),
            system_instruction=AssistantPrompts.SUMMARY_SYSTEM,
        )
        result = await self._llm.generate(request)
        return SummaryResult(room_id, result.text or AssistantPrompts.SUMMARY_MISSING)
