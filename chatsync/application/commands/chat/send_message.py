"""
SendMessage Command - the message dispatcher.

Handler:
1. Refuse the assistant as sender, validate kind ("room" | "thread") and text (trimmed, non-empty)
2. Append {text, senderId, SERVER_TIMESTAMP} to the conversation
3. If this is a two-person thread with the assistant, schedule the assistant
   reply in the background and return without waiting for it

The message write never depends on the assistant: a failed reply leaves the
user's message in place.
"""

import logging
from dataclasses import dataclass

from chatsync.application.common.interfaces import Command, CommandHandler
from chatsync.domain.entities.identity import ASSISTANT_ID, is_assistant_id
from chatsync.domain.entities.message import Message
from chatsync.domain.exceptions import AccessDeniedError, DomainValidationError
from chatsync.domain.ports.repositories import MessageRepository
from chatsync.domain.value_objects.conversation_ref import ConversationKind, ConversationRef
from chatsync.domain.value_objects.user_id import UserId
from chatsync.observability.metrics import increment_messages_sent
from chatsync.services.assistant_orchestrator import AssistantOrchestrator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SendMessageCommand(Command[Message]):
    conversation_id: str
    kind: str
    text: str
    participants: tuple[str, ...]
    sender_id: UserId


def triggers_assistant(kind: ConversationKind, participants: tuple[str, ...]) -> bool:
    return (
        kind is ConversationKind.THREAD
        and len(participants) == 2
        and ASSISTANT_ID in participants
    )


class SendMessageHandler(CommandHandler[Message]):
    def __init__(
        self,
        message_repository: MessageRepository,
        orchestrator: AssistantOrchestrator,
    ):
        self._messages = message_repository
        self._orchestrator = orchestrator

    async def execute(self, command: SendMessageCommand) -> Message:
        if is_assistant_id(command.sender_id.value):
            raise AccessDeniedError("Assistant messages are written by the orchestrator only")
        kind = ConversationKind.parse(command.kind)
        text = (command.text or "").strip()
        if not text:
            raise DomainValidationError("Message text cannot be empty")

        ref = ConversationRef(id=command.conversation_id, kind=kind)
        message = await self._messages.add(ref, text, command.sender_id.value)
        increment_messages_sent(kind.value)
        logger.debug(f"[Dispatcher] {command.sender_id} -> {ref}")

        if triggers_assistant(kind, tuple(command.participants)):
            self._orchestrator.schedule(ref.id, text)

        return message
