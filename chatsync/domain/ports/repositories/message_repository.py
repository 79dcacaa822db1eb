"""
Message Repository Port - Interface for message persistence.
Implementation: chatsync/infrastructure/persistence/store_message_repository.py
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional

from chatsync.domain.entities.message import Message
from chatsync.domain.ports.document_store import ErrorCallback, Subscription
from chatsync.domain.value_objects.conversation_ref import ConversationRef


class MessageRepository(ABC):
    @abstractmethod
    async def add(self, conversation: ConversationRef, text: str, sender_id: str) -> Message:
        """Append a message; the store assigns id and timestamp."""

    @abstractmethod
    async def latest(self, conversation: ConversationRef, limit: int) -> list[Message]:
        """Most recent messages, newest first."""

    @abstractmethod
    async def history(
        self, conversation: ConversationRef, limit: Optional[int] = None
    ) -> list[Message]:
        """Messages in chronological order (oldest first)."""

    @abstractmethod
    async def watch(
        self,
        conversation: ConversationRef,
        on_snapshot: Callable[[list[Message]], None],
        on_error: Optional[ErrorCallback] = None,
    ) -> Subscription: ...
