"""
Store-backed Message Repository.

Document shape (messages sub-collection of a room or thread):
    {text, senderId, timestamp}

The timestamp is always SERVER_TIMESTAMP on write so ordering follows the
store clock, not the sender's.
"""

from typing import Callable, Optional

from chatsync.domain.entities.message import Message
from chatsync.domain.ports.document_store import (
    SERVER_TIMESTAMP,
    Document,
    DocumentStore,
    ErrorCallback,
    OrderBy,
    Subscription,
)
from chatsync.domain.ports.repositories import MessageRepository
from chatsync.domain.value_objects.conversation_ref import ConversationRef
from chatsync.infrastructure.persistence.paths import CollectionPaths

_BY_TIMESTAMP = OrderBy("timestamp")
_BY_TIMESTAMP_DESC = OrderBy("timestamp", descending=True)


class StoreMessageRepository(MessageRepository):
    def __init__(self, store: DocumentStore, paths: CollectionPaths):
        self._store = store
        self._paths = paths

    @staticmethod
    def _to_entity(conversation: ConversationRef, doc: Document) -> Message:
        return Message(
            id=doc["id"],
            conversation=conversation,
            text=doc.get("text", ""),
            sender_id=doc.get("senderId", ""),
            timestamp=doc.get("timestamp"),
        )

    async def add(self, conversation: ConversationRef, text: str, sender_id: str) -> Message:
        collection = self._paths.messages(conversation)
        doc = await self._store.create(
            f"{collection}/{self._store.new_id()}",
            {"text": text, "senderId": sender_id, "timestamp": SERVER_TIMESTAMP},
        )
        return self._to_entity(conversation, doc)

    async def latest(self, conversation: ConversationRef, limit: int) -> list[Message]:
        docs = await self._store.query(
            self._paths.messages(conversation), order_by=_BY_TIMESTAMP_DESC, limit=limit
        )
        return [self._to_entity(conversation, d) for d in docs]

    async def history(
        self, conversation: ConversationRef, limit: Optional[int] = None
    ) -> list[Message]:
        if limit is None:
            docs = await self._store.query(
                self._paths.messages(conversation), order_by=_BY_TIMESTAMP
            )
            return [self._to_entity(conversation, d) for d in docs]
        # Most recent N, returned oldest first
        recent = await self.latest(conversation, limit)
        recent.reverse()
        return recent

    async def watch(
        self,
        conversation: ConversationRef,
        on_snapshot: Callable[[list[Message]], None],
        on_error: Optional[ErrorCallback] = None,
    ) -> Subscription:
        return await self._store.subscribe(
            self._paths.messages(conversation),
            lambda docs: on_snapshot([self._to_entity(conversation, d) for d in docs]),
            on_error,
            order_by=_BY_TIMESTAMP,
        )
