"""
Store-backed Thread Repository.

Document shape (dmThreads collection, id derived from participants):
    {participants: [sorted user ids], createdAt}
"""

import logging
from typing import Callable, Optional

from chatsync.domain.entities.dm_thread import DMThread
from chatsync.domain.exceptions import DocumentExistsError
from chatsync.domain.ports.document_store import (
    SERVER_TIMESTAMP,
    Document,
    DocumentStore,
    ErrorCallback,
    Filter,
    OrderBy,
    Subscription,
)
from chatsync.domain.ports.repositories import ThreadRepository
from chatsync.infrastructure.persistence.paths import CollectionPaths

logger = logging.getLogger(__name__)


class StoreThreadRepository(ThreadRepository):
    def __init__(self, store: DocumentStore, paths: CollectionPaths):
        self._store = store
        self._paths = paths

    def _to_entity(self, doc: Document) -> DMThread:
        return DMThread(
            id=doc["id"],
            participants=tuple(doc.get("participants") or ()),
            created_at=doc.get("createdAt"),
        )

    async def get(self, thread_id: str) -> Optional[DMThread]:
        doc = await self._store.get(self._paths.thread(thread_id))
        return self._to_entity(doc) if doc else None

    async def create_if_absent(self, thread: DMThread) -> tuple[DMThread, bool]:
        path = self._paths.thread(thread.id)
        try:
            doc = await self._store.create(
                path,
                {"participants": list(thread.participants), "createdAt": SERVER_TIMESTAMP},
            )
            logger.info(f"[Threads] Created {thread.id} for {len(thread.participants)} participants")
            return self._to_entity(doc), True
        except DocumentExistsError:
            existing = await self._store.get(path)
            return self._to_entity(existing), False

    def _participant_filter(self, user_id: str) -> list[Filter]:
        return [Filter("participants", "array_contains", user_id)]

    async def list_for_participant(self, user_id: str) -> list[DMThread]:
        docs = await self._store.query(
            self._paths.threads,
            filters=self._participant_filter(user_id),
            order_by=OrderBy("createdAt"),
        )
        return [self._to_entity(d) for d in docs]

    async def watch_for_participant(
        self,
        user_id: str,
        on_snapshot: Callable[[list[DMThread]], None],
        on_error: Optional[ErrorCallback] = None,
    ) -> Subscription:
        return await self._store.subscribe(
            self._paths.threads,
            lambda docs: on_snapshot([self._to_entity(d) for d in docs]),
            on_error,
            filters=self._participant_filter(user_id),
            order_by=OrderBy("createdAt"),
        )
