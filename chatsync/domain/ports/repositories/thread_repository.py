"""
Thread Repository Port - Interface for DM thread persistence.
Implementation: chatsync/infrastructure/persistence/store_thread_repository.py
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional

from chatsync.domain.entities.dm_thread import DMThread
from chatsync.domain.ports.document_store import ErrorCallback, Subscription


class ThreadRepository(ABC):
    @abstractmethod
    async def get(self, thread_id: str) -> Optional[DMThread]: ...

    @abstractmethod
    async def create_if_absent(self, thread: DMThread) -> tuple[DMThread, bool]:
        """Atomic create; returns the stored thread and whether this call created it."""

    @abstractmethod
    async def list_for_participant(self, user_id: str) -> list[DMThread]: ...

    @abstractmethod
    async def watch_for_participant(
        self,
        user_id: str,
        on_snapshot: Callable[[list[DMThread]], None],
        on_error: Optional[ErrorCallback] = None,
    ) -> Subscription: ...
