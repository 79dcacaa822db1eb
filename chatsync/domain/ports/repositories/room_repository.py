"""
Room Repository Port - Interface for chat room persistence.
Implementation: chatsync/infrastructure/persistence/store_room_repository.py
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional

from chatsync.domain.entities.chat_room import ChatRoom
from chatsync.domain.ports.document_store import ErrorCallback, Subscription


class RoomRepository(ABC):
    @abstractmethod
    def new_id(self) -> str: ...

    @abstractmethod
    async def get(self, room_id: str) -> Optional[ChatRoom]: ...

    @abstractmethod
    async def create(self, room: ChatRoom) -> ChatRoom: ...

    @abstractmethod
    async def list_visible_to(self, user_id: str) -> list[ChatRoom]: ...

    @abstractmethod
    async def watch_all(
        self,
        on_snapshot: Callable[[list[ChatRoom]], None],
        on_error: Optional[ErrorCallback] = None,
    ) -> Subscription:
        """All rooms; visibility is filtered by the caller."""
