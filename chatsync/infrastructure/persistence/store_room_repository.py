"""
Store-backed Room Repository.

Document shape (chatrooms collection, store-assigned id):
    {name, ownerId, members: [user ids], createdAt}
"""

from typing import Callable, Optional

from chatsync.domain.entities.chat_room import ChatRoom
from chatsync.domain.ports.document_store import (
    SERVER_TIMESTAMP,
    Document,
    DocumentStore,
    ErrorCallback,
    OrderBy,
    Subscription,
)
from chatsync.domain.ports.repositories import RoomRepository
from chatsync.infrastructure.persistence.paths import CollectionPaths


class StoreRoomRepository(RoomRepository):
    def __init__(self, store: DocumentStore, paths: CollectionPaths):
        self._store = store
        self._paths = paths

    def _to_entity(self, doc: Document) -> ChatRoom:
        return ChatRoom(
            id=doc["id"],
            name=doc.get("name", ""),
            owner_id=doc.get("ownerId", ""),
            members=frozenset(doc.get("members") or ()),
            created_at=doc.get("createdAt"),
        )

    def new_id(self) -> str:
        return self._store.new_id()

    async def get(self, room_id: str) -> Optional[ChatRoom]:
        doc = await self._store.get(self._paths.room(room_id))
        return self._to_entity(doc) if doc else None

    async def create(self, room: ChatRoom) -> ChatRoom:
        doc = await self._store.create(
            self._paths.room(room.id),
            {
                "name": room.name,
                "ownerId": room.owner_id,
                "members": sorted(room.members),
                "createdAt": SERVER_TIMESTAMP,
            },
        )
        return self._to_entity(doc)

    async def list_visible_to(self, user_id: str) -> list[ChatRoom]:
        # Visibility is "member OR owner", which the store cannot express in one filter
        docs = await self._store.query(self._paths.rooms, order_by=OrderBy("createdAt"))
        rooms = [self._to_entity(d) for d in docs]
        return [room for room in rooms if room.is_visible_to(user_id)]

    async def watch_all(
        self,
        on_snapshot: Callable[[list[ChatRoom]], None],
        on_error: Optional[ErrorCallback] = None,
    ) -> Subscription:
        return await self._store.subscribe(
            self._paths.rooms,
            lambda docs: on_snapshot([self._to_entity(d) for d in docs]),
            on_error,
            order_by=OrderBy("createdAt"),
        )
