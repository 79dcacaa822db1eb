"""
GetConversation Query - load a room or thread and check that the caller may see it.

Rooms are visible to their owner and members; threads to their participants.
Every endpoint that reads or writes a conversation goes through this query.
"""

from dataclasses import dataclass
from typing import Optional, Union

from chatsync.application.common.interfaces import Query, QueryHandler
from chatsync.domain.entities import ChatRoom, DMThread
from chatsync.domain.exceptions import AccessDeniedError, EntityNotFoundError
from chatsync.domain.ports.repositories import RoomRepository, ThreadRepository
from chatsync.domain.value_objects.conversation_ref import ConversationKind, ConversationRef
from chatsync.domain.value_objects.user_id import UserId


@dataclass
class ConversationDetail:
    ref: ConversationRef
    conversation: Union[ChatRoom, DMThread]

    @property
    def participants(self) -> tuple[str, ...]:
        return self.conversation.participants


@dataclass(frozen=True)
class GetConversationQuery(Query[ConversationDetail]):
    conversation_id: str
    kind: str
    user_id: UserId


class GetConversationHandler(QueryHandler[ConversationDetail]):
    def __init__(self, room_repository: RoomRepository, thread_repository: ThreadRepository):
        self._rooms = room_repository
        self._threads = thread_repository

    async def execute(self, query: GetConversationQuery) -> ConversationDetail:
        ref = ConversationRef(id=query.conversation_id, kind=ConversationKind.parse(query.kind))
        user_id = query.user_id.value

        conversation: Optional[Union[ChatRoom, DMThread]]
        if ref.kind is ConversationKind.ROOM:
            conversation = await self._rooms.get(ref.id)
            visible = conversation is not None and conversation.is_visible_to(user_id)
        else:
            conversation = await self._threads.get(ref.id)
            visible = conversation is not None and conversation.has_participant(user_id)

        if conversation is None:
            raise EntityNotFoundError(f"{ref.kind.value.capitalize()} {ref.id} not found")
        if not visible:
            raise AccessDeniedError("You don't have access to this conversation")

        return ConversationDetail(ref=ref, conversation=conversation)
