"""List Conversations Query - the caller's rooms and threads with display titles."""

from dataclasses import dataclass

from chatsync.application.common.interfaces import Query, QueryHandler
from chatsync.domain.ports.repositories import RoomRepository, ThreadRepository
from chatsync.domain.value_objects.user_id import UserId
from chatsync.services.conversation_view import ConversationSummary, build_conversation_view
from chatsync.services.profile_directory import ProfileDirectory


@dataclass(frozen=True)
class ListConversationsQuery(Query[list[ConversationSummary]]):
    user_id: UserId


class ListConversationsHandler(QueryHandler[list[ConversationSummary]]):
    def __init__(
        self,
        room_repository: RoomRepository,
        thread_repository: ThreadRepository,
        directory: ProfileDirectory,
    ):
        self._rooms = room_repository
        self._threads = thread_repository
        self._directory = directory

    async def execute(self, query: ListConversationsQuery) -> list[ConversationSummary]:
        user_id = query.user_id.value
        rooms = await self._rooms.list_visible_to(user_id)
        threads = await self._threads.list_for_participant(user_id)
        profiles = await self._directory.all()
        return build_conversation_view(user_id, rooms, threads, profiles)
