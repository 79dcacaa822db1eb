"""
GetMessages Query - chronological history of a conversation the caller can see.
"""

from dataclasses import dataclass

from chatsync.application.common.interfaces import Query, QueryHandler
from chatsync.application.queries.conversations.get_conversation import (
    GetConversationHandler,
    GetConversationQuery,
)
from chatsync.config.settings import Config
from chatsync.domain.entities.message import Message
from chatsync.domain.ports.repositories import MessageRepository
from chatsync.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class GetMessagesQuery(Query[list[Message]]):
    conversation_id: str
    kind: str
    user_id: UserId
    limit: int = Config.CONVERSATION_MESSAGE_LIMIT


class GetMessagesHandler(QueryHandler[list[Message]]):
    def __init__(
        self,
        conversation_handler: GetConversationHandler,
        message_repository: MessageRepository,
    ):
        self._conversations = conversation_handler
        self._messages = message_repository

    async def execute(self, query: GetMessagesQuery) -> list[Message]:
        detail = await self._conversations.execute(
            GetConversationQuery(
                conversation_id=query.conversation_id,
                kind=query.kind,
                user_id=query.user_id,
            )
        )
        # Latest `limit` messages, oldest first
        return await self._messages.history(detail.ref, limit=query.limit)
