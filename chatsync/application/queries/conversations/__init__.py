"""Conversation queries."""

from .get_conversation import ConversationDetail, GetConversationHandler, GetConversationQuery
from .list_conversations import ListConversationsHandler, ListConversationsQuery

__all__ = [
    "ConversationDetail",
    "GetConversationHandler",
    "GetConversationQuery",
    "ListConversationsHandler",
    "ListConversationsQuery",
]
