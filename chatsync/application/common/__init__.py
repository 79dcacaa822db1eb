from chatsync.application.common.interfaces import (
    Command,
    CommandHandler,
    Query,
    QueryHandler,
)
from chatsync.application.common.background_tasks import BackgroundTasks
from chatsync.application.common.context import AppContext, AssistantSettings

__all__ = [
    "Command",
    "CommandHandler",
    "Query",
    "QueryHandler",
    "BackgroundTasks",
    "AppContext",
    "AssistantSettings",
]
