"""
Services - stateful coordinators built on the repository ports.
"""

from chatsync.services.retry_policy import BackoffPolicy, next_delay
from chatsync.services.thread_resolver import ResolvedThread, ThreadResolver
from chatsync.services.profile_directory import ProfileDirectory
from chatsync.services.conversation_view import (
    ConversationSummary,
    build_conversation_view,
    thread_title,
)
from chatsync.services.assistant_orchestrator import AssistantOrchestrator
from chatsync.services.sync_manager import SyncManager, ViewSnapshot

__all__ = [
    "BackoffPolicy",
    "next_delay",
    "ResolvedThread",
    "ThreadResolver",
    "ProfileDirectory",
    "ConversationSummary",
    "build_conversation_view",
    "thread_title",
    "AssistantOrchestrator",
    "SyncManager",
    "ViewSnapshot",
]
