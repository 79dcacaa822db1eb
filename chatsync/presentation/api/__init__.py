"""
API Routers - FastAPI endpoint definitions.
"""

from chatsync.presentation.api.session import router as session_router
from chatsync.presentation.api.profiles import router as profiles_router
from chatsync.presentation.api.conversations import router as conversations_router
from chatsync.presentation.api.assistant import router as assistant_router
from chatsync.presentation.api.sync import router as sync_router
from chatsync.presentation.api.metrics import router as metrics_router

__all__ = [
    "session_router",
    "profiles_router",
    "conversations_router",
    "assistant_router",
    "sync_router",
    "metrics_router",
]
