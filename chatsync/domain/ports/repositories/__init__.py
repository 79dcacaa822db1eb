"""
REPOSITORY PORTS - Entity persistence interfaces

Each repository port:
- Is an abstract base class (ABC)
- Defines methods the core needs
- Does NOT specify the store (memory, Redis, ...)
"""

from chatsync.domain.ports.repositories.identity_repository import IdentityRepository
from chatsync.domain.ports.repositories.room_repository import RoomRepository
from chatsync.domain.ports.repositories.thread_repository import ThreadRepository
from chatsync.domain.ports.repositories.message_repository import MessageRepository

__all__ = [
    "IdentityRepository",
    "RoomRepository",
    "ThreadRepository",
    "MessageRepository",
]
