"""
Persistence - DocumentStore implementations and store-backed repositories.
"""

from chatsync.infrastructure.persistence.paths import CollectionPaths
from chatsync.infrastructure.persistence.memory_document_store import InMemoryDocumentStore
from chatsync.infrastructure.persistence.redis_document_store import RedisDocumentStore
from chatsync.infrastructure.persistence.store_identity_repository import (
    StoreIdentityRepository,
)
from chatsync.infrastructure.persistence.store_room_repository import StoreRoomRepository
from chatsync.infrastructure.persistence.store_thread_repository import StoreThreadRepository
from chatsync.infrastructure.persistence.store_message_repository import (
    StoreMessageRepository,
)

__all__ = [
    "CollectionPaths",
    "InMemoryDocumentStore",
    "RedisDocumentStore",
    "StoreIdentityRepository",
    "StoreRoomRepository",
    "StoreThreadRepository",
    "StoreMessageRepository",
]
