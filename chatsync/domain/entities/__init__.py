"""
ENTITIES - Business objects with identity

Pure Python dataclasses (no ORM, no Pydantic). Mapping to store documents
lives in infrastructure/persistence.
"""

from chatsync.domain.entities.identity import (
    ASSISTANT_ID,
    ASSISTANT_NAME,
    AssistantIdentity,
    HumanIdentity,
    Identity,
    default_avatar,
    is_assistant_id,
)
from chatsync.domain.entities.chat_room import ChatRoom
from chatsync.domain.entities.dm_thread import DMThread
from chatsync.domain.entities.message import Message

__all__ = [
    "ASSISTANT_ID",
    "ASSISTANT_NAME",
    "AssistantIdentity",
    "HumanIdentity",
    "Identity",
    "default_avatar",
    "is_assistant_id",
    "ChatRoom",
    "DMThread",
    "Message",
]
