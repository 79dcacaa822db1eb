"""
VALUE OBJECTS - Immutable domain types

Each value object:
- Has no identity (compared by value, not by ID)
- Is immutable (frozen dataclass)
- Validates itself on creation
"""

from chatsync.domain.value_objects.user_id import UserId
from chatsync.domain.value_objects.conversation_ref import (
    ConversationKind,
    ConversationRef,
)

__all__ = [
    "UserId",
    "ConversationKind",
    "ConversationRef",
]
