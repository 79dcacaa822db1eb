"""
ConversationRef Value Object - addresses a room or a DM thread.
"""

from dataclasses import dataclass
from enum import Enum

from chatsync.domain.exceptions.unsupported_conversation_kind import (
    UnsupportedConversationKindError,
)


class ConversationKind(str, Enum):
    ROOM = "room"
    THREAD = "thread"

    @classmethod
    def parse(cls, raw: "str | ConversationKind") -> "ConversationKind":
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError as e:
            raise UnsupportedConversationKindError(str(raw)) from e


@dataclass(frozen=True)
class ConversationRef:
    id: str
    kind: ConversationKind

    def __post_init__(self):
        if not self.id:
            raise ValueError("Conversation id cannot be empty")
        if not isinstance(self.kind, ConversationKind):
            raise UnsupportedConversationKindError(str(self.kind))

    @classmethod
    def room(cls, room_id: str) -> "ConversationRef":
        return cls(id=room_id, kind=ConversationKind.ROOM)

    @classmethod
    def thread(cls, thread_id: str) -> "ConversationRef":
        return cls(id=thread_id, kind=ConversationKind.THREAD)

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.id}"
