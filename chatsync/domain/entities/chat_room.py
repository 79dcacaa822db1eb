"""
ChatRoom Entity - a named, owned, multi-member conversation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar, Optional

from chatsync.domain.exceptions import DomainValidationError


@dataclass
class ChatRoom:
    id: str
    name: str
    owner_id: str
    members: frozenset[str] = field(default_factory=frozenset)
    created_at: Optional[datetime] = None

    MAX_NAME_LENGTH: ClassVar[int] = 50

    def __post_init__(self):
        self.members = frozenset(self.members)

    @classmethod
    def create(cls, room_id: str, name: str, owner_id: str) -> ChatRoom:
        name = (name or "").strip()
        if not name:
            raise DomainValidationError("Room name cannot be empty")
        if len(name) > cls.MAX_NAME_LENGTH:
            raise DomainValidationError(
                f"Room name cannot exceed {cls.MAX_NAME_LENGTH} characters"
            )
        return cls(id=room_id, name=name, owner_id=owner_id, members=frozenset({owner_id}))

    def is_visible_to(self, user_id: str) -> bool:
        return user_id in self.members or user_id == self.owner_id

    @property
    def participants(self) -> tuple[str, ...]:
        return tuple(sorted(self.members | {self.owner_id}))
