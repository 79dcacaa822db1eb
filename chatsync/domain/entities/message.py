"""
Message Entity - a single append-only message in a room or thread.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from chatsync.domain.entities.identity import is_assistant_id
from chatsync.domain.value_objects.conversation_ref import ConversationRef


@dataclass
class Message:
    id: str
    conversation: ConversationRef
    text: str
    sender_id: str
    # Assigned by the store at write time; None only before the write lands
    timestamp: Optional[datetime] = None

    @property
    def is_from_assistant(self) -> bool:
        return is_assistant_id(self.sender_id)
