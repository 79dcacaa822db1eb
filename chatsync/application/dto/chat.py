"""Chat DTOs for API request/response."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from chatsync.domain.entities.message import Message


class MessageDTO(BaseModel):
    """DTO for message data returned to clients."""

    id: str
    conversation_id: str
    kind: str
    text: str
    sender_id: str
    timestamp: Optional[datetime] = None

    @classmethod
    def from_entity(cls, message: Message) -> "MessageDTO":
        return cls(
            id=message.id,
            conversation_id=message.conversation.id,
            kind=message.conversation.kind.value,
            text=message.text,
            sender_id=message.sender_id,
            timestamp=message.timestamp,
        )


class SendMessageRequest(BaseModel):
    text: str = Field(..., min_length=1)


class AssistantTextDTO(BaseModel):
    """Summary or draft, tagged with the conversation it was computed for."""

    conversation_id: str
    text: str
