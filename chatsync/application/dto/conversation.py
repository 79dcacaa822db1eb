"""Conversation DTOs for API request/response."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from chatsync.domain.entities import ChatRoom, DMThread
from chatsync.services.conversation_view import ConversationSummary


class ConversationDTO(BaseModel):
    id: str
    kind: str
    title: str
    participants: list[str]
    is_assistant: bool = False
    created_at: Optional[datetime] = None

    @classmethod
    def from_summary(cls, summary: ConversationSummary) -> "ConversationDTO":
        return cls(
            id=summary.ref.id,
            kind=summary.ref.kind.value,
            title=summary.title,
            participants=list(summary.participants),
            is_assistant=summary.is_assistant,
            created_at=summary.created_at,
        )


class ConversationListDTO(BaseModel):
    conversations: list[ConversationDTO]
    total: int


class RoomDTO(BaseModel):
    id: str
    name: str
    owner_id: str
    members: list[str]
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, room: ChatRoom) -> "RoomDTO":
        return cls(
            id=room.id,
            name=room.name,
            owner_id=room.owner_id,
            members=sorted(room.members),
            created_at=room.created_at,
        )


class ThreadDTO(BaseModel):
    id: str
    participants: list[str]
    created_at: Optional[datetime] = None
    created: bool = False

    @classmethod
    def from_entity(cls, thread: DMThread, created: bool = False) -> "ThreadDTO":
        return cls(
            id=thread.id,
            participants=list(thread.participants),
            created_at=thread.created_at,
            created=created,
        )


class CreateRoomRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=ChatRoom.MAX_NAME_LENGTH)


class ResolveThreadRequest(BaseModel):
    target_ids: list[str] = Field(..., min_length=1)
