"""Sync stream DTO - one full client view, pushed after every change."""

from typing import Optional

from pydantic import BaseModel

from chatsync.application.dto.chat import MessageDTO
from chatsync.application.dto.conversation import ConversationDTO
from chatsync.application.dto.profile import ProfileDTO
from chatsync.services.sync_manager import ViewSnapshot


class ActiveConversationDTO(BaseModel):
    id: str
    kind: str


class ViewDTO(BaseModel):
    user_id: Optional[str] = None
    profiles: list[ProfileDTO]
    conversations: list[ConversationDTO]
    active: Optional[ActiveConversationDTO] = None
    messages: list[MessageDTO]
    summary: Optional[str] = None
    draft: Optional[str] = None

    @classmethod
    def from_snapshot(cls, view: ViewSnapshot) -> "ViewDTO":
        return cls(
            user_id=view.user_id,
            profiles=[ProfileDTO.from_entity(p) for p in view.profiles.values()],
            conversations=[ConversationDTO.from_summary(c) for c in view.conversations],
            active=(
                ActiveConversationDTO(id=view.active.id, kind=view.active.kind.value)
                if view.active
                else None
            ),
            messages=[MessageDTO.from_entity(m) for m in view.messages],
            summary=view.summary,
            draft=view.draft,
        )
