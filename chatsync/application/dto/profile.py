"""Profile DTOs for API request/response."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from chatsync.domain.entities.identity import Identity


class ProfileDTO(BaseModel):
    id: str
    display_name: str
    avatar_ref: str
    email: Optional[str] = None
    is_assistant: bool = False
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, identity: Identity) -> "ProfileDTO":
        return cls(
            id=identity.id,
            display_name=identity.display_name,
            avatar_ref=identity.avatar_ref,
            email=identity.email,
            is_assistant=identity.is_assistant,
            created_at=identity.created_at,
        )


class UpdateProfileRequest(BaseModel):
    display_name: str = Field(..., min_length=1)
    avatar_ref: Optional[str] = None


class SessionDTO(BaseModel):
    profile: ProfileDTO
    assistant_thread_id: str
