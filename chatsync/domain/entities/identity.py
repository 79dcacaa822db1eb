"""
Identity Entities - human accounts and the single synthetic assistant.

Identity is a tagged variant: HumanIdentity | AssistantIdentity. Flows that only
make sense for human accounts (profile edits, drafting replies on someone's
behalf) check the variant instead of comparing ids by hand.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import ClassVar, Optional, Union

ASSISTANT_ID = "ai_assistant_gemini"
ASSISTANT_NAME = "CJ's Assistant"
ASSISTANT_AVATAR = "https://placehold.co/150x150/06b6d4/ffffff?text=AI"
ASSISTANT_EMAIL = "assistant@cjc.ai"


def default_avatar(display_name: Optional[str]) -> str:
    """Deterministic coloured placeholder keyed on the first character."""
    seed = ord(display_name[0]) * 10 if display_name else 0
    color = f"{(seed * 123456) % 0xFFFFFF:06x}"
    initial = display_name[0].upper() if display_name else "?"
    return f"https://placehold.co/150x150/{color}/ffffff?text={initial}"


def is_assistant_id(user_id: Optional[str]) -> bool:
    return user_id == ASSISTANT_ID


@dataclass(frozen=True)
class HumanIdentity:
    id: str
    display_name: str
    avatar_ref: str
    email: Optional[str] = None
    created_at: Optional[datetime] = None

    is_assistant: ClassVar[bool] = False

    def __post_init__(self):
        if is_assistant_id(self.id):
            raise ValueError("The assistant id is reserved")

    @classmethod
    def create(
        cls,
        user_id: str,
        display_name: Optional[str] = None,
        avatar_ref: Optional[str] = None,
        email: Optional[str] = None,
    ) -> HumanIdentity:
        """New profile from identity-provider claims, filling in defaults."""
        name = display_name or f"User_{user_id[:4]}"
        return cls(
            id=user_id,
            display_name=name,
            avatar_ref=avatar_ref or default_avatar(display_name or user_id),
            email=email or None,
        )

    def with_profile(self, display_name: str, avatar_ref: Optional[str]) -> HumanIdentity:
        return replace(
            self,
            display_name=display_name,
            avatar_ref=avatar_ref or self.avatar_ref,
        )


@dataclass(frozen=True)
class AssistantIdentity:
    id: str = ASSISTANT_ID
    display_name: str = ASSISTANT_NAME
    avatar_ref: str = ASSISTANT_AVATAR
    email: Optional[str] = ASSISTANT_EMAIL
    created_at: Optional[datetime] = None

    is_assistant: ClassVar[bool] = True


Identity = Union[HumanIdentity, AssistantIdentity]
