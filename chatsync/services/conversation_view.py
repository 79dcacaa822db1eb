"""
ConversationView - the client-visible list of rooms and threads with titles.

Derived, never persisted. Title rules:
- room: its name
- thread with one other participant: the assistant's name, else the other
  person's display name ("Direct Message" while the profile is unknown)
- group thread: up to three other names ("User" when unknown), then " +N"
The viewer's assistant thread sorts first; everything else by creation time.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Mapping, Optional

from chatsync.domain.entities import (
    ASSISTANT_NAME,
    ChatRoom,
    DMThread,
    Identity,
    is_assistant_id,
)
from chatsync.domain.value_objects.conversation_ref import ConversationRef

GROUP_TITLE_NAMES = 3

_MIN_TIME = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class ConversationSummary:
    ref: ConversationRef
    title: str
    participants: tuple[str, ...]
    is_assistant: bool = False
    created_at: Optional[datetime] = None


def thread_title(thread: DMThread, viewer_id: str, profiles: Mapping[str, Identity]) -> str:
    others = thread.other_participants(viewer_id)
    if len(others) == 1:
        other = others[0]
        if is_assistant_id(other):
            return ASSISTANT_NAME
        profile = profiles.get(other)
        return profile.display_name if profile else "Direct Message"
    names = [
        profiles[uid].display_name if uid in profiles else "User"
        for uid in others[:GROUP_TITLE_NAMES]
    ]
    extra = len(others) - GROUP_TITLE_NAMES
    return ", ".join(names) + (f" +{extra}" if extra > 0 else "")


def build_conversation_view(
    viewer_id: str,
    rooms: Iterable[ChatRoom],
    threads: Iterable[DMThread],
    profiles: Mapping[str, Identity],
) -> list[ConversationSummary]:
    items = [
        ConversationSummary(
            ref=ConversationRef.room(room.id),
            title=room.name,
            participants=room.participants,
            created_at=room.created_at,
        )
        for room in rooms
        if room.is_visible_to(viewer_id)
    ]
    items.extend(
        ConversationSummary(
            ref=ConversationRef.thread(thread.id),
            title=thread_title(thread, viewer_id, profiles),
            participants=thread.participants,
            is_assistant=thread.is_assistant_thread,
            created_at=thread.created_at,
        )
        for thread in threads
        if thread.has_participant(viewer_id)
    )
    items.sort(key=lambda c: (not c.is_assistant, c.created_at or _MIN_TIME))
    return items
