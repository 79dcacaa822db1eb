"""
DMThread Entity - a direct conversation between two or more identities.

Thread ids are derived from the participant set:
- two participants: the sorted ids joined with "_" (e.g. "u1_u2")
- more than two: "grp_" + a SHA-256 prefix over the sorted ids, so every
  enumeration order of the same set lands on the same document
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from chatsync.domain.entities.identity import is_assistant_id
from chatsync.domain.exceptions import InvalidParticipantsError

PAIR_SEPARATOR = "_"
GROUP_PREFIX = "grp_"


def canonical_participants(requester: str, targets: Iterable[str]) -> tuple[str, ...]:
    """Requester plus targets, deduplicated and sorted."""
    return tuple(sorted({requester, *targets}))


def pair_thread_id(user_a: str, user_b: str) -> str:
    return PAIR_SEPARATOR.join(sorted([user_a, user_b]))


def group_thread_id(participants: Iterable[str]) -> str:
    digest = hashlib.sha256("\n".join(sorted(set(participants))).encode("utf-8"))
    return GROUP_PREFIX + digest.hexdigest()[:32]


def thread_id_for(participants: tuple[str, ...]) -> str:
    if len(participants) < 2:
        raise InvalidParticipantsError(participants)
    if len(participants) == 2:
        return pair_thread_id(*participants)
    return group_thread_id(participants)


@dataclass
class DMThread:
    id: str
    participants: tuple[str, ...]
    created_at: Optional[datetime] = None

    def __post_init__(self):
        self.participants = tuple(sorted(set(self.participants)))

    @classmethod
    def create(cls, participants: Iterable[str]) -> DMThread:
        members = tuple(sorted(set(participants)))
        return cls(id=thread_id_for(members), participants=members)

    def has_participant(self, user_id: str) -> bool:
        return user_id in self.participants

    def same_participants(self, participants: Iterable[str]) -> bool:
        return set(self.participants) == set(participants)

    def other_participants(self, viewer_id: str) -> list[str]:
        return [p for p in self.participants if p != viewer_id]

    @property
    def is_pairwise(self) -> bool:
        return len(self.participants) == 2

    @property
    def is_assistant_thread(self) -> bool:
        return self.is_pairwise and any(is_assistant_id(p) for p in self.participants)
