"""
Thread Identity Resolver.

Maps (requester, targets) to the one DM thread those people share, creating
it on first use.

- 2 participants: id = sorted ids joined with "_"; O(1) get, then atomic
  create-if-absent. Both sides of a pair compute the same id, so concurrent
  first messages cannot fork the conversation.
- >2 participants: reuse any known thread with a set-equal participant list
  (covers threads created with opaque ids), otherwise create under a
  content-hash id with the same atomic create-if-absent. Concurrent creators
  of the same group therefore converge on one document.
"""

import logging
from dataclasses import dataclass
from typing import Iterable

from chatsync.domain.entities.dm_thread import (
    DMThread,
    canonical_participants,
    pair_thread_id,
)
from chatsync.domain.exceptions import InvalidParticipantsError
from chatsync.domain.ports.repositories import ThreadRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedThread:
    thread: DMThread
    created: bool


class ThreadResolver:
    def __init__(self, thread_repository: ThreadRepository):
        self._threads = thread_repository

    async def resolve(self, requester_id: str, target_ids: Iterable[str]) -> ResolvedThread:
        participants = canonical_participants(requester_id, target_ids)
        if len(participants) < 2:
            raise InvalidParticipantsError(participants)

        if len(participants) == 2:
            thread_id = pair_thread_id(*participants)
            existing = await self._threads.get(thread_id)
            if existing is not None:
                return ResolvedThread(existing, created=False)
            thread, created = await self._threads.create_if_absent(
                DMThread(id=thread_id, participants=participants)
            )
            return ResolvedThread(thread, created=created)

        for known in await self._threads.list_for_participant(requester_id):
            if known.same_participants(participants):
                logger.debug(f"[Resolver] Reusing group thread {known.id}")
                return ResolvedThread(known, created=False)

        thread, created = await self._threads.create_if_absent(DMThread.create(participants))
        return ResolvedThread(thread, created=created)
