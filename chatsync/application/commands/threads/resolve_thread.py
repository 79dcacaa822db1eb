"""
Resolve Thread Command - find or create the DM thread for a set of people.

Maps to POST /conversations/threads. The requester is always a participant.
"""

from dataclasses import dataclass

from chatsync.application.common.interfaces import Command, CommandHandler
from chatsync.domain.value_objects.user_id import UserId
from chatsync.services.thread_resolver import ResolvedThread, ThreadResolver


@dataclass(frozen=True)
class ResolveThreadCommand(Command[ResolvedThread]):
    requester_id: UserId
    target_ids: tuple[str, ...]


class ResolveThreadHandler(CommandHandler[ResolvedThread]):
    def __init__(self, resolver: ThreadResolver):
        self._resolver = resolver

    async def execute(self, command: ResolveThreadCommand) -> ResolvedThread:
        return await self._resolver.resolve(command.requester_id.value, command.target_ids)
