"""
SignIn Command - first contact of an authenticated user with the service.

Steps:
1. Create the user's profile if it does not exist (claims fill the defaults)
2. Make sure the assistant profile exists
3. Make sure the user's DM thread with the assistant exists

Idempotent: signing in again changes nothing.
"""

from dataclasses import dataclass
from typing import Optional

from chatsync.application.common.interfaces import Command, CommandHandler
from chatsync.domain.entities.dm_thread import DMThread
from chatsync.domain.entities.identity import ASSISTANT_ID, Identity
from chatsync.domain.value_objects.user_id import UserId
from chatsync.services.profile_directory import ProfileDirectory
from chatsync.services.thread_resolver import ThreadResolver


@dataclass
class SignInResult:
    profile: Identity
    assistant_thread: DMThread


@dataclass(frozen=True)
class SignInCommand(Command[SignInResult]):
    user_id: UserId
    display_name: Optional[str] = None
    photo_ref: Optional[str] = None
    email: Optional[str] = None


class SignInHandler(CommandHandler[SignInResult]):
    def __init__(self, directory: ProfileDirectory, resolver: ThreadResolver):
        self._directory = directory
        self._resolver = resolver

    async def execute(self, command: SignInCommand) -> SignInResult:
        profile = await self._directory.ensure_human(
            command.user_id.value,
            display_name=command.display_name,
            photo_ref=command.photo_ref,
            email=command.email,
        )
        await self._directory.ensure_assistant()
        resolved = await self._resolver.resolve(command.user_id.value, [ASSISTANT_ID])
        return SignInResult(profile=profile, assistant_thread=resolved.thread)
