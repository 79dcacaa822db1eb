"""Update Profile Command - change display name and avatar of a human account."""

from dataclasses import dataclass
from typing import Optional

from chatsync.application.common.interfaces import Command, CommandHandler
from chatsync.domain.entities.identity import Identity
from chatsync.domain.value_objects.user_id import UserId
from chatsync.services.profile_directory import ProfileDirectory


@dataclass(frozen=True)
class UpdateProfileCommand(Command[Identity]):
    user_id: UserId
    display_name: str
    avatar_ref: Optional[str] = None


class UpdateProfileHandler(CommandHandler[Identity]):
    def __init__(self, directory: ProfileDirectory):
        self._directory = directory

    async def execute(self, command: UpdateProfileCommand) -> Identity:
        return await self._directory.update_profile(
            command.user_id.value, command.display_name, command.avatar_ref
        )
