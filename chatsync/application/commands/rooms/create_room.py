"""Create Room Command - a named room owned by its creator."""

import logging
from dataclasses import dataclass

from chatsync.application.common.interfaces import Command, CommandHandler
from chatsync.domain.entities.chat_room import ChatRoom
from chatsync.domain.ports.repositories import RoomRepository
from chatsync.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreateRoomCommand(Command[ChatRoom]):
    owner_id: UserId
    name: str


class CreateRoomHandler(CommandHandler[ChatRoom]):
    def __init__(self, room_repository: RoomRepository):
        self._rooms = room_repository

    async def execute(self, command: CreateRoomCommand) -> ChatRoom:
        room = ChatRoom.create(self._rooms.new_id(), command.name, command.owner_id.value)
        created = await self._rooms.create(room)
        logger.info(f"[Rooms] {command.owner_id} created room {created.id}")
        return created
