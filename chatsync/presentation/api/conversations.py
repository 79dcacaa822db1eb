"""
Conversations API Router - rooms, threads and their messages.

Thin layer: only handles HTTP concerns (request/response). Domain exceptions
propagate to the handlers registered in fastapi_app.py.

Flow:
  HTTP Request → Router → Command/Query → Handler → Repository → DocumentStore
"""

from logging import getLogger

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, Depends, status

from chatsync.application.commands.chat import SendMessageCommand, SendMessageHandler
from chatsync.application.commands.rooms import CreateRoomCommand, CreateRoomHandler
from chatsync.application.commands.threads import ResolveThreadCommand, ResolveThreadHandler
from chatsync.application.dto.chat import MessageDTO, SendMessageRequest
from chatsync.application.dto.conversation import (
    ConversationDTO,
    ConversationListDTO,
    CreateRoomRequest,
    ResolveThreadRequest,
    RoomDTO,
    ThreadDTO,
)
from chatsync.application.queries.chat import GetMessagesHandler, GetMessagesQuery
from chatsync.application.queries.conversations import (
    GetConversationHandler,
    GetConversationQuery,
    ListConversationsHandler,
    ListConversationsQuery,
)
from chatsync.presentation.dependencies.auth import AuthUser, get_current_user

logger = getLogger(__name__)

router = APIRouter(prefix="/conversations", tags=["conversations"])


@router.get("", response_model=ConversationListDTO, status_code=status.HTTP_200_OK)
@inject
async def list_conversations(
    handler: FromDishka[ListConversationsHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """Rooms and threads visible to the caller, assistant thread first."""
    summaries = await handler.execute(ListConversationsQuery(user_id=current_user.user_id))
    return ConversationListDTO(
        conversations=[ConversationDTO.from_summary(s) for s in summaries],
        total=len(summaries),
    )


@router.post("/rooms", response_model=RoomDTO, status_code=status.HTTP_201_CREATED)
@inject
async def create_room(
    request: CreateRoomRequest,
    handler: FromDishka[CreateRoomHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    room = await handler.execute(
        CreateRoomCommand(owner_id=current_user.user_id, name=request.name)
    )
    return RoomDTO.from_entity(room)


@router.post("/threads", response_model=ThreadDTO, status_code=status.HTTP_200_OK)
@inject
async def resolve_thread(
    request: ResolveThreadRequest,
    handler: FromDishka[ResolveThreadHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """Find or create the thread shared by the caller and target_ids."""
    resolved = await handler.execute(
        ResolveThreadCommand(
            requester_id=current_user.user_id,
            target_ids=tuple(request.target_ids),
        )
    )
    return ThreadDTO.from_entity(resolved.thread, created=resolved.created)


@router.get(
    "/{kind}/{conversation_id}/messages",
    response_model=list[MessageDTO],
    status_code=status.HTTP_200_OK,
)
@inject
async def get_messages(
    kind: str,
    conversation_id: str,
    handler: FromDishka[GetMessagesHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    messages = await handler.execute(
        GetMessagesQuery(
            conversation_id=conversation_id,
            kind=kind,
            user_id=current_user.user_id,
        )
    )
    return [MessageDTO.from_entity(m) for m in messages]


@router.post(
    "/{kind}/{conversation_id}/messages",
    response_model=MessageDTO,
    status_code=status.HTTP_201_CREATED,
)
@inject
async def send_message(
    kind: str,
    conversation_id: str,
    request: SendMessageRequest,
    conversation_handler: FromDishka[GetConversationHandler],
    handler: FromDishka[SendMessageHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """
    Append a message. Returns as soon as the message is stored; an assistant
    reply, if any, arrives later through the sync stream.
    """
    detail = await conversation_handler.execute(
        GetConversationQuery(
            conversation_id=conversation_id,
            kind=kind,
            user_id=current_user.user_id,
        )
    )
    message = await handler.execute(
        SendMessageCommand(
            conversation_id=detail.ref.id,
            kind=detail.ref.kind.value,
            text=request.text,
            participants=detail.participants,
            sender_id=current_user.user_id,
        )
    )
    return MessageDTO.from_entity(message)
