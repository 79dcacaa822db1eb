"""
Assistant API Router - on-demand summary and reply drafting.

Both endpoints are read-only and return their result tagged with the
conversation id; nothing is written to the conversation.
"""

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, Depends, status

from chatsync.application.dto.chat import AssistantTextDTO
from chatsync.application.queries.chat import (
    DraftReplyHandler,
    DraftReplyQuery,
    SummarizeRoomHandler,
    SummarizeRoomQuery,
)
from chatsync.application.queries.conversations import (
    GetConversationHandler,
    GetConversationQuery,
)
from chatsync.domain.value_objects.conversation_ref import ConversationKind
from chatsync.presentation.dependencies.auth import AuthUser, get_current_user

router = APIRouter(prefix="/assistant", tags=["assistant"])


@router.post(
    "/rooms/{room_id}/summary",
    response_model=AssistantTextDTO,
    status_code=status.HTTP_200_OK,
)
@inject
async def summarize_room(
    room_id: str,
    conversation_handler: FromDishka[GetConversationHandler],
    handler: FromDishka[SummarizeRoomHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    await conversation_handler.execute(
        GetConversationQuery(
            conversation_id=room_id,
            kind=ConversationKind.ROOM.value,
            user_id=current_user.user_id,
        )
    )
    result = await handler.execute(SummarizeRoomQuery(room_id=room_id))
    return AssistantTextDTO(conversation_id=result.conversation_id, text=result.text)


@router.post(
    "/threads/{thread_id}/draft",
    response_model=AssistantTextDTO,
    status_code=status.HTTP_200_OK,
)
@inject
async def draft_reply(
    thread_id: str,
    conversation_handler: FromDishka[GetConversationHandler],
    handler: FromDishka[DraftReplyHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    await conversation_handler.execute(
        GetConversationQuery(
            conversation_id=thread_id,
            kind=ConversationKind.THREAD.value,
            user_id=current_user.user_id,
        )
    )
    result = await handler.execute(
        DraftReplyQuery(thread_id=thread_id, requester_id=current_user.user_id)
    )
    return AssistantTextDTO(conversation_id=result.conversation_id, text=result.text)
