"""
Session API Router - sign-in bootstrap.

Called once after the client obtains a token: creates the caller's profile
from the token claims (first time only), the assistant profile and the
caller's assistant thread.
"""

from logging import getLogger

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, Depends, status

from chatsync.application.commands.profiles import SignInCommand, SignInHandler
from chatsync.application.dto.profile import ProfileDTO, SessionDTO
from chatsync.presentation.dependencies.auth import AuthUser, get_current_user

logger = getLogger(__name__)

router = APIRouter(prefix="/session", tags=["session"])


@router.post("", response_model=SessionDTO, status_code=status.HTTP_200_OK)
@inject
async def sign_in(
    handler: FromDishka[SignInHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    result = await handler.execute(
        SignInCommand(
            user_id=current_user.user_id,
            display_name=current_user.display_name,
            photo_ref=current_user.photo_ref,
            email=current_user.email,
        )
    )
    logger.info(f"[Session] {current_user.user_id} signed in")
    return SessionDTO(
        profile=ProfileDTO.from_entity(result.profile),
        assistant_thread_id=result.assistant_thread.id,
    )
