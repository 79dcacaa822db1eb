"""Profiles API Router - the directory of known identities."""

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, Depends, status

from chatsync.application.commands.profiles import UpdateProfileCommand, UpdateProfileHandler
from chatsync.application.dto.profile import ProfileDTO, UpdateProfileRequest
from chatsync.presentation.dependencies.auth import AuthUser, get_current_user
from chatsync.services.profile_directory import ProfileDirectory

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("", response_model=list[ProfileDTO], status_code=status.HTTP_200_OK)
@inject
async def list_profiles(
    directory: FromDishka[ProfileDirectory],
    current_user: AuthUser = Depends(get_current_user),
):
    profiles = await directory.all()
    return [ProfileDTO.from_entity(p) for p in profiles.values()]


@router.patch("/me", response_model=ProfileDTO, status_code=status.HTTP_200_OK)
@inject
async def update_my_profile(
    request: UpdateProfileRequest,
    handler: FromDishka[UpdateProfileHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """Change the caller's display name and, optionally, avatar."""
    updated = await handler.execute(
        UpdateProfileCommand(
            user_id=current_user.user_id,
            display_name=request.display_name,
            avatar_ref=request.avatar_ref,
        )
    )
    return ProfileDTO.from_entity(updated)
