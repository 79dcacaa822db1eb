"""
Profile Directory - the set of known identities, human and synthetic.
"""

import logging
from typing import Iterable, Optional

from chatsync.domain.entities.identity import (
    AssistantIdentity,
    HumanIdentity,
    Identity,
    is_assistant_id,
)
from chatsync.domain.exceptions import DomainValidationError, EntityNotFoundError
from chatsync.domain.ports.repositories import IdentityRepository

logger = logging.getLogger(__name__)


class ProfileDirectory:
    def __init__(self, identity_repository: IdentityRepository):
        self._identities = identity_repository

    async def ensure_human(
        self,
        user_id: str,
        display_name: Optional[str] = None,
        photo_ref: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Identity:
        """Create the profile on first sign-in; an existing profile is left untouched."""
        if is_assistant_id(user_id):
            raise DomainValidationError("The assistant id cannot sign in")
        identity, created = await self._identities.create_if_absent(
            HumanIdentity.create(user_id, display_name, photo_ref, email)
        )
        if created:
            logger.info(f"[Profiles] Created profile for {user_id}")
        return identity

    async def ensure_assistant(self) -> Identity:
        identity, created = await self._identities.create_if_absent(AssistantIdentity())
        if created:
            logger.info("[Profiles] Assistant profile created")
        return identity

    async def get(self, user_id: str) -> Optional[Identity]:
        return await self._identities.get(user_id)

    async def all(self) -> dict[str, Identity]:
        return {identity.id: identity for identity in await self._identities.list_all()}

    async def display_names(self, user_ids: Iterable[str]) -> dict[str, str]:
        profiles = await self.all()
        return {
            uid: profiles[uid].display_name for uid in set(user_ids) if uid in profiles
        }

    async def update_profile(
        self, user_id: str, display_name: str, avatar_ref: Optional[str] = None
    ) -> Identity:
        if is_assistant_id(user_id):
            raise DomainValidationError("The assistant profile cannot be edited")
        display_name = (display_name or "").strip()
        if not display_name:
            raise DomainValidationError("Display name cannot be empty")
        current = await self._identities.get(user_id)
        if current is None:
            raise EntityNotFoundError(f"No profile for {user_id}")
        updated = current.with_profile(display_name, avatar_ref)
        return await self._identities.update_profile(
            user_id, updated.display_name, updated.avatar_ref
        )
