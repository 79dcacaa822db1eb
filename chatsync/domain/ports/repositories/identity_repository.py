"""
Identity Repository Port - Interface for profile persistence.
Implementation: chatsync/infrastructure/persistence/store_identity_repository.py
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional

from chatsync.domain.entities.identity import Identity
from chatsync.domain.ports.document_store import ErrorCallback, Subscription


class IdentityRepository(ABC):
    @abstractmethod
    async def get(self, user_id: str) -> Optional[Identity]: ...

    @abstractmethod
    async def list_all(self) -> list[Identity]: ...

    @abstractmethod
    async def create_if_absent(self, identity: Identity) -> tuple[Identity, bool]:
        """Returns the stored identity and whether this call created it."""

    @abstractmethod
    async def update_profile(
        self, user_id: str, display_name: str, avatar_ref: str
    ) -> Identity: ...

    @abstractmethod
    async def watch_all(
        self,
        on_snapshot: Callable[[list[Identity]], None],
        on_error: Optional[ErrorCallback] = None,
    ) -> Subscription: ...
