"""
Store-backed Identity Repository.

Document shape (users collection, keyed by user id):
    {displayName, photoURL, email, isAI?, createdAt}
"""

import logging
from typing import Callable, Optional

from chatsync.domain.entities.identity import (
    AssistantIdentity,
    HumanIdentity,
    Identity,
    is_assistant_id,
)
from chatsync.domain.exceptions import DocumentExistsError, DomainValidationError
from chatsync.domain.ports.document_store import (
    SERVER_TIMESTAMP,
    Document,
    DocumentStore,
    ErrorCallback,
    Subscription,
)
from chatsync.domain.ports.repositories import IdentityRepository
from chatsync.infrastructure.persistence.paths import CollectionPaths

logger = logging.getLogger(__name__)


class StoreIdentityRepository(IdentityRepository):
    def __init__(self, store: DocumentStore, paths: CollectionPaths):
        self._store = store
        self._paths = paths

    def _to_entity(self, doc: Document) -> Identity:
        if doc.get("isAI") or is_assistant_id(doc["id"]):
            return AssistantIdentity(created_at=doc.get("createdAt"))
        return HumanIdentity(
            id=doc["id"],
            display_name=doc.get("displayName") or f"User_{doc['id'][:4]}",
            avatar_ref=doc.get("photoURL") or "",
            email=doc.get("email"),
            created_at=doc.get("createdAt"),
        )

    @staticmethod
    def _to_document(identity: Identity) -> Document:
        doc = {
            "displayName": identity.display_name,
            "photoURL": identity.avatar_ref,
            "email": identity.email,
            "createdAt": SERVER_TIMESTAMP,
        }
        if identity.is_assistant:
            doc["isAI"] = True
        return doc

    async def get(self, user_id: str) -> Optional[Identity]:
        doc = await self._store.get(self._paths.user(user_id))
        return self._to_entity(doc) if doc else None

    async def list_all(self) -> list[Identity]:
        docs = await self._store.query(self._paths.users)
        return [self._to_entity(d) for d in docs]

    async def create_if_absent(self, identity: Identity) -> tuple[Identity, bool]:
        path = self._paths.user(identity.id)
        try:
            doc = await self._store.create(path, self._to_document(identity))
            return self._to_entity(doc), True
        except DocumentExistsError:
            existing = await self._store.get(path)
            return self._to_entity(existing), False

    async def update_profile(
        self, user_id: str, display_name: str, avatar_ref: str
    ) -> Identity:
        if is_assistant_id(user_id):
            raise DomainValidationError("The assistant profile cannot be edited")
        doc = await self._store.update(
            self._paths.user(user_id),
            {"displayName": display_name, "photoURL": avatar_ref},
        )
        return self._to_entity(doc)

    async def watch_all(
        self,
        on_snapshot: Callable[[list[Identity]], None],
        on_error: Optional[ErrorCallback] = None,
    ) -> Subscription:
        return await self._store.subscribe(
            self._paths.users,
            lambda docs: on_snapshot([self._to_entity(d) for d in docs]),
            on_error,
        )
