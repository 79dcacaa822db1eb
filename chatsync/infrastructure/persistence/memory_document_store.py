"""
In-memory DocumentStore.

Used by the test-suite and for single-process local runs (STORE_BACKEND=memory).
All mutations happen without suspending, so create() is atomic with respect
to other tasks on the same event loop. Subscribers are notified synchronously
after each write with a full, freshly-queried snapshot.
"""

import copy
import logging
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Sequence
from uuid import uuid4

from chatsync.domain.exceptions import DocumentExistsError, EntityNotFoundError
from chatsync.domain.ports.document_store import (
    SERVER_TIMESTAMP,
    Document,
    DocumentStore,
    ErrorCallback,
    Filter,
    OrderBy,
    SnapshotCallback,
    Subscription,
    apply_query,
)

logger = logging.getLogger(__name__)


def split_path(path: str) -> tuple[str, str]:
    collection, _, doc_id = path.rstrip("/").rpartition("/")
    if not collection or not doc_id:
        raise ValueError(f"Not a document path: {path!r}")
    return collection, doc_id


class InMemorySubscription(Subscription):
    def __init__(
        self,
        store: "InMemoryDocumentStore",
        collection: str,
        on_snapshot: SnapshotCallback,
        on_error: Optional[ErrorCallback],
        filters: Sequence[Filter],
        order_by: Optional[OrderBy],
    ):
        self._store = store
        self.collection = collection
        self._on_snapshot = on_snapshot
        self._on_error = on_error
        self._filters = tuple(filters)
        self._order_by = order_by
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if self._active:
            self._active = False
            self._store._detach(self)

    def _deliver(self, docs: list[Document]) -> None:
        if not self._active:
            return
        snapshot = apply_query(docs, self._filters, self._order_by)
        try:
            self._on_snapshot(snapshot)
        except Exception as e:
            logger.exception(f"[MemoryStore] Snapshot callback failed on {self.collection}")
            self._fail(e)

    def _fail(self, error: Exception) -> None:
        if self._active and self._on_error is not None:
            self._on_error(error)


class InMemoryDocumentStore(DocumentStore):
    def __init__(self, clock: Callable[[], datetime] | None = None):
        self._collections: dict[str, dict[str, Document]] = defaultdict(dict)
        self._subscriptions: dict[str, list[InMemorySubscription]] = defaultdict(list)
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._last_timestamp: Optional[datetime] = None

    # ==================== HELPERS ====================

    def _next_timestamp(self) -> datetime:
        ts = self._clock()
        if self._last_timestamp is not None and ts <= self._last_timestamp:
            ts = self._last_timestamp + timedelta(microseconds=1)
        self._last_timestamp = ts
        return ts

    def _resolve(self, doc: Document) -> Document:
        resolved = {}
        timestamp = None
        for key, value in doc.items():
            if key == "id":
                continue
            if value is SERVER_TIMESTAMP:
                if timestamp is None:
                    timestamp = self._next_timestamp()
                value = timestamp
            resolved[key] = copy.deepcopy(value)
        return resolved

    @staticmethod
    def _with_id(doc_id: str, doc: Document) -> Document:
        return {"id": doc_id, **copy.deepcopy(doc)}

    def _snapshot(self, collection: str) -> list[Document]:
        return [self._with_id(i, d) for i, d in self._collections[collection].items()]

    def _notify(self, collection: str) -> None:
        subscribers = list(self._subscriptions.get(collection, ()))
        if not subscribers:
            return
        docs = self._snapshot(collection)
        for sub in subscribers:
            sub._deliver(docs)

    def _detach(self, sub: InMemorySubscription) -> None:
        subs = self._subscriptions.get(sub.collection, [])
        if sub in subs:
            subs.remove(sub)

    # ==================== DOCUMENT STORE ====================

    def new_id(self) -> str:
        return uuid4().hex[:20]

    async def get(self, path: str) -> Optional[Document]:
        collection, doc_id = split_path(path)
        doc = self._collections[collection].get(doc_id)
        return self._with_id(doc_id, doc) if doc is not None else None

    async def create(self, path: str, doc: Document) -> Document:
        collection, doc_id = split_path(path)
        if doc_id in self._collections[collection]:
            raise DocumentExistsError(path)
        self._collections[collection][doc_id] = self._resolve(doc)
        self._notify(collection)
        return self._with_id(doc_id, self._collections[collection][doc_id])

    async def set(self, path: str, doc: Document) -> Document:
        collection, doc_id = split_path(path)
        self._collections[collection][doc_id] = self._resolve(doc)
        self._notify(collection)
        return self._with_id(doc_id, self._collections[collection][doc_id])

    async def update(self, path: str, partial: Document) -> Document:
        collection, doc_id = split_path(path)
        current = self._collections[collection].get(doc_id)
        if current is None:
            raise EntityNotFoundError(f"No document at {path}")
        current.update(self._resolve(partial))
        self._notify(collection)
        return self._with_id(doc_id, current)

    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[OrderBy] = None,
        limit: Optional[int] = None,
    ) -> list[Document]:
        return apply_query(self._snapshot(collection), filters, order_by, limit)

    async def subscribe(
        self,
        collection: str,
        on_snapshot: SnapshotCallback,
        on_error: Optional[ErrorCallback] = None,
        filters: Sequence[Filter] = (),
        order_by: Optional[OrderBy] = None,
    ) -> Subscription:
        sub = InMemorySubscription(self, collection, on_snapshot, on_error, filters, order_by)
        self._subscriptions[collection].append(sub)
        sub._deliver(self._snapshot(collection))
        return sub

    # ==================== TEST / OPS HOOKS ====================

    def emit_error(self, collection: str, error: Exception) -> None:
        """Report a stream failure to every live subscriber of a collection."""
        for sub in list(self._subscriptions.get(collection, ())):
            sub._fail(error)

    def subscriber_count(self, collection: str) -> int:
        return len(self._subscriptions.get(collection, ()))
