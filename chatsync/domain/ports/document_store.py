"""
DocumentStore Port - the persistent record store, seen as collections of
JSON-like documents addressed by slash-separated paths.

Implementations:
- chatsync/infrastructure/persistence/memory_document_store.py
- chatsync/infrastructure/persistence/redis_document_store.py

Contract:
- create() is atomic create-if-absent and raises DocumentExistsError
- SERVER_TIMESTAMP anywhere in a written document is replaced by the store
  clock; store timestamps are strictly increasing per store
- query()/subscribe() results are lists of dicts carrying their "id"
- subscribe() delivers the current snapshot, then a full snapshot after every
  change to the collection; cancel() is immediate and idempotent
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Literal, Optional, Sequence

Document = dict[str, Any]
SnapshotCallback = Callable[[list[Document]], None]
ErrorCallback = Callable[[Exception], None]


class _ServerTimestamp:
    """Sentinel replaced by the store clock on write."""

    _instance: Optional["_ServerTimestamp"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


@dataclass(frozen=True)
class Filter:
    field: str
    op: Literal["==", "array_contains"]
    value: Any

    def matches(self, doc: Document) -> bool:
        current = doc.get(self.field)
        if self.op == "==":
            return current == self.value
        if self.op == "array_contains":
            return isinstance(current, (list, tuple)) and self.value in current
        raise ValueError(f"Unsupported filter op: {self.op}")


@dataclass(frozen=True)
class OrderBy:
    field: str
    descending: bool = False


def _sort_key(doc: Document, field: str) -> tuple:
    # Documents missing the field sort first, like pending server timestamps
    value = doc.get(field)
    return (0, 0) if value is None else (1, value)


def apply_query(
    docs: list[Document],
    filters: Sequence[Filter] = (),
    order_by: Optional[OrderBy] = None,
    limit: Optional[int] = None,
) -> list[Document]:
    """Filter, order and cut a list of documents the way every store must."""
    result = [d for d in docs if all(f.matches(d) for f in filters)]
    if order_by is not None:
        result.sort(key=lambda d: _sort_key(d, order_by.field), reverse=order_by.descending)
    if limit is not None:
        result = result[:limit]
    return result


class Subscription(ABC):
    """Cancellable handle for one live query."""

    @abstractmethod
    def cancel(self) -> None: ...

    @property
    @abstractmethod
    def active(self) -> bool: ...


class DocumentStore(ABC):
    @abstractmethod
    def new_id(self) -> str:
        """Opaque, store-assigned document id."""

    @abstractmethod
    async def get(self, path: str) -> Optional[Document]: ...

    @abstractmethod
    async def create(self, path: str, doc: Document) -> Document: ...

    @abstractmethod
    async def set(self, path: str, doc: Document) -> Document: ...

    @abstractmethod
    async def update(self, path: str, partial: Document) -> Document: ...

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[OrderBy] = None,
        limit: Optional[int] = None,
    ) -> list[Document]: ...

    @abstractmethod
    async def subscribe(
        self,
        collection: str,
        on_snapshot: SnapshotCallback,
        on_error: Optional[ErrorCallback] = None,
        filters: Sequence[Filter] = (),
        order_by: Optional[OrderBy] = None,
    ) -> Subscription: ...

    async def close(self) -> None:
        """Release connections; no-op for in-process stores."""
