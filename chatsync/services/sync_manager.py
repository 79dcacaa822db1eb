"""
Synchronization Manager - one per signed-in client view.

Keeps a local, read-only mirror of the store for a single user:

    identities  all profiles
    rooms       all rooms, filtered locally to the ones the user can see
    threads     threads whose participants contain the user
    messages    the active conversation only, oldest first

Every stream is held in exactly one slot. Replacing a stream cancels the old
handle before the new one is opened, and each slot carries a token so that a
callback from a superseded handle is ignored even if it fires late.
Snapshots replace local state wholesale. Stream errors are logged and counted,
and the view keeps its last good state.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional

from chatsync.application.common.context import AppContext
from chatsync.domain.entities import ChatRoom, DMThread, Identity, Message
from chatsync.domain.exceptions import SubscriptionFailure
from chatsync.domain.ports.document_store import ErrorCallback, Subscription
from chatsync.domain.value_objects.conversation_ref import ConversationKind, ConversationRef
from chatsync.observability.metrics import (
    decrement_active_subscriptions,
    increment_active_subscriptions,
    increment_subscription_error,
)
from chatsync.services.conversation_view import ConversationSummary, build_conversation_view

logger = logging.getLogger(__name__)

IDENTITIES = "identities"
ROOMS = "rooms"
THREADS = "threads"
MESSAGES = "messages"

OpenStream = Callable[[Callable, ErrorCallback], Awaitable[Subscription]]
Listener = Callable[["ViewSnapshot"], None]


@dataclass(frozen=True)
class ViewSnapshot:
    user_id: Optional[str]
    profiles: dict[str, Identity] = field(default_factory=dict)
    rooms: tuple[ChatRoom, ...] = ()
    threads: tuple[DMThread, ...] = ()
    active: Optional[ConversationRef] = None
    messages: tuple[Message, ...] = ()
    summary: Optional[str] = None
    draft: Optional[str] = None

    @property
    def conversations(self) -> list[ConversationSummary]:
        if self.user_id is None:
            return []
        return build_conversation_view(self.user_id, self.rooms, self.threads, self.profiles)


class SyncManager:
    def __init__(self, context: AppContext):
        self._identity_repo = context.identities
        self._room_repo = context.rooms
        self._thread_repo = context.threads
        self._message_repo = context.messages

        self._subs: dict[str, Subscription] = {}
        self._tokens: dict[str, int] = defaultdict(int)
        self._listeners: list[Listener] = []
        self._reset()

    def _reset(self) -> None:
        self._user_id: Optional[str] = None
        self._profiles: dict[str, Identity] = {}
        self._rooms: tuple[ChatRoom, ...] = ()
        self._threads: tuple[DMThread, ...] = ()
        self._clear_active()

    def _clear_active(self) -> None:
        self._active: Optional[ConversationRef] = None
        self._messages: tuple[Message, ...] = ()
        self._summary: Optional[str] = None
        self._draft: Optional[str] = None

    # ==================== LIFECYCLE ====================

    async def start(self, user_id: str) -> None:
        """Subscribe the per-user streams; a different user first tears everything down."""
        if self._user_id == user_id and self._subs:
            return
        if self._user_id is not None:
            logger.info(f"[Sync] Identity changed from {self._user_id} to {user_id}")
            self.stop()
        self._user_id = user_id

        await self._replace(IDENTITIES, self._identity_repo.watch_all, self._on_identities)
        await self._replace(ROOMS, self._room_repo.watch_all, self._on_rooms)
        await self._replace(
            THREADS,
            lambda deliver, fail: self._thread_repo.watch_for_participant(user_id, deliver, fail),
            self._on_threads,
        )
        self._emit()

    def stop(self) -> None:
        for stream in list(self._subs):
            self._cancel(stream)
        self._reset()

    def close(self) -> None:
        self.stop()
        self._listeners.clear()

    async def select(self, ref: Optional[ConversationRef]) -> None:
        """Make ref the active conversation; None clears the selection."""
        self._cancel(MESSAGES)
        self._clear_active()
        self._active = ref
        self._emit()
        if ref is None:
            return
        await self._replace(
            MESSAGES,
            lambda deliver, fail: self._message_repo.watch(ref, deliver, fail),
            self._on_messages,
        )

    # ==================== DERIVED RESULTS ====================

    def accept_summary(self, conversation_id: str, text: str) -> bool:
        """Store a summary unless the user has since moved to another conversation."""
        if not self._is_active(conversation_id):
            logger.debug(f"[Sync] Dropping stale summary for {conversation_id}")
            return False
        self._summary = text
        self._emit()
        return True

    def accept_draft(self, conversation_id: str, text: str) -> bool:
        if not self._is_active(conversation_id):
            logger.debug(f"[Sync] Dropping stale draft for {conversation_id}")
            return False
        self._draft = text
        self._emit()
        return True

    def _is_active(self, conversation_id: str) -> bool:
        return self._active is not None and self._active.id == conversation_id

    # ==================== VIEW ====================

    @property
    def user_id(self) -> Optional[str]:
        return self._user_id

    @property
    def active(self) -> Optional[ConversationRef]:
        return self._active

    def is_subscribed(self, stream: str) -> bool:
        sub = self._subs.get(stream)
        return sub is not None and sub.active

    def snapshot(self) -> ViewSnapshot:
        return ViewSnapshot(
            user_id=self._user_id,
            profiles=dict(self._profiles),
            rooms=self._rooms,
            threads=self._threads,
            active=self._active,
            messages=self._messages,
            summary=self._summary,
            draft=self._draft,
        )

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _emit(self) -> None:
        if not self._listeners:
            return
        view = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(view)
            except Exception:
                logger.exception("[Sync] View listener failed")

    # ==================== STREAM SLOTS ====================

    def _cancel(self, stream: str) -> int:
        self._tokens[stream] += 1
        sub = self._subs.pop(stream, None)
        if sub is not None:
            sub.cancel()
            decrement_active_subscriptions()
        return self._tokens[stream]

    async def _replace(
        self, stream: str, open_stream: OpenStream, on_snapshot: Callable[[list], None]
    ) -> None:
        token = self._cancel(stream)

        def deliver(items: list) -> None:
            if self._tokens[stream] != token:
                return
            on_snapshot(items)
            self._emit()

        def fail(error: Exception) -> None:
            if self._tokens[stream] == token:
                self._on_stream_error(stream, error)

        try:
            sub = await open_stream(deliver, fail)
        except Exception as e:
            self._on_stream_error(stream, e)
            return

        if self._tokens[stream] != token:
            # Superseded while the subscription was being opened
            sub.cancel()
            return
        self._subs[stream] = sub
        increment_active_subscriptions()

    def _on_stream_error(self, stream: str, error: Exception) -> None:
        failure = SubscriptionFailure(stream, error)
        logger.warning(f"[Sync] {failure}")
        increment_subscription_error(stream)

    # ==================== SNAPSHOT HANDLERS ====================

    def _on_identities(self, identities: list[Identity]) -> None:
        self._profiles = {identity.id: identity for identity in identities}

    def _on_rooms(self, rooms: list[ChatRoom]) -> None:
        user_id = self._user_id
        self._rooms = tuple(r for r in rooms if user_id and r.is_visible_to(user_id))

    def _on_threads(self, threads: list[DMThread]) -> None:
        self._threads = tuple(threads)
        active = self._active
        if active is None or active.kind is not ConversationKind.THREAD:
            return
        if not any(t.id == active.id for t in self._threads):
            logger.info(f"[Sync] Active thread {active.id} is gone, clearing selection")
            self._cancel(MESSAGES)
            self._clear_active()

    def _on_messages(self, messages: list[Message]) -> None:
        self._messages = tuple(messages)
