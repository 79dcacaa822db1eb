"""
Sync WebSocket - live view stream for one signed-in client.

    client                                  server
    ──────                                  ──────
    connect /sync?token=JWT        ──────►  verify token, start SyncManager
                                   ◄──────  {"type": "view", "view": {...}}  (after every change)
    {"action": "select", "kind", "id"} ──►  switch the active conversation
    {"action": "select"}           ──────►  clear the selection
    {"action": "summarize"}        ──────►  summary of the active room
    {"action": "draft"}            ──────►  draft reply for the active thread
                                   ◄──────  {"type": "error", "detail": "..."}

Summaries and drafts run in the background; a result that arrives after the
client switched conversation is dropped.
"""

import asyncio
import json
from logging import getLogger
from typing import Any

from dishka import AsyncContainer
from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from chatsync.application.common.context import AppContext
from chatsync.application.dto.view import ViewDTO
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
from chatsync.domain.exceptions import (
    AccessDeniedError,
    EntityNotFoundError,
    UnsupportedConversationKindError,
)
from chatsync.domain.value_objects.conversation_ref import ConversationKind
from chatsync.presentation.dependencies.auth import AuthUser, InvalidTokenError, decode_token
from chatsync.services.sync_manager import SyncManager, ViewSnapshot

logger = getLogger(__name__)

router = APIRouter(tags=["sync"])


class SyncSession:
    """Binds one WebSocket to one SyncManager."""

    def __init__(self, websocket: WebSocket, container: AsyncContainer, user: AuthUser):
        self._websocket = websocket
        self._container = container
        self._user = user
        self._outbox: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        self._manager: SyncManager | None = None
        self._context: AppContext | None = None

    def _on_view(self, view: ViewSnapshot) -> None:
        self._outbox.put_nowait(
            {"type": "view", "view": ViewDTO.from_snapshot(view).model_dump(mode="json")}
        )

    def _send_error(self, detail: str) -> None:
        self._outbox.put_nowait({"type": "error", "detail": detail})

    async def run(self) -> None:
        self._context = await self._container.get(AppContext)
        self._manager = SyncManager(self._context)
        self._manager.add_listener(self._on_view)
        await self._manager.start(self._user.user_id.value)

        sender = asyncio.create_task(self._send_loop(), name="sync-sender")
        try:
            await self._receive_loop()
        finally:
            sender.cancel()
            self._manager.close()
            await asyncio.gather(sender, return_exceptions=True)

    async def _send_loop(self) -> None:
        while True:
            payload = await self._outbox.get()
            await self._websocket.send_json(payload)

    async def _receive_loop(self) -> None:
        while True:
            raw = await self._websocket.receive_text()
            try:
                data = json.loads(raw)
            except ValueError:
                data = None
            if not isinstance(data, dict):
                self._send_error("Expected a JSON object")
                continue
            action = data.get("action")
            if action == "select":
                await self._select(data.get("kind"), data.get("id"))
            elif action == "summarize":
                self._spawn_summary()
            elif action == "draft":
                self._spawn_draft()
            else:
                self._send_error(f"Unknown action: {action}")

    async def _select(self, kind: Any, conversation_id: Any) -> None:
        if not conversation_id:
            await self._manager.select(None)
            return
        try:
            async with self._container() as request_container:
                handler = await request_container.get(GetConversationHandler)
                detail = await handler.execute(
                    GetConversationQuery(
                        conversation_id=str(conversation_id),
                        kind=str(kind),
                        user_id=self._user.user_id,
                    )
                )
        except (AccessDeniedError, EntityNotFoundError, UnsupportedConversationKindError) as e:
            self._send_error(str(e))
            return
        await self._manager.select(detail.ref)

    def _spawn_summary(self) -> None:
        active = self._manager.active
        if active is None or active.kind is not ConversationKind.ROOM:
            self._send_error("Select a room to summarize")
            return
        self._context.tasks.spawn(self._summarize(active.id), name=f"summary:{active.id}")

    def _spawn_draft(self) -> None:
        active = self._manager.active
        if active is None or active.kind is not ConversationKind.THREAD:
            self._send_error("Select a thread to draft a reply")
            return
        self._context.tasks.spawn(self._draft(active.id), name=f"draft:{active.id}")

    async def _summarize(self, room_id: str) -> None:
        async with self._container() as request_container:
            handler = await request_container.get(SummarizeRoomHandler)
            result = await handler.execute(SummarizeRoomQuery(room_id=room_id))
        self._manager.accept_summary(result.conversation_id, result.text)

    async def _draft(self, thread_id: str) -> None:
        async with self._container() as request_container:
            handler = await request_container.get(DraftReplyHandler)
            result = await handler.execute(
                DraftReplyQuery(thread_id=thread_id, requester_id=self._user.user_id)
            )
        self._manager.accept_draft(result.conversation_id, result.text)


@router.websocket("/sync")
async def sync(websocket: WebSocket, token: str = ""):
    try:
        user = decode_token(token)
    except InvalidTokenError as e:
        logger.info(f"[Sync] Rejected connection: {e.detail}")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    container: AsyncContainer = websocket.app.state.dishka_container
    session = SyncSession(websocket, container, user)
    try:
        await session.run()
    except WebSocketDisconnect:
        logger.debug(f"[Sync] {user.user_id} disconnected")
