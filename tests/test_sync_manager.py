"""Live view synchronization: stream replacement, invalidation, stale results."""

import pytest

from chatsync.domain.entities import ChatRoom
from chatsync.domain.value_objects.conversation_ref import ConversationRef
from chatsync.services.profile_directory import ProfileDirectory
from chatsync.services.sync_manager import IDENTITIES, MESSAGES, ROOMS, THREADS, SyncManager
from chatsync.services.thread_resolver import ThreadResolver


async def seed(ctx):
    directory = ProfileDirectory(ctx.identities)
    await directory.ensure_human("alice", "Alice")
    await directory.ensure_human("bob", "Bob")
    await ctx.rooms.create(ChatRoom.create("room-a", "Alice's room", "alice"))
    await ctx.rooms.create(ChatRoom.create("room-b", "Bob's room", "bob"))
    resolved = await ThreadResolver(ctx.threads).resolve("alice", ["bob"])
    return resolved.thread


class TestStart:
    @pytest.mark.asyncio
    async def test_initial_view(self, ctx):
        thread = await seed(ctx)
        manager = SyncManager(ctx)

        await manager.start("alice")

        view = manager.snapshot()
        assert set(view.profiles) == {"alice", "bob"}
        assert [r.id for r in view.rooms] == ["room-a"]
        assert [t.id for t in view.threads] == [thread.id]
        assert {c.title for c in view.conversations} == {"Alice's room", "Bob"}
        for stream in (IDENTITIES, ROOMS, THREADS):
            assert manager.is_subscribed(stream)

    @pytest.mark.asyncio
    async def test_changes_arrive_live(self, ctx):
        await seed(ctx)
        manager = SyncManager(ctx)
        await manager.start("alice")

        await ctx.rooms.create(ChatRoom.create("room-c", "Another", "alice"))

        assert [r.id for r in manager.snapshot().rooms] == ["room-a", "room-c"]

    @pytest.mark.asyncio
    async def test_identity_change_replaces_streams(self, ctx, store, paths):
        await seed(ctx)
        manager = SyncManager(ctx)
        await manager.start("alice")
        await manager.select(ConversationRef.room("room-a"))

        await manager.start("bob")

        view = manager.snapshot()
        assert view.user_id == "bob"
        assert view.active is None
        assert [r.id for r in view.rooms] == ["room-b"]
        assert store.subscriber_count(paths.users) == 1
        assert store.subscriber_count(paths.rooms) == 1
        assert store.subscriber_count(paths.threads) == 1
        assert store.subscriber_count(paths.messages(ConversationRef.room("room-a"))) == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("viewer, visible", [("u1", True), ("u2", True), ("u3", False)])
    async def test_room_visible_to_members_and_owner_only(self, ctx, viewer, visible):
        await ctx.rooms.create(ChatRoom("shared", "Shared", owner_id="u2", members={"u1"}))
        manager = SyncManager(ctx)

        await manager.start(viewer)

        assert [r.id for r in manager.snapshot().rooms] == (["shared"] if visible else [])


class TestSelect:
    @pytest.mark.asyncio
    async def test_messages_follow_active_conversation(self, ctx):
        await seed(ctx)
        room = ConversationRef.room("room-a")
        await ctx.messages.add(room, "first", "alice")
        manager = SyncManager(ctx)
        await manager.start("alice")

        await manager.select(room)
        await ctx.messages.add(room, "second", "bob")

        assert [m.text for m in manager.snapshot().messages] == ["first", "second"]

    @pytest.mark.asyncio
    async def test_switch_cancels_previous_stream(self, ctx, store, paths):
        thread = await seed(ctx)
        room = ConversationRef.room("room-a")
        dm = ConversationRef.thread(thread.id)
        manager = SyncManager(ctx)
        await manager.start("alice")

        await manager.select(room)
        await manager.select(dm)
        await ctx.messages.add(room, "late room message", "alice")

        assert store.subscriber_count(paths.messages(room)) == 0
        assert store.subscriber_count(paths.messages(dm)) == 1
        assert manager.snapshot().messages == ()
        assert manager.snapshot().active == dm

    @pytest.mark.asyncio
    async def test_select_none_clears(self, ctx, store, paths):
        await seed(ctx)
        room = ConversationRef.room("room-a")
        manager = SyncManager(ctx)
        await manager.start("alice")
        await manager.select(room)

        await manager.select(None)

        assert manager.active is None
        assert not manager.is_subscribed(MESSAGES)
        assert store.subscriber_count(paths.messages(room)) == 0

    @pytest.mark.asyncio
    async def test_vanished_thread_clears_selection(self, ctx, store, paths):
        thread = await seed(ctx)
        dm = ConversationRef.thread(thread.id)
        manager = SyncManager(ctx)
        await manager.start("alice")
        await manager.select(dm)

        await store.update(paths.thread(thread.id), {"participants": ["bob", "carol"]})

        assert manager.active is None
        assert manager.snapshot().threads == ()
        assert store.subscriber_count(paths.messages(dm)) == 0


class TestErrorsAndResults:
    @pytest.mark.asyncio
    async def test_stream_error_keeps_last_view(self, ctx, store, paths):
        await seed(ctx)
        manager = SyncManager(ctx)
        await manager.start("alice")
        before = manager.snapshot()

        store.emit_error(paths.threads, RuntimeError("permission denied"))

        assert manager.snapshot().threads == before.threads
        assert manager.is_subscribed(THREADS)

    @pytest.mark.asyncio
    async def test_stale_summary_is_dropped(self, ctx):
        await seed(ctx)
        manager = SyncManager(ctx)
        await manager.start("alice")
        await manager.select(ConversationRef.room("room-a"))
        await manager.select(ConversationRef.thread("alice_bob"))

        accepted = manager.accept_summary("room-a", "Key Summary: old news")

        assert accepted is False
        assert manager.snapshot().summary is None

    @pytest.mark.asyncio
    async def test_current_draft_is_kept(self, ctx):
        await seed(ctx)
        manager = SyncManager(ctx)
        await manager.start("alice")
        await manager.select(ConversationRef.thread("alice_bob"))

        assert manager.accept_draft("alice_bob", "Sure!") is True
        assert manager.snapshot().draft == "Sure!"

    @pytest.mark.asyncio
    async def test_listeners_and_close(self, ctx, store, paths):
        await seed(ctx)
        manager = SyncManager(ctx)
        views = []
        manager.add_listener(views.append)
        await manager.start("alice")
        received = len(views)

        await ctx.messages.add(ConversationRef.room("room-a"), "ignored", "alice")
        await ctx.rooms.create(ChatRoom.create("room-c", "New", "alice"))
        manager.close()

        assert received >= 1
        assert len(views) == received + 1
        assert store.subscriber_count(paths.users) == 0
        assert store.subscriber_count(paths.rooms) == 0
        assert store.subscriber_count(paths.threads) == 0
