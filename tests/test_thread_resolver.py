"""Thread identity resolution: deterministic ids, reuse, and no forks under concurrency."""

import asyncio

import pytest

from chatsync.domain.entities.dm_thread import group_thread_id
from chatsync.domain.exceptions import InvalidParticipantsError
from chatsync.domain.value_objects.conversation_ref import ConversationRef
from chatsync.services.thread_resolver import ThreadResolver


class TestPairwiseThreads:
    @pytest.mark.asyncio
    async def test_id_is_sorted_pair(self, ctx):
        resolved = await ThreadResolver(ctx.threads).resolve("u2", ["u1"])

        assert resolved.thread.id == "u1_u2"
        assert resolved.thread.participants == ("u1", "u2")
        assert resolved.created is True

    @pytest.mark.asyncio
    async def test_both_sides_get_the_same_thread(self, ctx):
        resolver = ThreadResolver(ctx.threads)

        first = await resolver.resolve("u1", ["u2"])
        second = await resolver.resolve("u2", ["u1"])

        assert first.thread.id == second.thread.id
        assert second.created is False

    @pytest.mark.asyncio
    async def test_concurrent_first_contact_creates_one_thread(self, ctx):
        resolver = ThreadResolver(ctx.threads)

        results = await asyncio.gather(
            resolver.resolve("u1", ["u2"]),
            resolver.resolve("u2", ["u1"]),
        )

        assert {r.thread.id for r in results} == {"u1_u2"}
        assert sum(r.created for r in results) == 1
        assert len(await ctx.threads.list_for_participant("u1")) == 1

    @pytest.mark.asyncio
    async def test_requester_in_targets_is_deduplicated(self, ctx):
        resolved = await ThreadResolver(ctx.threads).resolve("u1", ["u1", "u2", "u2"])

        assert resolved.thread.id == "u1_u2"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("targets", [[], ["u1"]])
    async def test_fewer_than_two_participants_rejected(self, ctx, store, paths, targets):
        with pytest.raises(InvalidParticipantsError):
            await ThreadResolver(ctx.threads).resolve("u1", targets)

        assert await store.query(paths.threads) == []

    @pytest.mark.asyncio
    async def test_creation_writes_no_messages(self, ctx):
        resolved = await ThreadResolver(ctx.threads).resolve("u1", ["u2"])

        assert await ctx.messages.history(ConversationRef.thread(resolved.thread.id)) == []


class TestGroupThreads:
    @pytest.mark.asyncio
    async def test_enumeration_order_does_not_matter(self, ctx):
        resolver = ThreadResolver(ctx.threads)

        a = await resolver.resolve("u1", ["u3", "u2"])
        b = await resolver.resolve("u3", ["u2", "u1"])

        assert a.thread.id == b.thread.id == group_thread_id(["u1", "u2", "u3"])
        assert a.thread.id.startswith("grp_")
        assert b.created is False

    @pytest.mark.asyncio
    async def test_reuses_existing_thread_with_same_members(self, ctx, store, paths):
        await store.create(paths.thread("legacy123"), {"participants": ["u3", "u1", "u2"]})

        resolved = await ThreadResolver(ctx.threads).resolve("u2", ["u1", "u3"])

        assert resolved.thread.id == "legacy123"
        assert resolved.created is False

    @pytest.mark.asyncio
    async def test_superset_is_a_different_thread(self, ctx):
        resolver = ThreadResolver(ctx.threads)

        small = await resolver.resolve("u1", ["u2", "u3"])
        large = await resolver.resolve("u1", ["u2", "u3", "u4"])

        assert small.thread.id != large.thread.id

    @pytest.mark.asyncio
    async def test_concurrent_group_creation_converges(self, ctx, store, paths):
        resolver = ThreadResolver(ctx.threads)

        results = await asyncio.gather(
            resolver.resolve("u1", ["u2", "u3"]),
            resolver.resolve("u2", ["u3", "u1"]),
            resolver.resolve("u3", ["u1", "u2"]),
        )

        assert len({r.thread.id for r in results}) == 1
        assert len(await store.query(paths.threads)) == 1
