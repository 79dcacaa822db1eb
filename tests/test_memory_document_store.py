from datetime import datetime, timezone

import pytest

from chatsync.domain.exceptions import DocumentExistsError, EntityNotFoundError
from chatsync.domain.ports.document_store import SERVER_TIMESTAMP, Filter, OrderBy
from chatsync.infrastructure.persistence import InMemoryDocumentStore

FROZEN = datetime(2025, 1, 1, tzinfo=timezone.utc)


class TestWrites:
    @pytest.mark.asyncio
    async def test_create_is_create_if_absent(self, store):
        await store.create("things/a", {"v": 1})

        with pytest.raises(DocumentExistsError):
            await store.create("things/a", {"v": 2})

        assert (await store.get("things/a")) == {"id": "a", "v": 1}

    @pytest.mark.asyncio
    async def test_server_timestamps_strictly_increase(self):
        store = InMemoryDocumentStore(clock=lambda: FROZEN)

        stamps = [
            (await store.create(f"things/{n}", {"at": SERVER_TIMESTAMP}))["at"]
            for n in range(5)
        ]

        assert stamps[0] == FROZEN
        assert all(a < b for a, b in zip(stamps, stamps[1:]))

    @pytest.mark.asyncio
    async def test_update_missing_document(self, store):
        with pytest.raises(EntityNotFoundError):
            await store.update("things/missing", {"v": 1})

    @pytest.mark.asyncio
    async def test_returned_documents_are_copies(self, store):
        created = await store.create("things/a", {"tags": ["x"]})
        created["tags"].append("y")

        assert (await store.get("things/a"))["tags"] == ["x"]


class TestQuery:
    @pytest.mark.asyncio
    async def test_filter_order_limit(self, store):
        await store.create("threads/t1", {"participants": ["a", "b"], "n": 2})
        await store.create("threads/t2", {"participants": ["b", "c"], "n": 1})
        await store.create("threads/t3", {"participants": ["a", "c"], "n": 3})

        docs = await store.query(
            "threads",
            filters=[Filter("participants", "array_contains", "a")],
            order_by=OrderBy("n", descending=True),
            limit=1,
        )

        assert [d["id"] for d in docs] == ["t3"]


class TestSubscribe:
    @pytest.mark.asyncio
    async def test_initial_snapshot_then_updates_until_cancel(self, store):
        await store.create("rooms/r1", {"name": "one"})
        snapshots = []

        sub = await store.subscribe("rooms", snapshots.append)
        await store.create("rooms/r2", {"name": "two"})
        sub.cancel()
        await store.create("rooms/r3", {"name": "three"})

        assert [[d["id"] for d in s] for s in snapshots] == [["r1"], ["r1", "r2"]]
        assert sub.active is False
        assert store.subscriber_count("rooms") == 0

    @pytest.mark.asyncio
    async def test_callback_failure_goes_to_on_error(self, store):
        errors = []

        def explode(docs):
            raise ValueError("bad snapshot")

        await store.subscribe("rooms", explode, errors.append)

        assert len(errors) == 1
        assert isinstance(errors[0], ValueError)
