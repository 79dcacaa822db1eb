"""Redis document store against a mocked client: atomic create and live streams."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import RedisError

from chatsync.domain.exceptions import DocumentExistsError
from chatsync.infrastructure.persistence.redis_document_store import RedisDocumentStore


@pytest.fixture
def create_script():
    return AsyncMock(return_value=1)


@pytest.fixture
def pubsub():
    pubsub = MagicMock()
    pubsub.subscribe = AsyncMock()
    pubsub.unsubscribe = AsyncMock()
    pubsub.aclose = AsyncMock()
    return pubsub


@pytest.fixture
def redis(create_script, pubsub):
    redis = MagicMock()
    redis.register_script.side_effect = [AsyncMock(), create_script]
    redis.publish = AsyncMock()
    redis.set = AsyncMock()
    redis.sadd = AsyncMock()
    redis.pubsub.return_value = pubsub
    return redis


@pytest.fixture
def store(redis):
    return RedisDocumentStore(redis, namespace="test")


async def _settle(condition, rounds=50):
    for _ in range(rounds):
        if condition():
            return
        await asyncio.sleep(0)


class TestCreate:
    @pytest.mark.asyncio
    async def test_document_and_index_written_in_one_script(self, store, redis, create_script):
        doc = await store.create("rooms/r1", {"name": "General"})

        call = create_script.await_args
        assert call.kwargs["keys"] == ["test:doc:rooms/r1", "test:idx:rooms"]
        assert call.kwargs["args"][1] == "r1"
        assert doc == {"id": "r1", "name": "General"}
        redis.set.assert_not_called()
        redis.sadd.assert_not_called()
        redis.publish.assert_awaited_once_with("test:chan:rooms", "r1")

    @pytest.mark.asyncio
    async def test_existing_document_is_not_overwritten(self, store, redis, create_script):
        create_script.return_value = 0

        with pytest.raises(DocumentExistsError):
            await store.create("rooms/r1", {"name": "General"})

        redis.publish.assert_not_called()


class TestSubscribe:
    @pytest.mark.asyncio
    async def test_callback_failure_reaches_on_error_and_stream_continues(
        self, store, pubsub, monkeypatch
    ):
        pending = [{"type": "message", "data": "a"}, {"type": "message", "data": "b"}]

        async def get_message(timeout=None):
            if pending:
                return pending.pop(0)
            await asyncio.Event().wait()

        pubsub.get_message = get_message
        monkeypatch.setattr(store, "query", AsyncMock(return_value=[{"id": "a"}]))
        snapshots, errors = [], []

        def on_snapshot(docs):
            snapshots.append(docs)
            if len(snapshots) == 2:
                raise KeyError("name")

        subscription = await store.subscribe("rooms", on_snapshot, errors.append)
        await _settle(lambda: len(snapshots) == 3)

        assert len(snapshots) == 3
        assert [type(e) for e in errors] == [KeyError]
        assert subscription.active

        subscription.cancel()
        await _settle(lambda: pubsub.aclose.await_count > 0)
        pubsub.aclose.assert_awaited()

    @pytest.mark.asyncio
    async def test_failed_initial_read_releases_connection(self, store, pubsub, monkeypatch):
        monkeypatch.setattr(store, "query", AsyncMock(side_effect=RedisError("down")))

        with pytest.raises(RedisError):
            await store.subscribe("rooms", lambda docs: None)

        pubsub.aclose.assert_awaited_once()
