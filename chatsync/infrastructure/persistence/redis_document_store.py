"""
Redis DocumentStore.

Redis Data Structures:
- "{ns}:doc:{path}"        STRING, JSON document (datetimes as {"$date": iso})
- "{ns}:idx:{collection}"  SET of document ids in the collection
- "{ns}:chan:{collection}" PUB/SUB channel, one message per write
- "{ns}:clock"             last issued server timestamp (microseconds)

Guarantees:
- create() runs SET NX and the index SADD in one script, so create-if-absent
  is atomic across processes and a created document is always indexed
- server timestamps come from a Lua script over Redis TIME that never returns
  a value <= the previous one
- update() is an optimistic WATCH/MULTI transaction
- subscribe() re-queries the collection on every channel message and hands the
  full snapshot to the callback; stream errors go to on_error and the
  listener keeps running (pub/sub reconnects on its own)
"""

import asyncio
import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Sequence
from uuid import uuid4

from redis.asyncio import Redis
from redis.exceptions import RedisError, WatchError

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
from chatsync.infrastructure.persistence.memory_document_store import split_path
from chatsync.infrastructure.persistence.redis_client import close_redis_client

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_MONOTONIC_TIME = """
local t = redis.call('TIME')
local now = tonumber(t[1]) * 1000000 + tonumber(t[2])
local last = tonumber(redis.call('GET', KEYS[1]) or '0')
if now <= last then now = last + 1 end
redis.call('SET', KEYS[1], now)
return now
"""

_CREATE_IF_ABSENT = """
if not redis.call('SET', KEYS[1], ARGV[1], 'NX') then return 0 end
redis.call('SADD', KEYS[2], ARGV[2])
return 1
"""


def _encode_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return {"$date": value.isoformat()}
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    raise TypeError(f"Cannot serialise {type(value).__name__}")


def _decode_hook(obj: dict) -> Any:
    if len(obj) == 1 and "$date" in obj:
        return datetime.fromisoformat(obj["$date"])
    return obj


def dumps(doc: Document) -> str:
    return json.dumps(doc, default=_encode_default)


def loads(raw: str) -> Document:
    return json.loads(raw, object_hook=_decode_hook)


class RedisSubscription(Subscription):
    def __init__(self, task: asyncio.Task):
        self._task = task
        self._cancelled = False

    @property
    def active(self) -> bool:
        return not self._cancelled and not self._task.done()

    def cancel(self) -> None:
        self._cancelled = True
        if not self._task.done():
            self._task.cancel()


class RedisDocumentStore(DocumentStore):
    def __init__(self, redis: Redis, namespace: str = "chatsync"):
        self._redis = redis
        self._ns = namespace
        self._clock = redis.register_script(_MONOTONIC_TIME)
        self._create = redis.register_script(_CREATE_IF_ABSENT)

    # ==================== KEYS ====================

    def _doc_key(self, path: str) -> str:
        return f"{self._ns}:doc:{path}"

    def _index_key(self, collection: str) -> str:
        return f"{self._ns}:idx:{collection}"

    def _channel(self, collection: str) -> str:
        return f"{self._ns}:chan:{collection}"

    # ==================== HELPERS ====================

    async def _server_timestamp(self) -> datetime:
        micros = int(await self._clock(keys=[f"{self._ns}:clock"]))
        return _EPOCH + timedelta(microseconds=micros)

    async def _resolve(self, doc: Document) -> Document:
        resolved = {k: v for k, v in doc.items() if k != "id"}
        if any(v is SERVER_TIMESTAMP for v in resolved.values()):
            timestamp = await self._server_timestamp()
            resolved = {
                k: (timestamp if v is SERVER_TIMESTAMP else v) for k, v in resolved.items()
            }
        return resolved

    async def _publish(self, collection: str, doc_id: str) -> None:
        await self._redis.publish(self._channel(collection), doc_id)

    # ==================== DOCUMENT STORE ====================

    def new_id(self) -> str:
        return uuid4().hex[:20]

    async def get(self, path: str) -> Optional[Document]:
        _, doc_id = split_path(path)
        raw = await self._redis.get(self._doc_key(path))
        return {"id": doc_id, **loads(raw)} if raw is not None else None

    async def create(self, path: str, doc: Document) -> Document:
        collection, doc_id = split_path(path)
        resolved = await self._resolve(doc)
        created = await self._create(
            keys=[self._doc_key(path), self._index_key(collection)],
            args=[dumps(resolved), doc_id],
        )
        if not int(created):
            raise DocumentExistsError(path)
        await self._publish(collection, doc_id)
        return {"id": doc_id, **loads(dumps(resolved))}

    async def set(self, path: str, doc: Document) -> Document:
        collection, doc_id = split_path(path)
        resolved = await self._resolve(doc)
        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.set(self._doc_key(path), dumps(resolved))
            pipe.sadd(self._index_key(collection), doc_id)
            await pipe.execute()
        await self._publish(collection, doc_id)
        return {"id": doc_id, **loads(dumps(resolved))}

    async def update(self, path: str, partial: Document) -> Document:
        collection, doc_id = split_path(path)
        changes = await self._resolve(partial)
        key = self._doc_key(path)
        async with self._redis.pipeline(transaction=True) as pipe:
            while True:
                try:
                    await pipe.watch(key)
                    raw = await pipe.get(key)
                    if raw is None:
                        raise EntityNotFoundError(f"No document at {path}")
                    merged = {**loads(raw), **changes}
                    pipe.multi()
                    pipe.set(key, dumps(merged))
                    await pipe.execute()
                    break
                except WatchError:
                    logger.debug(f"[RedisStore] Concurrent write on {path}, retrying update")
                    continue
        await self._publish(collection, doc_id)
        return {"id": doc_id, **loads(dumps(merged))}

    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[OrderBy] = None,
        limit: Optional[int] = None,
    ) -> list[Document]:
        ids = sorted(await self._redis.smembers(self._index_key(collection)))
        if not ids:
            return []
        raws = await self._redis.mget([self._doc_key(f"{collection}/{i}") for i in ids])
        docs = [{"id": i, **loads(raw)} for i, raw in zip(ids, raws) if raw is not None]
        return apply_query(docs, filters, order_by, limit)

    async def subscribe(
        self,
        collection: str,
        on_snapshot: SnapshotCallback,
        on_error: Optional[ErrorCallback] = None,
        filters: Sequence[Filter] = (),
        order_by: Optional[OrderBy] = None,
    ) -> Subscription:
        pubsub = self._redis.pubsub(ignore_subscribe_messages=True)
        try:
            await pubsub.subscribe(self._channel(collection))
            # Subscribed before the first read, so no write can fall in between
            on_snapshot(await self.query(collection, filters, order_by))
        except Exception:
            await pubsub.aclose()
            raise
        task = asyncio.create_task(
            self._listen(pubsub, collection, on_snapshot, on_error, filters, order_by),
            name=f"redis-subscription:{collection}",
        )
        return RedisSubscription(task)

    async def _listen(
        self,
        pubsub,
        collection: str,
        on_snapshot: SnapshotCallback,
        on_error: Optional[ErrorCallback],
        filters: Sequence[Filter],
        order_by: Optional[OrderBy],
    ) -> None:
        try:
            while True:
                try:
                    message = await pubsub.get_message(timeout=1.0)
                    if message is None:
                        continue
                    on_snapshot(await self.query(collection, filters, order_by))
                except RedisError as e:
                    logger.warning(f"[RedisStore] Stream error on {collection}: {e}")
                    if on_error is not None:
                        on_error(e)
                    await asyncio.sleep(1.0)
                except Exception as e:
                    logger.exception(f"[RedisStore] Snapshot callback failed on {collection}")
                    if on_error is not None:
                        on_error(e)
        finally:
            try:
                await pubsub.unsubscribe()
                await pubsub.aclose()
            except RedisError as e:
                logger.debug(f"[RedisStore] Pub/sub cleanup failed: {e}")

    async def close(self) -> None:
        await close_redis_client(self._redis)
