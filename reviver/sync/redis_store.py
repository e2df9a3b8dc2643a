"""Redis-backed workspace document store."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, Mapping

import redis.asyncio as redis
from redis.exceptions import WatchError

from .adapters import DocumentSnapshot, ErrorCallback, SnapshotCallback, Unsubscribe

logger = logging.getLogger("reviver")


class RedisDocumentStore:
    """Store workspace documents as JSON strings and fan out changes via pub/sub.

    Every write sets the document and publishes its full new value in one
    transaction, so subscribers receive snapshots in modification order.
    """

    KEY_PREFIX = "reviver:doc:"
    CHANNEL_PREFIX = "reviver:changes:"

    def __init__(self, redis_client: redis.Redis) -> None:
        self.redis = redis_client

    @classmethod
    def from_url(cls, url: str) -> "RedisDocumentStore":
        return cls(redis.Redis.from_url(url))

    def subscribe(
        self,
        path: str,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> Unsubscribe:
        task = asyncio.get_running_loop().create_task(self._listen(path, on_snapshot, on_error))

        def unsubscribe() -> None:
            task.cancel()

        return unsubscribe

    async def get(self, path: str) -> Dict[str, Any] | None:
        return self._decode(await self.redis.get(self._key(path)))

    async def create(self, path: str, value: Mapping[str, Any]) -> None:
        payload = self._encode(value)
        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.set(self._key(path), payload)
            pipe.publish(self._channel(path), payload)
            await pipe.execute()

    async def update(self, path: str, partial: Mapping[str, Any]) -> None:
        key = self._key(path)
        async with self.redis.pipeline(transaction=True) as pipe:
            while True:
                try:
                    await pipe.watch(key)
                    document = self._decode(await pipe.get(key))
                    if document is None:
                        raise KeyError(f"Document does not exist: {path}")
                    document.update(partial)
                    payload = self._encode(document)
                    pipe.multi()
                    pipe.set(key, payload)
                    pipe.publish(self._channel(path), payload)
                    await pipe.execute()
                    return
                except WatchError:
                    logger.debug("Concurrent modification of %s; retrying update", path)
                    continue

    async def _listen(self, path: str, on_snapshot: SnapshotCallback, on_error: ErrorCallback) -> None:
        pubsub = self.redis.pubsub()
        try:
            # Subscribe before the initial read so no write falls in between.
            await pubsub.subscribe(self._channel(path))
            document = await self.get(path)
            on_snapshot(DocumentSnapshot(path=path, exists=document is not None, data=document))

            async for message in pubsub.listen():
                if message.get("type") != "message":
                    continue
                document = self._decode(message.get("data"))
                on_snapshot(DocumentSnapshot(path=path, exists=document is not None, data=document))
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.debug("Subscription to %s failed", path, exc_info=True)
            on_error(exc)
        finally:
            await pubsub.aclose()

    def _key(self, path: str) -> str:
        return f"{self.KEY_PREFIX}{path}"

    def _channel(self, path: str) -> str:
        return f"{self.CHANNEL_PREFIX}{path}"

    @staticmethod
    def _encode(value: Mapping[str, Any]) -> str:
        return json.dumps(dict(value), separators=(",", ":"))

    @staticmethod
    def _decode(raw: Any) -> Dict[str, Any] | None:
        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        try:
            data = json.loads(raw)
        except (TypeError, json.JSONDecodeError):
            logger.warning("Discarding undecodable workspace document")
            return None
        return data if isinstance(data, dict) else None


__all__ = ["RedisDocumentStore"]
