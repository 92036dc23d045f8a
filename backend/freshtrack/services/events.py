"""
Change events — fan-out of row-level changes to websocket subscribers.

Writers call `broker.publish(...)` after a successful commit, whether they
run in the API or in a Celery worker. Events go over Redis pub/sub on one
channel per user, and every open websocket of that user receives
`{"table", "event", "id"}`. Events carry no row data; clients re-fetch.
"""

import json
import logging
from typing import AsyncIterator
from uuid import UUID

import redis
import redis.asyncio as aioredis

from freshtrack.config import get_settings

logger = logging.getLogger(__name__)

CHANNEL_PREFIX = "freshtrack:changes:"


def channel_for(user_id) -> str:
    return f"{CHANNEL_PREFIX}{user_id}"


class ChangeFeed:
    """A single subscription to one user's change channel."""

    def __init__(self, client: aioredis.Redis, user_id):
        self.channel = channel_for(user_id)
        self._client = client
        self._pubsub = client.pubsub()

    async def open(self) -> "ChangeFeed":
        await self._pubsub.subscribe(self.channel)
        return self

    async def events(self) -> AsyncIterator[dict]:
        async for message in self._pubsub.listen():
            if message["type"] != "message":
                continue
            yield json.loads(message["data"])

    async def close(self) -> None:
        await self._pubsub.unsubscribe(self.channel)
        await self._pubsub.aclose()
        await self._client.aclose()


class ChangeBroker:
    def __init__(self, redis_url: str | None = None):
        self._redis_url = redis_url
        self._client: redis.Redis | None = None

    @property
    def redis_url(self) -> str:
        return self._redis_url or get_settings().REDIS_URL

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            self._client = redis.Redis.from_url(self.redis_url)
        return self._client

    def async_client(self) -> aioredis.Redis:
        return aioredis.Redis.from_url(self.redis_url)

    def publish(self, user_id, table: str, event: str, row_id: UUID | str | None = None) -> int:
        """Send a change event to the user's channel. Returns how many feeds received it."""
        payload = {"table": table, "event": event, "id": str(row_id) if row_id else None}
        try:
            return self.client.publish(channel_for(user_id), json.dumps(payload))
        except redis.RedisError as e:
            # Never fails the write that triggered it; that is already committed
            logger.warning("Change event %s/%s for user %s not published: %s", table, event, user_id, e)
            return 0

    async def open_feed(self, user_id) -> ChangeFeed:
        """Subscribe to the user's channel. Events published after this returns are delivered."""
        return await ChangeFeed(self.async_client(), user_id).open()


broker = ChangeBroker()
