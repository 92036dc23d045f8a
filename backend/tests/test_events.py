"""Tests for the change broker and websocket change feed."""

import asyncio
import json

import fakeredis
import fakeredis.aioredis
import pytest
from starlette.websockets import WebSocketDisconnect

from freshtrack.models.notification import Notification
from freshtrack.routers import events as events_router
from freshtrack.services import notifications
from freshtrack.services.events import ChangeBroker, ChangeFeed, broker, channel_for
from freshtrack.tasks.notification_check import run_check_for_user
from freshtrack.utils.auth import create_access_token


def _listener(server, user_id):
    pubsub = fakeredis.FakeRedis(server=server).pubsub()
    pubsub.subscribe(channel_for(user_id))
    return pubsub


def _next_event(pubsub):
    for _ in range(5):
        message = pubsub.get_message(timeout=0.1)
        if message and message["type"] == "message":
            return json.loads(message["data"])
    return None


def test_publish_goes_to_the_owners_channel(redis_server):
    mine = _listener(redis_server, "u1")
    theirs = _listener(redis_server, "u2")

    assert broker.publish("u1", "food_items", "INSERT", "abc") == 1

    assert _next_event(mine) == {"table": "food_items", "event": "INSERT", "id": "abc"}
    assert _next_event(theirs) is None


def test_publish_without_subscribers(redis_server):
    assert broker.publish("nobody", "notifications", "INSERT") == 0


def test_publish_survives_unreachable_redis():
    assert ChangeBroker("redis://127.0.0.1:1/0").publish("u1", "food_items", "DELETE") == 0


def test_scheduled_check_reaches_api_subscribers(redis_server, session_factory, user, make_item, monkeypatch):
    """A Celery worker has its own broker and Redis connection; its events still reach the feed."""
    item = make_item("Yoghurt", days=1)
    api_side = _listener(redis_server, user.id)

    worker_broker = ChangeBroker()
    worker_broker._client = fakeredis.FakeRedis(server=redis_server)
    monkeypatch.setattr(notifications, "broker", worker_broker)

    result = run_check_for_user(user.id, session_factory=session_factory)
    assert result["created"] == 1

    check = session_factory()
    notif = check.query(Notification).filter(Notification.item_id == item.id).one()
    check.close()
    assert _next_event(api_side) == {"table": "notifications", "event": "INSERT", "id": str(notif.id)}


def test_change_feed_yields_published_events(redis_server):
    async def scenario():
        feed = await ChangeFeed(fakeredis.aioredis.FakeRedis(server=redis_server), "u1").open()
        try:
            assert broker.publish("u1", "notifications", "UPDATE", "n-1") == 1
            event = await asyncio.wait_for(feed.events().__anext__(), timeout=1)
            assert event == {"table": "notifications", "event": "UPDATE", "id": "n-1"}
        finally:
            await feed.close()

    asyncio.run(scenario())


class CannedFeed:
    """Feed that replays fixed events, then stays open."""

    def __init__(self, events):
        self._events = events
        self.closed = False

    async def events(self):
        for event in self._events:
            yield event
        await asyncio.Event().wait()

    async def close(self):
        self.closed = True


def test_websocket_forwards_feed_events(anon_client, user, monkeypatch):
    opened = []
    feed = CannedFeed([{"table": "notifications", "event": "INSERT", "id": "n-1"}])

    async def open_feed(user_id):
        opened.append(user_id)
        return feed

    monkeypatch.setattr(events_router.broker, "open_feed", open_feed)
    user_id = user.id
    token = create_access_token({"sub": str(user_id)})

    with anon_client.websocket_connect(f"/api/v1/events/ws?token={token}") as ws:
        assert ws.receive_json() == {"table": "notifications", "event": "INSERT", "id": "n-1"}

    assert opened == [user_id]


def test_websocket_rejects_bad_token(anon_client):
    with pytest.raises(WebSocketDisconnect):
        with anon_client.websocket_connect("/api/v1/events/ws?token=garbage") as ws:
            ws.receive_json()
