import asyncio
import contextlib
import logging

import redis
from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect, status
from sqlalchemy.orm import Session

from freshtrack.database import get_db
from freshtrack.services.events import broker
from freshtrack.utils.auth import user_from_token

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws")
async def change_feed(
    websocket: WebSocket,
    token: str = Query(...),
    db: Session = Depends(get_db),
):
    """Push `{table, event, id}` for every change to the user's items and notifications."""
    try:
        user_id = user_from_token(db, token).id
    except HTTPException:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    finally:
        # Release the connection; the feed itself never touches the database
        db.close()

    # Subscribe first so nothing published after the handshake is missed
    try:
        feed = await broker.open_feed(user_id)
    except redis.RedisError as e:
        logger.error(f"Change feed unavailable for user {user_id}: {e}")
        await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
        return
    await websocket.accept()
    logger.info("Change feed opened for user %s", user_id)

    async def forward():
        async for event in feed.events():
            await websocket.send_json(event)

    sender = asyncio.create_task(forward())
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
    finally:
        sender.cancel()
        try:
            with contextlib.suppress(asyncio.CancelledError, WebSocketDisconnect):
                await sender
        finally:
            await feed.close()
            logger.info("Change feed closed for user %s", user_id)
