"""WebSocket endpoints that stream a subject's events as they happen.

Paths:
    /ws/alerts/{subject_id}   each new alert
    /ws/scores/{subject_id}   each new risk score

Each connected client gets its own subscription on the session's event
channel.  A slow client only loses its own oldest pending events.
Clients may send "ping" at any time and receive "pong".
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from footguard.services.broadcaster import Subscription
from footguard.store.session_store import SessionStore

logger = logging.getLogger(__name__)


def create_events_router(sessions: SessionStore) -> APIRouter:
    """Factory that wires the alert and score streams to a SessionStore."""

    router = APIRouter()

    @router.websocket("/ws/alerts/{subject_id}")
    async def stream_alerts(websocket: WebSocket, subject_id: str) -> None:
        await websocket.accept()
        session = await sessions.get_or_create(subject_id)
        await _serve(websocket, session.alert_events.subscribe(), f"alerts:{subject_id}")

    @router.websocket("/ws/scores/{subject_id}")
    async def stream_scores(websocket: WebSocket, subject_id: str) -> None:
        await websocket.accept()
        session = await sessions.get_or_create(subject_id)
        await _serve(websocket, session.score_events.subscribe(), f"scores:{subject_id}")

    return router


async def _serve(websocket: WebSocket, subscription: Subscription[Any], name: str) -> None:
    logger.info("Listener connected to %s", name)
    pusher = asyncio.create_task(_push(websocket, subscription))
    try:
        while True:
            message = await websocket.receive_text()
            if message == "ping":
                await websocket.send_text("pong")
    except WebSocketDisconnect:
        logger.info("Listener disconnected from %s", name)
    finally:
        pusher.cancel()
        subscription.close()


async def _push(websocket: WebSocket, subscription: Subscription[Any]) -> None:
    async for event in subscription:
        await websocket.send_json(event.to_wire())
