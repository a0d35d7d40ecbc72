"""WebSocket endpoint for reading ingestion.

Path: /ws/reading/{subject_id}

Accepts one JSON reading per message, validates it through the
ReadingParser, runs it through the subject's MonitoringSession and
returns a compact acknowledgement.  Invalid readings get an error reply;
the connection stays open.
"""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from footguard.adapters.registry import ReadingParser
from footguard.domain.reading import InvalidReading
from footguard.store.session_store import SessionStore

logger = logging.getLogger(__name__)


def create_reading_router(sessions: SessionStore, parser: ReadingParser) -> APIRouter:
    """Factory that wires the ingestion socket to a SessionStore.

    Args:
        sessions: Registry the readings are routed into.
        parser: Wire-format parser selecting the schema adapter.
    """

    router = APIRouter()

    @router.websocket("/ws/reading/{subject_id}")
    async def ingest_readings(websocket: WebSocket, subject_id: str) -> None:
        await websocket.accept()
        logger.info("Reading source connected for subject %s", subject_id)

        try:
            while True:
                text = await websocket.receive_text()

                # ── Validate at the boundary ─────────────────────────────
                try:
                    reading = parser.parse(json.loads(text))
                except json.JSONDecodeError as exc:
                    await websocket.send_json({
                        "status": "error",
                        "reason": f"malformed JSON: {exc.msg}",
                        "errors": [],
                    })
                    continue
                except InvalidReading as exc:
                    await websocket.send_json({"status": "error", **exc.to_dict()})
                    continue

                # ── Process ──────────────────────────────────────────────
                session = await sessions.get_or_create(subject_id)
                result = await session.process(reading)

                # ── Acknowledge ──────────────────────────────────────────
                await websocket.send_json({
                    "status": "accepted",
                    "overallScore": result.score.overall_score,
                    "riskLevel": result.score.risk_level.value,
                    "needsAction": result.score.needs_action,
                    "primaryFactor": result.score.primary_factor,
                    "alerts": [a.id for a in result.alerts],
                })

        except WebSocketDisconnect:
            logger.info("Reading source disconnected for subject %s", subject_id)

    return router
