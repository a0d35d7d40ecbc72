"""REST endpoints for session queries and alert management.

Paths (all under /api):
    GET    /sessions
    POST   /sessions/{subject_id}/readings
    GET    /sessions/{subject_id}/risk
    GET    /sessions/{subject_id}/risk/history
    GET    /sessions/{subject_id}/risk/stats
    GET    /sessions/{subject_id}/summary
    GET    /sessions/{subject_id}/alerts
    GET    /sessions/{subject_id}/alerts/stats
    POST   /sessions/{subject_id}/alerts/read-all
    POST   /sessions/{subject_id}/alerts/{alert_id}/read
    DELETE /sessions/{subject_id}/alerts/{alert_id}
    DELETE /sessions/{subject_id}/alerts
    POST   /sessions/{subject_id}/reset

Query endpoints 404 for unknown subjects; only reading ingestion
creates a session.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any

from fastapi import APIRouter, Body, HTTPException, Query
from fastapi.responses import JSONResponse

from footguard.adapters.registry import ReadingParser
from footguard.domain.enums import AlertSeverity, AlertType
from footguard.domain.reading import InvalidReading
from footguard.store.session_store import MonitoringSession, SessionStore

logger = logging.getLogger(__name__)


def create_sessions_router(sessions: SessionStore, parser: ReadingParser) -> APIRouter:
    """Factory that wires the session endpoints to a SessionStore."""

    router = APIRouter(prefix="/api", tags=["sessions"])

    async def _session_or_404(subject_id: str) -> MonitoringSession:
        session = await sessions.get(subject_id)
        if session is None:
            raise HTTPException(status_code=404, detail=f"Session {subject_id} not found")
        return session

    @router.get("/sessions")
    async def list_sessions() -> dict[str, Any]:
        items = [s.summary() for s in await sessions.list_sessions()]
        return {"sessions": items, "count": len(items)}

    # ── Ingestion ────────────────────────────────────────────────────────

    @router.post("/sessions/{subject_id}/readings")
    async def post_reading(subject_id: str, payload: Any = Body(...)) -> Any:
        try:
            reading = parser.parse(payload)
        except InvalidReading as exc:
            return JSONResponse(status_code=422, content=exc.to_dict())

        session = await sessions.get_or_create(subject_id)
        result = await session.process(reading)
        return result.to_wire()

    # ── Risk ─────────────────────────────────────────────────────────────

    @router.get("/sessions/{subject_id}/risk")
    async def current_risk(subject_id: str) -> dict[str, Any]:
        session = await _session_or_404(subject_id)
        return (await session.current_score()).to_wire()

    @router.get("/sessions/{subject_id}/risk/history")
    async def risk_history(
        subject_id: str,
        limit: int | None = Query(None, ge=1),
    ) -> dict[str, Any]:
        session = await _session_or_404(subject_id)
        scores = await session.risk_history(limit)
        return {"scores": [s.to_wire() for s in scores], "count": len(scores)}

    @router.get("/sessions/{subject_id}/risk/stats")
    async def risk_stats(
        subject_id: str,
        hours: float = Query(24, gt=0),
    ) -> dict[str, Any]:
        session = await _session_or_404(subject_id)
        return {
            "hours": hours,
            "averageRisk": await session.average_risk(hours),
            "maxRisk": await session.max_risk(hours),
        }

    @router.get("/sessions/{subject_id}/summary")

    async def daily_summary(subject_id: str) -> dict[str, Any]:
        session = await _session_or_404(subject_id)
        return (await session.daily_summary()).to_wire()

    # ── Alerts ───────────────────────────────────────────────────────────

    @router.get("/sessions/{subject_id}/alerts")
    async def list_alerts(
        subject_id: str,
        alert_type: AlertType | None = Query(None, alias="type"),
        severity: AlertSeverity | None = None,
        hours: float | None = Query(None, gt=0),
        unread: bool = False,
    ) -> dict[str, Any]:
        session = await _session_or_404(subject_id)
        alerts = await session.alerts(alert_type, severity, hours, unread_only=unread)
        return {"alerts": [a.to_wire() for a in alerts], "count": len(alerts)}

    @router.get("/sessions/{subject_id}/alerts/stats")
    async def alert_stats(subject_id: str) -> dict[str, Any]:
        session = await _session_or_404(subject_id)
        return (await session.alert_stats()).to_wire()

    @router.post("/sessions/{subject_id}/alerts/read-all")
    async def mark_all_read(subject_id: str) -> dict[str, Any]:
        session = await _session_or_404(subject_id)
        return {"marked": await session.mark_all_read()}

    @router.post("/sessions/{subject_id}/alerts/{alert_id}/read")
    async def mark_read(subject_id: str, alert_id: str) -> dict[str, Any]:
        session = await _session_or_404(subject_id)
        alert = await session.mark_read(alert_id)
        if alert is None:
            raise HTTPException(status_code=404, detail=f"Alert {alert_id} not found")
        return alert.to_wire()

    @router.delete("/sessions/{subject_id}/alerts/{alert_id}")
    async def delete_alert(subject_id: str, alert_id: str) -> dict[str, Any]:
        session = await _session_or_404(subject_id)
        if not await session.remove_alert(alert_id):
            raise HTTPException(status_code=404, detail=f"Alert {alert_id} not found")
        return {"removed": alert_id}

    @router.delete("/sessions/{subject_id}/alerts")
    async def clear_alerts(
        subject_id: str,
        older_than_minutes: float | None = Query(None, ge=0),
    ) -> dict[str, Any]:
        session = await _session_or_404(subject_id)
        if older_than_minutes is None:
            await session.clear_alerts()
            return {"cleared": "all"}
        removed = await session.clear_alerts_older_than(timedelta(minutes=older_than_minutes))
        return {"cleared": removed}

    @router.post("/sessions/{subject_id}/reset")
    async def reset_session(subject_id: str) -> dict[str, Any]:
        session = await _session_or_404(subject_id)
        await session.reset()
        return {"status": "reset", "subjectId": subject_id}

    return router
