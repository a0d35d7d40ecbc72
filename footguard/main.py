"""footguard — foot-health risk scoring and alerting service.

This is the application entry point.  It wires the SessionStore,
ReadingParser, and the WebSocket/REST endpoints together.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from footguard.adapters.registry import ReadingParser
from footguard.api.sessions import create_sessions_router
from footguard.api.ws_events import create_events_router
from footguard.api.ws_reading import create_reading_router
from footguard.config import settings
from footguard.store.session_store import SessionStore

# ── Logging ──────────────────────────────────────────────────────────────────

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)

# ── State ────────────────────────────────────────────────────────────────────

sessions = SessionStore(
    ttl=settings.session_ttl,
    thresholds=settings.thresholds(),
    weights=settings.risk_weights(),
    cooldown=settings.alert_cooldown,
    history_size=settings.history_size,
    risk_history_size=settings.risk_history_size,
    max_alerts=settings.max_stored_alerts,
    queue_size=settings.event_queue_size,
)

# ── Wire formats ─────────────────────────────────────────────────────────────

parser = ReadingParser.with_defaults()

# ── App ──────────────────────────────────────────────────────────────────────

app = FastAPI(
    title=settings.app_name,
    description="Foot-health risk assessment and alerting for sensor socks",
    version="1.0.0",
    debug=settings.debug,
)

# ── Routes ───────────────────────────────────────────────────────────────────

app.include_router(create_reading_router(sessions, parser))
app.include_router(create_events_router(sessions))
app.include_router(create_sessions_router(sessions, parser))


# ── Health ───────────────────────────────────────────────────────────────────

@app.get("/health")
async def health() -> dict:
    expired = await sessions.expire_stale()
    return {
        "status": "ok",
        "active_sessions": sessions.count,
        "expired_sessions": len(expired),
        "schemas": parser.schema_names,
        "parser": parser.stats,
        "total_parsed": parser.total_accepted,
        "total_rejected": parser.total_rejected,
    }
