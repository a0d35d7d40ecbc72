"""Per-subject monitoring sessions and the registry that owns them.

Design notes:
    - A MonitoringSession bundles everything one subject's stream needs:
      history window, scorer, alert engine (with its cooldowns), alert
      store, risk history and the current daily summary.
    - An asyncio.Lock guards each session.  ``process()`` runs the whole
      push → score → evaluate → store step under it, so concurrent readers
      only ever see the state before or after a reading, never in between.
    - Nothing inside the lock awaits I/O.  Broadcast is non-blocking.
    - The SessionStore finds-or-creates sessions by subject id and expires
      those idle for longer than the TTL.  A session with live event
      subscribers is never idle, so listeners keep their channel.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from footguard.core.alert_engine import AlertEngine
from footguard.core.risk_scorer import RiskScorer
from footguard.core.thresholds import DEFAULT_COOLDOWN, RiskWeights, Thresholds
from footguard.domain.alert import Alert, AlertStats
from footguard.domain.enums import AlertSeverity, AlertType
from footguard.domain.reading import SensorReading
from footguard.domain.risk import DailyRiskSummary, RiskScore
from footguard.foundation.clock import Clock, to_epoch_ms, utc_now
from footguard.foundation.identifiers import new_id
from footguard.services.broadcaster import DEFAULT_QUEUE_SIZE, EventBroadcaster
from footguard.store.alert_store import DEFAULT_MAX_ALERTS, AlertStore
from footguard.store.history import DEFAULT_HISTORY_SIZE, HistoryBuffer

logger = logging.getLogger(__name__)

DEFAULT_RISK_HISTORY_SIZE = 100


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of processing one reading."""

    score: RiskScore
    alerts: tuple[Alert, ...]

    def to_wire(self) -> dict[str, Any]:
        return {
            "score": self.score.to_wire(),
            "alerts": [a.to_wire() for a in self.alerts],
        }


class MonitoringSession:
    """Engine state for one monitored subject.

    Args:
        subject_id: Identifier of the wearer / device stream.
        scorer: Shared, stateless risk scorer.
        thresholds: Limits for this session's alert engine.
        cooldown: Alert cooldown per rule key.
        history_size: Reading window capacity.
        risk_history_size: How many past scores to keep.
        max_alerts: Alert store capacity.
        queue_size: Per-subscriber queue bound on the event channels.
        clock: Source of "now" for idle tracking and alert retention.
    """

    def __init__(
        self,
        subject_id: str,
        scorer: RiskScorer | None = None,
        thresholds: Thresholds | None = None,
        cooldown: timedelta = DEFAULT_COOLDOWN,
        history_size: int = DEFAULT_HISTORY_SIZE,
        risk_history_size: int = DEFAULT_RISK_HISTORY_SIZE,
        max_alerts: int = DEFAULT_MAX_ALERTS,
        queue_size: int = DEFAULT_QUEUE_SIZE,
        clock: Clock = utc_now,
    ) -> None:
        self.subject_id = subject_id
        self._clock = clock
        self._lock = asyncio.Lock()

        self._scorer = scorer or RiskScorer(thresholds)
        self._engine = AlertEngine(thresholds, cooldown)
        self._history = HistoryBuffer(history_size)

        self.alert_events: EventBroadcaster[Alert] = EventBroadcaster(
            f"alerts:{subject_id}", queue_size
        )
        self.score_events: EventBroadcaster[RiskScore] = EventBroadcaster(
            f"scores:{subject_id}", queue_size
        )
        self._alerts = AlertStore(max_alerts, clock, self.alert_events)

        self._risk_history_size = risk_history_size
        self._risk_history: list[RiskScore] = []
        self._daily: DailyRiskSummary | None = None

        self.created_at: datetime = clock()
        self.last_activity: datetime = self.created_at
        self.readings_processed = 0

    # ── Ingestion ────────────────────────────────────────────────────────

    async def process(self, reading: SensorReading) -> ProcessResult:
        """Run one reading through history, scorer and alert engine."""
        async with self._lock:
            self._history.push(reading)
            window = self._history.snapshot()

            score = self._scorer.score(reading, window).with_id(new_id())
            alerts = self._engine.evaluate(reading, window)

            self._alerts.add_many(alerts)
            self._record_score(score)
            self.readings_processed += 1
            self.last_activity = self._clock()

        self.score_events.publish(score)
        logger.debug(
            "Session %s processed reading #%d → %s, %d alerts",
            self.subject_id,
            self.readings_processed,
            score,
            len(alerts),
        )
        return ProcessResult(score=score, alerts=tuple(alerts))

    async def add_alert(self, alert: Alert) -> None:
        async with self._lock:
            self._alerts.add(alert)

    async def reset(self) -> None:
        """Forget history, cooldowns, scores and alerts."""
        async with self._lock:
            self._history.clear()
            self._engine.reset_cooldowns()
            self._alerts.clear()
            self._risk_history.clear()
            self._daily = None
            self.readings_processed = 0
        logger.info("Session %s reset", self.subject_id)

    # ── Risk queries ─────────────────────────────────────────────────────

    async def current_score(self) -> RiskScore:
        async with self._lock:
            if self._risk_history:
                return self._risk_history[0]
        return RiskScore.empty(self._clock())

    async def risk_history(self, limit: int | None = None) -> list[RiskScore]:
        async with self._lock:
            items = list(self._risk_history)
        return items[:limit] if limit is not None else items

    async def average_risk(self, hours: float = 24) -> float:
        """Mean overall score over the last *hours*; 0 when there is none."""
        scores = await self._scores_since(hours)
        return sum(scores) / len(scores) if scores else 0.0

    async def max_risk(self, hours: float = 24) -> int:
        """Highest overall score over the last *hours*; 0 when there is none."""
        return max(await self._scores_since(hours), default=0)

    async def daily_summary(self) -> DailyRiskSummary:
        async with self._lock:
            if self._daily is not None:
                return self._daily
        return DailyRiskSummary.for_day(self._clock().date())

    async def history(self) -> list[SensorReading]:
        async with self._lock:
            return self._history.snapshot()

    # ── Alert queries & management ───────────────────────────────────────

    async def alerts(
        self,
        alert_type: AlertType | None = None,
        severity: AlertSeverity | None = None,
        hours: float | None = None,
        unread_only: bool = False,
    ) -> list[Alert]:
        async with self._lock:
            if hours is not None:
                items = self._alerts.recent(hours)
            else:
                items = self._alerts.all()
        if alert_type is not None:
            items = [a for a in items if a.alert_type == alert_type]
        if severity is not None:
            items = [a for a in items if a.severity == severity]
        if unread_only:
            items = [a for a in items if not a.is_read]
        return items

    async def alert_stats(self) -> AlertStats:
        async with self._lock:
            return self._alerts.stats()

    async def has_critical_unread(self) -> bool:
        async with self._lock:
            return self._alerts.has_critical_unread

    async def mark_read(self, alert_id: str) -> Alert | None:
        async with self._lock:
            return self._alerts.mark_read(alert_id)

    async def mark_all_read(self) -> int:
        async with self._lock:
            return self._alerts.mark_all_read()

    async def remove_alert(self, alert_id: str) -> bool:
        async with self._lock:
            return self._alerts.remove(alert_id)

    async def clear_alerts(self) -> None:
        async with self._lock:
            self._alerts.clear()

    async def clear_alerts_older_than(self, age: timedelta) -> int:
        async with self._lock:
            return self._alerts.clear_older_than(age)

    # ── Lifecycle ────────────────────────────────────────────────────────

    @property
    def has_listeners(self) -> bool:
        return self.alert_events.subscriber_count > 0 or self.score_events.subscriber_count > 0

    def is_expired(self, ttl: timedelta) -> bool:
        """Idle for longer than *ttl* and nobody subscribed to its events."""
        if self.has_listeners:
            return False
        return (self._clock() - self.last_activity) > ttl

    def summary(self) -> dict[str, Any]:
        """Lock-free overview for listings."""
        current = self._risk_history[0] if self._risk_history else None
        last_reading = self._history.latest
        return {
            "subjectId": self.subject_id,
            "readingsProcessed": self.readings_processed,
            "historySize": len(self._history),
            "alertCount": len(self._alerts),
            "unreadAlerts": self._alerts.unread_count,
            "overallScore": current.overall_score if current else None,
            "riskLevel": current.risk_level.value if current else None,
            "highestRiskComponent": current.highest_risk_component if current else None,
            "lastReadingAt": to_epoch_ms(last_reading.timestamp) if last_reading else None,
            "listening": self.has_listeners,
            "lastActivity": self.last_activity.isoformat(),
        }

    # ── Internals ────────────────────────────────────────────────────────

    async def _scores_since(self, hours: float) -> list[int]:
        cutoff = self._clock() - timedelta(hours=hours)
        async with self._lock:
            return [s.overall_score for s in self._risk_history if s.timestamp > cutoff]

    def _record_score(self, score: RiskScore) -> None:
        """Must be called while holding self._lock."""
        self._risk_history.insert(0, score)
        del self._risk_history[self._risk_history_size:]

        day = score.timestamp.date()
        if self._daily is None or self._daily.day != day:
            self._daily = DailyRiskSummary.for_day(day)
        self._daily = self._daily.add(score)


class SessionStore:
    """Async-safe registry of MonitoringSessions keyed by subject id.

    Args:
        ttl: Idle time after which a session is dropped by ``expire_stale``.
        clock: Shared clock for every session created here.
        Remaining arguments are passed to each new MonitoringSession.
    """

    def __init__(
        self,
        ttl: timedelta = timedelta(minutes=120),
        clock: Clock = utc_now,
        thresholds: Thresholds | None = None,
        weights: RiskWeights | None = None,
        cooldown: timedelta = DEFAULT_COOLDOWN,
        history_size: int = DEFAULT_HISTORY_SIZE,
        risk_history_size: int = DEFAULT_RISK_HISTORY_SIZE,
        max_alerts: int = DEFAULT_MAX_ALERTS,
        queue_size: int = DEFAULT_QUEUE_SIZE,
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._thresholds = thresholds or Thresholds()
        self._scorer = RiskScorer(self._thresholds, weights)
        self._cooldown = cooldown
        self._history_size = history_size
        self._risk_history_size = risk_history_size
        self._max_alerts = max_alerts
        self._queue_size = queue_size
        self._lock = asyncio.Lock()
        self._sessions: dict[str, MonitoringSession] = {}

    # ── Public API ───────────────────────────────────────────────────────

    async def get_or_create(self, subject_id: str) -> MonitoringSession:
        async with self._lock:
            session = self._sessions.get(subject_id)
            if session is not None and session.is_expired(self._ttl):
                logger.info("Session %s expired, starting fresh", subject_id)
                session = None
            if session is None:
                session = self._new_session(subject_id)
                self._sessions[subject_id] = session
                logger.info("Created session for subject %s", subject_id)
            return session

    async def get(self, subject_id: str) -> MonitoringSession | None:
        async with self._lock:
            return self._sessions.get(subject_id)

    async def list_sessions(self) -> list[MonitoringSession]:
        async with self._lock:
            return list(self._sessions.values())

    async def expire_stale(self) -> list[str]:
        """Drop sessions idle longer than the TTL; return their subject ids."""
        async with self._lock:
            expired = [sid for sid, s in self._sessions.items() if s.is_expired(self._ttl)]
            for sid in expired:
                del self._sessions[sid]
        if expired:
            logger.info("Expired %d idle sessions: %s", len(expired), expired)
        return expired

    @property
    def count(self) -> int:
        return len(self._sessions)

    # ── Internals ────────────────────────────────────────────────────────

    def _new_session(self, subject_id: str) -> MonitoringSession:
        return MonitoringSession(
            subject_id,
            scorer=self._scorer,
            thresholds=self._thresholds,
            cooldown=self._cooldown,
            history_size=self._history_size,
            risk_history_size=self._risk_history_size,
            max_alerts=self._max_alerts,
            queue_size=self._queue_size,
            clock=self._clock,
        )
