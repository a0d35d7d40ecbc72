"""Bounded, newest-first alert list with read state and filters.

New alerts go to the head; once the list is longer than ``capacity``
the oldest alerts fall off the tail.  Every stored alert is also
published to the attached broadcaster, if any.

Alerts are immutable, so marking one read replaces it in place with
its read copy.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Iterable

from footguard.domain.alert import Alert, AlertStats
from footguard.domain.enums import AlertSeverity, AlertType
from footguard.foundation.clock import Clock, utc_now
from footguard.services.broadcaster import EventBroadcaster

logger = logging.getLogger(__name__)

DEFAULT_MAX_ALERTS = 100


class AlertStore:
    """In-memory alert storage for one monitoring session.

    Args:
        capacity: Maximum number of alerts retained.
        clock: Source of "now" for recency filters and age-based clearing.
        broadcaster: Channel that receives each newly stored alert.
    """

    def __init__(
        self,
        capacity: int = DEFAULT_MAX_ALERTS,
        clock: Clock = utc_now,
        broadcaster: EventBroadcaster[Alert] | None = None,
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._capacity = capacity
        self._clock = clock
        self._broadcaster = broadcaster
        self._alerts: list[Alert] = []

    @property
    def capacity(self) -> int:
        return self._capacity

    # ── Mutations ────────────────────────────────────────────────────────

    def add(self, alert: Alert) -> None:
        self.add_many([alert])

    def add_many(self, alerts: Iterable[Alert]) -> None:
        """Insert *alerts* (in production order) at the head, then trim."""
        new = list(alerts)
        if not new:
            return
        self._alerts[:0] = reversed(new)
        evicted = len(self._alerts) - self._capacity
        if evicted > 0:
            del self._alerts[self._capacity:]
            logger.debug("Alert store trimmed %d oldest alerts", evicted)
        if self._broadcaster is not None:
            # Only alerts that survived the trim are announced.
            for alert in new[-self._capacity:]:
                self._broadcaster.publish(alert)

    def mark_read(self, alert_id: str) -> Alert | None:
        for i, alert in enumerate(self._alerts):
            if alert.id == alert_id:
                self._alerts[i] = alert.mark_read()
                return self._alerts[i]
        return None

    def mark_all_read(self) -> int:
        changed = 0
        for i, alert in enumerate(self._alerts):
            if not alert.is_read:
                self._alerts[i] = alert.mark_read()
                changed += 1
        return changed

    def remove(self, alert_id: str) -> bool:
        before = len(self._alerts)
        self._alerts = [a for a in self._alerts if a.id != alert_id]
        return len(self._alerts) < before

    def clear(self) -> None:
        self._alerts.clear()

    def clear_older_than(self, age: timedelta) -> int:
        """Drop alerts whose timestamp is more than *age* before now."""
        cutoff = self._clock() - age
        before = len(self._alerts)
        self._alerts = [a for a in self._alerts if a.timestamp >= cutoff]
        removed = before - len(self._alerts)
        if removed:
            logger.info("Cleared %d alerts older than %s", removed, age)
        return removed

    # ── Queries ──────────────────────────────────────────────────────────

    def all(self) -> list[Alert]:
        return list(self._alerts)

    def get(self, alert_id: str) -> Alert | None:
        return next((a for a in self._alerts if a.id == alert_id), None)

    def by_type(self, alert_type: AlertType) -> list[Alert]:
        return [a for a in self._alerts if a.alert_type == alert_type]

    def by_severity(self, severity: AlertSeverity) -> list[Alert]:
        return [a for a in self._alerts if a.severity == severity]

    def recent(self, hours: float) -> list[Alert]:
        cutoff = self._clock() - timedelta(hours=hours)
        return [a for a in self._alerts if a.timestamp >= cutoff]

    def unread(self) -> list[Alert]:
        return [a for a in self._alerts if not a.is_read]

    def critical(self) -> list[Alert]:
        return self.by_severity(AlertSeverity.CRITICAL)

    @property
    def unread_count(self) -> int:
        return sum(1 for a in self._alerts if not a.is_read)

    @property
    def has_critical_unread(self) -> bool:
        return any(
            not a.is_read and a.severity == AlertSeverity.CRITICAL for a in self._alerts
        )

    def stats(self) -> AlertStats:
        return AlertStats.from_alerts(self._alerts)

    def __len__(self) -> int:
        return len(self._alerts)
