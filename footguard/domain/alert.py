"""Alert records and the statistics derived from a set of them.

An Alert is produced by the AlertEngine when a rule fires outside its
cooldown.  The only state change it ever sees is read/unread, which is
expressed by returning a new instance from ``mark_read()``.
"""

from __future__ import annotations

from typing import Any, Iterable, NamedTuple

from pydantic import BaseModel, Field

from footguard.domain.enums import AlertRule, AlertSeverity, AlertType, Zone
from footguard.domain.types import WIRE_MODEL_CONFIG, EpochMillis
from footguard.foundation.clock import utc_now
from footguard.foundation.identifiers import new_id


class CooldownKey(NamedTuple):
    """Cooldown map key: one timer per rule, per zone for zone rules."""

    rule: AlertRule
    zone: Zone | None = None

    def __str__(self) -> str:
        if self.zone is None:
            return self.rule.value
        return f"{self.rule.value}:{self.zone.display_name.lower()}"


class Alert(BaseModel):
    """A severity-classified notification about one reading."""

    id: str = Field(default_factory=new_id)
    alert_type: AlertType = Field(..., alias="type")
    severity: AlertSeverity
    title: str = Field(..., min_length=1, max_length=120)
    message: str
    affected_zone: str | None = None
    actual_value: float | None = None
    threshold: float | None = None
    action: str | None = None
    timestamp: EpochMillis = Field(default_factory=utc_now)
    is_read: bool = False

    model_config = WIRE_MODEL_CONFIG

    def mark_read(self) -> "Alert":
        if self.is_read:
            return self
        return self.model_copy(update={"is_read": True})

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    def __str__(self) -> str:
        zone = f" @{self.affected_zone}" if self.affected_zone else ""
        return f"Alert[{self.severity.value}/{self.alert_type.value}{zone}] {self.title}"


class AlertStats(BaseModel):
    """Counts over the current alert store contents.  Never cached."""

    total: int = 0
    unread: int = 0
    critical: int = 0
    warning: int = 0
    info: int = 0
    temperature_alerts: int = 0
    pressure_alerts: int = 0
    circulation_alerts: int = 0
    gait_alerts: int = 0
    battery_alerts: int = 0
    asymmetry_alerts: int = 0

    model_config = WIRE_MODEL_CONFIG

    @classmethod
    def from_alerts(cls, alerts: Iterable[Alert]) -> "AlertStats":
        items = list(alerts)
        by_severity = {sev: 0 for sev in AlertSeverity}
        by_type = {kind: 0 for kind in AlertType}
        unread = 0
        for alert in items:
            by_severity[alert.severity] += 1
            by_type[alert.alert_type] += 1
            if not alert.is_read:
                unread += 1

        return cls(
            total=len(items),
            unread=unread,
            critical=by_severity[AlertSeverity.CRITICAL],
            warning=by_severity[AlertSeverity.WARNING],
            info=by_severity[AlertSeverity.INFO],
            temperature_alerts=by_type[AlertType.TEMPERATURE],
            pressure_alerts=by_type[AlertType.PRESSURE],
            circulation_alerts=by_type[AlertType.CIRCULATION],
            gait_alerts=by_type[AlertType.GAIT],
            battery_alerts=by_type[AlertType.BATTERY],
            asymmetry_alerts=by_type[AlertType.ASYMMETRY],
        )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
