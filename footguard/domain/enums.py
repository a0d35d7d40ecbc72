"""Controlled enumerations for the footguard domain.

Every categorical field in the domain MUST reference an enum defined here.
Free-form strings are not acceptable for classification fields, and the
string values are part of the persisted wire format.
"""

from __future__ import annotations

from enum import Enum, IntEnum


class Zone(IntEnum):
    """Instrumented foot regions.  The index is the position in zone arrays."""

    HEEL = 0
    BALL = 1
    ARCH = 2
    TOE = 3

    @property
    def display_name(self) -> str:
        return self.name.capitalize()


class ActivityType(str, Enum):
    """Activity classification reported by the device IMU."""

    RESTING = "resting"
    SITTING = "sitting"
    STANDING = "standing"
    WALKING = "walking"
    RUNNING = "running"
    UNKNOWN = "unknown"


class RiskLevel(str, Enum):
    """Severity tier of an overall risk score."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class AlertType(str, Enum):
    TEMPERATURE = "temperature"
    PRESSURE = "pressure"
    CIRCULATION = "circulation"
    GAIT = "gait"
    BATTERY = "battery"
    ASYMMETRY = "asymmetry"


class AlertSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class AlertRule(str, Enum):
    """The closed set of alert rules evaluated per reading.

    Each rule owns its own cooldown timer; per-zone rules own one timer
    per zone.
    """

    TEMPERATURE_HIGH = "temperature_high"
    TEMPERATURE_LOW = "temperature_low"
    PRESSURE_HIGH = "pressure_high"
    PRESSURE_SPIKE = "pressure_spike"
    SPO2_LOW = "spo2_low"
    HEART_RATE_LOW = "heart_rate_low"
    HEART_RATE_HIGH = "heart_rate_high"
    TEMPERATURE_ASYMMETRY = "temperature_asymmetry"
    BATTERY_LOW = "battery_low"

    @property
    def per_zone(self) -> bool:
        return self in _PER_ZONE_RULES


_PER_ZONE_RULES = frozenset({
    AlertRule.TEMPERATURE_HIGH,
    AlertRule.TEMPERATURE_LOW,
    AlertRule.PRESSURE_HIGH,
    AlertRule.PRESSURE_SPIKE,
})
