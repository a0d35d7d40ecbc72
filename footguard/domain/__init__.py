from footguard.domain.alert import Alert, AlertStats, CooldownKey
from footguard.domain.reading import InvalidReading, SensorReading, Vector3
from footguard.domain.risk import DailyRiskSummary, RiskScore

__all__ = [
    "Alert",
    "AlertStats",
    "CooldownKey",
    "DailyRiskSummary",
    "InvalidReading",
    "RiskScore",
    "SensorReading",
    "Vector3",
]
