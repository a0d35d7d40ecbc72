"""FullReadingAdapter — the canonical JSON reading format.

Expected raw format (``footguard.reading/v1``):
{
    "schema": "footguard.reading/v1",
    "timestamp": 1767268800000,
    "temperatures": [32.1, 32.4, 31.9, 31.5],
    "pressures": [45.0, 60.2, 12.0, 30.5],
    "spO2": 97.5,
    "heartRate": 74,
    "accelerometer": {"x": 0.1, "y": -0.2, "z": 9.7},
    "gyroscope": {"x": 0.0, "y": 0.0, "z": 0.0},
    "stepCount": 1520,
    "batteryLevel": 86,
    "activityType": "walking"
}

Only ``timestamp``, ``temperatures`` and ``pressures`` are required.
"""

from __future__ import annotations

from typing import Any

from footguard.adapters.base import ReadingAdapter
from footguard.domain.reading import SensorReading

FULL_SCHEMA = "footguard.reading/v1"


class FullReadingAdapter(ReadingAdapter):
    """Validates canonical camelCase payloads as-is."""

    @property
    def schema_name(self) -> str:
        return FULL_SCHEMA

    def adapt(self, raw: dict[str, Any]) -> SensorReading:
        return SensorReading.parse(raw, self.schema_name)
