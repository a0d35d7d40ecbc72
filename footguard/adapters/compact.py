"""CompactReadingAdapter — the device's short-key BLE packet.

Expected raw format (``footguard.reading-compact/v1``):
{
    "schema": "footguard.reading-compact/v1",
    "ts": 1767268800.5,
    "temp": [32.1, 32.4, 31.9, 31.5],
    "pres": [45.0, 60.2, 12.0, 30.5],
    "spo2": 97.5,
    "hr": 74,
    "acc": [0.1, -0.2, 9.7],
    "gyr": [0.0, 0.0, 0.0],
    "steps": 1520,
    "batt": 86,
    "activity": "walking"
}

``ts`` is in epoch seconds.  Only ``ts``, ``temp`` and ``pres`` are required.
"""

from __future__ import annotations

from typing import Any

from footguard.adapters.base import ReadingAdapter
from footguard.domain.reading import InvalidReading, SensorReading

COMPACT_SCHEMA = "footguard.reading-compact/v1"

# compact key → canonical key, for fields that map one-to-one
_RENAMES = {
    "temp": "temperatures",
    "pres": "pressures",
    "spo2": "spO2",
    "hr": "heartRate",
    "steps": "stepCount",
    "batt": "batteryLevel",
    "activity": "activityType",
}

_VECTORS = {"acc": "accelerometer", "gyr": "gyroscope"}


class CompactReadingAdapter(ReadingAdapter):
    """Expands short keys and positional vectors into the canonical shape."""

    @property
    def schema_name(self) -> str:
        return COMPACT_SCHEMA

    def adapt(self, raw: dict[str, Any]) -> SensorReading:
        canonical: dict[str, Any] = {}

        # ── Timestamp: seconds → milliseconds ────────────────────────────
        ts = raw.get("ts")
        if ts is None:
            raise InvalidReading(
                f"{COMPACT_SCHEMA} payload missing 'ts'",
                [{"field": "ts", "message": "Field required"}],
            )
        if isinstance(ts, bool) or not isinstance(ts, (int, float)):
            raise InvalidReading(
                f"{COMPACT_SCHEMA} 'ts' must be epoch seconds",
                [{"field": "ts", "message": "Input should be a number"}],
            )
        canonical["timestamp"] = ts * 1000

        for short, full in _RENAMES.items():
            if short in raw:
                canonical[full] = raw[short]

        # ── Positional [x, y, z] vectors ─────────────────────────────────
        for short, full in _VECTORS.items():
            if short not in raw:
                continue
            values = raw[short]
            if not isinstance(values, (list, tuple)) or len(values) != 3:
                raise InvalidReading(
                    f"{COMPACT_SCHEMA} '{short}' must be a 3-element list",
                    [{"field": short, "message": "Expected [x, y, z]"}],
                )
            canonical[full] = dict(zip("xyz", values))

        return SensorReading.parse(canonical, self.schema_name)
