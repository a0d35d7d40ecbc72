"""Canonical SensorReading model — the contract between device and engine.

A SensorReading is one periodic snapshot of every sensor on the sock.
It is validated once, at the boundary, so the scoring and alerting code
never re-checks array lengths or numeric sanity.

Zone arrays are fixed-length tuples ordered Heel, Ball, Arch, Toe
(see ``Zone``).  Field names on the wire are camelCase; timestamps travel
as epoch milliseconds.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationError
from pydantic.alias_generators import to_camel

from footguard.domain.enums import ActivityType, Zone
from footguard.domain.types import EpochMillis

STANDARD_GRAVITY = 9.8

ZoneValues = tuple[float, float, float, float]


# ── Errors ───────────────────────────────────────────────────────────────────

class InvalidReading(ValueError):
    """A raw reading that cannot be turned into a SensorReading.

    ``errors`` holds one ``{"field": ..., "message": ...}`` entry per
    problem so API layers can report them verbatim.
    """

    def __init__(self, reason: str, errors: list[dict[str, str]] | None = None) -> None:
        self.reason = reason
        self.errors: list[dict[str, str]] = errors or []
        super().__init__(reason)

    @classmethod
    def from_validation_error(cls, exc: ValidationError, schema: str | None = None) -> "InvalidReading":
        errors = [
            {
                "field": ".".join(str(part) for part in err["loc"]) or "<root>",
                "message": err["msg"],
            }
            for err in exc.errors()
        ]
        where = f" ({schema})" if schema else ""
        return cls(f"reading failed validation{where}: {len(errors)} error(s)", errors)

    def to_dict(self) -> dict[str, Any]:
        return {"reason": self.reason, "errors": self.errors}


# ── Vectors ──────────────────────────────────────────────────────────────────

class Vector3(BaseModel):
    """Three-axis IMU sample (m/s² for acceleration, deg/s for rotation)."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    model_config = {"frozen": True, "allow_inf_nan": False}


def _resting_accelerometer() -> Vector3:
    return Vector3(x=0.0, y=0.0, z=STANDARD_GRAVITY)


# ── SensorReading ────────────────────────────────────────────────────────────

class SensorReading(BaseModel):
    """One validated multi-sensor snapshot.  Immutable after creation."""

    timestamp: EpochMillis = Field(..., description="When the device sampled (UTC)")
    temperatures: ZoneValues = Field(..., description="Zone temperatures in °C, Heel/Ball/Arch/Toe")
    pressures: ZoneValues = Field(..., description="Zone pressures in kPa, Heel/Ball/Arch/Toe")
    spo2: float = Field(98.0, alias="spO2", description="Blood oxygen saturation (%)")
    heart_rate: int = Field(72, description="Heart rate (BPM)")
    accelerometer: Vector3 = Field(default_factory=_resting_accelerometer)
    gyroscope: Vector3 = Field(default_factory=Vector3)
    step_count: int = Field(0, description="Cumulative step counter")
    battery_level: int = Field(100, description="Device battery (%)")
    activity_type: ActivityType = Field(ActivityType.UNKNOWN)

    model_config = {
        "frozen": True,
        "allow_inf_nan": False,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    # ── Construction ─────────────────────────────────────────────────────

    @classmethod
    def parse(cls, raw: dict[str, Any], schema: str | None = None) -> "SensorReading":
        """Validate a wire-format dict, raising InvalidReading on failure."""
        try:
            return cls.model_validate(raw)
        except ValidationError as exc:
            raise InvalidReading.from_validation_error(exc, schema) from exc

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    # ── Derived values ───────────────────────────────────────────────────

    @property
    def average_temperature(self) -> float:
        return sum(self.temperatures) / len(self.temperatures)

    @property
    def max_temperature(self) -> float:
        return max(self.temperatures)

    @property
    def min_temperature(self) -> float:
        return min(self.temperatures)

    @property
    def temperature_spread(self) -> float:
        """Hottest minus coldest zone — the asymmetry signal."""
        return self.max_temperature - self.min_temperature

    @property
    def hottest_zone(self) -> Zone:
        return Zone(self.temperatures.index(self.max_temperature))

    @property
    def average_pressure(self) -> float:
        return sum(self.pressures) / len(self.pressures)

    @property
    def max_pressure(self) -> float:
        return max(self.pressures)

    @property
    def peak_pressure_zone(self) -> Zone:
        return Zone(self.pressures.index(self.max_pressure))

    def __str__(self) -> str:
        return (
            f"SensorReading(ts={self.timestamp.isoformat()}, temps={list(self.temperatures)}, "
            f"pressures={list(self.pressures)}, spO2={self.spo2}, hr={self.heart_rate}, "
            f"steps={self.step_count}, battery={self.battery_level}%)"
        )
