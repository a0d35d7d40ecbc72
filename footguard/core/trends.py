"""Trend and rate-of-change helpers over a reading window.

Every helper takes the window in chronological order with the reading
being evaluated as its last element.  When the window is shorter than
the helper's lookback the helper reports "no signal" (0.0 or False);
none of them raise.

Elapsed time is truncated to whole minutes (temperature rate) or whole
seconds (step frequency) before dividing, so windows spanning less than
one unit also report no signal.
"""

from __future__ import annotations

from typing import Sequence

from footguard.domain.enums import ActivityType
from footguard.domain.reading import STANDARD_GRAVITY, SensorReading

WALKING_MAX_DEVIATION = 8.0
RUNNING_MAX_DEVIATION = 15.0


def window_with(reading: SensorReading, history: Sequence[SensorReading]) -> list[SensorReading]:
    """Return *history* as a list ending with *reading*.

    Callers may pass a history that already ends with this reading object
    (the session pushes before scoring) or one that does not; both yield
    the same window.  An equal but separate reading, such as a
    retransmission, is appended.
    """
    window = list(history)
    if not window or window[-1] is not reading:
        window.append(reading)
    return window


def previous_reading(window: Sequence[SensorReading]) -> SensorReading | None:
    """The reading immediately before the current one, if any."""
    if len(window) < 2:
        return None
    return window[-2]


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


# ── Temperature ──────────────────────────────────────────────────────────────

def temperature_rate_of_change(window: Sequence[SensorReading], lookback: int = 5) -> float:
    """Absolute change of average zone temperature, in °C per hour.

    Compares the first and last of the most recent *lookback* readings.
    """
    if len(window) < lookback:
        return 0.0
    recent = window[-lookback:]
    first, last = recent[0], recent[-1]
    minutes = int((last.timestamp - first.timestamp).total_seconds() / 60)
    if minutes == 0:
        return 0.0
    return abs(last.average_temperature - first.average_temperature) / (minutes / 60)


# ── Pressure ─────────────────────────────────────────────────────────────────

def pressure_evenness(pressures: Sequence[float]) -> float:
    """0–1 distribution score, 1 meaning perfectly even loading.

    Computed as ``1 - variance / mean²`` (population variance).  An
    unloaded foot counts as even.
    """
    if all(p == 0 for p in pressures):
        return 1.0
    mean = sum(pressures) / len(pressures)
    if mean == 0:
        return 1.0
    variance = sum((p - mean) ** 2 for p in pressures) / len(pressures)
    return _clamp01(1 - variance / (mean * mean))


def sustained_high_pressure(
    window: Sequence[SensorReading],
    threshold: float,
    lookback: int = 5,
    min_hits: int = 4,
) -> bool:
    """True if at least *min_hits* of the last *lookback* readings peaked above *threshold*."""
    if len(window) < lookback:
        return False
    hits = sum(1 for r in window[-lookback:] if r.max_pressure > threshold)
    return hits >= min_hits


def pressure_spike_deltas(window: Sequence[SensorReading]) -> list[float]:
    """Per-zone pressure increase versus the previous reading (empty if none)."""
    previous = previous_reading(window)
    if previous is None:
        return []
    current = window[-1]
    return [now - before for now, before in zip(current.pressures, previous.pressures)]


# ── Circulation ──────────────────────────────────────────────────────────────

def spo2_dropping(window: Sequence[SensorReading], lookback: int = 5, min_drops: int = 3) -> bool:
    """True if SpO2 fell between consecutive readings at least *min_drops* times."""
    if len(window) < lookback:
        return False
    recent = window[-lookback:]
    drops = sum(1 for a, b in zip(recent, recent[1:]) if b.spo2 < a.spo2)
    return drops >= min_drops


# ── Gait ─────────────────────────────────────────────────────────────────────

def gait_stability(reading: SensorReading) -> float:
    """0–1 stability from deviation of the accelerometer against gravity."""
    acc = reading.accelerometer
    deviation = abs(acc.x) + abs(acc.y) + abs(acc.z - STANDARD_GRAVITY)
    max_deviation = (
        RUNNING_MAX_DEVIATION
        if reading.activity_type == ActivityType.RUNNING
        else WALKING_MAX_DEVIATION
    )
    return _clamp01(1 - deviation / max_deviation)


def sudden_gait_change(window: Sequence[SensorReading], lookback: int = 3) -> bool:
    """True for an A → B → C activity pattern with all three labels distinct.

    Looks at the last *lookback* readings; the oldest and newest must
    differ and the middle one must differ from both.
    """
    if len(window) < lookback:
        return False
    recent = window[-lookback:]
    oldest, middle, newest = recent[0], recent[len(recent) // 2], recent[-1]
    if oldest.activity_type == newest.activity_type:
        return False
    return (
        middle.activity_type != oldest.activity_type
        and middle.activity_type != newest.activity_type
    )


def step_frequency(window: Sequence[SensorReading], lookback: int = 10) -> float:
    """Steps per minute over the last *lookback* readings."""
    if len(window) < lookback:
        return 0.0
    recent = window[-lookback:]
    seconds = int((recent[-1].timestamp - recent[0].timestamp).total_seconds())
    if seconds == 0:
        return 0.0
    return (recent[-1].step_count - recent[0].step_count) / (seconds / 60)
