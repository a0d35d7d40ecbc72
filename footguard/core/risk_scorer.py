"""RiskScorer — deterministic multi-signal risk computation.

Design principles:
    1. Pure function: ``score(reading, history)`` depends only on its
       arguments and the thresholds/weights given at construction.
    2. No side effects, no state mutation, no I/O.
    3. Each sub-score is a sum of independent penalties, clamped to 0–100
       on its own before weighting.

Overall formula:
    overall = round_half_up(
        w_temperature * temperature_risk
      + w_pressure    * pressure_risk
      + w_circulation * circulation_risk
      + w_gait        * gait_risk
    ) clamped to [0, 100]

Tiers (inclusive upper bounds): ≤30 Low, ≤50 Moderate, ≤70 High, else Critical.

Zone temperatures, SpO2 and heart rate at or below zero are treated as
"sensor not reporting" and contribute no penalty, so an all-zero reading
scores 0.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

from footguard.core import trends
from footguard.core.thresholds import RiskWeights, Thresholds, WindowConfig
from footguard.domain.enums import ActivityType, RiskLevel
from footguard.domain.reading import SensorReading
from footguard.domain.risk import MAX_KEY_FACTORS, RiskScore

logger = logging.getLogger(__name__)

_SEVERE_MARKERS = ("Critical", "Dangerous")

_TIER_RECOMMENDATIONS: dict[RiskLevel, tuple[str, str]] = {
    RiskLevel.LOW: (
        "Continue regular monitoring",
        "Maintain good foot hygiene",
    ),
    RiskLevel.MODERATE: (
        "Increase monitoring frequency",
        "Check your footwear for proper fit",
    ),
    RiskLevel.HIGH: (
        "Rest your feet and elevate if possible",
        "Consider consulting a healthcare provider",
    ),
    RiskLevel.CRITICAL: (
        "Seek medical attention promptly",
        "Avoid putting weight on affected areas",
    ),
}

_FACTOR_RECOMMENDATIONS = {
    "temperature": (
        "Apply cool compress to hot spots",
        "Check for signs of infection or inflammation",
    ),
    "pressure": (
        "Redistribute weight or change position",
        "Consider using cushioned insoles",
    ),
    "circulation": (
        "Move around to improve blood flow",
        "Avoid tight socks or footwear",
    ),
    "gait": (
        "Walk slowly and carefully",
        "Use assistive devices if needed",
    ),
}

# Sub-scores above this add their factor-specific recommendations.
RECOMMENDATION_TRIGGER = 50


def round_half_up(value: float) -> int:
    # Tolerance absorbs float error in weighted sums such as 0.3 * 55.
    return int(math.floor(value + 0.5 + 1e-9))


def clamp_score(value: float) -> int:
    return max(0, min(100, int(value)))


def severity_tier(score: int, thresholds: Thresholds | None = None) -> RiskLevel:
    """Map an overall score to its tier.  Monotonic step function."""
    t = thresholds or Thresholds()
    if score <= t.risk_low_max:
        return RiskLevel.LOW
    if score <= t.risk_moderate_max:
        return RiskLevel.MODERATE
    if score <= t.risk_high_max:
        return RiskLevel.HIGH
    return RiskLevel.CRITICAL


class RiskScorer:
    """Stateless scorer turning one reading plus its history into a RiskScore."""

    def __init__(
        self,
        thresholds: Thresholds | None = None,
        weights: RiskWeights | None = None,
        windows: WindowConfig | None = None,
    ) -> None:
        self._t = thresholds or Thresholds()
        self._weights = weights or RiskWeights()
        self._windows = windows or WindowConfig()

    # ── Public API ───────────────────────────────────────────────────────

    def score(self, reading: SensorReading, history: Sequence[SensorReading] = ()) -> RiskScore:
        """Score *reading*; *history* may or may not already end with it."""
        window = trends.window_with(reading, history)

        temperature = self.temperature_risk(reading, window)
        pressure = self.pressure_risk(reading, window)
        circulation = self.circulation_risk(reading, window)
        gait = self.gait_risk(reading, window)

        overall = self.combine(temperature, pressure, circulation, gait)
        level = severity_tier(overall, self._t)
        factors = self.identify_factors(reading, window, temperature, pressure, circulation, gait)

        result = RiskScore(
            overall_score=overall,
            risk_level=level,
            temperature_risk=temperature,
            pressure_risk=pressure,
            circulation_risk=circulation,
            gait_risk=gait,
            factors=tuple(factors),
            recommendations=tuple(
                self.recommendations(level, temperature, pressure, circulation, gait)
            ),
            timestamp=reading.timestamp,
        )
        logger.debug("Scored reading at %s → %s", reading.timestamp.isoformat(), result)
        return result

    def combine(self, temperature: int, pressure: int, circulation: int, gait: int) -> int:
        w = self._weights
        raw = (
            w.temperature * temperature
            + w.pressure * pressure
            + w.circulation * circulation
            + w.gait * gait
        )
        return clamp_score(round_half_up(raw))

    # ── Sub-scores ───────────────────────────────────────────────────────

    def temperature_risk(self, reading: SensorReading, window: Sequence[SensorReading]) -> int:
        t = self._t
        risk = 0
        for temp in reading.temperatures:
            if temp > t.temp_critical_high:
                risk += 30
            elif temp > t.temp_warning_high:
                risk += 20
            elif 0 < temp < t.temp_critical_low:
                risk += 25
            elif 0 < temp < t.temp_warning_low:
                risk += 15

        spread = reading.temperature_spread
        if spread > t.temp_asymmetry_critical:
            risk += 25
        elif spread > t.temp_asymmetry_warning:
            risk += 15

        rate = trends.temperature_rate_of_change(window, self._windows.rate_of_change)
        if rate > t.temp_rate_of_change_warning:
            risk += 15

        return clamp_score(risk)

    def pressure_risk(self, reading: SensorReading, window: Sequence[SensorReading]) -> int:
        t = self._t
        risk = 0
        for pressure in reading.pressures:
            if pressure > t.pressure_critical:
                risk += 35
            elif pressure > t.pressure_high:
                risk += 25
            elif pressure > t.pressure_warning:
                risk += 15

        evenness = trends.pressure_evenness(reading.pressures)
        if evenness < 0.5:
            risk += 20
        elif evenness < 0.7:
            risk += 10

        if self._sustained_high_pressure(window):
            risk += 20

        if any(delta > t.pressure_spike for delta in trends.pressure_spike_deltas(window)):
            risk += 15

        return clamp_score(risk)

    def circulation_risk(self, reading: SensorReading, window: Sequence[SensorReading]) -> int:
        t = self._t
        risk = 0

        spo2 = reading.spo2
        if spo2 > 0:
            if spo2 < t.spo2_critical:
                risk += 50
            elif spo2 < t.spo2_low:
                risk += 35
            elif spo2 < t.spo2_warning:
                risk += 20
            elif spo2 < t.spo2_normal:
                risk += 10

        hr = reading.heart_rate
        if hr > 0:
            if hr < t.hr_critical_low or hr > t.hr_critical_high:
                risk += 30
            elif hr < t.hr_warning_low or hr > t.hr_warning_high:
                risk += 15
            elif hr < t.hr_normal_min or hr > t.hr_normal_max:
                risk += 5

        w = self._windows
        if trends.spo2_dropping(window, w.spo2_drop, w.spo2_drop_min_count):
            risk += 15

        return clamp_score(risk)

    def gait_risk(self, reading: SensorReading, window: Sequence[SensorReading]) -> int:
        if reading.activity_type in (ActivityType.RESTING, ActivityType.SITTING):
            return 0

        t = self._t
        risk = 0

        stability = trends.gait_stability(reading)
        if stability < t.gait_stability_critical:
            risk += 40
        elif stability < t.gait_stability_warning:
            risk += 25

        if trends.sudden_gait_change(window, self._windows.gait_change):
            risk += 20

        if reading.activity_type == ActivityType.WALKING:
            frequency = trends.step_frequency(window, self._windows.step_frequency)
            low = t.step_frequency_min - t.step_frequency_tolerance
            high = t.step_frequency_max + t.step_frequency_tolerance
            if frequency > 0 and (frequency < low or frequency > high):
                risk += 15

        return clamp_score(risk)

    # ── Factors & recommendations ────────────────────────────────────────

    def identify_factors(
        self,
        reading: SensorReading,
        window: Sequence[SensorReading],
        temperature: int,
        pressure: int,
        circulation: int,
        gait: int,
    ) -> list[str]:
        """Human-readable drivers of the score, most severe first, at most five."""
        t = self._t
        factors: list[str] = []

        if temperature > 0:
            hottest = reading.max_temperature
            zone = reading.hottest_zone.display_name
            if hottest > t.temp_critical_high:
                factors.append(f"Critical temperature at {zone} ({hottest:.1f}°C)")
            elif hottest > t.temp_warning_high:
                factors.append(f"Elevated temperature at {zone} ({hottest:.1f}°C)")
            spread = reading.temperature_spread
            if spread > t.temp_asymmetry_warning:
                factors.append(f"Temperature asymmetry detected ({spread:.1f}°C difference)")

        if pressure > 0:
            peak = reading.max_pressure
            zone = reading.peak_pressure_zone.display_name
            if peak > t.pressure_critical:
                factors.append(f"Dangerous pressure at {zone} ({peak:.0f} kPa)")
            elif peak > t.pressure_warning:
                factors.append(f"High pressure at {zone} ({peak:.0f} kPa)")
            if self._sustained_high_pressure(window):
                factors.append("Sustained high pressure detected")

        if circulation > 0:
            if 0 < reading.spo2 < t.spo2_normal:
                factors.append(f"Low blood oxygen ({reading.spo2:.1f}%)")
            hr = reading.heart_rate
            if 0 < hr < t.hr_normal_min:
                factors.append(f"Low heart rate ({hr} BPM)")
            elif hr > t.hr_normal_max:
                factors.append(f"Elevated heart rate ({hr} BPM)")

        if gait > 0 and trends.gait_stability(reading) < t.gait_stability_warning:
            factors.append("Gait instability detected")

        # Stable sort: severe factors first, insertion order otherwise.
        factors.sort(key=lambda f: not any(marker in f for marker in _SEVERE_MARKERS))
        return factors[:MAX_KEY_FACTORS]

    @staticmethod
    def recommendations(
        level: RiskLevel,
        temperature: int,
        pressure: int,
        circulation: int,
        gait: int,
    ) -> list[str]:
        result = list(_TIER_RECOMMENDATIONS[level])
        for name, value in (
            ("temperature", temperature),
            ("pressure", pressure),
            ("circulation", circulation),
            ("gait", gait),
        ):
            if value > RECOMMENDATION_TRIGGER:
                result.extend(_FACTOR_RECOMMENDATIONS[name])
        return result

    # ── Helpers ──────────────────────────────────────────────────────────

    def _sustained_high_pressure(self, window: Sequence[SensorReading]) -> bool:
        w = self._windows
        return trends.sustained_high_pressure(
            window,
            self._t.pressure_warning,
            w.sustained_pressure,
            w.sustained_pressure_min_hits,
        )
