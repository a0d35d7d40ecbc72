"""Clinical thresholds and score weights.

Defaults are the reference values used for diabetic foot monitoring.
Both dataclasses are frozen; main.py builds them from Settings so the
core never reads environment configuration itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta


@dataclass(frozen=True)
class Thresholds:
    """Per-signal warning/critical limits shared by scorer and alert engine."""

    # Temperature (°C)
    temp_warning_high: float = 35.0
    temp_critical_high: float = 37.0
    temp_warning_low: float = 27.0
    temp_critical_low: float = 25.0
    temp_asymmetry_warning: float = 2.0
    temp_asymmetry_critical: float = 3.5
    temp_rate_of_change_warning: float = 1.5  # °C per hour

    # Pressure (kPa)
    pressure_warning: float = 80.0
    pressure_high: float = 100.0
    pressure_critical: float = 120.0
    pressure_spike: float = 30.0

    # Blood oxygen (%)
    spo2_normal: float = 95.0
    spo2_warning: float = 92.0
    spo2_low: float = 90.0
    spo2_critical: float = 85.0

    # Heart rate (BPM)
    hr_normal_min: int = 60
    hr_normal_max: int = 100
    hr_warning_low: int = 50
    hr_warning_high: int = 110
    hr_critical_low: int = 40
    hr_critical_high: int = 130

    # Gait
    gait_stability_warning: float = 0.7
    gait_stability_critical: float = 0.5
    step_frequency_min: int = 80  # steps per minute
    step_frequency_max: int = 130
    step_frequency_tolerance: int = 20

    # Battery (%)
    battery_low: int = 20
    battery_critical: int = 10

    # Score tiers (inclusive upper bounds)
    risk_low_max: int = 30
    risk_moderate_max: int = 50
    risk_high_max: int = 70


@dataclass(frozen=True)
class RiskWeights:
    """Weights for combining sub-scores into the overall score."""

    temperature: float = 0.30
    pressure: float = 0.35
    circulation: float = 0.20
    gait: float = 0.15


@dataclass(frozen=True)
class WindowConfig:
    """Lookback sizes for trend checks, in readings."""

    rate_of_change: int = 5
    sustained_pressure: int = 5
    sustained_pressure_min_hits: int = 4
    spo2_drop: int = 5
    spo2_drop_min_count: int = 3
    gait_change: int = 3
    step_frequency: int = 10


DEFAULT_COOLDOWN = timedelta(minutes=5)
