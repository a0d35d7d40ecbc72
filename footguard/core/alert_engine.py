"""AlertEngine — threshold rules with per-rule cooldown.

Each reading is checked against every ``AlertRule``.  A rule that fires
produces one Alert unless the same rule (and zone, for zone rules) fired
less than ``cooldown`` ago.  Firing resets that rule's timer.

Time is read from the reading itself, never from the wall clock, so a
replayed stream of readings yields the same alerts as the live one.

Severity follows one pattern throughout: past the warning threshold is
``warning``, past the critical threshold is ``critical``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, Iterable, Iterator, Sequence

from footguard.core import trends
from footguard.core.thresholds import DEFAULT_COOLDOWN, Thresholds
from footguard.domain.alert import Alert, CooldownKey
from footguard.domain.enums import AlertRule, AlertSeverity, AlertType, Zone
from footguard.domain.reading import SensorReading

logger = logging.getLogger(__name__)

# A rule evaluator yields (zone, build) for every condition that holds;
# ``build`` is only called when the cooldown allows the alert.
Candidate = tuple[Zone | None, Callable[[], Alert]]
RuleEvaluator = Callable[[SensorReading, Sequence[SensorReading]], Iterable[Candidate]]


def _severity(critical: bool) -> AlertSeverity:
    return AlertSeverity.CRITICAL if critical else AlertSeverity.WARNING


class AlertEngine:
    """Stateful rule evaluator.  Holds only the cooldown map.

    Args:
        thresholds: Warning/critical limits shared with the scorer.
        cooldown: Minimum time between two alerts from the same rule key.
    """

    def __init__(
        self,
        thresholds: Thresholds | None = None,
        cooldown: timedelta = DEFAULT_COOLDOWN,
    ) -> None:
        self._t = thresholds or Thresholds()
        self._cooldown = cooldown
        self._last_fired: dict[CooldownKey, datetime] = {}
        self._evaluators: dict[AlertRule, RuleEvaluator] = {
            AlertRule.TEMPERATURE_HIGH: self._temperature_high,
            AlertRule.TEMPERATURE_LOW: self._temperature_low,
            AlertRule.PRESSURE_HIGH: self._pressure_high,
            AlertRule.PRESSURE_SPIKE: self._pressure_spike,
            AlertRule.SPO2_LOW: self._spo2_low,
            AlertRule.HEART_RATE_LOW: self._heart_rate_low,
            AlertRule.HEART_RATE_HIGH: self._heart_rate_high,
            AlertRule.TEMPERATURE_ASYMMETRY: self._temperature_asymmetry,
            AlertRule.BATTERY_LOW: self._battery_low,
        }
        missing = set(AlertRule) - set(self._evaluators)
        if missing:
            raise RuntimeError(f"alert rules without evaluator: {sorted(r.value for r in missing)}")

    # ── Public API ───────────────────────────────────────────────────────

    @property
    def cooldown(self) -> timedelta:
        return self._cooldown

    @property
    def rules(self) -> list[AlertRule]:
        return list(self._evaluators)

    def evaluate(self, reading: SensorReading, history: Sequence[SensorReading] = ()) -> list[Alert]:
        """Run every rule against *reading*; return the alerts that fired."""
        window = trends.window_with(reading, history)
        now = reading.timestamp
        fired: list[Alert] = []

        for rule, evaluator in self._evaluators.items():
            for zone, build in evaluator(reading, window):
                key = CooldownKey(rule, zone if rule.per_zone else None)
                if not self.can_fire(key, now):
                    logger.debug("Alert %s suppressed by cooldown", key)
                    continue
                alert = build()
                self._last_fired[key] = now
                fired.append(alert)
                logger.info("Alert fired: %s (%s)", alert, key)

        return fired

    def can_fire(self, key: CooldownKey, now: datetime) -> bool:
        last = self._last_fired.get(key)
        if last is None:
            return True
        return (now - last) > self._cooldown

    def reset_cooldowns(self) -> None:
        self._last_fired.clear()

    def cooldown_state(self) -> dict[str, datetime]:
        """Last firing time per rule key, for diagnostics."""
        return {str(key): ts for key, ts in self._last_fired.items()}

    # ── Temperature ──────────────────────────────────────────────────────

    def _temperature_high(self, reading: SensorReading, window: Sequence[SensorReading]) -> Iterator[Candidate]:
        t = self._t
        for zone, temp in zip(Zone, reading.temperatures):
            if temp > t.temp_warning_high:
                yield zone, self._builder(
                    alert_type=AlertType.TEMPERATURE,
                    severity=_severity(temp > t.temp_critical_high),
                    title="High Temperature",
                    message=(
                        f"{zone.display_name} area temperature is elevated ({temp:.1f}°C). "
                        "This may indicate inflammation or infection."
                    ),
                    affected_zone=zone.display_name,
                    actual_value=temp,
                    threshold=t.temp_warning_high,
                    action="Check the area for redness or swelling and rest your foot",
                    timestamp=reading.timestamp,
                )

    def _temperature_low(self, reading: SensorReading, window: Sequence[SensorReading]) -> Iterator[Candidate]:
        t = self._t
        for zone, temp in zip(Zone, reading.temperatures):
            # Zero or below means the zone sensor has not reported yet.
            if 0 < temp < t.temp_warning_low:
                yield zone, self._builder(
                    alert_type=AlertType.TEMPERATURE,
                    severity=_severity(temp < t.temp_critical_low),
                    title="Low Temperature",
                    message=(
                        f"{zone.display_name} area showing low temperature ({temp:.1f}°C). "
                        "This may indicate poor circulation."
                    ),
                    affected_zone=zone.display_name,
                    actual_value=temp,
                    threshold=t.temp_warning_low,
                    action="Warm your feet and check circulation",
                    timestamp=reading.timestamp,
                )

    def _temperature_asymmetry(self, reading: SensorReading, window: Sequence[SensorReading]) -> Iterator[Candidate]:
        t = self._t
        spread = reading.temperature_spread
        if spread > t.temp_asymmetry_warning:
            hottest = reading.hottest_zone.display_name
            yield None, self._builder(
                alert_type=AlertType.ASYMMETRY,
                severity=_severity(spread > t.temp_asymmetry_critical),
                title="Temperature Asymmetry",
                message=(
                    f"Foot zones differ by {spread:.1f}°C; {hottest} is the warmest. "
                    "Localized heat can precede skin breakdown."
                ),
                affected_zone=hottest,
                actual_value=spread,
                threshold=t.temp_asymmetry_warning,
                action=f"Inspect the {hottest.lower()} area closely",
                timestamp=reading.timestamp,
            )

    # ── Pressure ─────────────────────────────────────────────────────────

    def _pressure_high(self, reading: SensorReading, window: Sequence[SensorReading]) -> Iterator[Candidate]:
        t = self._t
        for zone, pressure in zip(Zone, reading.pressures):
            if pressure > t.pressure_warning:
                yield zone, self._builder(
                    alert_type=AlertType.PRESSURE,
                    severity=_severity(pressure > t.pressure_critical),
                    title="High Pressure",
                    message=f"High pressure detected at {zone.display_name} ({pressure:.0f} kPa).",
                    affected_zone=zone.display_name,
                    actual_value=pressure,
                    threshold=t.pressure_warning,
                    action="Shift your weight or change position",
                    timestamp=reading.timestamp,
                )

    def _pressure_spike(self, reading: SensorReading, window: Sequence[SensorReading]) -> Iterator[Candidate]:
        t = self._t
        for zone, delta in zip(Zone, trends.pressure_spike_deltas(window)):
            if delta > t.pressure_spike:
                yield zone, self._builder(
                    alert_type=AlertType.PRESSURE,
                    severity=AlertSeverity.WARNING,
                    title="Pressure Spike",
                    message=f"Sudden pressure increase at {zone.display_name} (+{delta:.1f} kPa).",
                    affected_zone=zone.display_name,
                    actual_value=reading.pressures[zone],
                    threshold=t.pressure_spike,
                    action="Check foot position and redistribute weight",
                    timestamp=reading.timestamp,
                )

    # ── Circulation ──────────────────────────────────────────────────────

    def _spo2_low(self, reading: SensorReading, window: Sequence[SensorReading]) -> Iterator[Candidate]:
        t = self._t
        spo2 = reading.spo2
        if 0 < spo2 < t.spo2_normal:
            yield None, self._builder(
                alert_type=AlertType.CIRCULATION,
                severity=_severity(spo2 < t.spo2_critical),
                title="Low Blood Oxygen",
                message=f"Blood oxygen is low ({spo2:.1f}%). Circulation to the feet may be reduced.",
                actual_value=spo2,
                threshold=t.spo2_normal,
                action="Sit down, breathe deeply and re-check. Seek help if it stays low.",
                timestamp=reading.timestamp,
            )

    def _heart_rate_low(self, reading: SensorReading, window: Sequence[SensorReading]) -> Iterator[Candidate]:
        t = self._t
        hr = reading.heart_rate
        if 0 < hr < t.hr_warning_low:
            yield None, self._builder(
                alert_type=AlertType.CIRCULATION,
                severity=_severity(hr < t.hr_critical_low),
                title="Low Heart Rate",
                message=f"Heart rate is low ({hr} BPM). This may indicate a health concern.",
                actual_value=float(hr),
                threshold=float(t.hr_warning_low),
                action="Rest and monitor. Seek help if symptoms persist.",
                timestamp=reading.timestamp,
            )

    def _heart_rate_high(self, reading: SensorReading, window: Sequence[SensorReading]) -> Iterator[Candidate]:
        t = self._t
        hr = reading.heart_rate
        if hr > t.hr_warning_high:
            yield None, self._builder(
                alert_type=AlertType.CIRCULATION,
                severity=_severity(hr > t.hr_critical_high),
                title="High Heart Rate",
                message=f"Heart rate is elevated ({hr} BPM). Consider resting if not exercising.",
                actual_value=float(hr),
                threshold=float(t.hr_warning_high),
                action="Rest and take slow, deep breaths",
                timestamp=reading.timestamp,
            )

    # ── Device ───────────────────────────────────────────────────────────

    def _battery_low(self, reading: SensorReading, window: Sequence[SensorReading]) -> Iterator[Candidate]:
        t = self._t
        level = reading.battery_level
        if level <= t.battery_low:
            yield None, self._builder(
                alert_type=AlertType.BATTERY,
                severity=_severity(level <= t.battery_critical),
                title="Low Battery",
                message=f"Sock battery is at {level}%. Monitoring stops when it runs out.",
                actual_value=float(level),
                threshold=float(t.battery_low),
                action="Charge the device soon",
                timestamp=reading.timestamp,
            )

    # ── Helpers ──────────────────────────────────────────────────────────

    @staticmethod
    def _builder(**fields) -> Callable[[], Alert]:
        return lambda: Alert(**fields)
