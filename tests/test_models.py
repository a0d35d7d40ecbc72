"""Tests for the RiskScore, DailyRiskSummary and Alert wire models."""

from datetime import date, datetime, timezone

import pytest

from footguard.core.risk_scorer import severity_tier
from footguard.domain.alert import Alert, AlertStats
from footguard.domain.enums import AlertSeverity, AlertType, RiskLevel
from footguard.domain.risk import DailyRiskSummary, RiskScore
from footguard.foundation.clock import to_epoch_ms

_TS = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
_DAY = date(2026, 1, 1)


def _score(overall: int, factors: tuple = (), **overrides) -> RiskScore:
    base = {
        "overall_score": overall,
        "risk_level": severity_tier(overall),
        "temperature_risk": 0,
        "pressure_risk": 0,
        "circulation_risk": 0,
        "gait_risk": 0,
        "factors": factors,
        "timestamp": _TS,
    }
    base.update(overrides)
    return RiskScore(**base)


class TestRiskScore:
    def test_wire_format(self) -> None:
        wire = _score(42, factors=("High pressure at Heel (90 kPa)",), pressure_risk=60).to_wire()
        assert wire["overallScore"] == 42
        assert wire["riskLevel"] == "moderate"
        assert wire["pressureRisk"] == 60
        assert wire["timestamp"] == to_epoch_ms(_TS)
        assert wire["factors"] == ["High pressure at Heel (90 kPa)"]
        assert wire["id"] is None

    def test_reloads_from_wire(self) -> None:
        score = _score(75, temperature_risk=90).with_id("score-1")
        assert RiskScore.model_validate(score.to_wire()) == score

    def test_with_id_returns_new_instance(self) -> None:
        score = _score(10)
        stored = score.with_id("abc")
        assert stored.id == "abc"
        assert score.id is None

    def test_out_of_range_rejected(self) -> None:
        with pytest.raises(Exception):
            _score(101)

    def test_more_than_five_factors_rejected(self) -> None:
        with pytest.raises(Exception):
            _score(10, factors=tuple(f"f{i}" for i in range(6)))

    def test_queries(self) -> None:
        score = _score(60, circulation_risk=80, gait_risk=20, factors=("Low blood oxygen (84.0%)",))
        assert score.is_high_risk
        assert score.needs_action
        assert score.primary_factor == "Low blood oxygen (84.0%)"
        assert score.highest_risk_component == "circulation"
        assert _score(0).primary_factor == "No issues detected"

    def test_empty(self) -> None:
        empty = RiskScore.empty(_TS)
        assert empty.overall_score == 0
        assert empty.risk_level == RiskLevel.LOW
        assert not empty.needs_action


class TestDailyRiskSummary:
    def test_from_scores(self) -> None:
        summary = DailyRiskSummary.from_scores(_DAY, [
            _score(20, factors=("a",)),
            _score(40, factors=("b", "a")),
            _score(80, factors=("c",)),
            _score(21),
        ])
        assert summary.reading_count == 4
        assert summary.average_score == 40
        assert summary.highest_score == 80
        assert summary.lowest_score == 20
        assert summary.alert_count == 1
        assert summary.dominant_risk_level == RiskLevel.LOW
        assert summary.key_factors == ("a", "b", "c")

    def test_tie_resolves_to_lower_tier(self) -> None:
        summary = DailyRiskSummary.from_scores(_DAY, [_score(60), _score(10)])
        assert summary.dominant_risk_level == RiskLevel.LOW

    def test_average_rounds_half_up(self) -> None:
        summary = DailyRiskSummary.from_scores(_DAY, [_score(10), _score(11)])
        assert summary.average_score == 11

    def test_key_factors_capped(self) -> None:
        scores = [_score(10, factors=(f"f{i}",)) for i in range(8)]
        assert len(DailyRiskSummary.from_scores(_DAY, scores).key_factors) == 5

    def test_empty_day(self) -> None:
        summary = DailyRiskSummary.for_day(_DAY)
        assert summary.average_score == 0
        assert summary.dominant_risk_level == RiskLevel.LOW

    def test_wire_format_and_reload(self) -> None:
        summary = DailyRiskSummary.from_scores(_DAY, [_score(55), _score(75)])
        wire = summary.to_wire()
        assert wire["date"] == to_epoch_ms(datetime(2026, 1, 1, tzinfo=timezone.utc))
        assert wire["averageScore"] == 65
        assert wire["dominantRiskLevel"] == "high"
        assert wire["readingCount"] == 2
        assert DailyRiskSummary.model_validate(wire) == summary


class TestAlertModel:
    def _alert(self, **overrides) -> Alert:
        base = {
            "alert_type": AlertType.PRESSURE,
            "severity": AlertSeverity.CRITICAL,
            "title": "High Pressure",
            "message": "High pressure detected at Toe (125 kPa).",
            "affected_zone": "Toe",
            "actual_value": 125.0,
            "threshold": 80.0,
            "action": "Shift your weight or change position",
            "timestamp": _TS,
        }
        base.update(overrides)
        return Alert(**base)

    def test_wire_format(self) -> None:
        wire = self._alert().to_wire()
        assert wire["type"] == "pressure"
        assert wire["severity"] == "critical"
        assert wire["affectedZone"] == "Toe"
        assert wire["actualValue"] == 125.0
        assert wire["isRead"] is False
        assert wire["timestamp"] == to_epoch_ms(_TS)
        assert isinstance(wire["id"], str)

    def test_reloads_from_wire(self) -> None:
        alert = self._alert()
        assert Alert.model_validate(alert.to_wire()) == alert

    def test_ids_are_unique(self) -> None:
        assert self._alert().id != self._alert().id

    def test_mark_read_returns_copy(self) -> None:
        alert = self._alert()
        read = alert.mark_read()
        assert read.is_read and read.id == alert.id
        assert not alert.is_read
        assert read.mark_read() is read

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(Exception):
            self._alert(alert_type="weather")

    def test_stats_of_nothing(self) -> None:
        stats = AlertStats.from_alerts([])
        assert stats.total == 0
        assert stats.to_wire()["temperatureAlerts"] == 0
