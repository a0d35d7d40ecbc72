"""Risk assessment models — the scorer's output and its daily roll-up.

A RiskScore is created fresh for every scored reading and never mutated.
Persistence ids are assigned by the storage collaborator through
``with_id()``, which returns a new instance.
"""

from __future__ import annotations

from collections import Counter
from datetime import date, datetime, time, timezone
from typing import Any, Iterable

from pydantic import BaseModel, Field, computed_field, field_serializer, field_validator

from footguard.domain.enums import RiskLevel
from footguard.domain.types import WIRE_MODEL_CONFIG, EpochMillis, Score
from footguard.foundation.clock import from_epoch_ms, to_epoch_ms, utc_now

MAX_KEY_FACTORS = 5


class RiskScore(BaseModel):
    """Weighted risk assessment of one reading."""

    id: str | None = Field(None, description="Persistence id, assigned outside the engine")
    overall_score: Score
    risk_level: RiskLevel
    temperature_risk: Score
    pressure_risk: Score
    circulation_risk: Score
    gait_risk: Score
    factors: tuple[str, ...] = Field(default_factory=tuple, max_length=MAX_KEY_FACTORS)
    recommendations: tuple[str, ...] = Field(default_factory=tuple)
    timestamp: EpochMillis

    model_config = WIRE_MODEL_CONFIG

    @classmethod
    def empty(cls, timestamp: datetime | None = None) -> "RiskScore":
        """Placeholder shown before the first reading has been scored."""
        return cls(
            overall_score=0,
            risk_level=RiskLevel.LOW,
            temperature_risk=0,
            pressure_risk=0,
            circulation_risk=0,
            gait_risk=0,
            factors=(),
            recommendations=("Start monitoring to get risk assessment",),
            timestamp=timestamp or utc_now(),
        )

    def with_id(self, score_id: str) -> "RiskScore":
        return self.model_copy(update={"id": score_id})

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def is_high_risk(self) -> bool:
        return self.risk_level in (RiskLevel.HIGH, RiskLevel.CRITICAL)

    @property
    def needs_action(self) -> bool:
        return self.risk_level != RiskLevel.LOW

    @property
    def primary_factor(self) -> str:
        return self.factors[0] if self.factors else "No issues detected"

    @property
    def highest_risk_component(self) -> str:
        components = {
            "temperature": self.temperature_risk,
            "pressure": self.pressure_risk,
            "circulation": self.circulation_risk,
            "gait": self.gait_risk,
        }
        return max(components, key=components.__getitem__)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    def __str__(self) -> str:
        return (
            f"RiskScore({self.overall_score} {self.risk_level.value}, "
            f"temp={self.temperature_risk}, pressure={self.pressure_risk}, "
            f"circ={self.circulation_risk}, gait={self.gait_risk})"
        )


class DailyRiskSummary(BaseModel):
    """Roll-up of every score produced on one UTC day.

    ``alert_count`` counts High/Critical scores, not Alert records.
    The running totals make ``add()`` exact regardless of how many
    readings arrive in a day.
    """

    day: date = Field(..., alias="date")
    reading_count: int = 0
    score_sum: int = 0
    highest_score: Score = 0
    lowest_score: Score = 0
    alert_count: int = 0
    level_counts: dict[RiskLevel, int] = Field(default_factory=dict)
    key_factors: tuple[str, ...] = Field(default_factory=tuple, max_length=MAX_KEY_FACTORS)

    model_config = WIRE_MODEL_CONFIG

    @field_validator("day", mode="before")
    @classmethod
    def epoch_ms_to_day(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return from_epoch_ms(v).date()
        if isinstance(v, datetime):
            return v.date()
        return v

    @field_serializer("day")
    def day_as_epoch_ms(self, v: date) -> int:
        return to_epoch_ms(datetime.combine(v, time.min, tzinfo=timezone.utc))

    # ── Derived ──────────────────────────────────────────────────────────

    @computed_field(alias="averageScore")  # type: ignore[prop-decorator]
    @property
    def average_score(self) -> int:
        if self.reading_count == 0:
            return 0
        return int(self.score_sum / self.reading_count + 0.5)

    @computed_field(alias="dominantRiskLevel")  # type: ignore[prop-decorator]
    @property
    def dominant_risk_level(self) -> RiskLevel:
        if not self.level_counts:
            return RiskLevel.LOW
        # Ties resolve to the lower tier, matching enum declaration order.
        order = list(RiskLevel)
        return max(
            self.level_counts,
            key=lambda level: (self.level_counts[level], -order.index(level)),
        )

    # ── Construction ─────────────────────────────────────────────────────

    @classmethod
    def for_day(cls, day: date) -> "DailyRiskSummary":
        return cls(day=day)

    @classmethod
    def from_scores(cls, day: date, scores: Iterable[RiskScore]) -> "DailyRiskSummary":
        summary = cls.for_day(day)
        for score in scores:
            summary = summary.add(score)
        return summary

    def add(self, score: RiskScore) -> "DailyRiskSummary":
        """Return a new summary that also accounts for *score*."""
        value = score.overall_score
        first = self.reading_count == 0
        counts = Counter(self.level_counts)
        counts[score.risk_level] += 1

        factors = list(self.key_factors)
        for factor in score.factors:
            if len(factors) >= MAX_KEY_FACTORS:
                break
            if factor not in factors:
                factors.append(factor)

        return self.model_copy(update={
            "reading_count": self.reading_count + 1,
            "score_sum": self.score_sum + value,
            "highest_score": value if first else max(self.highest_score, value),
            "lowest_score": value if first else min(self.lowest_score, value),
            "alert_count": self.alert_count + (1 if score.is_high_risk else 0),
            "level_counts": dict(counts),
            "key_factors": tuple(factors),
        })

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
