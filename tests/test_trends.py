"""Tests for the window trend helpers."""

import pytest

from footguard.core import trends

from tests.test_reading import _reading


def _series(values: list[dict], step_seconds: int = 60) -> list:
    """Readings *step_seconds* apart, each built from one override dict."""
    return [_reading(seconds=i * step_seconds, **kw) for i, kw in enumerate(values)]


class TestWindow:
    def test_appends_reading_missing_from_history(self) -> None:
        history = _series([{}, {}])
        current = _reading(seconds=600)
        assert trends.window_with(current, history) == history + [current]

    def test_does_not_duplicate_reading_already_pushed(self) -> None:
        history = _series([{}, {}])
        assert trends.window_with(history[-1], history) == history

    def test_retransmitted_reading_is_appended(self) -> None:
        history = _series([{}, {}])
        resent = _reading(seconds=60)
        assert resent == history[-1]
        window = trends.window_with(resent, history)
        assert len(window) == 3
        assert window[-1] is resent

    def test_empty_history(self) -> None:
        current = _reading()
        assert trends.window_with(current, []) == [current]
        assert trends.previous_reading([current]) is None


class TestTemperatureRate:
    def test_rate_per_hour(self) -> None:
        window = _series([{"temperatures": [32.0 + 0.05 * i] * 4} for i in range(5)])
        # +0.2 °C over 4 minutes
        assert trends.temperature_rate_of_change(window) == pytest.approx(3.0)

    def test_insufficient_history_is_zero(self) -> None:
        window = _series([{"temperatures": [30.0] * 4}, {"temperatures": [36.0] * 4}])
        assert trends.temperature_rate_of_change(window) == 0.0

    def test_sub_minute_span_is_zero(self) -> None:
        window = _series([{"temperatures": [30.0 + i] * 4} for i in range(5)], step_seconds=2)
        assert trends.temperature_rate_of_change(window) == 0.0


class TestPressure:
    def test_even_loading(self) -> None:
        assert trends.pressure_evenness([40.0, 40.0, 40.0, 40.0]) == 1.0

    def test_unloaded_foot_counts_as_even(self) -> None:
        assert trends.pressure_evenness([0.0, 0.0, 0.0, 0.0]) == 1.0

    def test_single_zone_loading_is_clamped_to_zero(self) -> None:
        assert trends.pressure_evenness([100.0, 0.0, 0.0, 0.0]) == 0.0

    def test_moderate_imbalance(self) -> None:
        # mean 50, population variance 100 → 1 - 100/2500
        assert trends.pressure_evenness([40.0, 60.0, 40.0, 60.0]) == pytest.approx(0.96)

    def test_sustained_high_pressure(self) -> None:
        high = {"pressures": [90.0, 40.0, 40.0, 40.0]}
        low = {}
        assert trends.sustained_high_pressure(_series([high, high, low, high, high]), 80.0)
        assert not trends.sustained_high_pressure(_series([high, low, low, high, high]), 80.0)
        assert not trends.sustained_high_pressure(_series([high] * 4), 80.0)

    def test_spike_deltas(self) -> None:
        window = _series([
            {"pressures": [40.0, 40.0, 40.0, 40.0]},
            {"pressures": [80.0, 30.0, 40.0, 45.0]},
        ])
        assert trends.pressure_spike_deltas(window) == [40.0, -10.0, 0.0, 5.0]
        assert trends.pressure_spike_deltas(window[:1]) == []


class TestCirculation:
    def test_spo2_drop_trend(self) -> None:
        dropping = _series([{"spO2": v} for v in (98, 97, 96, 95, 95)])
        flapping = _series([{"spO2": v} for v in (98, 97, 98, 97, 98)])
        assert trends.spo2_dropping(dropping)
        assert not trends.spo2_dropping(flapping)
        assert not trends.spo2_dropping(dropping[:4])


class TestGait:
    def test_stability_at_rest_is_one(self) -> None:
        assert trends.gait_stability(_reading()) == 1.0

    def test_stability_scales_with_activity(self) -> None:
        acc = {"x": 4.0, "y": 0.0, "z": 9.8}
        walking = _reading(accelerometer=acc, activityType="walking")
        running = _reading(accelerometer=acc, activityType="running")
        assert trends.gait_stability(walking) == pytest.approx(0.5)
        assert trends.gait_stability(running) == pytest.approx(1 - 4.0 / 15.0)

    def test_stability_clamped(self) -> None:
        wild = _reading(accelerometer={"x": 20.0, "y": 20.0, "z": 30.0}, activityType="walking")
        assert trends.gait_stability(wild) == 0.0

    @pytest.mark.parametrize(
        "labels, expected",
        [
            (("standing", "walking", "running"), True),
            (("walking", "running", "walking"), False),
            (("walking", "walking", "running"), False),
        ],
    )
    def test_sudden_gait_change(self, labels: tuple, expected: bool) -> None:
        window = _series([{"activityType": a} for a in labels], step_seconds=2)
        assert trends.sudden_gait_change(window) is expected

    def test_step_frequency(self) -> None:
        window = _series([{"stepCount": i * 3} for i in range(10)], step_seconds=2)
        # 27 steps over 18 seconds
        assert trends.step_frequency(window) == pytest.approx(90.0)

    def test_step_frequency_needs_full_lookback(self) -> None:
        window = _series([{"stepCount": i * 3} for i in range(9)], step_seconds=2)
        assert trends.step_frequency(window) == 0.0
