"""Tests for the canonical SensorReading model."""

from datetime import datetime, timedelta, timezone

import pytest

from footguard.domain.enums import ActivityType, Zone
from footguard.domain.reading import InvalidReading, SensorReading, Vector3
from footguard.foundation.clock import to_epoch_ms

_BASE = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def _valid_reading(**overrides) -> dict:
    """Return a valid, nominal resting reading dict, with optional overrides.

    ``seconds`` shifts the timestamp relative to a fixed base time.
    """
    seconds = overrides.pop("seconds", 0)
    base = {
        "timestamp": to_epoch_ms(_BASE + timedelta(seconds=seconds)),
        "temperatures": [32.0, 32.0, 32.0, 32.0],
        "pressures": [40.0, 40.0, 40.0, 40.0],
        "spO2": 98.0,
        "heartRate": 72,
        "accelerometer": {"x": 0.0, "y": 0.0, "z": 9.8},
        "gyroscope": {"x": 0.0, "y": 0.0, "z": 0.0},
        "stepCount": 0,
        "batteryLevel": 100,
        "activityType": "resting",
    }
    base.update(overrides)
    return base


def _reading(**overrides) -> SensorReading:
    return SensorReading.parse(_valid_reading(**overrides))


class TestReadingValidation:
    def test_valid_reading_parses(self) -> None:
        reading = _reading()
        assert reading.timestamp == _BASE
        assert reading.temperatures == (32.0, 32.0, 32.0, 32.0)
        assert reading.spo2 == 98.0
        assert reading.activity_type == ActivityType.RESTING

    def test_missing_optional_fields_get_defaults(self) -> None:
        reading = SensorReading.parse({
            "timestamp": to_epoch_ms(_BASE),
            "temperatures": [31.0, 31.0, 31.0, 31.0],
            "pressures": [0.0, 0.0, 0.0, 0.0],
        })
        assert reading.spo2 == 98.0
        assert reading.heart_rate == 72
        assert reading.accelerometer.z == 9.8
        assert reading.gyroscope == Vector3()
        assert reading.step_count == 0
        assert reading.battery_level == 100
        assert reading.activity_type == ActivityType.UNKNOWN

    @pytest.mark.parametrize("field", ["timestamp", "temperatures", "pressures"])
    def test_missing_required_field_rejected(self, field: str) -> None:
        raw = _valid_reading()
        del raw[field]
        with pytest.raises(InvalidReading) as info:
            SensorReading.parse(raw)
        assert any(e["field"].startswith(field) for e in info.value.errors)

    def test_short_zone_array_rejected(self) -> None:
        with pytest.raises(InvalidReading) as info:
            _reading(temperatures=[32.0, 32.0, 32.0])
        assert info.value.errors[0]["field"].startswith("temperatures")

    def test_long_zone_array_rejected(self) -> None:
        with pytest.raises(InvalidReading):
            _reading(pressures=[1.0, 2.0, 3.0, 4.0, 5.0])

    def test_non_finite_value_rejected(self) -> None:
        with pytest.raises(InvalidReading):
            _reading(temperatures=[32.0, float("inf"), 32.0, 32.0])

    def test_unknown_activity_rejected(self) -> None:
        with pytest.raises(InvalidReading):
            _reading(activityType="dancing")

    def test_boolean_timestamp_rejected(self) -> None:
        with pytest.raises(InvalidReading):
            _reading(timestamp=True)

    @pytest.mark.parametrize("timestamp", [1e25, float("inf"), float("-inf"), float("nan")])
    def test_out_of_range_timestamp_rejected(self, timestamp: float) -> None:
        with pytest.raises(InvalidReading) as info:
            _reading(timestamp=timestamp)
        assert info.value.errors[0]["field"] == "timestamp"

    def test_invalid_reading_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            _reading(temperatures="hot")

    def test_reading_is_immutable(self) -> None:
        reading = _reading()
        with pytest.raises(Exception):
            reading.heart_rate = 90

    def test_snake_case_names_accepted(self) -> None:
        reading = SensorReading(
            timestamp=_BASE,
            temperatures=(30.0, 31.0, 32.0, 33.0),
            pressures=(10.0, 20.0, 30.0, 40.0),
            heart_rate=65,
        )
        assert reading.heart_rate == 65


class TestReadingWireFormat:
    def test_to_wire_uses_camel_case_and_epoch_ms(self) -> None:
        wire = _reading(stepCount=1200).to_wire()
        assert wire["timestamp"] == to_epoch_ms(_BASE)
        assert wire["spO2"] == 98.0
        assert wire["heartRate"] == 72
        assert wire["stepCount"] == 1200
        assert wire["activityType"] == "resting"
        assert wire["accelerometer"] == {"x": 0.0, "y": 0.0, "z": 9.8}

    def test_error_payload_shape(self) -> None:
        with pytest.raises(InvalidReading) as info:
            _reading(pressures=[1.0])
        payload = info.value.to_dict()
        assert set(payload) == {"reason", "errors"}
        assert all(set(e) == {"field", "message"} for e in payload["errors"])


class TestDerivedValues:
    def test_temperature_spread_and_hottest_zone(self) -> None:
        reading = _reading(temperatures=[31.0, 34.5, 32.0, 30.5])
        assert reading.temperature_spread == pytest.approx(4.0)
        assert reading.hottest_zone == Zone.BALL
        assert reading.average_temperature == pytest.approx(32.0)

    def test_peak_pressure_zone(self) -> None:
        reading = _reading(pressures=[20.0, 35.0, 10.0, 90.0])
        assert reading.peak_pressure_zone == Zone.TOE
        assert reading.max_pressure == 90.0

    def test_zone_display_names(self) -> None:
        assert [z.display_name for z in Zone] == ["Heel", "Ball", "Arch", "Toe"]
