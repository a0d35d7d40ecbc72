"""Tests for the HistoryBuffer."""

import pytest

from footguard.store.history import HistoryBuffer

from tests.test_reading import _reading


class TestHistoryBuffer:
    def test_push_appends_in_order(self) -> None:
        buf = HistoryBuffer(capacity=5)
        readings = [_reading(seconds=2 * i) for i in range(3)]
        for r in readings:
            buf.push(r)
        assert buf.snapshot() == readings
        assert len(buf) == 3

    def test_evicts_oldest_past_capacity(self) -> None:
        buf = HistoryBuffer(capacity=3)
        readings = [_reading(seconds=2 * i) for i in range(5)]
        for r in readings:
            buf.push(r)
        assert len(buf) == 3
        assert buf.snapshot() == readings[2:]

    def test_default_capacity_is_thirty(self) -> None:
        buf = HistoryBuffer()
        for i in range(40):
            buf.push(_reading(seconds=i))
        assert buf.capacity == 30
        assert len(buf) == 30
        assert buf.snapshot()[0].timestamp == _reading(seconds=10).timestamp

    def test_snapshot_is_a_copy(self) -> None:
        buf = HistoryBuffer(capacity=3)
        buf.push(_reading())
        snap = buf.snapshot()
        snap.clear()
        assert len(buf) == 1

    def test_latest(self) -> None:
        buf = HistoryBuffer()
        assert buf.latest is None
        first, second = _reading(seconds=0), _reading(seconds=2)
        buf.push(first)
        assert buf.latest == first
        buf.push(second)
        assert buf.latest == second

    def test_clear(self) -> None:
        buf = HistoryBuffer()
        buf.push(_reading())
        buf.clear()
        assert len(buf) == 0
        assert buf.snapshot() == []

    def test_zero_capacity_rejected(self) -> None:
        with pytest.raises(ValueError):
            HistoryBuffer(capacity=0)
