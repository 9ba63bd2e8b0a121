"""Tests for Timeline invariants and point-in-time lookup."""

from __future__ import annotations

import pytest

from label_history.domain.timeline import ChangePoint, Timeline

from tests.test_entry import _d


def _timeline(identity_id: int, *points: tuple[str, int]) -> Timeline:
    return Timeline(identity_id, [ChangePoint(_d(on), value) for on, value in points])


class TestTimelineInvariants:
    def test_empty_rejected(self) -> None:
        with pytest.raises(ValueError):
            Timeline(1, [])

    def test_dates_must_strictly_increase(self) -> None:
        with pytest.raises(ValueError):
            _timeline(1, ("2025-01-05", 0), ("2025-01-05", 1))
        with pytest.raises(ValueError):
            _timeline(1, ("2025-01-05", 0), ("2025-01-01", 1))

    def test_consecutive_values_must_differ(self) -> None:
        with pytest.raises(ValueError):
            _timeline(1, ("2025-01-01", 0), ("2025-01-05", 0))

    def test_value_may_return_later(self) -> None:
        timeline = _timeline(1, ("2025-01-01", 0), ("2025-01-05", 1), ("2025-01-09", 0))
        assert len(timeline) == 3


class TestTimelineLookup:
    def test_creation_and_current(self) -> None:
        timeline = _timeline(42, ("2025-01-01", 0), ("2025-01-10", 1))
        assert timeline.creation_date == _d("2025-01-01")
        assert timeline.current_value == 1
        assert timeline.last_change_date == _d("2025-01-10")

    def test_value_before_creation_is_none(self) -> None:
        timeline = _timeline(42, ("2025-01-01", 0))
        assert timeline.value_at(_d("2024-12-31")) is None
        assert not timeline.existed_at(_d("2024-12-31"))

    def test_value_on_change_date(self) -> None:
        timeline = _timeline(42, ("2025-01-01", 0), ("2025-01-10", 1))
        assert timeline.value_at(_d("2025-01-01")) == 0
        assert timeline.value_at(_d("2025-01-10")) == 1

    def test_value_between_changes_holds(self) -> None:
        timeline = _timeline(42, ("2025-01-01", 0), ("2025-01-10", 1))
        assert timeline.value_at(_d("2025-01-07")) == 0
        assert timeline.value_at(_d("2025-01-09")) == 0

    def test_value_after_last_change_holds(self) -> None:
        timeline = _timeline(42, ("2025-01-01", 0), ("2025-01-10", 1))
        assert timeline.value_at(_d("2030-06-01")) == 1


class TestTimelineProtocol:
    def test_iterates_change_points(self) -> None:
        timeline = _timeline(3, ("2025-01-01", 2), ("2025-02-01", 1))
        assert list(timeline) == [
            ChangePoint(_d("2025-01-01"), 2),
            ChangePoint(_d("2025-02-01"), 1),
        ]
        assert timeline.change_points == tuple(timeline)

    def test_equality_and_hash(self) -> None:
        a = _timeline(3, ("2025-01-01", 2))
        b = _timeline(3, ("2025-01-01", 2))
        c = _timeline(4, ("2025-01-01", 2))
        assert a == b
        assert hash(a) == hash(b)
        assert a != c

    def test_summary(self) -> None:
        summary = _timeline(3, ("2025-01-01", 2), ("2025-02-01", 1)).summary()
        assert summary == {
            "identity_id": 3,
            "creation_date": "2025-01-01",
            "current_value": 1,
            "change_points": [
                {"date": "2025-01-01", "value": 2},
                {"date": "2025-02-01", "value": 1},
            ],
        }

    def test_repr(self) -> None:
        timeline = _timeline(42, ("2025-01-01", 0), ("2025-01-10", 1))
        assert repr(timeline) == "Timeline(id=42, [(2025-01-01, 0), (2025-01-10, 1)])"
