"""Tests for change-point compression and store building."""

from __future__ import annotations

import pytest

from label_history.adapters.snapshot import SnapshotParser
from label_history.core import HistoryBuilder, build_store
from label_history.core.history_builder import compress_entries
from label_history.domain.entry import LabelEntry
from label_history.domain.timeline import ChangePoint
from label_history.store.timeline_store import TimelineStore

from tests.test_entry import _d


def _snapshot(on: str, *pairs: tuple[int, int]) -> tuple:
    """A dated snapshot of flat ``{identity_id, value}`` rows."""
    return (_d(on), [{"identity_id": i, "value": v} for i, v in pairs])


def _store_from(*snapshots: tuple) -> TimelineStore:
    return build_store(snapshots)


def _entry(identity_id: int, value: int, on: str) -> LabelEntry:
    return LabelEntry(identity_id=identity_id, value=value, snapshot_date=_d(on))


class TestCompression:
    def test_repeated_value_is_not_a_change(self) -> None:
        store = _store_from(
            _snapshot("2025-01-01", (42, 0)),
            _snapshot("2025-01-05", (42, 0)),
            _snapshot("2025-01-10", (42, 1)),
        )
        assert store.history(42).change_points == (
            ChangePoint(_d("2025-01-01"), 0),
            ChangePoint(_d("2025-01-10"), 1),
        )

    def test_absence_keeps_last_value(self) -> None:
        store = _store_from(
            _snapshot("2025-01-01", (1, 2), (2, 0)),
            _snapshot("2025-01-05", (2, 1)),
        )
        assert len(store.history(1)) == 1
        assert store.value_at(1, _d("2025-03-01")) == 2

    def test_value_can_revert(self) -> None:
        store = _store_from(
            _snapshot("2025-01-01", (5, 0)),
            _snapshot("2025-01-02", (5, 1)),
            _snapshot("2025-01-03", (5, 0)),
        )
        assert [p.value for p in store.history(5)] == [0, 1, 0]

    def test_snapshots_sorted_by_date(self) -> None:
        store = _store_from(
            _snapshot("2025-01-10", (42, 1)),
            _snapshot("2025-01-01", (42, 0)),
        )
        assert store.history(42).creation_date == _d("2025-01-01")
        assert store.history(42).current_value == 1

    def test_same_date_last_write_wins(self) -> None:
        timeline = compress_entries(
            9,
            [_entry(9, 0, "2025-01-01"), _entry(9, 2, "2025-01-03"), _entry(9, 1, "2025-01-03")],
        )
        assert timeline.value_at(_d("2025-01-03")) == 1
        assert len(timeline) == 2

    def test_conflict_resolving_to_same_value_collapses(self) -> None:
        timeline = compress_entries(
            9,
            [_entry(9, 0, "2025-01-01"), _entry(9, 1, "2025-01-02"), _entry(9, 0, "2025-01-02")],
        )
        assert timeline.change_points == (ChangePoint(_d("2025-01-01"), 0),)

    def test_reingesting_snapshot_is_idempotent(self) -> None:
        once = _store_from(
            _snapshot("2025-01-01", (1, 0), (2, 1)),
            _snapshot("2025-01-04", (1, 2)),
        )
        twice = _store_from(
            _snapshot("2025-01-01", (1, 0), (2, 1)),
            _snapshot("2025-01-04", (1, 2)),
            _snapshot("2025-01-04", (1, 2)),
        )
        assert list(once.timelines()) == list(twice.timelines())


class TestBuilder:
    def test_report_counts_rows(self) -> None:
        store = build_store([
            (_d("2025-01-01"), [{"identity_id": 1, "value": 0}, {"bogus": 1}]),
            (_d("2025-01-02"), [{"identity_id": 1, "value": 1}]),
        ])
        assert store.report.snapshot_count == 2
        assert store.report.rows_accepted == 2
        assert store.report.rows_rejected == 1

    def test_builder_accepts_entries_directly(self) -> None:
        builder = HistoryBuilder()
        builder.add([_entry(1, 0, "2025-01-01"), _entry(2, 3, "2025-01-02")])
        assert builder.identity_count == 2
        store = builder.build()
        assert set(store) == {1, 2}
        assert store.report.rows_accepted == 2

    def test_custom_parser_used(self) -> None:
        parser = SnapshotParser()
        build_store([_snapshot("2025-01-01", (1, 0))], parser=parser)
        assert parser.registry.total_accepted == 1

    def test_empty_input_gives_empty_store(self) -> None:
        store = build_store([])
        assert len(store) == 0
        assert store.latest_date is None

    def test_build_logs_summary(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level("INFO", logger="label_history.core.history_builder"):
            _store_from(_snapshot("2025-01-01", (1, 0)))
        assert "Built timelines for 1 identities" in caplog.text
