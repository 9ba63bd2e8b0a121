"""Tests for the LabelEntry model and the error taxonomy."""

from __future__ import annotations

from datetime import date

import pytest

from label_history.domain.entry import LabelEntry
from label_history.domain.errors import (
    InvalidDateRange,
    LabelHistoryError,
    MalformedRow,
    SnapshotSourceError,
    UnknownIdentityQuery,
)


def _d(iso: str) -> date:
    return date.fromisoformat(iso)


def _valid_entry(**overrides) -> dict:
    base = {
        "identity_id": 42,
        "value": 0,
        "snapshot_date": _d("2025-01-01"),
    }
    base.update(overrides)
    return base


class TestLabelEntry:
    def test_valid_entry_parses(self) -> None:
        entry = LabelEntry.model_validate(_valid_entry())
        assert entry.identity_id == 42
        assert entry.value == 0
        assert entry.snapshot_date == _d("2025-01-01")

    def test_entry_is_frozen(self) -> None:
        entry = LabelEntry.model_validate(_valid_entry())
        with pytest.raises(Exception):
            entry.value = 2  # type: ignore[misc]

    def test_negative_identity_rejected(self) -> None:
        with pytest.raises(Exception):
            LabelEntry.model_validate(_valid_entry(identity_id=-1))

    def test_negative_value_rejected(self) -> None:
        with pytest.raises(Exception):
            LabelEntry.model_validate(_valid_entry(value=-3))

    def test_bool_value_rejected(self) -> None:
        with pytest.raises(Exception):
            LabelEntry.model_validate(_valid_entry(value=True))

    def test_numeric_string_identity_rejected(self) -> None:
        with pytest.raises(Exception):
            LabelEntry.model_validate(_valid_entry(identity_id="42"))

    def test_float_value_rejected(self) -> None:
        with pytest.raises(Exception):
            LabelEntry.model_validate(_valid_entry(value=1.5))

    def test_missing_snapshot_date_rejected(self) -> None:
        payload = _valid_entry()
        del payload["snapshot_date"]
        with pytest.raises(Exception):
            LabelEntry.model_validate(payload)

    def test_equal_entries_compare_equal(self) -> None:
        assert LabelEntry(**_valid_entry()) == LabelEntry(**_valid_entry())


class TestErrors:
    def test_all_errors_share_base(self) -> None:
        for exc in (
            MalformedRow("bad"),
            UnknownIdentityQuery(7),
            InvalidDateRange(_d("2025-02-01"), _d("2025-01-01")),
            SnapshotSourceError("/tmp/x", "gone"),
        ):
            assert isinstance(exc, LabelHistoryError)

    def test_malformed_row_names_adapter(self) -> None:
        exc = MalformedRow("missing 'value'", "flat_label")
        assert exc.adapter_name == "flat_label"
        assert "flat_label" in str(exc)
        assert "missing 'value'" in str(exc)

    def test_unknown_identity_message(self) -> None:
        assert str(UnknownIdentityQuery(7)) == "Identity 7 not found"

    def test_invalid_date_range_is_not_value_error(self) -> None:
        assert not isinstance(
            InvalidDateRange(_d("2025-02-01"), _d("2025-01-01")), ValueError
        )
