"""Tests for IdentityFilter."""

from __future__ import annotations

import pytest

from label_history.domain.errors import InvalidDateRange
from label_history.domain.filters import NO_FILTER, IdentityFilter

from tests.test_entry import _d
from tests.test_timeline import _timeline


_EARLY = _timeline(1, ("2025-01-02", 2))
_LATE = _timeline(2, ("2025-01-20", 0), ("2025-02-10", 1))


class TestIdentityFilter:
    def test_no_filter_matches_everything(self) -> None:
        assert NO_FILTER.is_unconstrained
        assert NO_FILTER.matches(_EARLY)
        assert NO_FILTER.matches(_LATE)

    def test_creation_bounds_inclusive(self) -> None:
        f = IdentityFilter(min_creation_date=_d("2025-01-02"), max_creation_date=_d("2025-01-20"))
        assert f.matches(_EARLY)
        assert f.matches(_LATE)

    def test_creation_window_excludes(self) -> None:
        f = IdentityFilter(min_creation_date=_d("2025-01-01"), max_creation_date=_d("2025-01-15"))
        assert f.matches(_EARLY)
        assert not f.matches(_LATE)

    def test_min_after_max_raises(self) -> None:
        with pytest.raises(InvalidDateRange):
            IdentityFilter(min_creation_date=_d("2025-02-01"), max_creation_date=_d("2025-01-01"))

    def test_single_day_window_allowed(self) -> None:
        f = IdentityFilter(min_creation_date=_d("2025-01-02"), max_creation_date=_d("2025-01-02"))
        assert f.matches(_EARLY)

    def test_current_value_uses_latest_value(self) -> None:
        f = IdentityFilter(current_value=1)
        assert f.matches(_LATE)
        assert not f.matches(_EARLY)

    def test_values_at(self) -> None:
        f = IdentityFilter(values_at=((_d("2025-01-25"), 0),))
        assert f.matches(_LATE)
        assert not f.matches(_EARLY)

    def test_values_at_before_creation_never_matches(self) -> None:
        f = IdentityFilter(values_at=((_d("2025-01-10"), 0),))
        assert not f.matches(_LATE)

    def test_conditions_combine_with_and(self) -> None:
        f = IdentityFilter(min_creation_date=_d("2025-01-10"), current_value=2)
        assert not f.matches(_EARLY)
        assert not f.matches(_LATE)
        assert not f.is_unconstrained

    def test_negative_current_value_rejected(self) -> None:
        with pytest.raises(Exception):
            IdentityFilter(current_value=-1)

    def test_filter_is_frozen(self) -> None:
        with pytest.raises(Exception):
            NO_FILTER.current_value = 1  # type: ignore[misc]
