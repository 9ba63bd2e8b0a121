"""Timeline — the compressed label history of one identity.

A Timeline is a chronological sequence of change points.  Each change point
records the first date on which the identity carried a value different from
the one before it; repeated observations of the same value are not stored.

Invariants (checked on construction):
    - at least one change point
    - dates strictly increasing
    - consecutive change points never share a value

The first change point's date is the identity's *creation date*; the last
change point's value is its *current value*.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Iterator


@dataclass(frozen=True)
class ChangePoint:
    """A date at which an identity's label took a new value."""

    date: date
    value: int


class Timeline:
    """Immutable change-point history for one identity."""

    __slots__ = ("identity_id", "_points", "_dates")

    def __init__(self, identity_id: int, points: Iterable[ChangePoint]) -> None:
        points = tuple(points)
        if not points:
            raise ValueError(f"timeline for identity {identity_id} has no change points")

        for prev, cur in zip(points, points[1:]):
            if cur.date <= prev.date:
                raise ValueError(
                    f"timeline for identity {identity_id} is not strictly increasing "
                    f"({prev.date} then {cur.date})"
                )
            if cur.value == prev.value:
                raise ValueError(
                    f"timeline for identity {identity_id} repeats value {cur.value} "
                    f"at {cur.date}"
                )

        self.identity_id: int = identity_id
        self._points: tuple[ChangePoint, ...] = points
        self._dates: tuple[date, ...] = tuple(p.date for p in points)

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def change_points(self) -> tuple[ChangePoint, ...]:
        return self._points

    @property
    def creation_date(self) -> date:
        """Date the identity was first observed."""
        return self._points[0].date

    @property
    def current_value(self) -> int:
        """Most recent known value across everything ingested."""
        return self._points[-1].value

    @property
    def last_change_date(self) -> date:
        return self._points[-1].date

    def value_at(self, on: date) -> int | None:
        """Value in effect at *on*, or None if the identity did not yet exist.

        Picks the latest change point whose date is <= *on*.
        """
        index = bisect_right(self._dates, on) - 1
        if index < 0:
            return None
        return self._points[index].value

    def existed_at(self, on: date) -> bool:
        return on >= self.creation_date

    # ── Summary ──────────────────────────────────────────────────────────

    def summary(self) -> dict:
        """Plain dict form suitable for JSON responses and logging."""
        return {
            "identity_id": self.identity_id,
            "creation_date": self.creation_date.isoformat(),
            "current_value": self.current_value,
            "change_points": [
                {"date": p.date.isoformat(), "value": p.value} for p in self._points
            ],
        }

    # ── Dunder ───────────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[ChangePoint]:
        return iter(self._points)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Timeline):
            return NotImplemented
        return self.identity_id == other.identity_id and self._points == other._points

    def __hash__(self) -> int:
        return hash((self.identity_id, self._points))

    def __repr__(self) -> str:
        points = ", ".join(f"({p.date.isoformat()}, {p.value})" for p in self._points)
        return f"Timeline(id={self.identity_id}, [{points}])"
