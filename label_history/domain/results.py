"""Query result types.

These are pure observations produced by the query functions.  None of them
hold a reference back to the store they were computed from.
"""

from __future__ import annotations

import datetime
from datetime import date
from typing import Literal, Mapping, Optional, Union

from pydantic import BaseModel, Field

NEW_IDENTITY = "new"

ShiftSource = Union[int, Literal["new"]]


# ── Distribution ─────────────────────────────────────────────────────────────

class DistributionResult(BaseModel):
    """Count of identities per label value at one date."""

    date: datetime.date
    counts: dict[int, int] = Field(default_factory=dict, description="Label value -> identity count")
    total: int = Field(0, ge=0, description="Identities included (sum of counts)")

    model_config = {"frozen": True}

    def count(self, value: int) -> int:
        return self.counts.get(value, 0)

    def proportions(self) -> Optional[dict[int, float]]:
        """Fraction of identities per value, or None when nothing was counted."""
        if self.total == 0:
            return None
        return {value: n / self.total for value, n in sorted(self.counts.items())}


# ── Transition Matrix ────────────────────────────────────────────────────────

class TransitionMatrix:
    """Sparse count table of (value at from_date, value at to_date) moves.

    Rows are always the value at *from_date* and columns the value at
    *to_date*, whichever of the two dates is earlier.
    """

    __slots__ = ("from_date", "to_date", "_cells")

    def __init__(
        self,
        from_date: date,
        to_date: date,
        cells: Mapping[tuple[int, int], int] | None = None,
    ) -> None:
        self.from_date = from_date
        self.to_date = to_date
        self._cells: dict[tuple[int, int], int] = {
            key: n for key, n in (cells or {}).items() if n
        }

    @property
    def cells(self) -> dict[tuple[int, int], int]:
        return dict(self._cells)

    def count(self, from_value: int, to_value: int) -> int:
        return self._cells.get((from_value, to_value), 0)

    @property
    def total(self) -> int:
        return sum(self._cells.values())

    @property
    def labels(self) -> list[int]:
        """Sorted union of every value appearing as a row or a column."""
        return sorted({v for key in self._cells for v in key})

    def transpose(self) -> "TransitionMatrix":
        return TransitionMatrix(
            from_date=self.to_date,
            to_date=self.from_date,
            cells={(b, a): n for (a, b), n in self._cells.items()},
        )

    def as_grid(self, labels: list[int] | None = None) -> list[list[int]]:
        """Dense rows over *labels* (defaults to self.labels)."""
        labels = self.labels if labels is None else labels
        return [[self.count(row, col) for col in labels] for row in labels]

    def to_dict(self) -> dict:
        return {
            "from_date": self.from_date.isoformat(),
            "to_date": self.to_date.isoformat(),
            "labels": self.labels,
            "grid": self.as_grid(),
            "cells": [
                {"from": a, "to": b, "count": n}
                for (a, b), n in sorted(self._cells.items())
            ],
            "total": self.total,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TransitionMatrix):
            return NotImplemented
        return (
            self.from_date == other.from_date
            and self.to_date == other.to_date
            and self._cells == other._cells
        )

    def __repr__(self) -> str:
        return (
            f"TransitionMatrix({self.from_date.isoformat()} -> {self.to_date.isoformat()}, "
            f"cells={dict(sorted(self._cells.items()))})"
        )


# ── Label Shift ──────────────────────────────────────────────────────────────

class LabelShift(BaseModel):
    """How many identities moved from *source* to *target* over a window.

    *source* is either a label value or ``"new"`` for identities created
    after the window opened.
    """

    source: ShiftSource
    target: int = Field(..., ge=0)
    count: int = Field(..., ge=1)

    model_config = {"frozen": True}

    @property
    def is_new(self) -> bool:
        return self.source == NEW_IDENTITY
