"""ResultFormatter — deterministic plain-text rendering of query results.

Produces consistent, structured output suitable for terminals, logs, or
debugging.  Nothing here computes; every number comes from the result
object passed in.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable

from label_history.domain.results import DistributionResult, LabelShift, TransitionMatrix
from label_history.domain.timeline import Timeline

_RULE = "=" * 50


class ResultFormatter:
    """Plain-text views of DistributionResult, TransitionMatrix and friends."""

    @staticmethod
    def format_distribution(result: DistributionResult) -> str:
        lines = [f"Label distribution at {result.date.isoformat()}", _RULE]
        proportions = result.proportions()
        if proportions is None:
            lines.append("No identities known at this date.")
            return "\n".join(lines)

        for value, share in proportions.items():
            lines.append(f"  {value}: {share * 100:.2f}% ({result.count(value)})")
        lines.append(f"Identities counted: {result.total}")
        return "\n".join(lines)

    @staticmethod
    def format_matrix(matrix: TransitionMatrix, labels: list[int] | None = None) -> str:
        """Grid with rows = value at from_date, columns = value at to_date."""
        labels = matrix.labels if labels is None else labels
        lines = [
            f"Transitions {matrix.from_date.isoformat()} -> {matrix.to_date.isoformat()} "
            "(rows: from, columns: to)",
            _RULE,
        ]
        if not labels:
            lines.append("No identities known at both dates.")
            return "\n".join(lines)

        grid = matrix.as_grid(labels)
        width = max(
            [len(str(v)) for v in labels] + [len(str(n)) for row in grid for n in row]
        )
        header = " " * (width + 2) + " ".join(f"{v:>{width}}" for v in labels)
        lines.append(header)
        for value, row in zip(labels, grid):
            cells = " ".join(f"{n:>{width}}" for n in row)
            lines.append(f"{value:>{width}}  {cells}")
        return "\n".join(lines)

    @staticmethod
    def format_history(timeline: Timeline) -> str:
        lines = [f"Label history for identity {timeline.identity_id}", "------"]
        for point in timeline:
            lines.append(f"{point.date.isoformat()}: {point.value}")
        return "\n".join(lines)

    @staticmethod
    def format_identities(identities: Iterable[int]) -> str:
        """One identity per line, ascending."""
        return "\n".join(str(i) for i in sorted(identities))

    @staticmethod
    def format_shifts(shifts: list[LabelShift], from_date: date, to_date: date) -> str:
        lines = [f"Label shifts {from_date.isoformat()} -> {to_date.isoformat()}", _RULE]
        if not shifts:
            lines.append("No shifts.")
        for shift in shifts:
            lines.append(f"  {shift.source} -> {shift.target}: {shift.count}")
        return "\n".join(lines)

    @staticmethod
    def format_updates(updates: dict[date, int]) -> str:
        return "\n".join(f"{on.isoformat()}: {n}" for on, n in updates.items())
