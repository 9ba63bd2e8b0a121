"""HistoryBuilder — merges dated label entries into per-identity Timelines.

Algorithm, per identity:
    1. Stable-sort the identity's entries by snapshot date, so entries that
       share a date keep their input order.
    2. Collapse each date to a single value; the last entry in input order
       wins.
    3. Walk the dates and emit a change point only when the value differs
       from the previously emitted one.  A value observed on several dates
       is therefore recorded once, at the earliest of them.

Identities absent from later snapshots keep their last known value; a
missing observation is never a change.  Feeding the same snapshot twice
yields the same Timelines as feeding it once.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Iterable, Sequence

from label_history.adapters.snapshot import ParsedSnapshot, SnapshotParser
from label_history.domain.entry import LabelEntry
from label_history.domain.timeline import ChangePoint, Timeline
from label_history.store.timeline_store import IngestReport, TimelineStore

logger = logging.getLogger(__name__)

Snapshot = tuple[date, Iterable[Any]]


def compress_entries(identity_id: int, entries: Sequence[LabelEntry]) -> Timeline:
    """Build one identity's Timeline from its entries in input order."""
    value_by_date: dict[date, int] = {}
    for entry in sorted(entries, key=lambda e: e.snapshot_date):
        previous = value_by_date.get(entry.snapshot_date)
        if previous is not None and previous != entry.value:
            logger.debug(
                "Identity %d has conflicting values on %s (%d then %d); keeping %d",
                identity_id,
                entry.snapshot_date.isoformat(),
                previous,
                entry.value,
                entry.value,
            )
        value_by_date[entry.snapshot_date] = entry.value

    points: list[ChangePoint] = []
    for on, value in value_by_date.items():
        if not points or points[-1].value != value:
            points.append(ChangePoint(date=on, value=value))
    return Timeline(identity_id, points)


class HistoryBuilder:
    """Accumulates entries from any number of snapshots, then builds a store.

    Entries are grouped by identity as they arrive; compression happens
    once, in build().
    """

    def __init__(self) -> None:
        self._groups: dict[int, list[LabelEntry]] = {}
        self._report = IngestReport()

    def add(self, entries: Iterable[LabelEntry]) -> None:
        """Add already-validated entries."""
        for entry in entries:
            self._groups.setdefault(entry.identity_id, []).append(entry)
            self._report.rows_accepted += 1

    def add_snapshot(self, parsed: ParsedSnapshot) -> None:
        """Add a parsed snapshot, carrying over its rejected-row count."""
        self.add(parsed.entries)
        self._report.snapshot_count += 1
        self._report.rows_rejected += parsed.rejected

    @property
    def identity_count(self) -> int:
        return len(self._groups)

    def build(self) -> TimelineStore:
        timelines = [
            compress_entries(identity_id, entries)
            for identity_id, entries in self._groups.items()
        ]
        store = TimelineStore(timelines, report=self._report)
        logger.info(
            "Built timelines for %d identities from %d snapshot(s) "
            "(%d rows accepted, %d rejected)",
            store.identity_count,
            self._report.snapshot_count,
            self._report.rows_accepted,
            self._report.rows_rejected,
        )
        return store


def build_store(
    snapshots: Iterable[Snapshot],
    parser: SnapshotParser | None = None,
) -> TimelineStore:
    """Parse every snapshot and build the TimelineStore.

    Args:
        snapshots: ``(snapshot_date, rows)`` pairs in any order.  Snapshots
            sharing a date keep their given order, so the later one wins.
        parser: Row parser; defaults to one with every built-in adapter.

    Malformed rows are dropped and counted in ``store.report``; they never
    abort the build.
    """
    parser = parser or SnapshotParser()
    builder = HistoryBuilder()
    for snapshot_date, rows in sorted(snapshots, key=lambda s: s[0]):
        builder.add_snapshot(parser.parse(snapshot_date, rows))
    return builder.build()
