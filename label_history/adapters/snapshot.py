"""SnapshotParser — turns one dated batch of raw rows into LabelEntries.

A bad row is rejected on its own; it never aborts the rest of the batch.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Iterable

from label_history.adapters.registry import AdapterRegistry, default_registry
from label_history.domain.entry import LabelEntry
from label_history.domain.errors import MalformedRow

logger = logging.getLogger(__name__)


class ParsedSnapshot:
    """Valid entries from one snapshot plus how many rows were dropped."""

    __slots__ = ("snapshot_date", "entries", "rejected")

    def __init__(
        self,
        snapshot_date: date,
        entries: list[LabelEntry],
        rejected: int = 0,
    ) -> None:
        self.snapshot_date = snapshot_date
        self.entries = entries
        self.rejected = rejected

    @property
    def accepted(self) -> int:
        return len(self.entries)


class SnapshotParser:
    """Routes every row of a snapshot through an AdapterRegistry."""

    def __init__(self, registry: AdapterRegistry | None = None) -> None:
        self._registry = registry or default_registry()

    @property
    def registry(self) -> AdapterRegistry:
        return self._registry

    def parse(self, snapshot_date: date, rows: Iterable[Any]) -> ParsedSnapshot:
        entries: list[LabelEntry] = []
        rejected = 0
        for line_no, raw in enumerate(rows, start=1):
            try:
                entries.append(self._registry.adapt(raw, snapshot_date))
            except MalformedRow as exc:
                rejected += 1
                logger.warning(
                    "Dropping row %d of snapshot %s: %s",
                    line_no,
                    snapshot_date.isoformat(),
                    exc,
                )

        logger.debug(
            "Parsed snapshot %s: %d accepted, %d rejected",
            snapshot_date.isoformat(),
            len(entries),
            rejected,
        )
        return ParsedSnapshot(snapshot_date, entries, rejected)
