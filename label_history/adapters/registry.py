"""Adapter Registry — routes raw snapshot rows to the adapter for their format.

Adapters are tried in registration order and the first whose can_handle()
accepts the row wins, so more specific formats register first.  A row that
is not a JSON object, or that no adapter recognises, is malformed.  Every
outcome is counted for /health.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from label_history.adapters.base import LabelAdapter
from label_history.adapters.flat import FlatLabelAdapter
from label_history.adapters.warpcast import WarpcastLabelAdapter
from label_history.domain.entry import LabelEntry
from label_history.domain.errors import MalformedRow

logger = logging.getLogger(__name__)


class AdapterStats:
    """Row counts for one adapter, reported by /health."""

    __slots__ = ("source_name", "rows_accepted", "rows_rejected")

    def __init__(self, source_name: str) -> None:
        self.source_name = source_name
        self.rows_accepted = 0
        self.rows_rejected = 0

    def to_dict(self) -> dict:
        return {
            "adapter": self.source_name,
            "rows_accepted": self.rows_accepted,
            "rows_rejected": self.rows_rejected,
        }


class AdapterRegistry:
    """Registry of label adapters with selection and stats tracking.

    Usage:
        registry = AdapterRegistry()
        registry.register(WarpcastLabelAdapter())
        registry.register(FlatLabelAdapter())

        entry = registry.adapt(raw_row, snapshot_date)
    """

    def __init__(self) -> None:
        self._adapters: list[LabelAdapter] = []
        self._stats: dict[str, AdapterStats] = {}
        self._unhandled_count: int = 0

    def register(self, adapter: LabelAdapter) -> None:
        """Add an adapter to the registry."""
        self._adapters.append(adapter)
        self._stats[adapter.source_name] = AdapterStats(adapter.source_name)
        logger.debug("Registered adapter: %s", adapter.source_name)

    def adapt(self, raw: Any, snapshot_date: date) -> LabelEntry:
        """Route a raw row through the first matching adapter.

        Args:
            raw: One decoded row from a snapshot source.
            snapshot_date: Date of the snapshot the row belongs to.

        Returns:
            A validated LabelEntry.

        Raises:
            MalformedRow: If the row is not an object, no adapter can
                handle it, or the matched adapter rejects it.
        """
        if not isinstance(raw, dict):
            self._unhandled_count += 1
            raise MalformedRow(f"row is a {type(raw).__name__}, not an object")

        adapter = self.select(raw)
        if adapter is None:
            self._unhandled_count += 1
            raise MalformedRow(f"no adapter can handle row with keys: {sorted(raw.keys())}")

        stats = self._stats[adapter.source_name]
        try:
            entry = adapter.adapt(raw, snapshot_date)
        except ValueError as exc:
            stats.rows_rejected += 1
            raise MalformedRow(str(exc), adapter.source_name) from exc
        stats.rows_accepted += 1
        return entry

    def select(self, raw: dict[str, Any]) -> LabelAdapter | None:
        """First registered adapter that recognises *raw*, if any."""
        return next((a for a in self._adapters if a.can_handle(raw)), None)

    @property
    def adapter_names(self) -> list[str]:
        return [a.source_name for a in self._adapters]

    @property
    def stats(self) -> list[dict]:
        return [s.to_dict() for s in self._stats.values()]

    @property
    def unhandled_count(self) -> int:
        """Rows that were not objects or that no adapter recognised."""
        return self._unhandled_count

    @property
    def total_accepted(self) -> int:
        return sum(s.rows_accepted for s in self._stats.values())

    @property
    def total_rejected(self) -> int:
        rejected_by_adapters = sum(s.rows_rejected for s in self._stats.values())
        return rejected_by_adapters + self._unhandled_count


def default_registry() -> AdapterRegistry:
    """Registry with every built-in row format, most specific first."""
    registry = AdapterRegistry()
    registry.register(WarpcastLabelAdapter())
    registry.register(FlatLabelAdapter())
    return registry
