"""In-memory, read-only store of per-identity Timelines.

Design notes:
    - Built once per run by the HistoryBuilder and never mutated after.
      Timelines are immutable and the mapping is exposed through a
      read-only proxy, so concurrent readers need no lock.
    - The store is passed explicitly into every query; there is no
      process-wide instance.
    - The store does NOT decide what a label value means.  It only answers
      which value an identity carried at a date.
"""

from __future__ import annotations

from datetime import date
from types import MappingProxyType
from typing import Iterable, Iterator

from label_history.domain.errors import UnknownIdentityQuery
from label_history.domain.filters import IdentityFilter
from label_history.domain.timeline import Timeline


class IngestReport:
    """What went into a store: snapshot and row counts."""

    __slots__ = ("snapshot_count", "rows_accepted", "rows_rejected")

    def __init__(
        self,
        snapshot_count: int = 0,
        rows_accepted: int = 0,
        rows_rejected: int = 0,
    ) -> None:
        self.snapshot_count = snapshot_count
        self.rows_accepted = rows_accepted
        self.rows_rejected = rows_rejected

    def to_dict(self) -> dict:
        return {
            "snapshot_count": self.snapshot_count,
            "rows_accepted": self.rows_accepted,
            "rows_rejected": self.rows_rejected,
        }


class TimelineStore:
    """Identity -> Timeline mapping with point-in-time lookup.

    Args:
        timelines: One Timeline per identity.  Duplicate identities are
            rejected with ValueError.
        report: Optional ingestion counts from the build that produced
            these timelines.
    """

    def __init__(
        self,
        timelines: Iterable[Timeline] = (),
        report: IngestReport | None = None,
    ) -> None:
        by_id: dict[int, Timeline] = {}
        for timeline in timelines:
            if timeline.identity_id in by_id:
                raise ValueError(f"duplicate timeline for identity {timeline.identity_id}")
            by_id[timeline.identity_id] = timeline

        self._timelines = MappingProxyType(by_id)
        self._report = report or IngestReport()
        self._earliest: date | None = min(
            (t.creation_date for t in by_id.values()), default=None
        )
        self._latest: date | None = max(
            (t.last_change_date for t in by_id.values()), default=None
        )

    # ── Lookup ───────────────────────────────────────────────────────────

    def get(self, identity_id: int) -> Timeline | None:
        """Timeline for *identity_id*, or None if never observed."""
        return self._timelines.get(identity_id)

    def history(self, identity_id: int) -> Timeline:
        """Timeline for *identity_id*.

        Raises:
            UnknownIdentityQuery: If the identity is not in the store.
        """
        timeline = self._timelines.get(identity_id)
        if timeline is None:
            raise UnknownIdentityQuery(identity_id)
        return timeline

    def value_at(self, identity_id: int, on: date) -> int | None:
        """Value *identity_id* carried at *on*; None if unknown then (or ever)."""
        timeline = self._timelines.get(identity_id)
        if timeline is None:
            return None
        return timeline.value_at(on)

    # ── Iteration ────────────────────────────────────────────────────────

    def items(self) -> Iterator[tuple[int, Timeline]]:
        """All (identity, Timeline) pairs, in a stable order for this store."""
        return iter(self._timelines.items())

    def timelines(self) -> Iterator[Timeline]:
        return iter(self._timelines.values())

    def filtered(self, identity_filter: IdentityFilter | None = None) -> Iterator[Timeline]:
        """Timelines passing *identity_filter* (all of them when None)."""
        if identity_filter is None or identity_filter.is_unconstrained:
            return iter(self._timelines.values())
        return (t for t in self._timelines.values() if identity_filter.matches(t))

    # ── Aggregate facts ──────────────────────────────────────────────────

    @property
    def identity_count(self) -> int:
        return len(self._timelines)

    def identity_count_at(self, on: date) -> int:
        """How many identities already existed at *on*."""
        return sum(1 for t in self._timelines.values() if t.existed_at(on))

    @property
    def earliest_date(self) -> date | None:
        """Earliest creation date across all identities."""
        return self._earliest

    @property
    def latest_date(self) -> date | None:
        """Latest change-point date across all identities."""
        return self._latest

    @property
    def report(self) -> IngestReport:
        return self._report

    def summary(self) -> dict:
        """Structural facts for health checks and logging."""
        return {
            "identity_count": self.identity_count,
            "earliest_date": self._earliest.isoformat() if self._earliest else None,
            "latest_date": self._latest.isoformat() if self._latest else None,
            **self._report.to_dict(),
        }

    # ── Dunder ───────────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._timelines)

    def __contains__(self, identity_id: object) -> bool:
        return identity_id in self._timelines

    def __iter__(self) -> Iterator[int]:
        return iter(self._timelines)

    def __repr__(self) -> str:
        return (
            f"TimelineStore(identities={self.identity_count}, "
            f"span={self._earliest}..{self._latest})"
        )
