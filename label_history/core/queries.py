"""Query engine — temporal questions answered against a TimelineStore.

Design principles:
    1. Pure functions: each accepts a store plus arguments and returns a
       fresh result object.
    2. No side effects, no state mutation, no I/O.
    3. Every query honours the same IdentityFilter semantics.
    4. Identities that did not yet exist at a queried date are left out,
       never counted as some default value.

Core queries:
    - distribution       value counts at one date
    - transition_matrix  (value at from_date, value at to_date) counts
    - list_identities    identities passing a filter
    - history            one identity's Timeline

Supplemental queries:
    - current_distribution    counts of current values
    - label_shifts            matrix cells plus newly created identities
    - count_updates           change points per date
    - periodic_distributions  weekly / monthly distribution series
"""

from __future__ import annotations

from collections import Counter
from datetime import date, timedelta
from enum import Enum

from label_history.domain.filters import IdentityFilter
from label_history.domain.results import (
    NEW_IDENTITY,
    DistributionResult,
    LabelShift,
    TransitionMatrix,
)
from label_history.domain.timeline import Timeline
from label_history.foundation.clock import today
from label_history.store.timeline_store import TimelineStore


class Cadence(str, Enum):
    """Sampling interval for periodic distributions."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"


# ── Core queries ─────────────────────────────────────────────────────────────

def distribution(
    store: TimelineStore,
    on: date,
    identity_filter: IdentityFilter | None = None,
) -> DistributionResult:
    """Count filtered identities per value at *on*.

    Identities created after *on* are excluded, so ``total`` equals the
    number of filtered identities known at that date.
    """
    counts: Counter[int] = Counter()
    for timeline in store.filtered(identity_filter):
        value = timeline.value_at(on)
        if value is not None:
            counts[value] += 1
    return DistributionResult(
        date=on,
        counts=dict(sorted(counts.items())),
        total=sum(counts.values()),
    )


def transition_matrix(
    store: TimelineStore,
    from_date: date,
    to_date: date,
    identity_filter: IdentityFilter | None = None,
) -> TransitionMatrix:
    """Count value moves between two dates.

    The dates may come in either chronological order.  Rows are always the
    value at *from_date*; identities unknown at either date are skipped.
    """
    cells: Counter[tuple[int, int]] = Counter()
    for timeline in store.filtered(identity_filter):
        before = timeline.value_at(from_date)
        if before is None:
            continue
        after = timeline.value_at(to_date)
        if after is None:
            continue
        cells[(before, after)] += 1
    return TransitionMatrix(from_date=from_date, to_date=to_date, cells=cells)


def list_identities(
    store: TimelineStore,
    identity_filter: IdentityFilter | None = None,
) -> frozenset[int]:
    """Every identity passing *identity_filter*, with no date-based exclusion."""
    return frozenset(t.identity_id for t in store.filtered(identity_filter))


def history(store: TimelineStore, identity_id: int) -> Timeline:
    """Timeline of a single identity.

    Raises:
        UnknownIdentityQuery: If the identity is not in the store.
    """
    return store.history(identity_id)


# ── Supplemental queries ─────────────────────────────────────────────────────

def current_distribution(
    store: TimelineStore,
    identity_filter: IdentityFilter | None = None,
) -> DistributionResult:
    """Count filtered identities by their current (latest known) value.

    Dated at the store's latest change date, or today for an empty store.
    """
    counts = Counter(t.current_value for t in store.filtered(identity_filter))
    return DistributionResult(
        date=store.latest_date or today(),
        counts=dict(sorted(counts.items())),
        total=sum(counts.values()),
    )


def label_shifts(
    store: TimelineStore,
    from_date: date,
    to_date: date,
    identity_filter: IdentityFilter | None = None,
) -> list[LabelShift]:
    """Non-empty moves between two dates, including newly created identities.

    Identities known at both dates contribute ``value -> value`` shifts.
    Identities created strictly after *from_date* and known at *to_date*
    contribute ``"new" -> value`` shifts.
    """
    matrix = transition_matrix(store, from_date, to_date, identity_filter)
    shifts = [
        LabelShift(source=source, target=target, count=n)
        for (source, target), n in sorted(matrix.cells.items())
    ]

    created: Counter[int] = Counter()
    for timeline in store.filtered(identity_filter):
        if timeline.creation_date <= from_date:
            continue
        value = timeline.value_at(to_date)
        if value is not None:
            created[value] += 1
    shifts.extend(
        LabelShift(source=NEW_IDENTITY, target=target, count=n)
        for target, n in sorted(created.items())
    )
    return shifts


def count_updates(
    store: TimelineStore,
    identity_filter: IdentityFilter | None = None,
) -> dict[date, int]:
    """Number of change points recorded on each date, in date order.

    Creation counts as an update, so every identity contributes at least one.
    """
    counts: Counter[date] = Counter()
    for timeline in store.filtered(identity_filter):
        for point in timeline:
            counts[point.date] += 1
    return dict(sorted(counts.items()))


def sample_dates(start: date, end: date, cadence: Cadence) -> list[date]:
    """Dates from *start* to *end* at *cadence*, always ending on *end*.

    Weekly samples step seven days from *start*.  Monthly samples fall on
    the first of each month after *start*.
    """
    if end < start:
        return []

    samples = [start]
    current = start
    while True:
        if cadence == Cadence.WEEKLY:
            current = current + timedelta(days=7)
        else:
            current = _first_of_next_month(current)
        if current > end:
            break
        samples.append(current)

    if samples[-1] != end:
        samples.append(end)
    return samples


def periodic_distributions(
    store: TimelineStore,
    cadence: Cadence,
    identity_filter: IdentityFilter | None = None,
) -> list[DistributionResult]:
    """Distribution series spanning the filtered identities' history.

    Runs from the earliest creation date to the latest change date among
    the filtered identities.  Empty when nothing passes the filter.
    """
    timelines = list(store.filtered(identity_filter))
    if not timelines:
        return []

    start = min(t.creation_date for t in timelines)
    end = max(t.last_change_date for t in timelines)
    subset = TimelineStore(timelines)
    return [distribution(subset, on) for on in sample_dates(start, end, cadence)]


# ── Helpers ──────────────────────────────────────────────────────────────────

def _first_of_next_month(on: date) -> date:
    if on.month == 12:
        return date(on.year + 1, 1, 1)
    return date(on.year, on.month + 1, 1)
