"""label-history command line.

Reads snapshot files, builds the TimelineStore once, runs one query and
prints the result as plain text.  Dates are parsed here, at the boundary;
the core only ever sees real ``date`` objects.
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from typing import Sequence

from label_history.config import settings
from label_history.core.history_builder import build_store
from label_history.core.queries import (
    count_updates,
    distribution,
    history,
    label_shifts,
    list_identities,
    transition_matrix,
)
from label_history.domain.errors import (
    InvalidDateRange,
    SnapshotSourceError,
    UnknownIdentityQuery,
)
from label_history.domain.filters import IdentityFilter
from label_history.explain.formatter import ResultFormatter
from label_history.foundation.clock import today
from label_history.ingest.jsonl_reader import read_snapshots
from label_history.store.timeline_store import TimelineStore

logger = logging.getLogger(__name__)


def _parse_date(raw: str) -> date:
    try:
        return date.fromisoformat(raw.strip())
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid date '{raw}', expected YYYY-MM-DD") from exc


def _parse_value(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid label value '{raw}'") from exc
    if value < 0:
        raise argparse.ArgumentTypeError(f"label value must be >= 0, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    """Top-level parser: shared filters first, then one subcommand."""
    parser = argparse.ArgumentParser(
        prog="label-history",
        description="Label distributions and transitions over dated snapshot files.",
    )
    parser.add_argument(
        "-p",
        "--path",
        default=None,
        help=f"Snapshot file or directory of .jsonl files (default: {settings.data_path})",
    )
    parser.add_argument(
        "-a",
        "--after-date",
        type=_parse_date,
        default=None,
        help="Only identities created on or after this date",
    )
    parser.add_argument(
        "-b",
        "--before-date",
        type=_parse_date,
        default=None,
        help="Only identities created on or before this date",
    )
    parser.add_argument(
        "-c",
        "--current-value",
        type=_parse_value,
        default=None,
        help="Only identities whose latest value equals this",
    )
    parser.add_argument(
        "-s",
        "--value-at-date",
        nargs=2,
        action="append",
        metavar=("DATE", "VALUE"),
        default=None,
        help="Only identities holding VALUE at DATE; repeat to combine",
    )

    subparsers = parser.add_subparsers(dest="command")

    dist = subparsers.add_parser("distribution", help="Value distribution at a date")
    dist.add_argument("-d", "--date", type=_parse_date, default=None, help="Defaults to today")

    matrix = subparsers.add_parser(
        "change-matrix",
        help="Counts of value moves; rows are the value at --from-date",
    )
    matrix.add_argument("-f", "--from-date", type=_parse_date, required=True)
    matrix.add_argument("-t", "--to-date", type=_parse_date, required=True)

    ident = subparsers.add_parser("identity", help="Change-point history of one identity")
    ident.add_argument("-i", "--id", dest="identity_id", type=int, required=True)

    subparsers.add_parser("all-ids", help="Every identity passing the filters")

    shifts = subparsers.add_parser("shifts", help="Moves between two dates, incl. new identities")
    shifts.add_argument("-f", "--from-date", type=_parse_date, required=True)
    shifts.add_argument("-t", "--to-date", type=_parse_date, required=True)

    subparsers.add_parser("updates", help="Number of change points per date")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return a process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )

    values_at: list[tuple[date, int]] = []
    for raw_date, raw_value in args.value_at_date or []:
        try:
            values_at.append((_parse_date(raw_date), _parse_value(raw_value)))
        except argparse.ArgumentTypeError as exc:
            parser.error(f"argument -s/--value-at-date: {exc}")

    try:
        identity_filter = IdentityFilter(
            min_creation_date=args.after_date,
            max_creation_date=args.before_date,
            current_value=args.current_value,
            values_at=tuple(values_at),
        )
    except InvalidDateRange as exc:
        print(f"label-history: error: {exc}", file=sys.stderr)
        return 2

    try:
        store = _load_store(args.path)
    except SnapshotSourceError as exc:
        print(f"label-history: error: {exc}", file=sys.stderr)
        return 1

    try:
        output = _run_command(store, args, identity_filter)
    except UnknownIdentityQuery as exc:
        print(f"label-history: error: {exc}", file=sys.stderr)
        return 1

    if output:
        print(output)
    return 0


def _load_store(path: str | None) -> TimelineStore:
    source = path or settings.data_path
    logger.info("Using snapshot data from %s", source)
    snapshot_files = read_snapshots(source)
    return build_store(f.as_snapshot() for f in snapshot_files)


def _run_command(
    store: TimelineStore,
    args: argparse.Namespace,
    identity_filter: IdentityFilter,
) -> str:
    fmt = ResultFormatter

    if args.command == "change-matrix":
        return fmt.format_matrix(
            transition_matrix(store, args.from_date, args.to_date, identity_filter)
        )

    if args.command == "identity":
        return fmt.format_history(history(store, args.identity_id))

    if args.command == "all-ids":
        return fmt.format_identities(list_identities(store, identity_filter))

    if args.command == "shifts":
        shifts = label_shifts(store, args.from_date, args.to_date, identity_filter)
        return fmt.format_shifts(shifts, args.from_date, args.to_date)

    if args.command == "updates":
        return fmt.format_updates(count_updates(store, identity_filter))

    # "distribution", or no subcommand at all: distribution as of today
    on = getattr(args, "date", None) or today()
    return fmt.format_distribution(distribution(store, on, identity_filter))
