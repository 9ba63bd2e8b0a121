"""Local snapshot reader for .jsonl label files.

Each file is one snapshot.  Its date comes from file metadata, never from
individual rows:
    1. an ISO date (YYYY-MM-DD) anywhere in the file name, otherwise
    2. the latest ``timestamp`` (unix seconds, UTC) found among its rows.

Lines that are not valid UTF-8 or not valid JSON are passed through as their
raw text so the snapshot parser rejects and counts them like any other
malformed row.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import date
from pathlib import Path
from typing import Any

from label_history.domain.errors import SnapshotSourceError
from label_history.foundation.clock import date_from_timestamp

logger = logging.getLogger(__name__)

SNAPSHOT_SUFFIX = ".jsonl"

_ISO_DATE = re.compile(r"(\d{4})-(\d{2})-(\d{2})")


class SnapshotFile:
    """Decoded rows of one snapshot file plus the date they are filed under."""

    __slots__ = ("path", "snapshot_date", "rows", "undecodable_lines")

    def __init__(
        self,
        path: Path,
        snapshot_date: date,
        rows: list[Any],
        undecodable_lines: int = 0,
    ) -> None:
        self.path = path
        self.snapshot_date = snapshot_date
        self.rows = rows
        self.undecodable_lines = undecodable_lines

    def as_snapshot(self) -> tuple[date, list[Any]]:
        """The ``(snapshot_date, rows)`` pair build_store() consumes."""
        return (self.snapshot_date, self.rows)


def read_snapshot_file(path: Path | str) -> SnapshotFile:
    """Read and date a single snapshot file.

    Raises:
        SnapshotSourceError: If the file is missing, unreadable, or cannot
            be dated.
    """
    path = Path(path).expanduser()
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise SnapshotSourceError(str(path), f"cannot read file ({exc.strerror})") from exc

    rows: list[Any] = []
    undecodable = 0
    for raw_line in data.splitlines():
        if not raw_line.strip():
            continue
        try:
            line = raw_line.decode("utf-8")
        except UnicodeDecodeError:
            undecodable += 1
            rows.append(raw_line.decode("utf-8", errors="replace"))
            continue
        try:
            rows.append(json.loads(line))
        except json.JSONDecodeError:
            undecodable += 1
            rows.append(line)

    snapshot_date = _date_from_name(path) or _date_from_rows(rows)
    if snapshot_date is None:
        raise SnapshotSourceError(
            str(path),
            "no YYYY-MM-DD date in file name and no row timestamps to date it by",
        )

    if undecodable:
        logger.warning("%s: %d line(s) are not valid UTF-8 JSON", path, undecodable)
    logger.debug("Read %d row(s) from %s dated %s", len(rows), path, snapshot_date.isoformat())
    return SnapshotFile(path, snapshot_date, rows, undecodable)


def read_snapshots(path: Path | str) -> list[SnapshotFile]:
    """Read a single snapshot file, or every *.jsonl file under a directory.

    Directory entries that cannot be read or dated are logged and skipped.

    Raises:
        SnapshotSourceError: If *path* does not exist.
    """
    path = Path(path).expanduser()
    if not path.exists():
        raise SnapshotSourceError(str(path), "path does not exist")
    if path.is_file():
        return [read_snapshot_file(path)]

    snapshots: list[SnapshotFile] = []
    for file_path in sorted(path.rglob(f"*{SNAPSHOT_SUFFIX}")):
        if not file_path.is_file():
            continue
        try:
            snapshots.append(read_snapshot_file(file_path))
        except SnapshotSourceError as exc:
            logger.warning("Skipping snapshot file: %s", exc)

    if not snapshots:
        logger.warning("No %s snapshot files found under %s", SNAPSHOT_SUFFIX, path)
    return snapshots


# ── Dating ───────────────────────────────────────────────────────────────────

def _date_from_name(path: Path) -> date | None:
    for match in _ISO_DATE.finditer(path.name):
        year, month, day = (int(g) for g in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            continue
    return None


def _date_from_rows(rows: list[Any]) -> date | None:
    timestamps = [
        row["timestamp"]
        for row in rows
        if isinstance(row, dict)
        and isinstance(row.get("timestamp"), int)
        and not isinstance(row.get("timestamp"), bool)
    ]
    if not timestamps:
        return None
    try:
        return date_from_timestamp(max(timestamps))
    except ValueError:
        return None
