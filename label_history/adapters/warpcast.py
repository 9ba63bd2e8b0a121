"""WarpcastLabelAdapter — translates rows from the Warpcast labels dataset.

Expected raw format (one JSON object per line):
{
    "provider": 1,
    "type": {"fid": 42, "target": "user"},
    "label_type": "spam",
    "label_value": 0,
    "timestamp": 1736000000
}

The row's own timestamp is ignored; rows are dated by their snapshot.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from label_history.adapters.base import LabelAdapter
from label_history.domain.entry import LabelEntry


class WarpcastLabelAdapter(LabelAdapter):
    """Maps nested ``type.fid`` / ``label_value`` rows to LabelEntries."""

    @property
    def source_name(self) -> str:
        return "warpcast_label"

    def can_handle(self, raw: dict[str, Any]) -> bool:
        return isinstance(raw.get("type"), dict) and "label_value" in raw

    def adapt(self, raw: dict[str, Any], snapshot_date: date) -> LabelEntry:
        fid = raw["type"].get("fid")
        if fid is None:
            raise ValueError("warpcast_label row missing 'type.fid'")

        value = raw.get("label_value")
        if value is None:
            raise ValueError("warpcast_label row missing 'label_value'")

        return self._entry(fid, value, snapshot_date)
