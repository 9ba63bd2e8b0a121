"""FlatLabelAdapter — translates flat identity/value rows.

Expected raw format:
{
    "identity_id": 42,
    "value": 0
}

The aliases ``fid`` and ``label_value`` are accepted for either key, so
hand-written exports of the Warpcast data also load.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from label_history.adapters.base import LabelAdapter
from label_history.domain.entry import LabelEntry

_IDENTITY_KEYS = ("identity_id", "fid")
_VALUE_KEYS = ("value", "label_value")


def _first_present(raw: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


class FlatLabelAdapter(LabelAdapter):
    """Maps top-level identity/value rows to LabelEntries."""

    @property
    def source_name(self) -> str:
        return "flat_label"

    def can_handle(self, raw: dict[str, Any]) -> bool:
        return any(key in raw for key in _IDENTITY_KEYS)

    def adapt(self, raw: dict[str, Any], snapshot_date: date) -> LabelEntry:
        identity_id = _first_present(raw, _IDENTITY_KEYS)
        if identity_id is None:
            raise ValueError("flat_label row missing 'identity_id'")

        value = _first_present(raw, _VALUE_KEYS)
        if value is None:
            raise ValueError("flat_label row missing 'value'")

        return self._entry(identity_id, value, snapshot_date)
