"""Abstract base for label row adapters.

Label adapters normalise raw snapshot rows from heterogeneous label
sources into the canonical LabelEntry model.

Architectural rules:
    1. Adapters must NOT mutate the incoming row dict.
    2. adapt() must return a fully valid LabelEntry or raise ValueError.
    3. The snapshot date is always supplied by the caller, never read
       from the row.
    4. No adapter may touch the history builder or store directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Any

from pydantic import ValidationError

from label_history.domain.entry import LabelEntry


class LabelAdapter(ABC):
    """Base class for converting raw snapshot rows into LabelEntries."""

    @abstractmethod
    def can_handle(self, raw: dict[str, Any]) -> bool:
        """Return True if this adapter knows how to translate *raw*.

        Must be a fast, non-destructive check (e.g. key presence).
        """
        ...

    @abstractmethod
    def adapt(self, raw: dict[str, Any], snapshot_date: date) -> LabelEntry:
        """Translate a raw row into a validated LabelEntry.

        The input dict must NOT be mutated.

        Raises:
            ValueError: If the row cannot be normalised.
        """
        ...

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Human-readable name of the row format this adapter handles."""
        ...

    @staticmethod
    def _entry(identity_id: Any, value: Any, snapshot_date: date) -> LabelEntry:
        """Validate extracted fields, reporting failures as ValueError."""
        try:
            return LabelEntry(
                identity_id=identity_id,
                value=value,
                snapshot_date=snapshot_date,
            )
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in exc.errors()
            )
            raise ValueError(problems) from exc
