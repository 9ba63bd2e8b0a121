"""LabelEntry — one validated observation from one snapshot row.

A LabelEntry says: on *snapshot_date*, identity *identity_id* carried label
*value*.  It is short-lived; entries exist only between parsing and
history building.  The value is an opaque ordered category: non-negative,
integral, and otherwise uninterpreted.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field


class LabelEntry(BaseModel):
    """Immutable, validated label observation.

    Strict integers: bools and numeric strings are rejected so a sloppy
    upstream row never silently becomes identity 1 or value 0.
    """

    identity_id: int = Field(..., ge=0, strict=True, description="Unique identity key (e.g. a fid)")
    value: int = Field(..., ge=0, strict=True, description="Observed label category")
    snapshot_date: date = Field(..., description="Date of the snapshot the row came from")

    model_config = {"frozen": True}
