"""IdentityFilter — the shared precondition for every query.

Conditions are independent and AND-combined.  Any condition left as None
(or empty) does not constrain anything.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from label_history.domain.errors import InvalidDateRange
from label_history.domain.timeline import Timeline


class IdentityFilter(BaseModel):
    """Which identities a query should consider.

    Creation date and current value come from the identity's Timeline as a
    whole, so they do not depend on any query date.
    """

    min_creation_date: Optional[date] = Field(
        default=None,
        description="Keep identities created on or after this date",
    )
    max_creation_date: Optional[date] = Field(
        default=None,
        description="Keep identities created on or before this date",
    )
    current_value: Optional[int] = Field(
        default=None,
        ge=0,
        description="Keep identities whose latest known value equals this",
    )
    values_at: tuple[tuple[date, int], ...] = Field(
        default=(),
        description="Keep identities whose value at each date equals the paired value",
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def bounds_must_be_ordered(self) -> "IdentityFilter":
        if (
            self.min_creation_date is not None
            and self.max_creation_date is not None
            and self.min_creation_date > self.max_creation_date
        ):
            raise InvalidDateRange(self.min_creation_date, self.max_creation_date)
        return self

    def matches(self, timeline: Timeline) -> bool:
        created = timeline.creation_date
        if self.min_creation_date is not None and created < self.min_creation_date:
            return False
        if self.max_creation_date is not None and created > self.max_creation_date:
            return False
        if self.current_value is not None and timeline.current_value != self.current_value:
            return False
        for on, value in self.values_at:
            if timeline.value_at(on) != value:
                return False
        return True

    @property
    def is_unconstrained(self) -> bool:
        return (
            self.min_creation_date is None
            and self.max_creation_date is None
            and self.current_value is None
            and not self.values_at
        )


NO_FILTER = IdentityFilter()
