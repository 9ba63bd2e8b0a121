"""Error taxonomy for label-history.

None of these are fatal to the process.  The core raises them and the
outer layers (CLI, API) decide how to report them.
"""

from __future__ import annotations

from datetime import date


class LabelHistoryError(Exception):
    """Base class for all label-history errors."""


class MalformedRow(LabelHistoryError):
    """A raw snapshot row is missing fields or fails type validation.

    Dropped and counted by the parser; never aborts a snapshot.
    """

    def __init__(self, reason: str, adapter_name: str | None = None) -> None:
        self.reason = reason
        self.adapter_name = adapter_name
        if adapter_name:
            super().__init__(f"Adapter '{adapter_name}' rejected row: {reason}")
        else:
            super().__init__(f"Malformed row: {reason}")


class UnknownIdentityQuery(LabelHistoryError):
    """History was requested for an identity the store has never seen."""

    def __init__(self, identity_id: int) -> None:
        self.identity_id = identity_id
        super().__init__(f"Identity {identity_id} not found")


class InvalidDateRange(LabelHistoryError):
    """A filter's minimum creation date lies after its maximum.

    Not a ValueError subclass, so it propagates out of pydantic validators
    unwrapped.
    """

    def __init__(self, min_creation_date: date, max_creation_date: date) -> None:
        self.min_creation_date = min_creation_date
        self.max_creation_date = max_creation_date
        super().__init__(
            f"min creation date {min_creation_date.isoformat()} is after "
            f"max creation date {max_creation_date.isoformat()}"
        )


class SnapshotSourceError(LabelHistoryError):
    """A snapshot file or directory cannot be read or dated."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")
