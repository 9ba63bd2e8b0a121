"""REST endpoints for label history queries.

All routes are read-only views over a TimelineStore built at start-up.

    GET /api/identities                   identities passing the filter
    GET /api/identities/{identity_id}     one identity's change points
    GET /api/distribution                 value counts at ?date=
    GET /api/distribution/current         counts of current values
    GET /api/transitions                  matrix between ?from_date= and ?to_date=
    GET /api/shifts                       moves incl. new identities
    GET /api/distributions/{cadence}      weekly / monthly series
    GET /api/updates                      change points per date

Filter query params shared by every list-style route:
    min_created, max_created, current_value
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Query

from label_history.core.queries import (
    Cadence,
    count_updates,
    current_distribution,
    distribution,
    history,
    label_shifts,
    list_identities,
    periodic_distributions,
    transition_matrix,
)
from label_history.domain.errors import InvalidDateRange, UnknownIdentityQuery
from label_history.domain.filters import IdentityFilter
from label_history.domain.results import DistributionResult
from label_history.foundation.clock import today
from label_history.store.timeline_store import TimelineStore

logger = logging.getLogger(__name__)


def _filter_from_params(
    min_created: Optional[date],
    max_created: Optional[date],
    current_value: Optional[int],
) -> IdentityFilter:
    try:
        return IdentityFilter(
            min_creation_date=min_created,
            max_creation_date=max_created,
            current_value=current_value,
        )
    except InvalidDateRange as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _distribution_body(result: DistributionResult) -> dict[str, Any]:
    body = result.model_dump(mode="json")
    body["proportions"] = result.proportions()
    return body


def create_query_router(
    store: TimelineStore,
    default_moves_days: int = 14,
) -> APIRouter:
    """Factory that wires the query endpoints to a built store."""

    router = APIRouter(prefix="/api", tags=["queries"])

    @router.get("/identities")
    async def get_identities(
        min_created: Optional[date] = None,
        max_created: Optional[date] = None,
        current_value: Optional[int] = Query(None, ge=0),
    ) -> dict[str, Any]:
        identity_filter = _filter_from_params(min_created, max_created, current_value)
        identities = sorted(list_identities(store, identity_filter))
        return {"identities": identities, "count": len(identities)}

    @router.get("/identities/{identity_id}")
    async def get_identity(identity_id: int) -> dict[str, Any]:
        try:
            timeline = history(store, identity_id)
        except UnknownIdentityQuery as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return timeline.summary()

    @router.get("/distribution")
    async def get_distribution(
        on: Optional[date] = Query(None, alias="date"),
        min_created: Optional[date] = None,
        max_created: Optional[date] = None,
        current_value: Optional[int] = Query(None, ge=0),
    ) -> dict[str, Any]:
        identity_filter = _filter_from_params(min_created, max_created, current_value)
        return _distribution_body(distribution(store, on or today(), identity_filter))

    @router.get("/distribution/current")
    async def get_current_distribution(
        min_created: Optional[date] = None,
        max_created: Optional[date] = None,
        current_value: Optional[int] = Query(None, ge=0),
    ) -> dict[str, Any]:
        identity_filter = _filter_from_params(min_created, max_created, current_value)
        return _distribution_body(current_distribution(store, identity_filter))

    @router.get("/transitions")
    async def get_transitions(
        from_date: date,
        to_date: date,
        min_created: Optional[date] = None,
        max_created: Optional[date] = None,
        current_value: Optional[int] = Query(None, ge=0),
    ) -> dict[str, Any]:
        identity_filter = _filter_from_params(min_created, max_created, current_value)
        return transition_matrix(store, from_date, to_date, identity_filter).to_dict()

    @router.get("/shifts")
    async def get_shifts(
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        min_created: Optional[date] = None,
        max_created: Optional[date] = None,
        current_value: Optional[int] = Query(None, ge=0),
    ) -> dict[str, Any]:
        """Label moves over a window; defaults to the last *default_moves_days*."""
        identity_filter = _filter_from_params(min_created, max_created, current_value)
        end = to_date or store.latest_date or today()
        start = from_date or end - timedelta(days=default_moves_days)
        shifts = label_shifts(store, start, end, identity_filter)
        return {
            "from_date": start.isoformat(),
            "to_date": end.isoformat(),
            "shifts": [s.model_dump(mode="json") for s in shifts],
        }

    @router.get("/distributions/{cadence}")
    async def get_periodic_distributions(
        cadence: str,
        min_created: Optional[date] = None,
        max_created: Optional[date] = None,
        current_value: Optional[int] = Query(None, ge=0),
    ) -> dict[str, Any]:
        try:
            parsed = Cadence(cadence.lower())
        except ValueError as exc:
            raise HTTPException(
                status_code=400,
                detail=f"Unknown cadence '{cadence}', expected one of "
                f"{[c.value for c in Cadence]}",
            ) from exc
        identity_filter = _filter_from_params(min_created, max_created, current_value)
        series = periodic_distributions(store, parsed, identity_filter)
        logger.debug("Computed %d %s distribution sample(s)", len(series), parsed.value)
        return {
            "cadence": parsed.value,
            "distributions": [_distribution_body(r) for r in series],
        }

    @router.get("/updates")
    async def get_updates(
        min_created: Optional[date] = None,
        max_created: Optional[date] = None,
        current_value: Optional[int] = Query(None, ge=0),
    ) -> dict[str, Any]:
        identity_filter = _filter_from_params(min_created, max_created, current_value)
        updates = count_updates(store, identity_filter)
        return {
            "updates": [{"date": on.isoformat(), "count": n} for on, n in updates.items()]
        }

    return router
