"""label-history — HTTP query service over dated label snapshots.

This is the application entry point.  It reads the snapshot files under
``settings.data_path`` once, builds the TimelineStore, and wires the query
router and health endpoint around it.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from label_history.adapters.registry import AdapterRegistry, default_registry
from label_history.adapters.snapshot import SnapshotParser
from label_history.api.queries import create_query_router
from label_history.config import settings
from label_history.core.history_builder import build_store
from label_history.domain.errors import SnapshotSourceError
from label_history.ingest.jsonl_reader import read_snapshots
from label_history.store.timeline_store import TimelineStore

# ── Logging ──────────────────────────────────────────────────────────────────

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)

logger = logging.getLogger(__name__)


# ── State ────────────────────────────────────────────────────────────────────

def load_store(registry: AdapterRegistry) -> TimelineStore:
    """Build the store from ``settings.data_path``; empty if it is missing."""
    try:
        snapshot_files = read_snapshots(settings.data_path)
    except SnapshotSourceError as exc:
        logger.warning("Serving an empty store: %s", exc)
        return TimelineStore()
    parser = SnapshotParser(registry)
    return build_store((f.as_snapshot() for f in snapshot_files), parser=parser)


# ── App ──────────────────────────────────────────────────────────────────────

def create_app(
    store: TimelineStore | None = None,
    registry: AdapterRegistry | None = None,
) -> FastAPI:
    """Assemble the FastAPI app around a built store.

    When *store* is None it is loaded from the configured data path.
    """
    registry = registry or default_registry()
    if store is None:
        store = load_store(registry)

    app = FastAPI(
        title=settings.app_name,
        description="Label distributions and transitions over dated snapshots",
        version="0.1.0",
        debug=settings.debug,
    )

    # ── Routes ───────────────────────────────────────────────────────────

    app.include_router(
        create_query_router(store, default_moves_days=settings.default_moves_days)
    )

    # ── Health ───────────────────────────────────────────────────────────

    @app.get("/health")
    async def health() -> dict:
        return {
            "status": "ok",
            **store.summary(),
            "adapters": registry.stats,
            "total_adapted": registry.total_accepted,
            "total_rejected": registry.total_rejected,
            "unhandled_rows": registry.unhandled_count,
        }

    return app


app = create_app()
