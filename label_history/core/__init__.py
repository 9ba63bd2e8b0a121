from label_history.core.history_builder import HistoryBuilder, build_store
from label_history.core.queries import (
    distribution,
    history,
    list_identities,
    transition_matrix,
)

__all__ = [
    "HistoryBuilder",
    "build_store",
    "distribution",
    "history",
    "list_identities",
    "transition_matrix",
]
