"""FastAPI dependencies."""

from fastapi import Depends

from preciazo.db.store import ObservationStore
from preciazo.query.service import HistoryService


def get_store() -> ObservationStore:
    """Dependency for the observation store."""
    return ObservationStore()


def get_history_service(store: ObservationStore = Depends(get_store)) -> HistoryService:
    """Dependency for the history query service."""
    return HistoryService(store)
