"""Summary statistics routes."""

from fastapi import APIRouter, Depends, Response

from preciazo.api.deps import get_history_service
from preciazo.config import settings
from preciazo.query.service import HistoryService

router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("")
async def get_stats(
    response: Response,
    service: HistoryService = Depends(get_history_service),
):
    """Approximate number of stored observations."""
    count = await service.count_observations()
    response.headers["Cache-Control"] = f"public, max-age={settings.stats_cache_seconds}"
    return {"count": count}
