from fastapi import APIRouter

from src.adapters.api.v1.schemas import StatsResponse
from src.infrastructure.dependency_injection.ledger_dependencies import StatsCacheDep

router = APIRouter()


@router.get(
    "",
    response_model=StatsResponse,
    summary="Aggregate ledger statistics",
    description="Total domain count and distinct eTLD count, refreshed in the background.",
)
async def get_stats(stats_cache: StatsCacheDep) -> StatsResponse:
    """
    Serve the latest refreshed snapshot. Never touches the store and is not
    subject to admission control.
    """
    return StatsResponse.from_snapshot(stats_cache.snapshot)
