"""API v1 router configuration.
"""

from fastapi import APIRouter

from .query import router as query_router
from .stats import router as stats_router

api_router = APIRouter()

api_router.include_router(stats_router, prefix="/stats", tags=["stats"])
api_router.include_router(query_router, prefix="/query", tags=["query"])
