"""Dependency providers for the ledger API.

The long-lived components (search service, stats cache, admission controller)
are built once in the application lifespan and stored on `app.state`. These
providers hand them to route handlers, and are the seams tests override.
"""

from typing import Annotated

from fastapi import Depends, Request

from src.domain.rate_limiting import AdmissionController
from src.domain.services.search import DomainSearchService
from src.domain.services.stats import StatsCache


def get_domain_search_service(request: Request) -> DomainSearchService:
    return request.app.state.search_service


def get_stats_cache(request: Request) -> StatsCache:
    return request.app.state.stats_cache


def get_admission_controller(request: Request) -> AdmissionController:
    return request.app.state.admission_controller


DomainSearchServiceDep = Annotated[DomainSearchService, Depends(get_domain_search_service)]
StatsCacheDep = Annotated[StatsCache, Depends(get_stats_cache)]
AdmissionControllerDep = Annotated[AdmissionController, Depends(get_admission_controller)]
