import pytest
from fastapi.testclient import TestClient

from src.core.application import create_application
from src.domain.rate_limiting import AdmissionController
from src.domain.services.search import DomainSearchService
from src.domain.services.stats import StatsCache
from tests.utils.fakes import InMemoryDomainRepository, ManualClock


@pytest.fixture
def repository():
    """Empty in-memory store; tests add records as needed."""
    return InMemoryDomainRepository()


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def admission_controller(clock):
    """Burst 5, refill 1/sec, driven by the manual clock."""
    return AdmissionController(clock=clock)


@pytest.fixture
def stats_cache():
    return StatsCache()


@pytest.fixture
def app(repository, admission_controller, stats_cache):
    """Application with its state wired to fakes.

    The lifespan is not run (the client is not used as a context manager), so
    no database connection or refresher task is created.
    """
    application = create_application()
    application.state.search_service = DomainSearchService(repository, timeout_seconds=1.0)
    application.state.stats_cache = stats_cache
    application.state.admission_controller = admission_controller
    return application


@pytest.fixture
def client(app):
    return TestClient(app)
