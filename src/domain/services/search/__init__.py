from .domain_search_service import DomainSearchService, SearchPage

__all__ = ["DomainSearchService", "SearchPage"]
