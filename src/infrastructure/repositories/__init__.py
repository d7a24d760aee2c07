"""Repository implementations for the infrastructure layer."""

from .domain_repository import DomainRepository
from src.domain.interfaces.repositories import IDomainRepository

__all__ = ["DomainRepository", "IDomainRepository"]
