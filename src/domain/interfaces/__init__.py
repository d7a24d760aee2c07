"""Domain interfaces (ports) for the ledger query API."""

from .repositories import IDomainRepository

__all__ = ["IDomainRepository"]
