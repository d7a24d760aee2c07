"""Domain entities for the ledger query API."""

from .domain_record import DomainRecord

__all__ = ["DomainRecord"]
