from .domain import create_domain_record, create_domain_records

__all__ = ["create_domain_record", "create_domain_records"]
