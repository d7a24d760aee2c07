"""Domain ledger record as stored in the `domains` table.

Rows are written by the external scanner; this service only reads them. The
model exists so that queries can be expressed against typed columns and so
that rows can be returned to callers without an intermediate mapping layer.
"""

from typing import Optional

from sqlalchemy import BigInteger, Text
from sqlmodel import Column, Field, SQLModel


class DomainRecord(SQLModel, table=True):
    """A registered domain observed by the scanner.

    Attributes:
        id: Row identifier assigned at insertion; strictly increasing and
            stable. Not correlated with the timestamps (backfilled rows may
            carry older timestamps than earlier rows).
        domain: The registered domain name, lower case.
        etld: Effective top-level domain of `domain` (e.g. "com.au").
        first_seen: Unix timestamp (seconds) of the first observation.
        last_seen: Unix timestamp (seconds) of the latest observation,
            never earlier than `first_seen`.
    """

    __tablename__ = "domains"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigInteger, primary_key=True),
        description="Stable, strictly increasing row identifier.",
    )
    domain: str = Field(
        sa_column=Column(Text, nullable=False, index=True),
        description="Registered domain name.",
    )
    etld: str = Field(
        sa_column=Column(Text, nullable=False),
        description="Effective top-level domain.",
    )
    first_seen: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="First observation, unix seconds.",
    )
    last_seen: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Latest observation, unix seconds.",
    )
