"""Domain ledger repository implementation using SQLAlchemy.

All statements are read-only and fully parameterized. Statement construction
is kept in module-level functions so the generated SQL can be inspected
without a database.
"""

from typing import List

from sqlalchemy import Select, distinct, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from structlog import get_logger

from src.domain.entities.domain_record import DomainRecord
from src.domain.interfaces.repositories import IDomainRepository
from src.domain.value_objects.search_query import CursorShape, QueryCursor, SearchFilter

logger = get_logger(__name__)


def build_search_statement(
    search_filter: SearchFilter, cursor: QueryCursor, limit: int
) -> Select:
    """Build the keyset search query for one page.

    `contains()` wraps the bound filter in `%...%` without escaping, so
    wildcards in the filter keep their LIKE meaning.
    """
    statement = select(DomainRecord).where(
        DomainRecord.domain.contains(search_filter.value, autoescape=False)
    )

    shape = cursor.shape
    if shape in (CursorShape.BEFORE_TIME, CursorShape.BEFORE_TIME_AND_ID):
        statement = statement.where(DomainRecord.first_seen <= cursor.from_time)
    if shape is CursorShape.BEFORE_TIME_AND_ID:
        # The id bound only breaks ties at the boundary timestamp.
        statement = statement.where(
            or_(
                DomainRecord.first_seen < cursor.from_time,
                DomainRecord.id < cursor.last_id,
            )
        )

    return statement.order_by(
        DomainRecord.first_seen.desc(),
        DomainRecord.last_seen.desc(),
        DomainRecord.id.desc(),
    ).limit(limit)


def build_domain_count_statement() -> Select:
    return select(func.count()).select_from(DomainRecord)


def build_etld_count_statement() -> Select:
    return select(func.count(distinct(DomainRecord.etld)))


class DomainRepository(IDomainRepository):
    """SQLAlchemy implementation of `IDomainRepository`.

    Each call opens its own session from the shared factory, so concurrent
    requests never share a connection. Errors propagate unchanged; the
    calling service decides what the client gets to see.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def search(
        self, search_filter: SearchFilter, cursor: QueryCursor, limit: int
    ) -> List[DomainRecord]:
        statement = build_search_statement(search_filter, cursor, limit)
        async with self.session_factory() as session:
            result = await session.execute(statement)
            rows = list(result.scalars().all())

        logger.debug(
            "domain_search_executed",
            cursor_shape=cursor.shape.value,
            limit=limit,
            returned=len(rows),
        )
        return rows

    async def count_domains(self) -> int:
        async with self.session_factory() as session:
            result = await session.execute(build_domain_count_statement())
            return int(result.scalar_one())

    async def count_etlds(self) -> int:
        async with self.session_factory() as session:
            result = await session.execute(build_etld_count_statement())
            return int(result.scalar_one())
