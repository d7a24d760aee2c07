"""Value objects describing a single search request.

A search request is made of three independent parts, each validated on its
own before any store access happens:

- `SearchFilter`: the normalized free-text filter.
- `QueryCursor`: the keyset position to resume from.
- page size, clamped by `clamp_page_size`.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional

from src.core.exceptions import QUERY_TOO_LONG, QUERY_TOO_SHORT, InvalidQueryError

MAX_PAGE_SIZE = 1000

# Returned as `last` when a page is empty, so that any follow-up cursor built
# from it excludes nothing.
NO_LAST_ID = 2**64 - 1

# Largest value a BIGINT column can be compared against. Larger cursor values
# (including an echoed NO_LAST_ID) select the same rows once capped.
MAX_CURSOR_VALUE = 2**63 - 1


def clamp_page_size(requested: Optional[int]) -> int:
    """Return the effective page size for a requested one.

    Absent, non-positive and oversized values all fall back to the maximum;
    a page size is never rejected.
    """
    if requested is None or requested <= 0 or requested > MAX_PAGE_SIZE:
        return MAX_PAGE_SIZE
    return requested


@dataclass(frozen=True, slots=True)
class SearchFilter:
    """Normalized substring filter over domain names.

    The raw value is trimmed and lower-cased. `%` and `_` are left alone so
    callers may use them as wildcards; the value is always sent to the store
    as a bound parameter.
    """

    value: str

    MIN_LENGTH: ClassVar[int] = 3
    MAX_RAW_LENGTH: ClassVar[int] = 255

    @classmethod
    def parse(cls, raw: Optional[str]) -> "SearchFilter":
        """Validate and normalize a raw filter string.

        Raises:
            InvalidQueryError: If the raw value is longer than 255 characters
                or the normalized value is shorter than 3.
        """
        raw = raw or ""
        if len(raw) > cls.MAX_RAW_LENGTH:
            raise InvalidQueryError(QUERY_TOO_LONG)

        value = raw.strip().lower()
        if len(value) < cls.MIN_LENGTH:
            raise InvalidQueryError(QUERY_TOO_SHORT)
        return cls(value)

    def __str__(self) -> str:
        return self.value


class CursorShape(Enum):
    """The three query shapes a cursor can select."""

    LATEST = "latest"
    BEFORE_TIME = "before_time"
    BEFORE_TIME_AND_ID = "before_time_and_id"


@dataclass(frozen=True, slots=True)
class QueryCursor:
    """Keyset position supplied by the caller.

    Non-positive values are treated as absent and values beyond the BIGINT
    range are capped at `MAX_CURSOR_VALUE`. `last_id` only takes effect
    together with `from_time`.
    """

    from_time: Optional[int] = None
    last_id: Optional[int] = None

    def __post_init__(self):
        if self.from_time is not None and self.from_time <= 0:
            object.__setattr__(self, "from_time", None)
        if self.last_id is not None and self.last_id <= 0:
            object.__setattr__(self, "last_id", None)
        for name in ("from_time", "last_id"):
            if (getattr(self, name) or 0) > MAX_CURSOR_VALUE:
                object.__setattr__(self, name, MAX_CURSOR_VALUE)

    @property
    def shape(self) -> CursorShape:
        if self.from_time is None:
            return CursorShape.LATEST
        if self.last_id is None:
            return CursorShape.BEFORE_TIME
        return CursorShape.BEFORE_TIME_AND_ID
