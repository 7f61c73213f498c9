"""
Filter predicates and pagination for collection listings.

Predicates are small immutable objects with a ``matches(record)``
method.  They look fields up by attribute name on Pydantic records; a
predicate naming a field the record type does not declare matches
nothing rather than raising, so callers can pass user supplied filter
names straight through.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, Iterable, List, Protocol, Sequence, Tuple, TypeVar

from ..core.errors import ValidationError

T = TypeVar("T")

_MISSING = object()


def field_value(record: Any, field: str) -> Any:
    """Return ``record.field`` or a sentinel when the field is not declared."""
    if field not in getattr(type(record), "model_fields", {}):
        return _MISSING
    return getattr(record, field)


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _contains(value: Any, needle: str) -> bool:
    if value is None or value is _MISSING:
        return False
    if isinstance(value, (list, tuple, set)):
        return any(_contains(item, needle) for item in value)
    return needle in str(_plain(value)).lower()


class Predicate(Protocol):
    def matches(self, record: Any) -> bool:
        ...


@dataclass(frozen=True)
class Exact:
    """Field equals ``value`` (enum members compare by value)."""

    field: str
    value: Any

    def matches(self, record: Any) -> bool:
        current = field_value(record, self.field)
        if current is _MISSING:
            return False
        return _plain(current) == _plain(self.value)


@dataclass(frozen=True)
class Contains:
    """Case-insensitive substring match; list fields match on any element."""

    field: str
    text: str

    def matches(self, record: Any) -> bool:
        return _contains(field_value(record, self.field), self.text.lower())


@dataclass(frozen=True)
class AnyOf:
    """Array field shares at least one value with ``values``.

    On a scalar field this reads as "field is one of ``values``".
    """

    field: str
    values: Tuple[Any, ...]

    def matches(self, record: Any) -> bool:
        current = field_value(record, self.field)
        if current is _MISSING or current is None:
            return False
        wanted = {_plain(value) for value in self.values}
        if isinstance(current, (list, tuple, set)):
            return any(_plain(item) in wanted for item in current)
        return _plain(current) in wanted


@dataclass(frozen=True)
class Search:
    """Case-insensitive substring over any of ``fields``."""

    fields: Tuple[str, ...]
    text: str

    def matches(self, record: Any) -> bool:
        needle = self.text.lower()
        return any(_contains(field_value(record, name), needle) for name in self.fields)


def apply_filters(records: Iterable[T], predicates: Sequence[Predicate]) -> List[T]:
    return [record for record in records if all(p.matches(record) for p in predicates)]


def id_order(record_id: str) -> Tuple[int, str]:
    """Sort key ordering numeric string ids numerically."""
    return (len(record_id), record_id)


@dataclass(frozen=True)
class Page(Generic[T]):
    items: List[T]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)

    def pagination(self) -> Dict[str, int]:
        return {"page": self.page, "limit": self.limit, "total": self.total, "pages": self.total_pages}


def check_paging(page: int, limit: int, max_limit: int = 100) -> None:
    details = []
    if page < 1:
        details.append({"location": "query", "field": "page", "message": "page must be >= 1", "type": "range"})
    if not 1 <= limit <= max_limit:
        details.append(
            {"location": "query", "field": "limit", "message": f"limit must be between 1 and {max_limit}", "type": "range"}
        )
    if details:
        raise ValidationError(details=details)


def paginate(records: Sequence[T], page: int, limit: int, max_limit: int = 100) -> Page[T]:
    """Slice ``records`` into page ``page`` of size ``limit``.

    A page past the end is empty, not an error.
    """
    check_paging(page, limit, max_limit)
    start = (page - 1) * limit
    return Page(items=list(records[start:start + limit]), page=page, limit=limit, total=len(records))
