"""
Listing scope: paginate(page, per_page) returns a function applied to a base query,
so repositories stay unaware of query-string parsing.
"""
from typing import Callable

from sqlalchemy.orm import Query

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 10
MAX_PER_PAGE = 100

Scope = Callable[[Query], Query]


def parse_page(page: str | None, per_page: str | None) -> tuple[int, int]:
    """Query-string values -> (page, per_page). Invalid or non-positive values fall back to defaults."""
    try:
        p = int(page) if page else DEFAULT_PAGE
    except ValueError:
        p = DEFAULT_PAGE
    try:
        pp = int(per_page) if per_page else DEFAULT_PER_PAGE
    except ValueError:
        pp = DEFAULT_PER_PAGE
    if p < 1:
        p = DEFAULT_PAGE
    if pp < 1:
        pp = DEFAULT_PER_PAGE
    return p, min(pp, MAX_PER_PAGE)


def paginate(page: int, per_page: int) -> Scope:
    offset = (page - 1) * per_page

    def scope(query: Query) -> Query:
        return query.offset(offset).limit(per_page)

    return scope
