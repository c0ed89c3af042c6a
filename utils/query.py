"""Shared SQL query builder utilities for the use case API routes.

Provides WHERE clause, ORDER BY and pagination helpers used by
api/routes/use_cases.py.
"""

import math
from typing import Any

from utils.strings import escape_like

# Query parameter name -> use_cases column (case-insensitive equality filters)
FILTER_COLUMNS = {
    "industry": "industry",
    "value_chain_step": "value_chain_step",
    "department": "department",
}

# Columns scanned by the free-text ``search`` parameter
SEARCH_COLUMNS = ("use_case", "concept_description", "benefit")

# Newest first; id breaks ties between rows created in the same millisecond.
DEFAULT_ORDER = "ORDER BY created_at DESC, id DESC"

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def build_where_clause(
    industry: str | None = None,
    value_chain_step: str | None = None,
    department: str | None = None,
    search: str | None = None,
) -> tuple[str, list[Any]]:
    """Build a SQL WHERE clause from filter parameters.

    The SQL calls ``casefold()``, registered by utils.database.connect(),
    so case folding covers non-ASCII letters.

    Args:
        industry: Case-insensitive exact match on industry.
        value_chain_step: Case-insensitive exact match on value_chain_step.
        department: Case-insensitive exact match on department.
        search: Case-insensitive substring match against use_case,
            concept_description or benefit (any of them).

    Returns:
        Tuple of (where_clause_string, params_list). The where_clause_string
        starts with "WHERE " if any conditions exist, or is "" if none.
    """
    conditions: list[str] = []
    params: list[Any] = []

    values = {
        "industry": industry,
        "value_chain_step": value_chain_step,
        "department": department,
    }
    for name, column in FILTER_COLUMNS.items():
        value = values[name]
        if value:
            conditions.append(f"casefold({column}) = casefold(?)")
            params.append(value)

    if search:
        pattern = f"%{escape_like(search.casefold())}%"
        ors = [f"casefold({col}) LIKE ? ESCAPE '\\'" for col in SEARCH_COLUMNS]
        conditions.append("(" + " OR ".join(ors) + ")")
        params.extend([pattern] * len(SEARCH_COLUMNS))

    where = "WHERE " + " AND ".join(conditions) if conditions else ""
    return where, params


def page_offset(page: int, limit: int) -> int:
    """Return the row offset for a 1-based *page* of size *limit*."""
    return (page - 1) * limit


def build_pagination(page: int, limit: int, total: int) -> dict[str, Any]:
    """Compute the pagination block for a list response.

    ``total_pages`` is 0 when there are no rows, so ``has_next`` is False on
    every page of an empty result.
    """
    total_pages = math.ceil(total / limit) if limit > 0 else 0
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": total_pages,
        "has_next": page < total_pages,
        "has_prev": page > 1,
    }
