"""
Use case endpoints.

GET  /api/use-cases          Paginated, filtered listing (newest first)
GET  /api/use-cases/filters  Distinct values for the filter dropdowns
GET  /api/use-cases/{id}     One use case
POST /api/use-cases          Create a use case (requires X-API-Key)
"""

import logging
import sqlite3

from fastapi import APIRouter, Depends, Query, status

from api.auth import require_api_key
from api.database import get_db
from api.errors import AppError
from api.models import (
    AppliedFilters,
    ErrorResponse,
    FilterOptionsOut,
    PaginationOut,
    UseCaseCreate,
    UseCaseCreatedResponse,
    UseCaseDetailResponse,
    UseCaseListResponse,
    UseCaseOut,
)
from utils.database import (
    SELECT_COLUMNS,
    get_use_case,
    insert_use_case,
    list_distinct_values,
)
from utils.query import (
    DEFAULT_ORDER,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    build_pagination,
    build_where_clause,
    page_offset,
)
from utils.strings import is_valid_url, normalize_value, truncate

logger = logging.getLogger("use_case_api")

router = APIRouter(prefix="/use-cases", tags=["use-cases"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Validation error"},
}


@router.get(
    "",
    response_model=UseCaseListResponse,
    responses=_ERROR_RESPONSES,
    summary="List use cases",
)
def list_use_cases(
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Page size"),
    industry: str | None = Query(None, max_length=200, description="Exact industry (case-insensitive)"),
    value_chain_step: str | None = Query(
        None, alias="valueChainStep", max_length=200,
        description="Exact value chain step (case-insensitive)",
    ),
    department: str | None = Query(None, max_length=200, description="Exact department (case-insensitive)"),
    search: str | None = Query(
        None, max_length=500,
        description="Substring matched against name, description and benefit",
    ),
    conn: sqlite3.Connection = Depends(get_db),
) -> UseCaseListResponse:
    """Return one page of use cases matching every supplied filter."""
    filters = AppliedFilters(
        industry=normalize_value(industry),
        value_chain_step=normalize_value(value_chain_step),
        department=normalize_value(department),
        search=normalize_value(search),
    )
    where, params = build_where_clause(
        industry=filters.industry,
        value_chain_step=filters.value_chain_step,
        department=filters.department,
        search=filters.search,
    )

    total = conn.execute(
        f"SELECT COUNT(*) FROM use_cases {where}", params
    ).fetchone()[0]
    rows = conn.execute(
        f"SELECT {SELECT_COLUMNS} FROM use_cases {where} {DEFAULT_ORDER} "
        f"LIMIT ? OFFSET ?",
        params + [limit, page_offset(page, limit)],
    ).fetchall()

    return UseCaseListResponse(
        data=[UseCaseOut(**dict(r)) for r in rows],
        pagination=PaginationOut(**build_pagination(page, limit, total)),
        filters=filters,
    )


@router.get(
    "/filters",
    response_model=FilterOptionsOut,
    summary="Filter dropdown values",
)
def get_filter_options(conn: sqlite3.Connection = Depends(get_db)) -> FilterOptionsOut:
    """Distinct non-blank industries, value chain steps and departments."""
    return FilterOptionsOut(
        industries=list_distinct_values(conn, "industry"),
        value_chain_steps=list_distinct_values(conn, "value_chain_step"),
        departments=list_distinct_values(conn, "department"),
    )


def _parse_id(raw: str) -> int:
    if not (raw.isascii() and raw.isdigit()) or int(raw) < 1:
        raise AppError.validation(
            [{"field": "id", "message": "ID must be a positive integer"}]
        )
    return int(raw)


@router.get(
    "/{use_case_id}",
    response_model=UseCaseDetailResponse,
    responses={
        400: {"model": ErrorResponse, "description": "ID is not a positive integer"},
        404: {"model": ErrorResponse, "description": "Use case not found"},
    },
    summary="Get a use case",
)
def get_use_case_by_id(
    use_case_id: str,
    conn: sqlite3.Connection = Depends(get_db),
) -> UseCaseDetailResponse:
    ident = _parse_id(use_case_id)
    row = get_use_case(conn, ident)
    if row is None:
        raise AppError.not_found("Use case", ident)
    return UseCaseDetailResponse(data=UseCaseOut(**row))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=UseCaseCreatedResponse,
    dependencies=[Depends(require_api_key)],
    responses={
        400: {"model": ErrorResponse, "description": "Validation error"},
        401: {"model": ErrorResponse, "description": "Missing or invalid X-API-Key"},
        409: {"model": ErrorResponse, "description": "A use case with this name exists"},
    },
    summary="Create a use case",
)
def create_use_case(
    body: UseCaseCreate,
    conn: sqlite3.Connection = Depends(get_db),
) -> UseCaseCreatedResponse:
    """Insert a new use case; names are unique ignoring case."""
    if body.url and not is_valid_url(body.url):
        logger.warning("invalid_url use_case=%r url=%r (stored as-is)",
                       truncate(body.use_case), truncate(body.url))

    new_id = insert_use_case(conn, body.to_record())
    if new_id is None:
        raise AppError.duplicate()

    row = get_use_case(conn, new_id)
    logger.info("use_case_created id=%d name=%r", new_id, truncate(body.use_case))
    return UseCaseCreatedResponse(
        message="Use case created successfully",
        data=UseCaseOut(**row),
    )
