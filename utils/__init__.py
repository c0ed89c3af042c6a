"""Shared utilities for the Use Case Library API and importer."""

# Common utilities
from utils.common import format_duration

# Pattern definitions
from utils.patterns import LIKE_SPECIAL_CHARS, URL_SHAPE

# String utilities
from utils.strings import escape_like, is_valid_url, normalize_value, truncate

# Database utilities
from utils.database import (
    connect,
    get_table_count,
    get_use_case,
    init_pragmas,
    init_schema,
    insert_use_case,
    list_distinct_values,
    register_functions,
)

# Query building
from utils.query import build_pagination, build_where_clause, page_offset

# Configuration
from utils.config import AppConfig, CsvColumns, DEFAULT_CSV_PATH

__all__ = [
    # Common
    "format_duration",
    # Patterns
    "LIKE_SPECIAL_CHARS",
    "URL_SHAPE",
    # Strings
    "escape_like",
    "is_valid_url",
    "normalize_value",
    "truncate",
    # Database
    "connect",
    "get_table_count",
    "get_use_case",
    "init_pragmas",
    "init_schema",
    "insert_use_case",
    "list_distinct_values",
    "register_functions",
    # Query
    "build_pagination",
    "build_where_clause",
    "page_offset",
    # Config
    "AppConfig",
    "CsvColumns",
    "DEFAULT_CSV_PATH",
]
