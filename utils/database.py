"""Database utilities for the Use Case Library.

Provides reusable functions for:
- Opening SQLite connections with standard pragmas
- Registering the Unicode ``casefold()`` SQL function
- Creating the ``use_cases`` schema (idempotent)
- Inserting and fetching use case rows

Both the API (through the pool in api/database.py) and the CSV importer go
through these helpers, so uniqueness and timestamp rules live in one place.
"""

import sqlite3
from pathlib import Path
from typing import Any, Dict, List, Optional

USE_CASE_COLUMNS = [
    "id",
    "use_case",
    "concept_description",
    "concrete_implementation",
    "benefit",
    "industry",
    "department",
    "value_chain_step",
    "url",
    "created_at",
    "updated_at",
]

# Columns a caller may supply on insert (everything else is store-generated)
WRITABLE_COLUMNS = USE_CASE_COLUMNS[1:9]

SELECT_COLUMNS = ", ".join(USE_CASE_COLUMNS)

_NOW = "(strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))"

SCHEMA_SQL = f"""
CREATE TABLE IF NOT EXISTS use_cases (
    id                      INTEGER PRIMARY KEY AUTOINCREMENT,
    use_case                TEXT NOT NULL CHECK (length(trim(use_case)) > 0),
    concept_description     TEXT NOT NULL CHECK (length(trim(concept_description)) > 0),
    concrete_implementation TEXT,
    benefit                 TEXT,
    industry                TEXT,
    department              TEXT,
    value_chain_step        TEXT,
    url                     TEXT,
    created_at              TEXT NOT NULL DEFAULT {_NOW},
    updated_at              TEXT NOT NULL DEFAULT {_NOW}
);

DROP INDEX IF EXISTS idx_use_cases_name_nocase;

CREATE UNIQUE INDEX IF NOT EXISTS idx_use_cases_name_fold
    ON use_cases (casefold(use_case));

CREATE INDEX IF NOT EXISTS idx_use_cases_created_at
    ON use_cases (created_at);

CREATE TRIGGER IF NOT EXISTS trg_use_cases_updated_at
AFTER UPDATE ON use_cases
FOR EACH ROW WHEN NEW.updated_at = OLD.updated_at
BEGIN
    UPDATE use_cases SET updated_at = {_NOW} WHERE id = NEW.id;
END;
"""


def init_pragmas(conn: sqlite3.Connection) -> None:
    """Initialize SQLite performance and reliability pragmas.

    - WAL mode so readers are not blocked by the importer
    - NORMAL synchronous mode for speed without data loss
    - busy_timeout so concurrent writers wait instead of failing
    - trusted_schema so the name index may call casefold()

    Args:
        conn: SQLite connection to configure
    """
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA synchronous=NORMAL")
    conn.execute("PRAGMA busy_timeout=5000")
    conn.execute("PRAGMA trusted_schema=ON")


def _casefold(value: Any) -> Any:
    return value.casefold() if isinstance(value, str) else value


def register_functions(conn: sqlite3.Connection) -> None:
    """Register ``casefold(text)`` on *conn*.

    SQLite's NOCASE collation and lower() only fold ASCII letters, so every
    case-insensitive comparison (name index, filters, search) goes through
    Python's str.casefold() instead.  Must run before the schema is touched.
    """
    conn.create_function("casefold", 1, _casefold, deterministic=True)


def init_schema(conn: sqlite3.Connection) -> None:
    """Create the use_cases table, indexes and trigger if missing."""
    conn.executescript(SCHEMA_SQL)
    conn.commit()


def connect(db_path: Path) -> sqlite3.Connection:
    """Open a read-write connection with pragmas applied and schema ensured.

    Args:
        db_path: Path to the SQLite database file (created if missing).

    Returns:
        Connection with ``sqlite3.Row`` row factory.
    """
    db_path = Path(db_path)
    if db_path.parent and not db_path.parent.exists():
        db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), check_same_thread=False, timeout=10)
    conn.row_factory = sqlite3.Row
    register_functions(conn)
    init_pragmas(conn)
    init_schema(conn)
    return conn


def get_table_count(conn: sqlite3.Connection, table: str) -> int:
    """Get row count for a table.

    Args:
        conn: SQLite connection
        table: Table name

    Returns:
        Number of rows in table
    """
    result = conn.execute(f"SELECT COUNT(*) AS cnt FROM {table}").fetchone()
    return result[0] if result else 0


def get_use_case(conn: sqlite3.Connection, use_case_id: int) -> Optional[Dict[str, Any]]:
    """Return one use case row as a dict, or None if the id is unknown."""
    row = conn.execute(
        f"SELECT {SELECT_COLUMNS} FROM use_cases WHERE id = ?",
        (use_case_id,),
    ).fetchone()
    return dict(row) if row is not None else None


def insert_use_case(conn: sqlite3.Connection, record: Dict[str, Any]) -> Optional[int]:
    """Insert a use case unless its name already exists (case-insensitive).

    The existence check and the write are one statement, so two concurrent
    inserts of the same name cannot both succeed.

    Args:
        conn: SQLite connection
        record: Mapping of WRITABLE_COLUMNS to values; missing keys are NULL.

    Returns:
        The new row id, or None if a row with the same name already exists.
    """
    values = [record.get(col) for col in WRITABLE_COLUMNS]
    placeholders = ", ".join("?" * len(WRITABLE_COLUMNS))
    cursor = conn.execute(
        f"INSERT INTO use_cases ({', '.join(WRITABLE_COLUMNS)}) "
        f"VALUES ({placeholders}) ON CONFLICT DO NOTHING",
        values,
    )
    conn.commit()
    if cursor.rowcount == 0:
        return None
    return cursor.lastrowid


def list_distinct_values(conn: sqlite3.Connection, column: str) -> List[str]:
    """Return distinct non-null, non-blank values of *column*, sorted ascending.

    Sorting ignores case, so "apple" comes before "Zebra".

    Args:
        conn: SQLite connection
        column: One of the categorical use_cases columns (caller-validated).
    """
    rows = conn.execute(
        f"SELECT DISTINCT {column} FROM use_cases "
        f"WHERE {column} IS NOT NULL AND trim({column}) != '' "
        f"ORDER BY casefold({column}), {column}"
    ).fetchall()
    return [r[0] for r in rows]
