"""
Database connection management for the API.

Each application instance owns a ``ConnectionPool`` (created by create_app()
and stored on ``app.state.pool``).  The get_db() dependency borrows a
connection for the duration of one request and hands it back afterwards.
"""

import queue
import sqlite3
import threading
from collections.abc import Generator
from pathlib import Path

from fastapi import Request

from utils.database import connect


class ConnectionPool:
    """Simple SQLite connection pool using a queue for thread-safety.

    Connections are created lazily up to ``max_size``.  When a connection is
    released it is returned to the pool (not closed) so subsequent requests
    can reuse it without the open/pragma overhead.  The first connection
    also creates the schema if the database is new.
    """

    def __init__(self, db_path: Path, max_size: int = 10) -> None:
        self._db_path = Path(db_path)
        self._max_size = max(1, max_size)
        self._pool: queue.Queue[sqlite3.Connection] = queue.Queue(maxsize=self._max_size)
        self._active = 0
        self._lock = threading.Lock()

    @property
    def db_path(self) -> Path:
        return self._db_path

    @property
    def active(self) -> int:
        """Number of connections currently open (idle or borrowed)."""
        return self._active

    def acquire(self) -> sqlite3.Connection:
        """Acquire a connection from the pool (create if needed, block if full)."""
        try:
            return self._pool.get_nowait()
        except queue.Empty:
            pass
        with self._lock:
            if self._active < self._max_size:
                self._active += 1
                try:
                    return connect(self._db_path)
                except Exception:
                    self._active -= 1
                    raise
        # Pool is full, wait for one to be released
        return self._pool.get(timeout=30)

    def release(self, conn: sqlite3.Connection) -> None:
        """Return a connection to the pool, discarding any open transaction."""
        if conn.in_transaction:
            conn.rollback()
        try:
            self._pool.put_nowait(conn)
        except queue.Full:
            conn.close()
            with self._lock:
                self._active -= 1

    def close_all(self) -> None:
        """Close all pooled connections (call on shutdown)."""
        while not self._pool.empty():
            try:
                conn = self._pool.get_nowait()
                conn.close()
            except queue.Empty:
                break
        with self._lock:
            self._active = 0


def get_db(request: Request) -> Generator[sqlite3.Connection, None, None]:
    """FastAPI dependency: borrow a pooled connection for one request.

    Usage in a route::

        from api.database import get_db
        from fastapi import Depends

        @router.get("/example")
        def example(conn=Depends(get_db)):
            ...
    """
    pool: ConnectionPool = request.app.state.pool
    conn = pool.acquire()
    try:
        yield conn
    finally:
        pool.release(conn)
