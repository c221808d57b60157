"""
Database Access
===============

A thin wrapper around a psycopg2 connection pool.

Every call borrows one connection, runs exactly one statement in its own
transaction (commit on success, rollback on failure) and gives the
connection back. There is no caching and no retrying here - if the
database says no, the caller gets the exception.

THREE WAYS TO RUN A STATEMENT:
-----------------------------
- fetch_all(sql, params)  -> list of rows (dicts)
- fetch_one(sql, params)  -> first row (dict) or None
- execute(sql, params)    -> number of affected rows

SQL templates use %s placeholders; psycopg2 does the parameter binding,
so values are never pasted into the SQL text.

CONNECTIONS:
-----------
- More callers than pooled connections? The extra callers wait for a
  connection to come back instead of failing.
- No pool yet (database was down at startup)? The next call tries to
  open one. If that fails too, the caller gets the psycopg2 error.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Optional, Sequence

from psycopg2 import pool
from psycopg2.extras import RealDictCursor

logger = logging.getLogger(__name__)


class DatabaseError(Exception):
    """Raised when no database handle is available."""


class Database:
    """
    Connection pool handle shared by all requests.

    Created once at startup (see main.lifespan) and handed to each
    endpoint through dependency injection.
    """

    def __init__(self, dsn: str, min_connections: int = 1, max_connections: int = 10):
        self.dsn = dsn
        self.min_connections = min_connections
        self.max_connections = max_connections
        self._pool: Optional[pool.ThreadedConnectionPool] = None

        # One slot per pooled connection; getconn() never waits on its own
        self._slots = threading.BoundedSemaphore(max_connections)
        self._connect_lock = threading.Lock()

    @property
    def is_connected(self) -> bool:
        return self._pool is not None and not self._pool.closed

    def connect(self):
        """Open the connection pool."""
        self._pool = pool.ThreadedConnectionPool(
            self.min_connections,
            self.max_connections,
            self.dsn,
            cursor_factory=RealDictCursor
        )
        logger.info(
            f"Database pool initialized (min={self.min_connections}, max={self.max_connections})"
        )

    def close(self):
        """Close every pooled connection."""
        if self._pool is not None and not self._pool.closed:
            self._pool.closeall()
            logger.info("Database pool closed")
        self._pool = None

    def _ensure_pool(self) -> pool.ThreadedConnectionPool:
        if not self.is_connected:
            with self._connect_lock:
                if not self.is_connected:
                    logger.info("No database pool, connecting")
                    self.connect()
        return self._pool

    @contextmanager
    def _cursor(self):
        connections = self._ensure_pool()

        with self._slots:
            conn = connections.getconn()
            try:
                with conn.cursor() as cur:
                    yield cur
                conn.commit()
            except Exception:
                conn.rollback()
                raise
            finally:
                connections.putconn(conn)

    def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> list[dict]:
        """Run a statement and return every row."""
        with self._cursor() as cur:
            cur.execute(sql, params)
            return [dict(row) for row in cur.fetchall()]

    def fetch_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[dict]:
        """Run a statement and return the first row, or None if there is none."""
        with self._cursor() as cur:
            cur.execute(sql, params)
            row = cur.fetchone()
            return dict(row) if row is not None else None

    def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        """Run a statement that returns nothing. Returns the affected row count."""
        with self._cursor() as cur:
            cur.execute(sql, params)
            return cur.rowcount

    def check_connection(self) -> Optional[dict]:
        """Ask the server for its clock. Used by /health and check_db."""
        return self.fetch_one("SELECT NOW() AS now")
