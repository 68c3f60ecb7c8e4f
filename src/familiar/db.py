"""Database access layer using psycopg2.

Used by the cursor executor and the database-backed tests; Alembic
migrations go through SQLAlchemy instead (see migrations/env.py).

Provides:
- get_conn(): Get a database connection from DATABASE_URL
- txn(): Context manager for short, safe transactions
- execute(): Statement execution
- fetchone(): Query helper
"""

from contextlib import contextmanager
from typing import Any, Iterator, Sequence

import psycopg2
from psycopg2.extensions import connection as PgConnection, cursor as PgCursor

from .config import Settings, load_settings


def get_conn(settings: Settings | None = None) -> PgConnection:
    """Get a new database connection.

    Args:
        settings: Settings to read DATABASE_URL from. Loaded from the
            environment when omitted.

    Returns:
        psycopg2 connection object.

    Raises:
        RuntimeError: If DATABASE_URL is not set.
        psycopg2.Error: On connection failure.
    """
    settings = settings or load_settings()
    return psycopg2.connect(settings.require_database_url())


@contextmanager
def txn(conn: PgConnection | None = None) -> Iterator[PgCursor]:
    """Context manager for a short, safe transaction.

    If conn is None, creates a new connection that is closed on exit.
    Commits on successful exit, rolls back on exception. PostgreSQL DDL is
    transactional, so a failing statement undoes the whole plan.

    Example:
        with txn() as cur:
            engine = MigrationEngine(store, DirectionalExecutor(cursor_statement_runner(cur)))
            engine.create_view("chickens", version=1)
    """
    owns_conn = conn is None
    if owns_conn:
        conn = get_conn()

    try:
        with conn.cursor() as cur:
            yield cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        if owns_conn:
            conn.close()


def execute(
    cur: PgCursor,
    query: str,
    params: Sequence[Any] | None = None,
) -> None:
    """Execute a statement.

    Generated DDL is passed without params so literal % signs in
    definition bodies are not treated as placeholders.
    """
    if params is None:
        cur.execute(query)
    else:
        cur.execute(query, params)


def fetchone(
    cur: PgCursor,
    query: str,
    params: Sequence[Any] | None = None,
) -> tuple[Any, ...] | None:
    """Execute query and fetch one row.

    Args:
        cur: Database cursor.
        query: SQL query with %s placeholders.
        params: Query parameters.

    Returns:
        Single row tuple or None if no results.
    """
    cur.execute(query, params)
    return cur.fetchone()
