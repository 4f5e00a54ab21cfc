import sqlite3
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence

from ..config import DB_FILE

logger = logging.getLogger(__name__)


def get_db_connection(db_file: str = DB_FILE) -> sqlite3.Connection:
    """Establishes a connection to the SQLite database."""
    # Shared with the MCP server's worker threads; calls are never concurrent
    conn = sqlite3.connect(db_file, check_same_thread=False)
    # Return rows as dictionary-like objects
    conn.row_factory = sqlite3.Row
    # Enable foreign key constraints (needed for cascading deletes)
    conn.execute("PRAGMA foreign_keys = ON")
    # SQLite's lower() and NOCASE only fold ASCII letters
    conn.create_function("casefold", 1, _casefold, deterministic=True)
    return conn


def _casefold(value):
    return value.casefold() if isinstance(value, str) else value


class Database:
    """
    Owner of the process-wide SQLite connection.

    Constructed once at application start and handed to the services that
    need storage access. The connection stays open for the lifetime of the
    process; call close() on shutdown.
    """

    def __init__(self, db_file: str = DB_FILE):
        self.db_file = db_file
        self._conn: Optional[sqlite3.Connection] = None

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = get_db_connection(self.db_file)
            logger.info(f"Opened database {self.db_file}")
        return self._conn

    def execute(self, sql: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
        """Run a single statement and commit it."""
        with self.conn:
            return self.conn.execute(sql, params)

    def fetch_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[Dict[str, Any]]:
        row = self.conn.execute(sql, params).fetchone()
        return dict(row) if row is not None else None

    def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        return [dict(row) for row in self.conn.execute(sql, params).fetchall()]

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Cursor]:
        """
        Run a group of statements as one unit.

        Commits when the block exits normally and rolls back every statement
        issued inside the block if it raises.
        """
        with self.conn:
            yield self.conn.cursor()

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
