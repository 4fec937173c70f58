# Area: Store
"""
ulti_stats._store.database — Database Initialization
====================================================

Handles SQLite database initialization and connection management
for the document store. Every ``sqlite3.Error`` leaving this module
is re-raised as ``StorageUnavailableError``.
"""

import json
import sqlite3
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..errors import StorageUnavailableError

logger = logging.getLogger("ulti_stats.store.database")

# Path to schema file
SCHEMA_PATH = Path(__file__).parent / "schema.sql"


def get_connection(db_path: str = "ulti_stats.db") -> sqlite3.Connection:
    """
    Get a database connection.

    Args:
        db_path: Path to the SQLite database file

    Returns:
        SQLite connection with row factory set
    """
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_database(db_path: str = "ulti_stats.db") -> None:
    """
    Initialize the database with schema.

    Args:
        db_path: Path to the SQLite database file

    Raises:
        StorageUnavailableError: If the schema cannot be applied
    """
    try:
        conn = get_connection(db_path)
        try:
            with open(SCHEMA_PATH, "r", encoding="utf-8") as f:
                schema = f.read()
            conn.executescript(schema)
            conn.commit()
            logger.info(f"Database initialized at {db_path}")
        finally:
            conn.close()
    except sqlite3.Error as e:
        raise StorageUnavailableError("init_database", e, {"db_path": db_path}) from e


def format_timestamp(value: datetime) -> str:
    """Serialize a datetime as a sortable UTC ISO string."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def next_timestamp(now: datetime, last: Optional[str]) -> datetime:
    """Return ``now``, bumped past ``last`` so timestamps strictly increase."""
    if last:
        previous = datetime.fromisoformat(last)
        if now <= previous:
            return previous + timedelta(microseconds=1)
    return now


class BaseRepository:
    """
    Base class for database repositories.

    Provides common database operations and connection management.
    Documents are stored as JSON text in a ``document`` column.
    """

    def __init__(self, db_path: str = "ulti_stats.db"):
        """
        Initialize repository.

        Args:
            db_path: Path to the SQLite database file
        """
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        """Get a database connection."""
        return get_connection(self.db_path)

    def _execute(
        self,
        query: str,
        params: tuple = (),
        fetch: bool = False,
        operation: str = "execute",
    ) -> Any:
        """
        Execute a query.

        Args:
            query: SQL query string
            params: Query parameters
            fetch: If True, fetch and return results
            operation: Name reported in a StorageUnavailableError

        Returns:
            Query results if fetch=True, else the affected row count

        Raises:
            StorageUnavailableError: On any sqlite3 failure
        """
        try:
            conn = self._get_conn()
            try:
                cursor = conn.execute(query, params)
                if fetch:
                    return [dict(row) for row in cursor.fetchall()]
                conn.commit()
                return cursor.rowcount
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageUnavailableError(operation, e) from e

    def _execute_one(
        self, query: str, params: tuple = (), operation: str = "execute"
    ) -> Optional[dict]:
        """Execute query and return single result."""
        results = self._execute(query, params, fetch=True, operation=operation)
        return results[0] if results else None

    def _execute_transaction(
        self,
        statements: Iterable[Tuple[str, tuple]],
        operation: str = "transaction",
    ) -> List[int]:
        """
        Run several statements in one transaction.

        Returns:
            Row count of each statement, in order
        """
        try:
            conn = self._get_conn()
            try:
                counts = []
                with conn:
                    for query, params in statements:
                        counts.append(conn.execute(query, params).rowcount)
                return counts
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageUnavailableError(operation, e) from e

    @staticmethod
    def _dumps(document: Dict[str, Any]) -> str:
        return json.dumps(document, sort_keys=True)

    @staticmethod
    def _loads(text: str) -> Dict[str, Any]:
        return json.loads(text)
