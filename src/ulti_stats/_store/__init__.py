# Area: Store
"""
Document store for games, scoring events and audit history.

This package contains:
- The abstract persistence collaborator (ScoreStore)
- The SQLite implementation and its per-table repositories
"""

from .database import init_database, get_connection
from .store import ScoreStore, SQLiteScoreStore

__all__ = [
    "init_database",
    "get_connection",
    "ScoreStore",
    "SQLiteScoreStore",
]
