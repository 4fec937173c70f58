# Area: Store
"""
ulti_stats._store.store — Persistence collaborator
==================================================

``ScoreStore`` is the only boundary the scoring core touches.
Every operation is fallible (``StorageUnavailableError``) and none is
assumed idempotent; retries belong to the caller.

``SQLiteScoreStore`` is the bundled implementation, composed of one
repository per table.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..types import (
    CreateGameData,
    CreateScoringEventData,
    EntityType,
    Game,
    HistoryEntry,
    ScoringEvent,
)
from .database import init_database
from .repo_events import EventRepository
from .repo_games import GameRepository
from .repo_history import HistoryRepository

logger = logging.getLogger("ulti_stats.store")


class ScoreStore(ABC):
    """
    Abstract persistence collaborator.

    ``list_events`` makes no ordering guarantee; callers must sort.
    """

    @abstractmethod
    def get_game(self, game_id: str) -> Optional[Game]:
        """Return the game, or None if it does not exist."""

    @abstractmethod
    def create_game(self, data: CreateGameData) -> Game:
        """Persist a new game; assigns id and timestamps."""

    @abstractmethod
    def list_games(self, tournament_id: str) -> List[Game]:
        """Return every game of a tournament."""

    @abstractmethod
    def update_game(self, game_id: str, fields: Dict[str, Any]) -> Game:
        """Merge fields into the game; raises GameNotFoundError if missing."""

    @abstractmethod
    def delete_game(self, game_id: str) -> None:
        """Delete the game and every scoring event of it."""

    @abstractmethod
    def list_events(
        self,
        game_id: Optional[str] = None,
        tournament_id: Optional[str] = None,
    ) -> List[ScoringEvent]:
        """Return the events of one game or of one tournament (unordered)."""

    @abstractmethod
    def append_event(self, data: CreateScoringEventData) -> ScoringEvent:
        """Persist a new event; assigns id and created_at."""

    @abstractmethod
    def delete_event(self, event_id: str) -> None:
        """Delete one event; raises NotFoundError if it does not exist."""

    @abstractmethod
    def add_history(self, entry: HistoryEntry) -> HistoryEntry:
        """Persist an audit history entry."""

    @abstractmethod
    def list_history(
        self,
        entity_type: Optional[EntityType] = None,
        entity_id: Optional[str] = None,
    ) -> List[HistoryEntry]:
        """Return history entries, newest first."""


class SQLiteScoreStore(ScoreStore):
    """
    SQLite-backed document store.

    Args:
        db_path: Path to the SQLite database file
        initialize: Apply the schema on construction
    """

    def __init__(self, db_path: str = "ulti_stats.db", initialize: bool = True):
        self.db_path = db_path
        if initialize:
            init_database(db_path)
        self.games = GameRepository(db_path)
        self.events = EventRepository(db_path)
        self.history = HistoryRepository(db_path)

    def get_game(self, game_id: str) -> Optional[Game]:
        return self.games.get_game(game_id)

    def create_game(self, data: CreateGameData) -> Game:
        game = self.games.create_game(data)
        logger.debug(f"Created game {game.id} ({game.display_name})")
        return game

    def list_games(self, tournament_id: str) -> List[Game]:
        return self.games.list_games(tournament_id)

    def update_game(self, game_id: str, fields: Dict[str, Any]) -> Game:
        return self.games.update_game(game_id, fields)

    def delete_game(self, game_id: str) -> None:
        deleted = self.games.delete_game(game_id)
        logger.debug(f"Deleted game {game_id} with {deleted} scoring events")

    def list_events(
        self,
        game_id: Optional[str] = None,
        tournament_id: Optional[str] = None,
    ) -> List[ScoringEvent]:
        if (game_id is None) == (tournament_id is None):
            raise ValueError("Pass exactly one of game_id or tournament_id")
        if game_id is not None:
            return self.events.list_by_game(game_id)
        return self.events.list_by_tournament(tournament_id)

    def append_event(self, data: CreateScoringEventData) -> ScoringEvent:
        return self.events.append_event(data)

    def delete_event(self, event_id: str) -> None:
        self.events.delete_event(event_id)

    def add_history(self, entry: HistoryEntry) -> HistoryEntry:
        return self.history.add_entry(entry)

    def list_history(
        self,
        entity_type: Optional[EntityType] = None,
        entity_id: Optional[str] = None,
    ) -> List[HistoryEntry]:
        return self.history.list_entries(entity_type, entity_id)
