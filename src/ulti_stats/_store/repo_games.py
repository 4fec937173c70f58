# Area: Store
"""
ulti_stats._store.repo_games — Games Repository
===============================================

Repository for the games table. A game is stored as one JSON
document; partial updates merge fields into it and re-validate.
"""

import uuid
from typing import Any, Dict, List, Optional

from ..errors import GameNotFoundError
from ..types import CreateGameData, Game, utc_now
from .database import BaseRepository, format_timestamp

# Fields the store owns; callers cannot overwrite them through update_game
_PROTECTED_FIELDS = {"id", "created_at", "updated_at", "tournament_id"}


class GameRepository(BaseRepository):
    """
    Repository for games table.

    Handles creating, retrieving, updating and deleting game documents.
    """

    def create_game(self, data: CreateGameData) -> Game:
        """
        Save a new game document.

        Args:
            data: Game fields supplied by the caller

        Returns:
            The created Game with its assigned id and timestamps
        """
        now = utc_now()
        game = Game.model_validate(
            {
                **data.model_dump(),
                "id": uuid.uuid4().hex,
                "created_at": now,
                "updated_at": now,
            }
        )
        query = """
            INSERT INTO games (id, tournament_id, document, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?)
        """
        self._execute(
            query,
            (
                game.id,
                game.tournament_id,
                self._dumps(game.to_document()),
                format_timestamp(now),
                format_timestamp(now),
            ),
            operation="create_game",
        )
        return game

    def get_game(self, game_id: str) -> Optional[Game]:
        """
        Get a game by ID.

        Args:
            game_id: Game identifier to look up

        Returns:
            Game or None if not found
        """
        query = "SELECT document FROM games WHERE id = ?"
        row = self._execute_one(query, (game_id,), operation="get_game")
        if row is None:
            return None
        return Game.model_validate(self._loads(row["document"]))

    def list_games(self, tournament_id: str) -> List[Game]:
        """
        Get all games of a tournament, newest date first.

        Args:
            tournament_id: Tournament identifier

        Returns:
            List of games
        """
        query = "SELECT document FROM games WHERE tournament_id = ?"
        rows = self._execute(query, (tournament_id,), fetch=True, operation="list_games")
        games = [Game.model_validate(self._loads(r["document"])) for r in rows]
        return sorted(games, key=lambda g: g.date, reverse=True)

    def update_game(self, game_id: str, fields: Dict[str, Any]) -> Game:
        """
        Merge fields into a game document.

        Args:
            game_id: Game identifier
            fields: Partial set of Game fields to overwrite

        Returns:
            The updated Game

        Raises:
            GameNotFoundError: If the game does not exist
        """
        current = self.get_game(game_id)
        if current is None:
            raise GameNotFoundError(game_id)

        now = utc_now()
        changes = {k: v for k, v in fields.items() if k not in _PROTECTED_FIELDS}
        updated = Game.model_validate(
            {**current.model_dump(), **changes, "updated_at": now}
        )
        query = "UPDATE games SET document = ?, updated_at = ? WHERE id = ?"
        count = self._execute(
            query,
            (self._dumps(updated.to_document()), format_timestamp(now), game_id),
            operation="update_game",
        )
        if count == 0:
            raise GameNotFoundError(game_id)
        return updated

    def delete_game(self, game_id: str) -> int:
        """
        Delete a game and all of its scoring events atomically.

        Args:
            game_id: Game identifier

        Returns:
            Number of scoring events deleted with the game

        Raises:
            GameNotFoundError: If the game does not exist
        """
        events_deleted, games_deleted = self._execute_transaction(
            [
                ("DELETE FROM scoring_events WHERE game_id = ?", (game_id,)),
                ("DELETE FROM games WHERE id = ?", (game_id,)),
            ],
            operation="delete_game",
        )
        if games_deleted == 0:
            raise GameNotFoundError(game_id)
        return events_deleted
