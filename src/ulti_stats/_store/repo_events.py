# Area: Store
"""
ulti_stats._store.repo_events — Scoring Events Repository
=========================================================

Repository for the scoring_events table. Result sets are returned
in no particular order; callers sort by (created_at, id).
"""

import uuid
from typing import List, Optional

from ..errors import NotFoundError
from ..types import CreateScoringEventData, ScoringEvent, utc_now
from .database import BaseRepository, format_timestamp, next_timestamp


class EventRepository(BaseRepository):
    """
    Repository for scoring_events table.

    Appends and deletes individual events and lists them per game
    or per tournament.
    """

    def append_event(self, data: CreateScoringEventData) -> ScoringEvent:
        """
        Save a new scoring event.

        The assigned ``created_at`` is strictly later than any event
        already stored, so two rapid appends never tie.

        Args:
            data: The event to persist

        Returns:
            The ScoringEvent with its assigned id and created_at
        """
        last = self._execute_one(
            "SELECT MAX(created_at) AS last FROM scoring_events",
            operation="append_event",
        )
        created_at = next_timestamp(utc_now(), last["last"] if last else None)
        event = ScoringEvent.model_validate(
            {**data.model_dump(), "id": uuid.uuid4().hex, "created_at": created_at}
        )
        query = """
            INSERT INTO scoring_events (id, game_id, tournament_id, document, created_at)
            VALUES (?, ?, ?, ?, ?)
        """
        self._execute(
            query,
            (
                event.id,
                event.game_id,
                event.tournament_id,
                self._dumps(event.to_document()),
                format_timestamp(created_at),
            ),
            operation="append_event",
        )
        return event

    def get_event(self, event_id: str) -> Optional[ScoringEvent]:
        """Get a scoring event by ID, or None."""
        query = "SELECT document FROM scoring_events WHERE id = ?"
        row = self._execute_one(query, (event_id,), operation="get_event")
        if row is None:
            return None
        return ScoringEvent.model_validate(self._loads(row["document"]))

    def list_by_game(self, game_id: str) -> List[ScoringEvent]:
        """
        Get all events of one game.

        Args:
            game_id: Game identifier

        Returns:
            Unordered list of events
        """
        query = "SELECT document FROM scoring_events WHERE game_id = ?"
        rows = self._execute(query, (game_id,), fetch=True, operation="list_events")
        return [ScoringEvent.model_validate(self._loads(r["document"])) for r in rows]

    def list_by_tournament(self, tournament_id: str) -> List[ScoringEvent]:
        """
        Get all events of every game in a tournament.

        Args:
            tournament_id: Tournament identifier

        Returns:
            Unordered list of events
        """
        query = "SELECT document FROM scoring_events WHERE tournament_id = ?"
        rows = self._execute(query, (tournament_id,), fetch=True, operation="list_events")
        return [ScoringEvent.model_validate(self._loads(r["document"])) for r in rows]

    def delete_event(self, event_id: str) -> None:
        """
        Delete a scoring event.

        Raises:
            NotFoundError: If no event has this id
        """
        query = "DELETE FROM scoring_events WHERE id = ?"
        count = self._execute(query, (event_id,), operation="delete_event")
        if count == 0:
            raise NotFoundError("ScoringEvent", event_id)
