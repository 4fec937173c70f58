# Area: Scoring
"""
ulti_stats._scoring.event_log — Ordered scoring event log
=========================================================

The authoritative order of a game's log is ``created_at`` ascending,
ties broken by event id. Storage returns events unordered, and an
in-memory list may come from an older load, so array position is
never trusted.
"""

import logging
from typing import List, Sequence, Tuple

from ..errors import NotFoundError
from ..types import CreateScoringEventData, ScoringEvent
from .._store.store import ScoreStore

logger = logging.getLogger("ulti_stats.event_log")


def event_order_key(event: ScoringEvent) -> Tuple:
    """Sort key giving the authoritative chronological order."""
    return (event.created_at, event.id)


def sort_events(events: Sequence[ScoringEvent]) -> List[ScoringEvent]:
    """Return events in chronological log order."""
    return sorted(events, key=event_order_key)


def last_event(events: Sequence[ScoringEvent]) -> ScoringEvent:
    """
    Return the chronologically last event.

    Raises:
        NotFoundError: If the log is empty
    """
    if not events:
        raise NotFoundError("ScoringEvent")
    return max(events, key=event_order_key)


class EventLog:
    """
    Append-only event log access for games.

    Storage failures propagate as ``StorageUnavailableError``; nothing
    is retried here.

    Args:
        store: Persistence collaborator
    """

    def __init__(self, store: ScoreStore):
        self.store = store

    def load(self, game_id: str) -> List[ScoringEvent]:
        """Fetch every event of a game, in log order."""
        return sort_events(self.store.list_events(game_id=game_id))

    def load_tournament(self, tournament_id: str) -> List[ScoringEvent]:
        """Fetch every event of a tournament (all games) in one batch."""
        return sort_events(self.store.list_events(tournament_id=tournament_id))

    def append(self, data: CreateScoringEventData) -> ScoringEvent:
        """Persist a new event and return it with its id and created_at."""
        event = self.store.append_event(data)
        logger.debug(f"Appended event {event.id} to game {event.game_id}")
        return event

    def remove_last(self, events: Sequence[ScoringEvent]) -> ScoringEvent:
        """
        Delete the chronologically last event of ``events``.

        Returns:
            The removed event

        Raises:
            NotFoundError: If ``events`` is empty, or the store no longer
                has the event
        """
        event = last_event(events)
        self.store.delete_event(event.id)
        logger.debug(f"Removed event {event.id} from game {event.game_id}")
        return event
