# Area: Scoring
"""
ulti_stats._scoring.history — Fire-and-forget audit history
===========================================================

Records who changed what after a successful write. A failure to
record is logged and dropped; it never fails the scoring operation
that triggered it.
"""

import logging
from typing import Any, Dict, Optional

from ..types import (
    EntityType,
    Game,
    HistoryAction,
    HistoryChange,
    HistoryEntry,
    ScoringEvent,
)
from .._store.store import ScoreStore

logger = logging.getLogger("ulti_stats.history")


class HistoryRecorder:
    """
    Writes audit entries through the store.

    Args:
        store: Persistence collaborator
        actor: Identity of the operator (e.g. scorekeeper email)
    """

    def __init__(self, store: ScoreStore, actor: str = "unknown"):
        self.store = store
        self.actor = actor

    def event_created(self, event: ScoringEvent) -> None:
        self._record(
            HistoryAction.CREATE, EntityType.EVENT, event.id, event.display_name,
            current_snapshot=event.to_document(),
        )

    def event_deleted(self, event: ScoringEvent) -> None:
        self._record(
            HistoryAction.DELETE, EntityType.EVENT, event.id, event.display_name,
            previous_snapshot=event.to_document(),
        )

    def game_updated(self, previous: Game, current: Game, fields: Dict[str, Any]) -> None:
        changes = [
            HistoryChange(field=name, old_value=getattr(previous, name, None),
                          new_value=getattr(current, name, None))
            for name in fields
        ]
        self._record(
            HistoryAction.UPDATE, EntityType.GAME, current.id, current.display_name,
            changes=changes,
            previous_snapshot=previous.to_document(),
            current_snapshot=current.to_document(),
        )

    def game_deleted(self, game: Game) -> None:
        self._record(
            HistoryAction.DELETE, EntityType.GAME, game.id, game.display_name,
            previous_snapshot=game.to_document(),
        )

    def _record(
        self,
        action: HistoryAction,
        entity_type: EntityType,
        entity_id: str,
        entity_name: str,
        changes: Optional[list] = None,
        previous_snapshot: Optional[Dict[str, Any]] = None,
        current_snapshot: Optional[Dict[str, Any]] = None,
    ) -> None:
        try:
            entry = HistoryEntry(
                action=action,
                entity_type=entity_type,
                entity_id=entity_id,
                entity_name=entity_name,
                actor=self.actor,
                changes=changes,
                previous_snapshot=previous_snapshot,
                current_snapshot=current_snapshot,
            )
            self.store.add_history(entry)
        except Exception as e:
            logger.warning(
                f"Could not record history for {entity_type.value} {entity_id}: {e}"
            )
