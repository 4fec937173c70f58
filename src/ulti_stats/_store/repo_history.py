# Area: Store
"""
ulti_stats._store.repo_history — History Repository
===================================================

Repository for the history (audit log) table.
"""

import uuid
from typing import List, Optional

from ..types import EntityType, HistoryEntry, utc_now
from .database import BaseRepository, format_timestamp


class HistoryRepository(BaseRepository):
    """Repository for history table."""

    def add_entry(self, entry: HistoryEntry) -> HistoryEntry:
        """
        Save a history entry.

        Args:
            entry: Entry to save (id and created_at are assigned)

        Returns:
            The saved entry
        """
        saved = entry.model_copy(update={"id": uuid.uuid4().hex, "created_at": utc_now()})
        query = """
            INSERT INTO history (id, entity_type, entity_id, document, timestamp)
            VALUES (?, ?, ?, ?, ?)
        """
        self._execute(
            query,
            (
                saved.id,
                saved.entity_type.value,
                saved.entity_id,
                self._dumps(saved.to_document()),
                format_timestamp(saved.timestamp),
            ),
            operation="add_history",
        )
        return saved

    def list_entries(
        self,
        entity_type: Optional[EntityType] = None,
        entity_id: Optional[str] = None,
    ) -> List[HistoryEntry]:
        """
        Get history entries, newest first.

        Args:
            entity_type: Only entries for this entity type
            entity_id: Only entries for this entity id

        Returns:
            List of history entries
        """
        clauses = []
        params: list = []
        if entity_type is not None:
            clauses.append("entity_type = ?")
            params.append(entity_type.value)
        if entity_id is not None:
            clauses.append("entity_id = ?")
            params.append(entity_id)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        query = f"SELECT document FROM history {where} ORDER BY timestamp DESC"
        rows = self._execute(query, tuple(params), fetch=True, operation="list_history")
        return [HistoryEntry.model_validate(self._loads(r["document"])) for r in rows]
