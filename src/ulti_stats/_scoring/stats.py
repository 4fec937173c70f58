# Area: Scoring
"""
ulti_stats._scoring.stats — Tournament and game statistics
==========================================================

Replays event logs into ranked player stats. Nothing is cached:
every call reloads the events, since points are added and undone
constantly during live play.
"""

import logging
from typing import List, Mapping, Optional

from ..errors import StorageUnavailableError
from ..types import MvpSelection, PlayerGender, PlayerStats
from .._store.store import ScoreStore
from .event_log import EventLog
from .score_deriver import mvp_by_gender, rank_stats, stats_of

logger = logging.getLogger("ulti_stats.stats")


class StatsAggregator:
    """
    Computes ranked player stats from the stored event logs.

    Args:
        store: Persistence collaborator
    """

    def __init__(self, store: ScoreStore):
        self.event_log = EventLog(store)

    def tournament_stats(self, tournament_id: str) -> List[PlayerStats]:
        """Rank every player across all games of a tournament."""
        events = self.event_log.load_tournament(tournament_id)
        ranked = rank_stats(stats_of(events))
        logger.debug(
            f"Tournament {tournament_id}: {len(events)} events, {len(ranked)} players"
        )
        return ranked

    def game_stats(self, game_id: str) -> List[PlayerStats]:
        """Rank the players of one game."""
        return rank_stats(stats_of(self.event_log.load(game_id)))

    def tournament_mvps(
        self,
        tournament_id: str,
        gender_lookup: Mapping[str, PlayerGender],
    ) -> MvpSelection:
        """Male and female MVP over the tournament's ranked stats."""
        return mvp_by_gender(self.tournament_stats(tournament_id), gender_lookup)

    def safe_tournament_stats(self, tournament_id: str) -> Optional[List[PlayerStats]]:
        """
        Background-refresh variant of ``tournament_stats``.

        Returns None instead of raising when storage is unavailable;
        a stale display is harmless and the caller retries later.
        """
        try:
            return self.tournament_stats(tournament_id)
        except StorageUnavailableError as e:
            logger.warning(f"Stats refresh for tournament {tournament_id} failed: {e}")
            return None
