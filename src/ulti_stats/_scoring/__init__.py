# Area: Scoring
"""
Live game scoring core.

This package handles:
- The ordered, append-only event log of a game
- Replaying score and player stats from events
- The three-step point entry state machine
- The live game session and its observers
- Tournament statistics and MVP selection
- Fire-and-forget audit history
"""

from .enums import InteractionStep, InteractionAction
from .event_log import EventLog, sort_events
from .score_deriver import (
    Score,
    score_of,
    stats_of,
    rank_stats,
    mvp_by_gender,
    verify_event_snapshots,
)
from .interaction import ScoringCandidate, ScoringInteractionMachine
from .snapshot import SessionSnapshot
from .history import HistoryRecorder
from .session import GameSession
from .stats import StatsAggregator

__all__ = [
    "InteractionStep",
    "InteractionAction",
    "EventLog",
    "sort_events",
    "Score",
    "score_of",
    "stats_of",
    "rank_stats",
    "mvp_by_gender",
    "verify_event_snapshots",
    "ScoringCandidate",
    "ScoringInteractionMachine",
    "SessionSnapshot",
    "HistoryRecorder",
    "GameSession",
    "StatsAggregator",
]
