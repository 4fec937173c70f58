"""
ulti_stats — Live scorekeeping for tournament games
===================================================

Quick Start:
    from ulti_stats import GameSession, SQLiteScoreStore

    store = SQLiteScoreStore("cup.db")
    session = GameSession(store)
    session.open(game_id)
    session.select_team(home_team_id)
    session.select_assister("P2")      # or None to skip
    session.select_scorer("P1")        # logs the point

    session.undo_last_event()

Statistics are always replayed from the stored events:

    from ulti_stats import StatsAggregator
    ranked = StatsAggregator(store).tournament_stats(tournament_id)

Type Definitions
----------------
All document and stats types are available for import:

    from ulti_stats import Game, ScoringEvent, PlayerStats, ...
"""

from ._scoring import (
    EventLog,
    GameSession,
    HistoryRecorder,
    InteractionStep,
    Score,
    ScoringCandidate,
    ScoringInteractionMachine,
    SessionSnapshot,
    StatsAggregator,
    mvp_by_gender,
    rank_stats,
    score_of,
    stats_of,
)
from ._store import ScoreStore, SQLiteScoreStore, init_database
from ._shared import setup_logging
from .errors import (
    ScorekeeperError,
    InvalidSelectionError,
    InvalidTransitionError,
    StorageUnavailableError,
    NotFoundError,
    GameNotFoundError,
    GameStateError,
    ScoringBusyError,
)
from .types import (
    GameStatus,
    PlayerGender,
    GenderRatio,
    RosterPlayer,
    CreateGameData,
    Game,
    CreateScoringEventData,
    ScoringEvent,
    HistoryEntry,
    PlayerStats,
    MvpSelection,
)

__all__ = [
    # Core
    "EventLog",
    "GameSession",
    "HistoryRecorder",
    "InteractionStep",
    "Score",
    "ScoringCandidate",
    "ScoringInteractionMachine",
    "SessionSnapshot",
    "StatsAggregator",
    "mvp_by_gender",
    "rank_stats",
    "score_of",
    "stats_of",
    # Store
    "ScoreStore",
    "SQLiteScoreStore",
    "init_database",
    "setup_logging",
    # Errors
    "ScorekeeperError",
    "InvalidSelectionError",
    "InvalidTransitionError",
    "StorageUnavailableError",
    "NotFoundError",
    "GameNotFoundError",
    "GameStateError",
    "ScoringBusyError",
    # Types
    "GameStatus",
    "PlayerGender",
    "GenderRatio",
    "RosterPlayer",
    "CreateGameData",
    "Game",
    "CreateScoringEventData",
    "ScoringEvent",
    "HistoryEntry",
    "PlayerStats",
    "MvpSelection",
]
__version__ = "1.0.0"
