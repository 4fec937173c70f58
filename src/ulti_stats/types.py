"""
ulti_stats.types — Document models for games, events and stats
==============================================================

Pydantic models for every document the scoring core reads or writes,
plus the derived (never persisted) stats values.

Persisted documents serialize with ``to_document()``; optional fields
that are ``None`` are left out of the stored document, so a skipped
scorer or assister is simply absent.

    >>> data = CreateScoringEventData(game_id="G1", tournament_id="T1",
    ...     team_id="H", home_score=1, away_score=0)
    >>> "scorer_player_id" in data.to_document()
    False
"""

from __future__ import annotations
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


# ============================================
# Enums
# ============================================

class GameStatus(str, Enum):
    """Game lifecycle: SCHEDULED -> IN_PROGRESS -> COMPLETED (forward only)."""
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class PlayerGender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class GenderRatio(str, Enum):
    """Line gender ratio for mixed division games."""
    THREE_MALE_TWO_FEMALE = "3M/2F"
    TWO_MALE_THREE_FEMALE = "2M/3F"


class HistoryAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class EntityType(str, Enum):
    GAME = "game"
    EVENT = "event"


class _Document(BaseModel):
    """Base for persisted documents."""

    def to_document(self) -> Dict[str, Any]:
        """Serialize to a JSON-ready dict, omitting unset optional fields."""
        return self.model_dump(mode="json", exclude_none=True)


# ============================================
# Game
# ============================================

class RosterPlayer(BaseModel):
    """A player selected for one game's roster snapshot."""
    model_config = ConfigDict(frozen=True)

    player_id: str
    player_name: str
    number: int


class CreateGameData(_Document):
    """Fields supplied when a game is created (ids/timestamps are assigned)."""

    tournament_id: str
    tournament_name: str = ""

    home_team_id: str
    away_team_id: str
    home_team_name: str = ""
    away_team_name: str = ""

    home_roster: List[RosterPlayer] = Field(default_factory=list)
    away_roster: List[RosterPlayer] = Field(default_factory=list)

    home_score: int = 0
    away_score: int = 0

    date: datetime = Field(default_factory=utc_now)
    status: GameStatus = GameStatus.SCHEDULED

    field: Optional[str] = None
    division: Optional[str] = None
    pool_or_bracket: Optional[str] = None
    game_number: Optional[str] = None

    @model_validator(mode="after")
    def _distinct_teams(self) -> "CreateGameData":
        if self.home_team_id == self.away_team_id:
            raise ValueError("home_team_id and away_team_id must differ")
        return self


class Game(CreateGameData):
    """
    Aggregate root for one match.

    ``home_score``/``away_score`` are a cache of the score derived from
    the game's event log; the session rewrites them on every log mutation.
    """
    model_config = ConfigDict(frozen=True)

    id: str

    # Setup, fixed when the game starts
    start_time: Optional[datetime] = None
    starting_offense_team_id: Optional[str] = None
    home_team_starts_left: Optional[bool] = None
    gender_ratio: Optional[GenderRatio] = None
    scorekeeper: Optional[str] = None

    # Progress
    home_timeouts: List[datetime] = Field(default_factory=list)
    away_timeouts: List[datetime] = Field(default_factory=list)
    home_spirit_timeouts: List[datetime] = Field(default_factory=list)
    away_spirit_timeouts: List[datetime] = Field(default_factory=list)
    halftime_time: Optional[datetime] = None
    halftime_home_score: Optional[int] = None
    halftime_away_score: Optional[int] = None
    second_half_start_time: Optional[datetime] = None

    # Captain signatures (opaque image payloads, e.g. data URLs)
    home_team_signature: Optional[str] = None
    away_team_signature: Optional[str] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        return f"{self.home_team_name or self.home_team_id} vs {self.away_team_name or self.away_team_id}"

    def has_team(self, team_id: Optional[str]) -> bool:
        return team_id in (self.home_team_id, self.away_team_id)

    def is_home(self, team_id: str) -> bool:
        return team_id == self.home_team_id

    def roster_for(self, team_id: str) -> List[RosterPlayer]:
        """Roster snapshot of the given team; empty for a foreign team id."""
        if team_id == self.home_team_id:
            return list(self.home_roster)
        if team_id == self.away_team_id:
            return list(self.away_roster)
        return []


# ============================================
# Scoring Event
# ============================================

class CreateScoringEventData(_Document):
    """A fully built scoring event, ready to append to the log."""

    game_id: str
    tournament_id: str

    # Team credited with the point
    team_id: str

    scorer_player_id: Optional[str] = None
    scorer_number: Optional[int] = None
    scorer_name: Optional[str] = None

    assister_player_id: Optional[str] = None
    assister_number: Optional[int] = None
    assister_name: Optional[str] = None

    # Score after this point
    home_score: int
    away_score: int

    # Wall clock time the point was logged (display only, never ordering)
    scored_at: Optional[datetime] = None

    @model_validator(mode="after")
    def _assister_is_not_scorer(self):
        if (
            self.scorer_player_id is not None
            and self.scorer_player_id == self.assister_player_id
        ):
            raise ValueError("assister and scorer must be different players")
        return self

    @property
    def display_name(self) -> str:
        """History label, e.g. ``"Ann goal (assist: Bob)"``."""
        name = f"{self.scorer_name or 'Unknown'} goal"
        if self.assister_name:
            name += f" (assist: {self.assister_name})"
        return name


class ScoringEvent(CreateScoringEventData):
    """A persisted scoring event. Immutable once created."""
    model_config = ConfigDict(frozen=True)

    id: str
    created_at: datetime
    updated_at: Optional[datetime] = None


# ============================================
# History (audit log)
# ============================================

class HistoryChange(BaseModel):
    field: str
    old_value: Any = None
    new_value: Any = None


class HistoryEntry(_Document):
    action: HistoryAction
    entity_type: EntityType
    entity_id: str
    entity_name: str
    actor: str = "unknown"
    timestamp: datetime = Field(default_factory=utc_now)
    changes: Optional[List[HistoryChange]] = None
    previous_snapshot: Optional[Dict[str, Any]] = None
    current_snapshot: Optional[Dict[str, Any]] = None
    id: Optional[str] = None
    created_at: Optional[datetime] = None


# ============================================
# Derived stats (computed from events, never stored)
# ============================================

class PlayerStats(BaseModel):
    player_id: str
    player_name: Optional[str] = None
    player_number: Optional[int] = None
    team_id: str
    goals: int = 0
    assists: int = 0

    @property
    def total(self) -> int:
        return self.goals + self.assists


class MvpSelection(BaseModel):
    """Top ranked player per gender; ``None`` when a partition is empty."""
    male: Optional[PlayerStats] = None
    female: Optional[PlayerStats] = None
