# Area: Tests
"""Shared fixtures: temporary databases, sample games and a failing store."""

import logging
import os
import tempfile
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from ulti_stats._store.database import init_database
from ulti_stats._store.store import SQLiteScoreStore
from ulti_stats._scoring.session import GameSession
from ulti_stats.errors import StorageUnavailableError
from ulti_stats.types import CreateGameData, RosterPlayer, ScoringEvent

HOME = "TEAM_H"
AWAY = "TEAM_A"
TOURNAMENT = "T2026"

HOME_ROSTER = [
    RosterPlayer(player_id="P1", player_name="Ann", number=7),
    RosterPlayer(player_id="P2", player_name="Bob", number=12),
    RosterPlayer(player_id="P4", player_name="Dee", number=3),
]
AWAY_ROSTER = [
    RosterPlayer(player_id="P3", player_name="Cal", number=21),
    RosterPlayer(player_id="P5", player_name="Eve", number=9),
]

BASE_TIME = datetime(2026, 5, 1, 10, 0, tzinfo=timezone.utc)


def make_game_data(**overrides) -> CreateGameData:
    """Create sample game data for HOME vs AWAY."""
    fields = dict(
        tournament_id=TOURNAMENT,
        tournament_name="Spring Cup",
        home_team_id=HOME,
        away_team_id=AWAY,
        home_team_name="Hawks",
        away_team_name="Owls",
        home_roster=HOME_ROSTER,
        away_roster=AWAY_ROSTER,
    )
    fields.update(overrides)
    return CreateGameData(**fields)


def make_event(
    seq: int,
    team_id: str,
    scorer: Optional[str] = None,
    assister: Optional[str] = None,
    home_score: int = 0,
    away_score: int = 0,
    game_id: str = "G1",
    event_id: Optional[str] = None,
) -> ScoringEvent:
    """Create a stored-looking event; ``seq`` sets its created_at order."""
    return ScoringEvent(
        id=event_id or f"E{seq:03d}",
        game_id=game_id,
        tournament_id=TOURNAMENT,
        team_id=team_id,
        scorer_player_id=scorer,
        scorer_name=f"name-{scorer}" if scorer else None,
        scorer_number=seq if scorer else None,
        assister_player_id=assister,
        assister_name=f"name-{assister}" if assister else None,
        assister_number=seq + 100 if assister else None,
        home_score=home_score,
        away_score=away_score,
        created_at=BASE_TIME + timedelta(seconds=seq),
    )


class FlakyStore(SQLiteScoreStore):
    """SQLite store that fails the operations named in ``fail_on``."""

    def __init__(self, db_path: str):
        super().__init__(db_path)
        self.fail_on = set()
        self.calls = []

    def _maybe_fail(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.fail_on:
            raise StorageUnavailableError(operation, ConnectionError("backend offline"))

    def get_game(self, game_id):
        self._maybe_fail("get_game")
        return super().get_game(game_id)

    def update_game(self, game_id, fields):
        self._maybe_fail("update_game")
        return super().update_game(game_id, fields)

    def delete_game(self, game_id):
        self._maybe_fail("delete_game")
        return super().delete_game(game_id)

    def list_events(self, game_id=None, tournament_id=None):
        self._maybe_fail("list_events")
        return super().list_events(game_id=game_id, tournament_id=tournament_id)

    def append_event(self, data):
        self._maybe_fail("append_event")
        return super().append_event(data)

    def delete_event(self, event_id):
        self._maybe_fail("delete_event")
        return super().delete_event(event_id)

    def add_history(self, entry):
        self._maybe_fail("add_history")
        return super().add_history(entry)


@pytest.fixture
def db_path():
    """Create temporary database for testing."""
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    init_database(path)
    yield path
    os.unlink(path)


@pytest.fixture
def store(db_path):
    """Create store with test database."""
    return FlakyStore(db_path)


@pytest.fixture
def game(store):
    """A scheduled game between HOME and AWAY."""
    return store.create_game(make_game_data())


@pytest.fixture
def clock():
    """Deterministic clock advancing one second per call."""
    ticks = {"n": 0}

    def now():
        ticks["n"] += 1
        return BASE_TIME + timedelta(seconds=ticks["n"])

    return now


@pytest.fixture
def session(store, game, clock):
    """A session with the sample game opened and started."""
    s = GameSession(store, clock=clock)
    s.open(game.id)
    s.start_game(HOME)
    return s


@pytest.fixture
def package_logger():
    """Restore the ulti_stats logger after a test reconfigures it."""
    pkg_logger = logging.getLogger("ulti_stats")
    handlers, level, propagate = list(pkg_logger.handlers), pkg_logger.level, pkg_logger.propagate
    yield pkg_logger
    for handler in pkg_logger.handlers:
        handler.close()
    pkg_logger.handlers[:] = handlers
    pkg_logger.setLevel(level)
    pkg_logger.propagate = propagate
