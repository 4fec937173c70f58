# Area: Store Tests
"""Tests for Games Repository."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from ulti_stats._store.repo_events import EventRepository
from ulti_stats._store.repo_games import GameRepository
from ulti_stats.errors import GameNotFoundError, StorageUnavailableError
from ulti_stats.types import CreateScoringEventData, GameStatus

from conftest import AWAY, HOME, HOME_ROSTER, TOURNAMENT, make_game_data


class TestGameRepository:
    """Tests for GameRepository class."""

    @pytest.fixture
    def repo(self, db_path):
        """Create repository with test database."""
        return GameRepository(db_path)

    def test_create_game(self, repo):
        """Test saving a new game assigns id and timestamps."""
        game = repo.create_game(make_game_data())

        assert game.id
        assert game.created_at is not None
        assert game.status == GameStatus.SCHEDULED
        assert (game.home_score, game.away_score) == (0, 0)

    def test_get_game_round_trips_document(self, repo):
        """Test a stored game reads back with rosters intact."""
        created = repo.create_game(make_game_data(field="Field 3"))

        game = repo.get_game(created.id)
        assert game == created
        assert game.home_roster == HOME_ROSTER
        assert game.field == "Field 3"

    def test_get_game_not_found(self, repo):
        """Test retrieving non-existent game returns None."""
        assert repo.get_game("NONEXISTENT") is None

    def test_same_team_twice_rejected(self):
        """Test a game needs two different teams."""
        with pytest.raises(ValidationError):
            make_game_data(away_team_id=HOME)

    def test_list_games_newest_date_first(self, repo):
        """Test list_games filters by tournament and sorts by date."""
        early = repo.create_game(make_game_data(date=datetime(2026, 5, 1, tzinfo=timezone.utc)))
        late = repo.create_game(make_game_data(date=datetime(2026, 5, 2, tzinfo=timezone.utc)))
        repo.create_game(make_game_data(tournament_id="OTHER"))

        games = repo.list_games(TOURNAMENT)
        assert [g.id for g in games] == [late.id, early.id]

    def test_update_game_merges_fields(self, repo):
        """Test partial updates keep the other fields."""
        game = repo.create_game(make_game_data())

        updated = repo.update_game(game.id, {"home_score": 3, "status": GameStatus.IN_PROGRESS})

        assert updated.home_score == 3
        assert updated.status == GameStatus.IN_PROGRESS
        assert updated.home_team_name == game.home_team_name
        assert repo.get_game(game.id) == updated

    def test_update_game_protects_identity(self, repo):
        """Test id, created_at and tournament_id cannot be overwritten."""
        game = repo.create_game(make_game_data())

        updated = repo.update_game(game.id, {"id": "other", "tournament_id": "X"})

        assert updated.id == game.id
        assert updated.tournament_id == TOURNAMENT
        assert updated.created_at == game.created_at

    def test_update_game_not_found(self, repo):
        """Test updating a missing game raises GameNotFoundError."""
        with pytest.raises(GameNotFoundError):
            repo.update_game("NONEXISTENT", {"home_score": 1})

    def test_update_game_validates(self, repo):
        """Test a merged document that fails validation is not written."""
        game = repo.create_game(make_game_data())
        with pytest.raises(ValidationError):
            repo.update_game(game.id, {"away_team_id": HOME})
        assert repo.get_game(game.id).away_team_id == AWAY

    def test_delete_game_cascades_events(self, db_path, repo):
        """Test deleting a game removes exactly its events."""
        events = EventRepository(db_path)
        game = repo.create_game(make_game_data())
        other = repo.create_game(make_game_data())
        for g in (game, other, game):
            events.append_event(CreateScoringEventData(
                game_id=g.id, tournament_id=TOURNAMENT, team_id=HOME,
                home_score=1, away_score=0,
            ))

        assert repo.delete_game(game.id) == 2

        assert repo.get_game(game.id) is None
        assert events.list_by_game(game.id) == []
        assert len(events.list_by_game(other.id)) == 1

    def test_delete_game_not_found(self, repo):
        """Test deleting a missing game raises GameNotFoundError."""
        with pytest.raises(GameNotFoundError):
            repo.delete_game("NONEXISTENT")

    def test_unreachable_database(self, tmp_path):
        """Test sqlite failures surface as StorageUnavailableError."""
        repo = GameRepository(str(tmp_path / "missing-dir" / "games.db"))
        with pytest.raises(StorageUnavailableError) as exc_info:
            repo.get_game("G1")
        assert exc_info.value.operation == "get_game"
