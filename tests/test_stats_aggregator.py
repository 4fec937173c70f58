# Area: Scoring Tests
"""Tests for tournament and game statistics."""

import pytest

from ulti_stats._scoring.interaction import ScoringCandidate
from ulti_stats._scoring.session import GameSession
from ulti_stats._scoring.stats import StatsAggregator
from ulti_stats.errors import StorageUnavailableError
from ulti_stats.types import PlayerGender

from conftest import AWAY, HOME, TOURNAMENT, make_game_data


@pytest.fixture
def aggregator(store):
    return StatsAggregator(store)


def play(store, clock, points, **game_fields):
    """Create and start a game and score ``points`` (team, scorer, assister)."""
    game = store.create_game(make_game_data(**game_fields))
    session = GameSession(store, clock=clock)
    session.open(game.id)
    session.start_game(HOME)
    for team_id, scorer, assister in points:
        session.add_scoring_event(ScoringCandidate(team_id, scorer, assister))
    return session


class TestStatsAggregator:
    """Tests for StatsAggregator."""

    def test_tournament_stats_span_games(self, store, clock, aggregator):
        """Test stats are summed over every game of the tournament."""
        play(store, clock, [(HOME, "P1", "P2"), (AWAY, "P3", None)])
        play(store, clock, [(HOME, "P1", None), (HOME, "P2", "P1")])

        stats = {s.player_id: s for s in aggregator.tournament_stats(TOURNAMENT)}
        assert (stats["P1"].goals, stats["P1"].assists) == (2, 1)
        assert (stats["P2"].goals, stats["P2"].assists) == (1, 1)
        assert (stats["P3"].goals, stats["P3"].assists) == (1, 0)

    def test_other_tournaments_excluded(self, store, clock, aggregator):
        """Test events of other tournaments do not count."""
        play(store, clock, [(HOME, "P1", None)], tournament_id="OTHER")
        assert aggregator.tournament_stats(TOURNAMENT) == []

    def test_game_stats_ranked(self, store, clock, aggregator):
        """Test game stats are ranked by goals plus assists."""
        session = play(store, clock, [(HOME, "P1", "P2"), (HOME, "P4", "P1"), (AWAY, "P3", None)])

        ranked = aggregator.game_stats(session.game.id)
        assert ranked[0].player_id == "P1"
        assert ranked[0].total == 2

    def test_undo_reflected_immediately(self, store, clock, aggregator):
        """Test stats are recomputed after an undo, never cached."""
        session = play(store, clock, [(HOME, "P1", "P2")])
        assert len(aggregator.game_stats(session.game.id)) == 2

        session.undo_last_event()
        assert aggregator.game_stats(session.game.id) == []

    def test_tournament_mvps(self, store, clock, aggregator):
        """Test MVPs are the top ranked player per gender."""
        play(store, clock, [(HOME, "P1", "P2"), (HOME, "P2", "P1"), (AWAY, "P5", "P3")])
        genders = {
            "P1": PlayerGender.MALE,
            "P2": PlayerGender.FEMALE,
            "P3": PlayerGender.MALE,
            "P4": PlayerGender.FEMALE,
            "P5": PlayerGender.FEMALE,
        }

        mvps = aggregator.tournament_mvps(TOURNAMENT, genders)
        assert mvps.male.player_id == "P1"
        assert mvps.female.player_id == "P2"

    def test_tournament_stats_storage_failure(self, store, aggregator):
        """Test storage errors propagate from tournament_stats."""
        store.fail_on.add("list_events")
        with pytest.raises(StorageUnavailableError):
            aggregator.tournament_stats(TOURNAMENT)

    def test_safe_tournament_stats(self, store, clock, aggregator):
        """Test the background variant returns None on storage failure."""
        play(store, clock, [(HOME, "P1", None)])
        assert len(aggregator.safe_tournament_stats(TOURNAMENT)) == 1

        store.fail_on.add("list_events")
        assert aggregator.safe_tournament_stats(TOURNAMENT) is None
