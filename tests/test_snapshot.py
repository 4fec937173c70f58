# Area: Scoring Tests
"""Tests for ulti_stats._scoring.snapshot — session snapshot builder."""

from datetime import timedelta

from ulti_stats._scoring.enums import InteractionStep
from ulti_stats._scoring.score_deriver import Score
from ulti_stats._scoring.snapshot import build_session_snapshot, elapsed_label

from conftest import AWAY, BASE_TIME, HOME, make_event


def test_snapshot_derives_score_from_events(game):
    """Snapshot score should come from the events, not the cached fields."""
    events = [
        make_event(1, HOME, home_score=1, game_id=game.id),
        make_event(2, AWAY, home_score=1, away_score=1, game_id=game.id),
    ]

    snapshot = build_session_snapshot(game, events, InteractionStep.AWAITING_TEAM)

    assert snapshot.score == Score(1, 1)
    assert snapshot.game_id == game.id
    assert len(snapshot.events) == 2


def test_snapshot_without_game():
    """Snapshot should handle a closed session gracefully."""
    snapshot = build_session_snapshot(None, [make_event(1, HOME)], InteractionStep.AWAITING_TEAM)

    assert snapshot.game_id is None
    assert snapshot.events == ()
    assert snapshot.as_dict() == {"game_id": None, "step": "AWAITING_TEAM"}


def test_as_dict_event_lines(game):
    """Summary should label sides, players and the running score."""
    started = game.model_copy(update={"start_time": BASE_TIME})
    events = [make_event(65, HOME, scorer="P1", assister="P2", home_score=1, game_id=game.id)]

    summary = build_session_snapshot(started, events, InteractionStep.AWAITING_SCORER).as_dict()

    assert summary["home"]["score"] == 1
    assert summary["away"]["score"] == 0
    assert summary["step"] == "AWAITING_SCORER"
    line = summary["events"][0]
    assert line["team"] == "home"
    assert line["scorer"] == "#65 name-P1"
    assert line["assister"] == "#165 name-P2"
    assert line["score"] == "1-0"


def test_elapsed_label():
    """Elapsed time should render as mm:ss from the game start."""
    assert elapsed_label(BASE_TIME + timedelta(minutes=12, seconds=5), BASE_TIME) == "12:05"
    assert elapsed_label(BASE_TIME - timedelta(seconds=3), BASE_TIME) == "00:00"


def test_elapsed_label_unknown():
    """Missing timestamps should render as an empty label."""
    assert elapsed_label(None, BASE_TIME) == ""
    assert elapsed_label(BASE_TIME, None) == ""
