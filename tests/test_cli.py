# Area: Shared Tests
"""Tests for the command-line interface."""

import json

import pytest

from ulti_stats._config import ENV_MAPPINGS
from ulti_stats.cli import build_parser, format_stats, main
from ulti_stats.types import PlayerStats

from conftest import AWAY, HOME, TOURNAMENT, make_game_data


@pytest.fixture
def cli(tmp_path, monkeypatch, package_logger, capsys):
    """Run the CLI against a temporary database; returns (code, stdout, stderr)."""
    for key in ENV_MAPPINGS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ULTI_STATS_LOG_FILE", str(tmp_path / "cli.log"))
    db = str(tmp_path / "cli.db")

    def run(*argv):
        code = main(["--db", db, *argv])
        out, err = capsys.readouterr()
        return code, out, err

    return run


@pytest.fixture
def game_id(cli, tmp_path):
    path = tmp_path / "game.json"
    path.write_text(json.dumps(make_game_data().to_document()))
    code, out, _ = cli("import-game", str(path))
    assert code == 0
    return out.strip()


class TestParser:
    """Tests for build_parser()."""

    def test_score_arguments(self):
        """Test score parses team and optional players."""
        args = build_parser().parse_args(["score", "G1", "--team", HOME, "--scorer", "P1"])
        assert args.command == "score"
        assert args.team == HOME
        assert args.scorer == "P1"
        assert args.assister is None

    def test_stats_needs_scope(self):
        """Test stats requires --tournament or --game."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(["stats"])


class TestCommands:
    """Tests for running subcommands through main()."""

    def test_init_db(self, cli):
        code, out, _ = cli("init-db")
        assert code == 0
        assert "Database ready" in out

    def test_score_and_undo(self, cli, game_id):
        """Test a full start, score, undo sequence."""
        assert cli("start", game_id, "--offense", HOME)[0] == 0

        code, out, _ = cli("score", game_id, "--team", HOME, "--scorer", "P1", "--assister", "P2")
        assert code == 0
        summary = json.loads(out)
        assert summary["home"]["score"] == 1
        assert summary["events"][0]["scorer"] == "#7 Ann"

        cli("score", game_id, "--team", AWAY)
        code, out, _ = cli("undo", game_id)
        summary = json.loads(out)
        assert (summary["home"]["score"], summary["away"]["score"]) == (1, 0)

    def test_score_before_start(self, cli, game_id):
        """Test scoring a scheduled game fails with exit code 1."""
        code, _, err = cli("score", game_id, "--team", HOME)
        assert code == 1
        assert "Error:" in err

    def test_undo_empty(self, cli, game_id):
        """Test undo with no points reports nothing to undo."""
        cli("start", game_id, "--offense", AWAY)
        code, _, err = cli("undo", game_id)
        assert code == 0
        assert "Nothing to undo" in err

    def test_unknown_game(self, cli):
        code, _, err = cli("show", "missing")
        assert code == 1
        assert "missing" in err

    def test_stats_with_genders(self, cli, game_id, tmp_path):
        """Test tournament stats print a table and MVPs."""
        cli("start", game_id, "--offense", HOME)
        cli("score", game_id, "--team", HOME, "--scorer", "P1", "--assister", "P2")
        genders = tmp_path / "genders.json"
        genders.write_text(json.dumps({"P1": "male", "P2": "female"}))

        code, out, _ = cli("stats", "--tournament", TOURNAMENT, "--genders", str(genders))
        assert code == 0
        assert "#7 Ann" in out
        assert "Male MVP:   Ann" in out
        assert "Female MVP: Bob" in out

    def test_invalid_game_file(self, cli, tmp_path):
        """Test an invalid game document fails cleanly."""
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"tournament_id": TOURNAMENT}))
        code, _, err = cli("import-game", str(path))
        assert code == 1
        assert "Error:" in err


def test_format_stats():
    """Test the table lists players in rank order."""
    table = format_stats([
        PlayerStats(player_id="P1", player_name="Ann", player_number=7, team_id=HOME, goals=2),
        PlayerStats(player_id="P3", player_name="Cal", team_id=AWAY, assists=1),
    ])
    lines = table.splitlines()
    assert "#7 Ann" in lines[1]
    assert "Cal" in lines[2]
