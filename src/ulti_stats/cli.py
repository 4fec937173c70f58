# Area: Shared
"""
ulti_stats.cli — Command-line interface
=======================================

Operate the scoring core against a local database.

Usage:
    ulti-stats init-db
    ulti-stats import-game game.json
    ulti-stats start GAME_ID --offense TEAM_ID
    ulti-stats score GAME_ID --team TEAM_ID --scorer P1 --assister P2
    ulti-stats undo GAME_ID
    ulti-stats stats --tournament TOURNAMENT_ID --genders genders.json

The database and log file come from --db / --config, a .env file, or
the ULTI_STATS_DB / ULTI_STATS_LOG_FILE environment variables.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ._config import load_config, validate_config
from ._scoring.history import HistoryRecorder
from ._scoring.session import GameSession
from ._scoring.score_deriver import mvp_by_gender
from ._scoring.stats import StatsAggregator
from ._shared.logging_config import log_storage_error, setup_logging
from ._store.store import SQLiteScoreStore
from .errors import ScorekeeperError, StorageUnavailableError
from .types import CreateGameData, GenderRatio, PlayerGender, PlayerStats


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="ulti-stats",
        description="Live game scorekeeping and tournament stats",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  ulti-stats --db cup.db import-game game.json
  ulti-stats score GAME_ID --team HOME --scorer P7
  SCOREKEEPER=ann@example.com ulti-stats undo GAME_ID
        """,
    )
    parser.add_argument("--config", type=str, help="Path to JSON config file")
    parser.add_argument("--db", type=str, help="Path to the SQLite database")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create the database schema")

    p = sub.add_parser("import-game", help="Create a game from a JSON document")
    p.add_argument("file", type=str)

    p = sub.add_parser("show", help="Show score and scoring log of a game")
    p.add_argument("game_id")

    p = sub.add_parser("start", help="Start a scheduled game")
    p.add_argument("game_id")
    p.add_argument("--offense", required=True, help="Team starting on offense")
    p.add_argument("--home-right", action="store_true",
                   help="Home team starts at the right endzone")
    p.add_argument("--ratio", choices=[r.value for r in GenderRatio])

    p = sub.add_parser("score", help="Add a point")
    p.add_argument("game_id")
    p.add_argument("--team", required=True)
    p.add_argument("--scorer", help="Scorer player id (omit to skip)")
    p.add_argument("--assister", help="Assister player id (omit for no assist)")

    for name, text in (("undo", "Undo the last point"),
                       ("complete", "Complete a game"),
                       ("halftime", "Call halftime"),
                       ("second-half", "Start the second half")):
        p = sub.add_parser(name, help=text)
        p.add_argument("game_id")

    p = sub.add_parser("timeout", help="Record a timeout")
    p.add_argument("game_id")
    p.add_argument("--team", required=True)
    p.add_argument("--spirit", action="store_true", help="Spirit timeout")

    p = sub.add_parser("stats", help="Ranked player stats and MVPs")
    scope = p.add_mutually_exclusive_group(required=True)
    scope.add_argument("--tournament")
    scope.add_argument("--game")
    p.add_argument("--genders", help="JSON file mapping player id to male/female")

    return parser


def load_genders(path: Optional[str]) -> Dict[str, PlayerGender]:
    """Load a player_id -> gender mapping from a JSON file."""
    if not path:
        return {}
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)
    return {player_id: PlayerGender(gender) for player_id, gender in raw.items()}


def format_stats(ranked: List[PlayerStats]) -> str:
    """Render ranked stats as a plain text table."""
    lines = [f"{'#':>3}  {'Player':<24} {'Team':<12} {'G':>3} {'A':>3} {'Tot':>4}"]
    for rank, s in enumerate(ranked, start=1):
        name = f"#{s.player_number} {s.player_name}" if s.player_number is not None else (s.player_name or s.player_id)
        lines.append(f"{rank:>3}  {name:<24} {s.team_id:<12} {s.goals:>3} {s.assists:>3} {s.total:>4}")
    return "\n".join(lines)


def _print_game(session: GameSession) -> None:
    print(json.dumps(session.snapshot().as_dict(), indent=2, default=str))


def _open(store: SQLiteScoreStore, config: Dict[str, Any], game_id: str) -> GameSession:
    history = HistoryRecorder(store, actor=config.get("scorekeeper") or "cli")
    session = GameSession(store, history=history)
    session.open(game_id)
    return session


def run_command(args: argparse.Namespace, store: SQLiteScoreStore, config: Dict[str, Any]) -> int:
    """Dispatch one subcommand. Raises ScorekeeperError on failure."""
    if args.command == "init-db":
        print(f"Database ready at {store.db_path}")
        return 0

    if args.command == "import-game":
        data = CreateGameData.model_validate(json.loads(Path(args.file).read_text(encoding="utf-8")))
        game = store.create_game(data)
        print(game.id)
        return 0

    if args.command == "stats":
        aggregator = StatsAggregator(store)
        if args.tournament:
            ranked = aggregator.tournament_stats(args.tournament)
        else:
            ranked = aggregator.game_stats(args.game)
        print(format_stats(ranked))
        genders = load_genders(args.genders)
        if genders:
            mvps = mvp_by_gender(ranked, genders)
            print(f"\nMale MVP:   {mvps.male.player_name if mvps.male else '-'}")
            print(f"Female MVP: {mvps.female.player_name if mvps.female else '-'}")
        return 0

    session = _open(store, config, args.game_id)

    if args.command == "start":
        session.start_game(
            args.offense,
            home_team_starts_left=not args.home_right,
            gender_ratio=GenderRatio(args.ratio) if args.ratio else None,
            scorekeeper=config.get("scorekeeper"),
        )
    elif args.command == "score":
        session.select_team(args.team)
        session.select_assister(args.assister)
        session.select_scorer(args.scorer)
    elif args.command == "undo":
        if not session.undo_last_event():
            print("Nothing to undo", file=sys.stderr)
    elif args.command == "complete":
        session.complete_game()
    elif args.command == "halftime":
        session.call_halftime()
    elif args.command == "second-half":
        session.start_second_half()
    elif args.command == "timeout":
        session.call_timeout(args.team, spirit=args.spirit)

    _print_game(session)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    config = load_config(args.config)
    if args.db:
        config["db_path"] = args.db

    try:
        validate_config(config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(config["log_file"], config["log_level"])

    try:
        store = SQLiteScoreStore(config["db_path"])
        return run_command(args, store, config)
    except StorageUnavailableError as e:
        log_storage_error(e)
        return 1
    except ScorekeeperError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (ValidationError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
