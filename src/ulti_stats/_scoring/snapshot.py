# Area: Scoring
"""
ulti_stats._scoring.snapshot — Session snapshot builder
=======================================================

Builds the immutable view a ``GameSession`` publishes to observers
after every change. The score in a snapshot is always derived from
the events it carries.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence, Tuple

from ..types import Game, ScoringEvent
from .enums import InteractionStep
from .score_deriver import Score, score_of


@dataclass(frozen=True)
class SessionSnapshot:
    """What observers see: game, log, derived score and flow step."""

    game: Optional[Game]
    events: Tuple[ScoringEvent, ...]
    score: Score
    step: InteractionStep

    @property
    def game_id(self) -> Optional[str]:
        return self.game.id if self.game else None

    def as_dict(self) -> dict:
        """Build a serializable summary for logs and the CLI."""
        if self.game is None:
            return {"game_id": None, "step": self.step.value}
        return {
            "game_id": self.game.id,
            "status": self.game.status.value,
            "home": {"team_id": self.game.home_team_id, "name": self.game.home_team_name,
                     "score": self.score.home},
            "away": {"team_id": self.game.away_team_id, "name": self.game.away_team_name,
                     "score": self.score.away},
            "events": [_event_line(self.game, e) for e in self.events],
            "step": self.step.value,
        }


def build_session_snapshot(
    game: Optional[Game],
    events: Sequence[ScoringEvent],
    step: InteractionStep,
) -> SessionSnapshot:
    """Build a snapshot, deriving the score from ``events``."""
    if game is None:
        return SessionSnapshot(None, (), Score(), step)
    score = score_of(events, game.home_team_id, game.away_team_id)
    return SessionSnapshot(game, tuple(events), score, step)


def elapsed_label(scored_at: Optional[datetime], start_time: Optional[datetime]) -> str:
    """Game clock label (``"mm:ss"``) for a point, or empty if unknown."""
    if scored_at is None or start_time is None:
        return ""
    seconds = max(0, int((scored_at - start_time).total_seconds()))
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


def _event_line(game: Game, event: ScoringEvent) -> dict:
    """Summarize one event for display."""
    return {
        "id": event.id,
        "team": "home" if game.is_home(event.team_id) else "away",
        "scorer": _player_label(event.scorer_number, event.scorer_name),
        "assister": _player_label(event.assister_number, event.assister_name),
        "score": f"{event.home_score}-{event.away_score}",
        "elapsed": elapsed_label(event.scored_at, game.start_time),
    }


def _player_label(number: Optional[int], name: Optional[str]) -> Optional[str]:
    if name is None:
        return None
    return f"#{number} {name}" if number is not None else name
