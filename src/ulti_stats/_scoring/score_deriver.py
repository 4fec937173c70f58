# Area: Scoring
"""
ulti_stats._scoring.score_deriver — Replay score and stats from events
======================================================================

Pure functions. The score of a game is the count of events credited
to each team; there is no point-value concept. Player stats are a
commutative fold over the events, so their order never changes the
counts.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from ..types import MvpSelection, PlayerGender, PlayerStats, ScoringEvent
from .event_log import sort_events


@dataclass(frozen=True)
class Score:
    """Derived home/away score."""

    home: int = 0
    away: int = 0

    def credit(self, team_id: str, home_team_id: str, away_team_id: str) -> "Score":
        """Return the score after one point for ``team_id``."""
        if team_id == home_team_id:
            return Score(self.home + 1, self.away)
        if team_id == away_team_id:
            return Score(self.home, self.away + 1)
        return self


def score_of(
    events: Iterable[ScoringEvent], home_team_id: str, away_team_id: str
) -> Score:
    """Count the events credited to each team."""
    home = away = 0
    for event in events:
        if event.team_id == home_team_id:
            home += 1
        elif event.team_id == away_team_id:
            away += 1
    return Score(home, away)


def verify_event_snapshots(
    events: Sequence[ScoringEvent], home_team_id: str, away_team_id: str
) -> List[ScoringEvent]:
    """
    Replay the log and return events whose stored score snapshot
    disagrees with the running replayed score.
    """
    mismatched = []
    running = Score()
    for event in sort_events(events):
        running = running.credit(event.team_id, home_team_id, away_team_id)
        if (event.home_score, event.away_score) != (running.home, running.away):
            mismatched.append(event)
    return mismatched


def stats_of(events: Iterable[ScoringEvent]) -> Dict[str, PlayerStats]:
    """
    Fold events into per-player goals and assists.

    A player's record is created on first sight, seeded from the name,
    number and team on that event. Skipped scorers/assisters are not
    counted.
    """
    stats: Dict[str, PlayerStats] = {}

    for event in events:
        if event.scorer_player_id:
            scorer = stats.get(event.scorer_player_id)
            if scorer is None:
                scorer = stats[event.scorer_player_id] = PlayerStats(
                    player_id=event.scorer_player_id,
                    player_name=event.scorer_name,
                    player_number=event.scorer_number,
                    team_id=event.team_id,
                )
            scorer.goals += 1

        if event.assister_player_id:
            assister = stats.get(event.assister_player_id)
            if assister is None:
                assister = stats[event.assister_player_id] = PlayerStats(
                    player_id=event.assister_player_id,
                    player_name=event.assister_name,
                    player_number=event.assister_number,
                    team_id=event.team_id,
                )
            assister.assists += 1

    return stats


def rank_stats(stats: Mapping[str, PlayerStats]) -> List[PlayerStats]:
    """
    Order players by goals + assists, descending.

    Ties keep encounter order (the sort is stable); no secondary key.
    """
    return sorted(stats.values(), key=lambda s: s.goals + s.assists, reverse=True)


def mvp_by_gender(
    ranked: Sequence[PlayerStats],
    gender_lookup: Mapping[str, PlayerGender],
) -> MvpSelection:
    """
    Pick the first ranked player of each gender.

    Args:
        ranked: Output of ``rank_stats``
        gender_lookup: player_id -> gender, supplied by the roster source.
            Players missing from it belong to neither partition.
    """
    male: Optional[PlayerStats] = None
    female: Optional[PlayerStats] = None
    for player in ranked:
        gender = gender_lookup.get(player.player_id)
        if gender is None:
            continue
        gender = PlayerGender(gender)
        if gender is PlayerGender.MALE and male is None:
            male = player
        elif gender is PlayerGender.FEMALE and female is None:
            female = player
        if male is not None and female is not None:
            break
    return MvpSelection(male=male, female=female)
