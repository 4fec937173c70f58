# Area: Scoring
"""
ulti_stats._scoring.interaction — Point entry state machine
===========================================================

Drives the three-step flow an operator follows to log a point:
choose the scoring team, choose the assister (or skip), choose the
scorer (or skip). The last step emits a ``ScoringCandidate`` and the
machine resets.

The machine is synchronous and holds no persisted state. Rejected
actions raise and leave the machine untouched.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..errors import InvalidSelectionError, InvalidTransitionError
from ..types import Game, RosterPlayer
from .enums import InteractionAction, InteractionStep


# Valid transitions: {current_step: {action: next_step}}
TRANSITIONS = {
    InteractionStep.AWAITING_TEAM: {
        InteractionAction.SELECT_TEAM: InteractionStep.AWAITING_ASSISTER,
    },
    InteractionStep.AWAITING_ASSISTER: {
        InteractionAction.SELECT_ASSISTER: InteractionStep.AWAITING_SCORER,
        InteractionAction.BACK: InteractionStep.AWAITING_TEAM,
    },
    InteractionStep.AWAITING_SCORER: {
        InteractionAction.SELECT_SCORER: InteractionStep.AWAITING_TEAM,
        InteractionAction.BACK: InteractionStep.AWAITING_ASSISTER,
    },
}


@dataclass(frozen=True)
class ScoringCandidate:
    """
    A completed selection, ready for ``GameSession.add_scoring_event``.

    Attributes:
        team_id: Team credited with the point
        scorer_player_id: Scorer, or None if skipped
        assister_player_id: Assister, or None if skipped
    """

    team_id: str
    scorer_player_id: Optional[str] = None
    assister_player_id: Optional[str] = None


class ScoringInteractionMachine:
    """
    State machine for the point entry flow of one game.

    Attributes:
        current_step: The step the operator is on
        team_id: Team chosen in the first step, if any
        assister_player_id: Assister chosen in the second step (None = skipped)
    """

    def __init__(
        self,
        home_team_id: str,
        away_team_id: str,
        home_roster: Sequence[RosterPlayer] = (),
        away_roster: Sequence[RosterPlayer] = (),
    ):
        self.home_team_id = home_team_id
        self.away_team_id = away_team_id
        self._rosters: Dict[str, List[RosterPlayer]] = {
            home_team_id: list(home_roster),
            away_team_id: list(away_roster),
        }
        self.current_step = InteractionStep.AWAITING_TEAM
        self.team_id: Optional[str] = None
        self.assister_player_id: Optional[str] = None

    @classmethod
    def for_game(cls, game: Game) -> "ScoringInteractionMachine":
        """Build a machine over the game's roster snapshot."""
        return cls(
            game.home_team_id,
            game.away_team_id,
            game.home_roster,
            game.away_roster,
        )

    def can_transition(self, action: InteractionAction) -> bool:
        """Check if an action is valid in the current step."""
        return action in TRANSITIONS.get(self.current_step, {})

    def _next_step(self, action: InteractionAction) -> InteractionStep:
        if not self.can_transition(action):
            raise InvalidTransitionError(action.value, self.current_step.value)
        return TRANSITIONS[self.current_step][action]

    def roster(self) -> List[RosterPlayer]:
        """Roster of the chosen team (empty before a team is chosen)."""
        if self.team_id is None:
            return []
        return list(self._rosters[self.team_id])

    def assister_candidates(self) -> List[RosterPlayer]:
        return self.roster()

    def scorer_candidates(self) -> List[RosterPlayer]:
        """Roster of the chosen team without the already chosen assister."""
        return [p for p in self.roster() if p.player_id != self.assister_player_id]

    def select_team(self, team_id: str) -> InteractionStep:
        """
        Choose the scoring team.

        Raises:
            InvalidTransitionError: If not awaiting a team
            InvalidSelectionError: If team_id is not one of the game's teams
        """
        next_step = self._next_step(InteractionAction.SELECT_TEAM)
        if team_id not in self._rosters:
            raise InvalidSelectionError(f"Team '{team_id}' is not playing this game", team_id)
        self.team_id = team_id
        self.current_step = next_step
        return next_step

    def select_assister(self, player_id: Optional[str]) -> InteractionStep:
        """
        Choose the assister, or pass None to skip.

        Raises:
            InvalidTransitionError: If not awaiting an assister
            InvalidSelectionError: If the player is not on the team's roster
        """
        next_step = self._next_step(InteractionAction.SELECT_ASSISTER)
        if player_id is not None:
            self._require_candidate(player_id, self.assister_candidates())
        self.assister_player_id = player_id
        self.current_step = next_step
        return next_step

    def select_scorer(self, player_id: Optional[str]) -> ScoringCandidate:
        """
        Choose the scorer (None to skip) and emit the candidate.

        The machine resets to AWAITING_TEAM afterwards.

        Raises:
            InvalidTransitionError: If not awaiting a scorer
            InvalidSelectionError: If the player is not a scorer candidate
        """
        next_step = self._next_step(InteractionAction.SELECT_SCORER)
        if player_id is not None:
            self._require_candidate(player_id, self.scorer_candidates())
        candidate = ScoringCandidate(
            team_id=self.team_id,
            scorer_player_id=player_id,
            assister_player_id=self.assister_player_id,
        )
        self.reset()
        self.current_step = next_step
        return candidate

    def back(self) -> InteractionStep:
        """
        Step back, discarding the selection made in the previous step.

        Raises:
            InvalidTransitionError: If already awaiting a team
        """
        next_step = self._next_step(InteractionAction.BACK)
        if next_step == InteractionStep.AWAITING_TEAM:
            self.team_id = None
        self.assister_player_id = None
        self.current_step = next_step
        return next_step

    def reset(self) -> None:
        """Return to AWAITING_TEAM and clear every selection."""
        self.current_step = InteractionStep.AWAITING_TEAM
        self.team_id = None
        self.assister_player_id = None

    @staticmethod
    def _require_candidate(player_id: str, candidates: List[RosterPlayer]) -> None:
        if not any(p.player_id == player_id for p in candidates):
            raise InvalidSelectionError(
                f"Player '{player_id}' is not a valid choice", player_id
            )
