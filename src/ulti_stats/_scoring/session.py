# Area: Scoring
"""
ulti_stats._scoring.session — Live game session
===============================================

``GameSession`` is the in-memory view of the one game an operator is
scoring. It owns the game's event log, keeps the cached score on the
game record consistent with that log, and republishes a snapshot to
observers after every change.

Rules the session enforces:

- Every log mutation is followed by a write-back of the game's score
  before anything observes the game.
- Held state is only replaced after the store confirms a write; any
  failure leaves it exactly as it was and propagates.
- One write at a time: a scoring action arriving while a write is in
  flight raises ``ScoringBusyError``.
"""

from __future__ import annotations
import logging
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from ..errors import (
    GameNotFoundError,
    GameStateError,
    InvalidSelectionError,
    NotFoundError,
    ScorekeeperError,
    ScoringBusyError,
)
from ..types import (
    CreateScoringEventData,
    Game,
    GameStatus,
    GenderRatio,
    RosterPlayer,
    ScoringEvent,
    utc_now,
)
from .._store.store import ScoreStore
from .enums import InteractionStep
from .event_log import EventLog, last_event, sort_events
from .history import HistoryRecorder
from .interaction import ScoringCandidate, ScoringInteractionMachine
from .score_deriver import Score, score_of, verify_event_snapshots
from .snapshot import SessionSnapshot, build_session_snapshot

logger = logging.getLogger("ulti_stats.session")

Observer = Callable[[SessionSnapshot], None]


class GameSession:
    """
    Session for scoring one game at a time.

    Construct one per "game view"; it is not a process-wide singleton.

    Args:
        store: Persistence collaborator
        history: Optional audit recorder, invoked after successful writes
        clock: Returns the current UTC time (injectable for tests)
    """

    def __init__(
        self,
        store: ScoreStore,
        history: Optional[HistoryRecorder] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.event_log = EventLog(store)
        self.history = history
        self._clock = clock
        self.game: Optional[Game] = None
        self._events: List[ScoringEvent] = []
        self.machine: Optional[ScoringInteractionMachine] = None
        self._observers: List[Observer] = []
        self._write_lock = threading.Lock()
        # Set when the stored log may differ from the held one after a partial failure
        self._stale_log = False
        # (event, removed_by_this_session) of an undo whose score write-back failed
        self._interrupted_undo: Optional[Tuple[ScoringEvent, bool]] = None

    # ── Read-only views ───────────────────────────────────────

    @property
    def is_open(self) -> bool:
        return self.game is not None

    @property
    def events(self) -> Tuple[ScoringEvent, ...]:
        return tuple(self._events)

    @property
    def score(self) -> Score:
        """The held game's cached score."""
        if self.game is None:
            return Score()
        return Score(self.game.home_score, self.game.away_score)

    @property
    def step(self) -> InteractionStep:
        if self.machine is None:
            return InteractionStep.AWAITING_TEAM
        return self.machine.current_step

    def snapshot(self) -> SessionSnapshot:
        return build_session_snapshot(self.game, self._events, self.step)

    # ── Observers ─────────────────────────────────────────────

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """
        Register an observer of session snapshots.

        Returns:
            A callable that unsubscribes the observer
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _publish(self) -> None:
        snapshot = self.snapshot()
        for observer in list(self._observers):
            try:
                observer(snapshot)
            except Exception:
                logger.warning("Session observer failed", exc_info=True)

    # ── Open / switch / close ─────────────────────────────────

    def open(self, game_id: str) -> SessionSnapshot:
        """
        Load a game and its event log and make it the active game.

        Raises:
            GameNotFoundError: If the game does not exist
            StorageUnavailableError: If loading fails (session unchanged)
        """
        game = self.store.get_game(game_id)
        if game is None:
            raise GameNotFoundError(game_id)
        events = self.event_log.load(game_id)
        self._activate(self._heal_cached_score(game, events), events)
        return self.snapshot()

    def set_current_game(self, game: Optional[Game]) -> None:
        """
        Switch to ``game`` (reloading its log), or clear with None.

        Events of a previously active game never carry over.
        """
        if game is None:
            self.close()
            return
        events = self.event_log.load(game.id)
        self._activate(self._heal_cached_score(game, events), events)

    def close(self) -> None:
        """Leave the game view: clear the game, its log and the flow."""
        self.game = None
        self._events = []
        self._clear_recovery()
        if self.machine is not None:
            self.machine.reset()
        self.machine = None
        self._publish()

    def _activate(self, game: Game, events: Sequence[ScoringEvent]) -> None:
        self.game = game
        self._events = list(events)
        self._clear_recovery()
        self.machine = ScoringInteractionMachine.for_game(game)
        logger.info(
            f"Opened game {game.id} ({game.display_name}) "
            f"at {game.home_score}-{game.away_score} with {len(events)} events"
        )
        self._publish()

    def _heal_cached_score(self, game: Game, events: Sequence[ScoringEvent]) -> Game:
        """Prefer the score derived from the log over the cached one."""
        mismatched = verify_event_snapshots(events, game.home_team_id, game.away_team_id)
        if mismatched:
            logger.warning(
                f"Game {game.id}: {len(mismatched)} events carry a score snapshot "
                f"that disagrees with replay"
            )

        derived = score_of(events, game.home_team_id, game.away_team_id)
        if (derived.home, derived.away) == (game.home_score, game.away_score):
            return game

        logger.warning(
            f"Game {game.id}: cached score {game.home_score}-{game.away_score} "
            f"differs from log {derived.home}-{derived.away}; using log"
        )
        fields = {"home_score": derived.home, "away_score": derived.away}
        try:
            return self.store.update_game(game.id, fields)
        except ScorekeeperError as e:
            logger.warning(f"Could not write healed score for game {game.id}: {e}")
            return game.model_copy(update=fields)

    def _clear_recovery(self) -> None:
        self._stale_log = False
        self._interrupted_undo = None

    def _resync(self, game: Game) -> Game:
        """
        Reload the log after a partial failure and re-derive the score.

        Finishes the bookkeeping of an interrupted undo, whose event is
        already gone from the store.
        """
        events = self.event_log.load(game.id)
        game = self._heal_cached_score(game, events)
        interrupted = self._interrupted_undo
        self.game = game
        self._events = events
        self._clear_recovery()
        logger.warning(f"Reloaded log of game {game.id} after an earlier partial failure")
        if interrupted is not None:
            self._record_undo(*interrupted)
        return game

    def _resync_if_stale(self, game: Game) -> Game:
        if not self._stale_log:
            return game
        with self._write_guard():
            return self._resync(game)

    def _record_undo(self, event: ScoringEvent, removed_here: bool) -> None:
        if self.history and removed_here:
            self.history.event_deleted(event)

    # ── Guards ────────────────────────────────────────────────

    @contextmanager
    def _write_guard(self) -> Iterator[None]:
        if not self._write_lock.acquire(blocking=False):
            raise ScoringBusyError(self.game.id if self.game else None)
        try:
            yield
        finally:
            self._write_lock.release()

    def _require_game(self) -> Game:
        if self.game is None:
            raise GameStateError("No game is open")
        return self.game

    def _require_status(self, status: GameStatus, action: str) -> Game:
        game = self._require_game()
        if game.status != status:
            raise GameStateError(
                f"Cannot {action}: game {game.id} is {game.status.value}, "
                f"expected {status.value}"
            )
        return game

    def _require_machine(self) -> ScoringInteractionMachine:
        self._require_status(GameStatus.IN_PROGRESS, "enter points")
        if self._write_lock.locked():
            raise ScoringBusyError(self.game.id)
        return self.machine

    # ── Point entry flow ──────────────────────────────────────

    def select_team(self, team_id: str) -> InteractionStep:
        step = self._require_machine().select_team(team_id)
        self._publish()
        return step

    def select_assister(self, player_id: Optional[str]) -> InteractionStep:
        step = self._require_machine().select_assister(player_id)
        self._publish()
        return step

    def back(self) -> InteractionStep:
        step = self._require_machine().back()
        self._publish()
        return step

    def select_scorer(self, player_id: Optional[str]) -> ScoringEvent:
        """
        Finish the flow and submit the point.

        The flow resets whether or not the write succeeds.
        """
        machine = self._require_machine()
        with self._write_guard():
            candidate = machine.select_scorer(player_id)
            try:
                return self._add(candidate)
            finally:
                machine.reset()

    # ── Scoring ───────────────────────────────────────────────

    def add_scoring_event(self, candidate: ScoringCandidate) -> ScoringEvent:
        """
        Append a point and update the game's cached score.

        The post-event score is the held pre-event score with the
        scoring team incremented; the same value is stored on the event
        and on the game.

        Raises:
            GameStateError: If no game is open or it is not in progress
            InvalidSelectionError: If the team or players are not valid
            StorageUnavailableError: If a write fails (session unchanged)
            ScoringBusyError: If another write is in flight
        """
        with self._write_guard():
            return self._add(candidate)

    def _add(self, candidate: ScoringCandidate) -> ScoringEvent:
        game = self._require_status(GameStatus.IN_PROGRESS, "add a point")
        if self._stale_log:
            game = self._resync(game)
        data = self._build_event_data(game, candidate)

        event = self.event_log.append(data)
        fields = {"home_score": data.home_score, "away_score": data.away_score}
        try:
            updated = self.store.update_game(game.id, fields)
        except ScorekeeperError:
            self._rollback_append(event)
            raise

        self.game = updated
        self._events = sort_events(self._events + [event])
        logger.info(
            f"Point for {candidate.team_id} in game {game.id}: "
            f"{data.home_score}-{data.away_score}",
            extra={"game_id": game.id, "event_id": event.id},
        )
        if self.history:
            self.history.event_created(event)
        self._publish()
        return event

    def _build_event_data(self, game: Game, candidate: ScoringCandidate) -> CreateScoringEventData:
        if not game.has_team(candidate.team_id):
            raise InvalidSelectionError(
                f"Team '{candidate.team_id}' is not playing this game", candidate.team_id
            )
        roster = game.roster_for(candidate.team_id)
        scorer = _roster_player(roster, candidate.scorer_player_id)
        assister = _roster_player(roster, candidate.assister_player_id)
        if scorer is not None and assister is not None and scorer.player_id == assister.player_id:
            raise InvalidSelectionError(
                "Assister and scorer must be different players", scorer.player_id
            )

        post = Score(game.home_score, game.away_score).credit(
            candidate.team_id, game.home_team_id, game.away_team_id
        )
        return CreateScoringEventData(
            game_id=game.id,
            tournament_id=game.tournament_id,
            team_id=candidate.team_id,
            scorer_player_id=scorer.player_id if scorer else None,
            scorer_number=scorer.number if scorer else None,
            scorer_name=scorer.player_name if scorer else None,
            assister_player_id=assister.player_id if assister else None,
            assister_number=assister.number if assister else None,
            assister_name=assister.player_name if assister else None,
            home_score=post.home,
            away_score=post.away,
            scored_at=self._clock(),
        )

    def _rollback_append(self, event: ScoringEvent) -> None:
        """Best-effort removal of an event whose score write-back failed."""
        try:
            self.store.delete_event(event.id)
            logger.warning(f"Rolled back event {event.id} after failed score update")
        except ScorekeeperError as e:
            self._stale_log = True
            logger.error(
                f"Could not roll back event {event.id}; game {event.game_id} "
                f"will be reloaded from its log before the next write: {e}",
                extra={"game_id": event.game_id, "event_id": event.id},
            )

    def undo_last_event(self) -> bool:
        """
        Remove the chronologically last point and re-derive the score.

        The score is recomputed from a fresh load of the remaining log,
        not decremented. Retrying after a failure finishes the interrupted
        undo instead of removing a second point; an event that is already
        gone counts as removed.

        Returns:
            False if the log is empty (no store calls made), else True

        Raises:
            GameStateError: If no game is open, or the log is not empty
                and the game is not in progress
            StorageUnavailableError: If a write fails (session unchanged)
            ScoringBusyError: If another write is in flight
        """
        with self._write_guard():
            game = self._require_game()
            if self._stale_log and self._interrupted_undo is None:
                game = self._resync(game)
            if not self._events:
                return False
            game = self._require_status(GameStatus.IN_PROGRESS, "undo a point")

            if self._interrupted_undo is not None:
                target, removed_here = self._interrupted_undo
            else:
                target = last_event(self._events)
                try:
                    self.event_log.remove_last(self._events)
                    removed_here = True
                except NotFoundError:
                    logger.warning(f"Event {target.id} was already removed; re-deriving score")
                    removed_here = False

            try:
                remaining = self.event_log.load(game.id)
                derived = score_of(remaining, game.home_team_id, game.away_team_id)
                updated = self.store.update_game(
                    game.id, {"home_score": derived.home, "away_score": derived.away}
                )
            except ScorekeeperError:
                self._stale_log = True
                self._interrupted_undo = (target, removed_here)
                raise

            self.game = updated
            self._events = remaining
            self._clear_recovery()
            if self.machine is not None:
                self.machine.reset()
            logger.info(
                f"Undid event {target.id} in game {game.id}: {derived.home}-{derived.away}",
                extra={"game_id": game.id, "event_id": target.id},
            )
            self._record_undo(target, removed_here)
            self._publish()
            return True

    # ── Game lifecycle and progress ───────────────────────────

    def start_game(
        self,
        starting_offense_team_id: str,
        home_team_starts_left: bool = True,
        gender_ratio: Optional[GenderRatio] = None,
        scorekeeper: Optional[str] = None,
    ) -> Game:
        """Confirm setup and move the game from scheduled to in progress."""
        game = self._require_status(GameStatus.SCHEDULED, "start the game")
        if not game.has_team(starting_offense_team_id):
            raise InvalidSelectionError(
                f"Team '{starting_offense_team_id}' is not playing this game",
                starting_offense_team_id,
            )
        fields: Dict[str, Any] = {
            "status": GameStatus.IN_PROGRESS,
            "start_time": self._clock(),
            "starting_offense_team_id": starting_offense_team_id,
            "home_team_starts_left": home_team_starts_left,
            "gender_ratio": gender_ratio,
            "scorekeeper": scorekeeper,
        }
        game = self._update_game({k: v for k, v in fields.items() if v is not None})
        self.machine.reset()
        return game

    def complete_game(self) -> Game:
        """Finish the game; its event log is frozen afterwards."""
        game = self._require_status(GameStatus.IN_PROGRESS, "complete the game")
        self._resync_if_stale(game)
        game = self._update_game({"status": GameStatus.COMPLETED})
        self.machine.reset()
        return game

    def call_timeout(self, team_id: str, spirit: bool = False) -> Game:
        """Record a (spirit) timeout for a team at the current time."""
        game = self._require_status(GameStatus.IN_PROGRESS, "call a timeout")
        side = self._side(game, team_id)
        field = f"{side}_spirit_timeouts" if spirit else f"{side}_timeouts"
        return self._update_game({field: list(getattr(game, field)) + [self._clock()]})

    def call_halftime(self) -> Game:
        """Record halftime with the score derived from the log. Only once."""
        game = self._require_status(GameStatus.IN_PROGRESS, "call halftime")
        if game.halftime_time is not None:
            raise GameStateError(f"Halftime already called for game {game.id}")
        game = self._resync_if_stale(game)
        score = score_of(self._events, game.home_team_id, game.away_team_id)
        return self._update_game({
            "halftime_time": self._clock(),
            "halftime_home_score": score.home,
            "halftime_away_score": score.away,
        })

    def start_second_half(self) -> Game:
        """Record the second half start. Only once, and only after halftime."""
        game = self._require_status(GameStatus.IN_PROGRESS, "start the second half")
        if game.halftime_time is None:
            raise GameStateError(f"Halftime has not been called for game {game.id}")
        if game.second_half_start_time is not None:
            raise GameStateError(f"Second half already started for game {game.id}")
        return self._update_game({"second_half_start_time": self._clock()})

    def set_signature(self, team_id: str, signature: Optional[str]) -> Game:
        """Attach (or overwrite, or clear with None) a captain's signature."""
        game = self._require_game()
        side = self._side(game, team_id)
        return self._update_game({f"{side}_team_signature": signature})

    def delete_game(self) -> None:
        """Delete the open game with all its events, then close the session."""
        with self._write_guard():
            game = self._require_game()
            self.store.delete_game(game.id)
            logger.info(f"Deleted game {game.id} ({game.display_name})")
            if self.history:
                self.history.game_deleted(game)
            self.close()

    def _update_game(self, fields: Dict[str, Any]) -> Game:
        with self._write_guard():
            previous = self._require_game()
            updated = self.store.update_game(previous.id, fields)
            self.game = updated
            if self.history:
                self.history.game_updated(previous, updated, fields)
            self._publish()
            return updated

    @staticmethod
    def _side(game: Game, team_id: str) -> str:
        if team_id == game.home_team_id:
            return "home"
        if team_id == game.away_team_id:
            return "away"
        raise InvalidSelectionError(f"Team '{team_id}' is not playing this game", team_id)


def _roster_player(roster: Sequence[RosterPlayer], player_id: Optional[str]) -> Optional[RosterPlayer]:
    """Find a player on a roster snapshot; None means skipped."""
    if player_id is None:
        return None
    for player in roster:
        if player.player_id == player_id:
            return player
    raise InvalidSelectionError(f"Player '{player_id}' is not on the scoring team's roster", player_id)
