# Area: Scoring
"""
ulti_stats._scoring.enums — Interaction State Machine Enums
===========================================================

Defines the steps and actions of the three-step point entry flow.
"""

from enum import Enum


class InteractionStep(Enum):
    """
    Steps of the scoring interaction machine.

    Step transitions:
    AWAITING_TEAM -> AWAITING_ASSISTER (on SELECT_TEAM)
    AWAITING_ASSISTER -> AWAITING_SCORER (on SELECT_ASSISTER, player or skip)
    AWAITING_ASSISTER -> AWAITING_TEAM (on BACK, team discarded)
    AWAITING_SCORER -> AWAITING_TEAM (on SELECT_SCORER, candidate emitted)
    AWAITING_SCORER -> AWAITING_ASSISTER (on BACK, assister discarded)
    """
    AWAITING_TEAM = "AWAITING_TEAM"
    AWAITING_ASSISTER = "AWAITING_ASSISTER"
    AWAITING_SCORER = "AWAITING_SCORER"


class InteractionAction(Enum):
    """Operator gestures fed into the interaction machine."""
    SELECT_TEAM = "SELECT_TEAM"
    SELECT_ASSISTER = "SELECT_ASSISTER"
    SELECT_SCORER = "SELECT_SCORER"
    BACK = "BACK"
