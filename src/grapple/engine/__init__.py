"""Match engine for Grapple.

This module contains the core match logic:
- dice: Injectable random source and the d6 roll
- tokens: Bounded token operations
- resolution: Turn scoring, outcome tiers and effect application
- endings: Submission, points and time-cap checks
- match_controller: The turn state machine

Usage:
    from grapple.engine import ScriptedRandom, create_match

    match = create_match(difficulty="medium", rng=ScriptedRandom(ints=[0]))
    match.start_match()
    match.start_turn()

    category = match.get_player_categories()[0]
    technique = match.get_player_techniques(category)[0]
    ...
    resolution = match.resolve_and_advance()
    for line in resolution.narratives:
        print(line)

    if match.is_match_over():
        print(match.get_ending().description)
"""

from grapple.engine.dice import RandomSource, ScriptedRandom, choose, roll_d6
from grapple.engine.endings import (
    MatchEnding,
    check_all_endings,
    check_points_victory,
    check_submission,
    check_time_expiry,
)
from grapple.engine.match_controller import (
    MatchController,
    TurnRecord,
    create_match,
    create_match_state,
)
from grapple.engine.resolution import calculate_score, classify_tier, resolve_turn
from grapple.engine.tokens import TokenManager

__all__ = [
    # Match controller
    "MatchController",
    "TurnRecord",
    "create_match",
    "create_match_state",
    # Resolution
    "calculate_score",
    "classify_tier",
    "resolve_turn",
    # Endings
    "MatchEnding",
    "check_all_endings",
    "check_points_victory",
    "check_submission",
    "check_time_expiry",
    # Tokens
    "TokenManager",
    # Randomness
    "RandomSource",
    "ScriptedRandom",
    "choose",
    "roll_d6",
]
