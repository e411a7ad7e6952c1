"""Match ending conditions for Grapple.

Checked after every resolved turn, in this order:
1. Submission: a submission resolution ends the match for its winner
2. Points: a side reaching POINTS_TO_WIN wins (player checked first)
3. Time: once the MAX_TURNS turn is resolved, the higher score wins, then
   the higher advantage count, then a coin flip
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from grapple.engine.dice import RandomSource, choose
from grapple.models.state import MatchEndReason, MatchState, Resolution, Side
from grapple.parameters import MAX_TURNS, POINTS_TO_WIN


@dataclass(frozen=True)
class MatchEnding:
    """Result of a match ending.

    Attributes:
        winner: Side that won
        reason: How the match was decided
        description: Human-readable description of the ending
    """

    winner: Side
    reason: MatchEndReason
    description: str


def check_submission(resolution: Resolution) -> Optional[MatchEnding]:
    """End the match if this turn's resolution was a submission."""
    if resolution.submission and resolution.winner is not None:
        technique = resolution.winner_technique
        name = technique.name if technique is not None else "submission"
        return MatchEnding(
            winner=resolution.winner,
            reason=MatchEndReason.SUBMISSION,
            description=f"Submission by {name}!",
        )
    return None


def check_points_victory(state: MatchState) -> Optional[MatchEnding]:
    """End the match if either side reached the points threshold."""
    for side in (Side.PLAYER, Side.AI):
        if state.scores[side] >= POINTS_TO_WIN:
            return MatchEnding(
                winner=side,
                reason=MatchEndReason.POINTS,
                description=f"Points victory! {state.scores[side]} points.",
            )
    return None


def check_time_expiry(state: MatchState, rng: RandomSource) -> Optional[MatchEnding]:
    """Decide the match at the turn cap.

    Higher score wins; on equal scores the higher advantage count wins; if
    both are level the winner is drawn uniformly from the two sides.
    """
    if state.turn_number < MAX_TURNS:
        return None

    player, ai = state.scores.player, state.scores.ai
    if player != ai:
        winner = Side.PLAYER if player > ai else Side.AI
        return MatchEnding(
            winner=winner,
            reason=MatchEndReason.TIME_SCORE,
            description=f"Time! Decision on points, {max(player, ai)}-{min(player, ai)}.",
        )

    player_adv, ai_adv = state.advantages.player, state.advantages.ai
    if player_adv != ai_adv:
        winner = Side.PLAYER if player_adv > ai_adv else Side.AI
        return MatchEnding(
            winner=winner,
            reason=MatchEndReason.TIME_ADVANTAGES,
            description=(
                f"Time! Points level at {player}, decided on advantages "
                f"{max(player_adv, ai_adv)}-{min(player_adv, ai_adv)}."
            ),
        )

    winner = choose(rng, (Side.PLAYER, Side.AI))
    return MatchEnding(
        winner=winner,
        reason=MatchEndReason.TIME_RANDOM,
        description="Time! Points and advantages level, the referee's decision is a coin flip.",
    )


def check_all_endings(
    state: MatchState,
    resolution: Resolution,
    rng: RandomSource,
) -> Optional[MatchEnding]:
    """Check all ending conditions in priority order.

    Args:
        state: Match state after the resolution was applied
        resolution: This turn's resolution
        rng: Shared random source (used only for the final coin flip)

    Returns:
        MatchEnding if the match is over, None otherwise
    """
    ending = check_submission(resolution)
    if ending is not None:
        return ending

    ending = check_points_victory(state)
    if ending is not None:
        return ending

    return check_time_expiry(state, rng)
