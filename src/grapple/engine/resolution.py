"""Turn resolution for Grapple.

Both sides' locked selections are scored, the margin is classified into an
outcome tier, and the tier's effects are applied to the match state:

1. Score both sides: control + matchup + technique + tokens + d6
2. Margin 0 is a stalemate: nothing changes
3. Submission: a submission technique winning at Dominant ends the match
4. Control shift: a winning control technique strips one of the loser's
   control points, or else builds one for the winner
5. Token economy (Major/Dominant only): technique reward, bonus token on a
   Dominant win without reward, technique strip, oldest-token loss on a
   Dominant loss
6. Transition and scoring: winning transitions always move the position;
   points on Major/Dominant, an advantage on Minor. A Major/Dominant win
   without a transition earns an advantage

Every mutation is mirrored in the returned Resolution.
"""

from __future__ import annotations

import logging
from typing import Optional

from grapple.engine.dice import RandomSource, choose, roll_d6
from grapple.engine.tokens import TokenManager
from grapple.models.catalog import Category, TokenType
from grapple.models.positions import get_matchup_modifier, get_position, get_token_info
from grapple.models.state import (
    ControlShift,
    MatchState,
    OutcomeTier,
    PositionChange,
    Resolution,
    ScoreBreakdown,
    Side,
    TokenChange,
)
from grapple.parameters import BONUS_TOKEN_POOL, DOMINANT_MARGIN, MAJOR_MARGIN, MAX_CONTROL

logger = logging.getLogger(__name__)

STALEMATE_NARRATIVE = "Stalemate! Neither fighter can break through."
MINOR_NARRATIVE = "A tense exchange. Neither fighter gains much ground."


def _phrase(side: Side, player_text: str, ai_text: str) -> str:
    return player_text if side == Side.PLAYER else ai_text


def calculate_score(state: MatchState, side: Side, rng: RandomSource) -> ScoreBreakdown:
    """Compute one side's turn total from its locked selection.

    Total = control points + matchup modifier + technique modifier
            + tokens held + d6

    Args:
        state: Match state with both selections locked
        side: Side to score
        rng: Random source for the die

    Returns:
        ScoreBreakdown carrying each term and the total
    """
    category = state.category_of(side)
    opponent_category = state.category_of(side.opponent)
    technique = state.technique_of(side)

    return ScoreBreakdown(
        control=state.control[side],
        matchup=get_matchup_modifier(category, opponent_category),
        technique=technique.modifier,
        tokens=len(state.tokens[side]),
        die=roll_d6(rng),
    )


def classify_tier(margin: int) -> OutcomeTier:
    """Classify a margin: 0-1 Minor, 2-3 Major, 4+ Dominant.

    Raises:
        ValueError: If margin is negative
    """
    if margin < 0:
        raise ValueError(f"Margin must be non-negative, got {margin}")
    if margin >= DOMINANT_MARGIN:
        return OutcomeTier.DOMINANT
    if margin >= MAJOR_MARGIN:
        return OutcomeTier.MAJOR
    return OutcomeTier.MINOR


def _shift_control(state: MatchState, winner: Side, loser: Side) -> Optional[ControlShift]:
    """Move at most one control point in the winner's favour.

    Stripping the loser takes priority over building the winner.
    """
    if state.control[loser] >= 1:
        state.control[loser] -= 1
        return ControlShift(side=loser, delta=-1, new_value=state.control[loser])
    if state.control[winner] < MAX_CONTROL:
        state.control[winner] += 1
        return ControlShift(side=winner, delta=1, new_value=state.control[winner])
    return None


def _token_narrative(change: TokenChange, gained: bool) -> str:
    name = get_token_info(change.token).name
    if gained:
        return _phrase(change.side, f"You gain {name}!", f"Opponent gains {name}!")
    return _phrase(change.side, f"You lose {name}!", f"Opponent loses {name}!")


def resolve_turn(state: MatchState, rng: RandomSource) -> Resolution:
    """Resolve the locked selections and apply the outcome to the state.

    Args:
        state: Match state with both selections locked
        rng: Shared random source (dice and bonus token draw)

    Returns:
        Resolution describing every effect applied
    """
    player_score = calculate_score(state, Side.PLAYER, rng)
    ai_score = calculate_score(state, Side.AI, rng)
    margin = abs(player_score.total - ai_score.total)
    tier = classify_tier(margin)

    if margin == 0:
        logger.debug(
            f"Turn {state.turn_number}: draw at {player_score.total}-{ai_score.total}"
        )
        return Resolution(
            player_score=player_score,
            ai_score=ai_score,
            margin=0,
            tier=tier,
            narratives=(STALEMATE_NARRATIVE,),
        )

    winner = Side.PLAYER if player_score.total > ai_score.total else Side.AI
    loser = winner.opponent
    technique = state.technique_of(winner)
    category = state.category_of(winner)
    tokens = TokenManager(state)

    narratives: list[str] = []
    gained: list[TokenChange] = []
    lost: list[TokenChange] = []
    points = 0
    advantages = 0
    control_shift: Optional[ControlShift] = None
    position_change: Optional[PositionChange] = None

    # Submission finishes the match; nothing else applies
    if technique.is_submission and tier == OutcomeTier.DOMINANT:
        logger.debug(f"Turn {state.turn_number}: {winner.value} submits with {technique.id}")
        return Resolution(
            player_score=player_score,
            ai_score=ai_score,
            margin=margin,
            tier=tier,
            winner=winner,
            loser=loser,
            winner_technique=technique,
            submission=True,
            narratives=(f"{technique.name} locked in! Submission!",),
        )

    if category == Category.CONTROL:
        control_shift = _shift_control(state, winner, loser)
        if control_shift is not None:
            if control_shift.delta < 0:
                narratives.append(
                    _phrase(winner, "You strip a control point!", "Opponent strips a control point!")
                )
            else:
                narratives.append(
                    _phrase(winner, "You build a control point!", "Opponent builds a control point!")
                )

    if tier != OutcomeTier.MINOR:
        reward = technique.token_reward
        if reward is not None and tokens.add(winner, reward):
            gained.append(TokenChange(side=winner, token=reward, reason="reward"))

        if tier == OutcomeTier.DOMINANT and reward is None:
            held = state.tokens[winner]
            candidates = [TokenType(t) for t in BONUS_TOKEN_POOL if TokenType(t) not in held]
            if candidates and tokens.has_room(winner):
                bonus = choose(rng, candidates)
                tokens.add(winner, bonus)
                gained.append(TokenChange(side=winner, token=bonus, reason="bonus"))

        strip = technique.token_remove
        if strip is not None and tokens.remove(loser, strip):
            lost.append(TokenChange(side=loser, token=strip, reason="stripped"))

        if tier == OutcomeTier.DOMINANT:
            oldest = tokens.remove_oldest(loser)
            if oldest is not None:
                lost.append(TokenChange(side=loser, token=oldest, reason="dominant_loss"))

    narratives.extend(_token_narrative(change, gained=True) for change in gained)
    narratives.extend(_token_narrative(change, gained=False) for change in lost)

    transition = technique.transition
    if transition is not None:
        from_position = state.position
        if winner == Side.PLAYER:
            state.player_is_top = transition.user_becomes_top
        else:
            state.player_is_top = not transition.user_becomes_top
        state.position = transition.position

        cleared = tokens.auto_clear(transition.position)
        lost.extend(cleared)
        position_change = PositionChange(
            from_position=from_position,
            to_position=transition.position,
            player_is_top=state.player_is_top,
        )
        narratives.append(f"Transition to {get_position(transition.position).name}!")
        narratives.extend(_token_narrative(change, gained=False) for change in cleared)

        if technique.scoring_points > 0:
            if tier == OutcomeTier.MINOR:
                advantages = 1
            else:
                points = technique.scoring_points
    elif tier != OutcomeTier.MINOR:
        advantages = 1
    else:
        narratives.append(MINOR_NARRATIVE)

    if points:
        state.scores[winner] += points
        narratives.append(
            _phrase(
                winner,
                f"You score {points} point{'s' if points > 1 else ''}!",
                f"Opponent scores {points} point{'s' if points > 1 else ''}!",
            )
        )
    if advantages:
        state.advantages[winner] += advantages
        narratives.append(_phrase(winner, "Advantage to you!", "Advantage to opponent!"))

    logger.debug(
        f"Turn {state.turn_number}: {player_score.total}-{ai_score.total} "
        f"margin={margin} tier={tier.value} winner={winner.value} technique={technique.id}"
    )

    return Resolution(
        player_score=player_score,
        ai_score=ai_score,
        margin=margin,
        tier=tier,
        winner=winner,
        loser=loser,
        winner_technique=technique,
        points_awarded=points,
        advantages_awarded=advantages,
        tokens_gained=tuple(gained),
        tokens_lost=tuple(lost),
        position_change=position_change,
        control_shift=control_shift,
        narratives=tuple(narratives),
    )
