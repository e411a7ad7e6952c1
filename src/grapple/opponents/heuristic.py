"""Heuristic AI opponent for Grapple.

Every usable (category, technique) pair is scored with an additive
heuristic read from the acting side's perspective, then one is drawn with
a difficulty-tuned bias towards the best-scoring band:

    score = technique modifier
          + submission bonus (+3, +4 more when usable)
          + 1.5 x scoring points of a transition
          + 2 x opponent control for an escape while on bottom
          + 3 for a token reward while holding fewer than 2 tokens
          + 2 for a token strip while the opponent holds any
          - 1 if risky
          + control category: 2 x opponent control (strip) or 2 (build)
          + defense category: 2 while opponent control >= 2
          + reversal category: opponent control
    floored at 0

Selection: with probability OPTIMAL_WEIGHTS[difficulty] pick uniformly from
options scoring within TOP_TIER_BAND of the best, otherwise uniformly from
the rest (or the top band when nothing else is left).
"""

from __future__ import annotations

import logging
import random
from typing import Optional

from grapple.engine.dice import RandomSource, choose
from grapple.models.catalog import Category, Role, Technique
from grapple.models.state import Difficulty, MatchState, Side
from grapple.models.techniques import can_use_technique
from grapple.opponents.base import (
    NoUsableTechniquesError,
    Opponent,
    SelectedAction,
    fallback_options,
    usable_options,
)
from grapple.parameters import (
    CONTROL_BUILD_BONUS,
    CONTROL_STRIP_PER_POINT,
    DEFENSE_UNDER_PRESSURE_BONUS,
    ESCAPE_PER_OPPONENT_CONTROL,
    FALLBACK_OPTION_WEIGHT,
    MAX_CONTROL,
    MAX_TOKENS,
    OPTIMAL_WEIGHTS,
    RISKY_PENALTY,
    SCORING_TRANSITION_MULTIPLIER,
    SUBMISSION_BASE_BONUS,
    SUBMISSION_USABLE_BONUS,
    SWEEP_PER_OPPONENT_CONTROL,
    TOKEN_EARN_BONUS,
    TOKEN_STRIP_BONUS,
    TOP_TIER_BAND,
)

logger = logging.getLogger(__name__)


def score_option(
    state: MatchState,
    side: Side,
    category: Category,
    technique: Technique,
) -> float:
    """Score one (category, technique) pair for a side. Never negative."""
    opponent = side.opponent
    my_tokens = state.tokens[side]
    opponent_tokens = state.tokens[opponent]
    my_control = state.control[side]
    opponent_control = state.control[opponent]

    score = float(technique.modifier)

    if technique.is_submission:
        score += SUBMISSION_BASE_BONUS
        if can_use_technique(technique, my_tokens.tokens):
            score += SUBMISSION_USABLE_BONUS

    transition = technique.transition
    if transition is not None:
        if technique.scoring_points > 0:
            score += technique.scoring_points * SCORING_TRANSITION_MULTIPLIER
        # Escape: does not put us on top while we are on bottom
        if not transition.user_becomes_top and state.role_of(side) == Role.BOTTOM:
            score += ESCAPE_PER_OPPONENT_CONTROL * opponent_control

    if technique.token_reward is not None and len(my_tokens) < MAX_TOKENS:
        score += TOKEN_EARN_BONUS

    if technique.token_remove is not None and len(opponent_tokens) >= 1:
        score += TOKEN_STRIP_BONUS

    if technique.is_risky:
        score -= RISKY_PENALTY

    if category == Category.CONTROL:
        if opponent_control > 0:
            score += CONTROL_STRIP_PER_POINT * opponent_control
        elif my_control < MAX_CONTROL:
            score += CONTROL_BUILD_BONUS
    elif category == Category.DEFENSE:
        if opponent_control >= 2:
            score += DEFENSE_UNDER_PRESSURE_BONUS
    elif category == Category.REVERSAL:
        score += SWEEP_PER_OPPONENT_CONTROL * opponent_control

    return max(score, 0.0)


class HeuristicOpponent(Opponent):
    """Difficulty-tuned weighted-random AI.

    Attributes:
        difficulty: Difficulty setting, fixing the optimal-pick weight
        optimal_weight: Probability of picking from the top band
    """

    def __init__(
        self,
        difficulty: Difficulty | str = Difficulty.MEDIUM,
        rng: Optional[RandomSource] = None,
    ):
        """Initialize the heuristic opponent.

        Args:
            difficulty: easy, medium or hard
            rng: Random source for the pick (default: unseeded random.Random)
        """
        self.difficulty = Difficulty(difficulty)
        super().__init__(name=f"Heuristic ({self.difficulty.value})")
        self.optimal_weight = OPTIMAL_WEIGHTS[self.difficulty.value]
        self._random: RandomSource = rng if rng is not None else random.Random()

    def score_options(
        self, state: MatchState, side: Side = Side.AI
    ) -> list[tuple[SelectedAction, float]]:
        """Score every selectable option, best first.

        Usable options are scored with the heuristic. When none is usable,
        every legal option not rewarding an already-held token gets a flat
        weight instead.

        Raises:
            NoLegalCategoriesError: If the side has no legal categories
            NoUsableTechniquesError: If even the fallback set is empty
        """
        options = usable_options(state, side)
        if options:
            scored = [
                (option, score_option(state, side, option.category, option.technique))
                for option in options
            ]
        else:
            logger.debug(f"{side.value} has no usable technique, ignoring token requirements")
            scored = [(option, FALLBACK_OPTION_WEIGHT) for option in fallback_options(state, side)]

        if not scored:
            raise NoUsableTechniquesError(
                f"{side.value} has no available techniques at {state.position.value}"
            )

        # Stable sort keeps catalog order among equal scores
        return sorted(scored, key=lambda pair: pair[1], reverse=True)

    def choose_action(self, state: MatchState, side: Side = Side.AI) -> SelectedAction:
        scored = self.score_options(state, side)

        best = scored[0][1]
        top_tier = [option for option, score in scored if score >= best - TOP_TIER_BAND]
        rest = [option for option, score in scored if score < best - TOP_TIER_BAND]

        if self._random.random() < self.optimal_weight:
            chosen = choose(self._random, top_tier)
        elif rest:
            chosen = choose(self._random, rest)
        else:
            chosen = choose(self._random, top_tier)

        logger.debug(
            f"{self.name} picks {chosen.category.value}/{chosen.technique.id} "
            f"from {len(top_tier)} top and {len(rest)} other options"
        )
        return chosen


def ai_select_action(state: MatchState, rng: RandomSource) -> SelectedAction:
    """Select the AI side's action at the match's configured difficulty."""
    return HeuristicOpponent(state.ai_difficulty, rng).choose_action(state, Side.AI)
