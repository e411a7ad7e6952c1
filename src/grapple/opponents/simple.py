"""Baseline opponents for Grapple simulations."""

from __future__ import annotations

import random
from typing import Optional

from grapple.engine.dice import RandomSource, choose
from grapple.models.state import MatchState, Side
from grapple.opponents.base import (
    NoUsableTechniquesError,
    Opponent,
    SelectedAction,
    fallback_options,
    usable_options,
)


class RandomOpponent(Opponent):
    """Picks uniformly among usable options.

    Uses the same token-ignoring fallback as the heuristic AI when nothing
    is usable. Serves as a stand-in for an unskilled human in batch runs.
    """

    def __init__(self, rng: Optional[RandomSource] = None):
        super().__init__(name="Random")
        self._random: RandomSource = rng if rng is not None else random.Random()

    def choose_action(self, state: MatchState, side: Side = Side.AI) -> SelectedAction:
        options = usable_options(state, side) or fallback_options(state, side)
        if not options:
            raise NoUsableTechniquesError(
                f"{side.value} has no available techniques at {state.position.value}"
            )
        return choose(self._random, options)
