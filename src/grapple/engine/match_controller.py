"""Match state machine for Grapple.

The MatchController owns one MatchState and the shared random source and
sequences every turn:

    MATCH_START --start_match--> TURN_START --start_turn--> ACTION_SELECTION
    --lock_actions--> ACTION_LOCKED --resolve_and_advance--> RESOLUTION
    --> TURN_END | MATCH_END
    TURN_END --next_turn--> TURN_START

MATCH_END is terminal. Calling an operation out of sequence is a caller
contract violation: the controller logs a warning and carries on, it does
not re-validate selections.

Usage:
    from grapple.engine import create_match
    from grapple.opponents import HeuristicOpponent

    match = create_match(difficulty="hard", random_seed=7)
    ai = HeuristicOpponent(match.state.ai_difficulty, match.rng)

    match.start_match()
    while not match.is_match_over():
        match.start_turn()
        category = match.get_player_categories()[0]
        technique = match.get_player_techniques(category)[0]
        ai_action = ai.choose_action(match.state)
        match.lock_actions(category, technique, ai_action.category, ai_action.technique)
        resolution = match.resolve_and_advance()
        if not match.is_match_over():
            match.next_turn()
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Optional

from grapple.engine.dice import RandomSource, choose
from grapple.engine.endings import MatchEnding, check_all_endings
from grapple.engine.resolution import resolve_turn
from grapple.models.catalog import Category, PositionId, Role, Technique
from grapple.models.techniques import (
    can_use_technique,
    get_available_categories,
    get_techniques_for_position_role,
)
from grapple.models.state import (
    ControlCounter,
    Difficulty,
    MatchPhase,
    MatchState,
    Resolution,
    Side,
    SideCounter,
    SideTokens,
)
from grapple.parameters import INITIAL_POSITION

logger = logging.getLogger(__name__)


@dataclass
class TurnRecord:
    """Record of a single resolved turn.

    Kept in memory for display and analysis only.

    Attributes:
        turn: Turn number (1-indexed)
        position: Position the turn was fought from
        player_is_top: Player's role during the turn
        player_category: Player's locked category
        player_technique: Player's locked technique
        ai_category: AI's locked category
        ai_technique: AI's locked technique
        resolution: Resolution produced by the turn
    """

    turn: int
    position: PositionId
    player_is_top: bool
    player_category: Category
    player_technique: Technique
    ai_category: Category
    ai_technique: Technique
    resolution: Resolution


def create_match_state(difficulty: Difficulty | str = Difficulty.MEDIUM) -> MatchState:
    """Create a fresh match state in the MATCH_START phase."""
    return MatchState(ai_difficulty=Difficulty(difficulty))


class MatchController:
    """Turn sequencing for a single match.

    Attributes:
        state: The match state this controller owns
        history: Resolved turns, oldest first
        ending: MatchEnding once the match is over, None before
    """

    def __init__(
        self,
        state: Optional[MatchState] = None,
        rng: Optional[RandomSource] = None,
        random_seed: Optional[int] = None,
    ) -> None:
        """Initialize the controller.

        Args:
            state: Existing state to drive (default: a fresh medium-difficulty state)
            rng: Random source shared by every draw in the match
            random_seed: Seed for a new random.Random when rng is not given
        """
        self._random: RandomSource = rng if rng is not None else random.Random(random_seed)
        self.state = state if state is not None else create_match_state()
        self.history: list[TurnRecord] = []
        self.ending: Optional[MatchEnding] = None

    @property
    def rng(self) -> RandomSource:
        """The shared random source."""
        return self._random

    def _expect_phase(self, operation: str, *phases: MatchPhase) -> None:
        if self.state.phase not in phases:
            logger.warning(
                f"{operation} called in phase {self.state.phase.value}, "
                f"expected {', '.join(p.value for p in phases)}"
            )

    # =========================================================================
    # State machine transitions
    # =========================================================================

    def start_match(self) -> None:
        """Reset every counter and begin turn 1 from the initial position.

        The initial top/bottom assignment is drawn at random.
        """
        state = self.state
        state.turn_number = 1
        state.position = PositionId(INITIAL_POSITION)
        state.player_is_top = choose(self._random, (True, False))
        state.scores = SideCounter()
        state.advantages = SideCounter()
        state.tokens = SideTokens()
        state.control = ControlCounter()
        state.player_category = None
        state.player_technique = None
        state.ai_category = None
        state.ai_technique = None
        state.last_resolution = None
        state.match_winner = None
        state.match_end_reason = None
        state.match_end_description = ""
        state.phase = MatchPhase.TURN_START

        self.history = []
        self.ending = None
        logger.info(
            f"Match started: difficulty={state.ai_difficulty.value}, "
            f"player {'top' if state.player_is_top else 'bottom'}"
        )

    def start_turn(self) -> None:
        """Clear both pending selections and open action selection."""
        self._expect_phase("start_turn", MatchPhase.TURN_START)
        state = self.state
        state.player_category = None
        state.player_technique = None
        state.ai_category = None
        state.ai_technique = None
        state.phase = MatchPhase.ACTION_SELECTION
        logger.debug(f"Turn {state.turn_number}: selection open at {state.position.value}")

    def lock_actions(
        self,
        player_category: Category,
        player_technique: Technique,
        ai_category: Category,
        ai_technique: Technique,
    ) -> None:
        """Store both selections verbatim.

        Selections are trusted to be legal for the current state; no
        re-validation happens here.
        """
        self._expect_phase("lock_actions", MatchPhase.ACTION_SELECTION)
        state = self.state
        state.player_category = Category(player_category)
        state.player_technique = player_technique
        state.ai_category = Category(ai_category)
        state.ai_technique = ai_technique
        state.phase = MatchPhase.ACTION_LOCKED
        logger.debug(
            f"Turn {state.turn_number}: locked player={player_technique.id} ai={ai_technique.id}"
        )

    def resolve_and_advance(self) -> Resolution:
        """Resolve the locked turn, then end the match or close the turn.

        Returns:
            The turn's Resolution (also stored as state.last_resolution)
        """
        self._expect_phase("resolve_and_advance", MatchPhase.ACTION_LOCKED)
        state = self.state
        state.phase = MatchPhase.RESOLUTION

        position = state.position
        player_is_top = state.player_is_top
        resolution = resolve_turn(state, self._random)
        state.last_resolution = resolution

        self.history.append(
            TurnRecord(
                turn=state.turn_number,
                position=position,
                player_is_top=player_is_top,
                player_category=state.player_category,
                player_technique=state.player_technique,
                ai_category=state.ai_category,
                ai_technique=state.ai_technique,
                resolution=resolution,
            )
        )

        ending = check_all_endings(state, resolution, self._random)
        if ending is not None:
            self.ending = ending
            state.match_winner = ending.winner
            state.match_end_reason = ending.reason
            state.match_end_description = ending.description
            state.phase = MatchPhase.MATCH_END
            logger.info(
                f"Match over on turn {state.turn_number}: {ending.winner.value} wins "
                f"({ending.reason.value}), score {state.scores.player}-{state.scores.ai}"
            )
        else:
            state.phase = MatchPhase.TURN_END

        return resolution

    def next_turn(self) -> None:
        """Advance the turn counter and loop back to TURN_START."""
        self._expect_phase("next_turn", MatchPhase.TURN_END)
        self.state.turn_number += 1
        self.state.phase = MatchPhase.TURN_START
        logger.debug(f"Turn {self.state.turn_number} begins")

    # =========================================================================
    # Queries (no state mutation)
    # =========================================================================

    def is_match_over(self) -> bool:
        return self.state.phase == MatchPhase.MATCH_END

    def get_ending(self) -> Optional[MatchEnding]:
        return self.ending

    def get_history(self) -> list[TurnRecord]:
        """Resolved turns so far, oldest first."""
        return list(self.history)

    def get_role(self, side: Side) -> Role:
        return self.state.role_of(side)

    def get_player_role(self) -> Role:
        return self.state.role_of(Side.PLAYER)

    def get_ai_role(self) -> Role:
        return self.state.role_of(Side.AI)

    def get_categories(self, side: Side) -> list[Category]:
        """Categories legal for a side at the current position."""
        return get_available_categories(self.state.position, self.get_role(side))

    def get_techniques(self, side: Side, category: Category) -> list[Technique]:
        """Techniques offered to a side in a category at the current position."""
        return get_techniques_for_position_role(self.state.position, self.get_role(side), category)

    def get_player_categories(self) -> list[Category]:
        return self.get_categories(Side.PLAYER)

    def get_player_techniques(self, category: Category) -> list[Technique]:
        return self.get_techniques(Side.PLAYER, category)

    def can_use_technique(self, side: Side, technique: Technique) -> bool:
        """Whether a side's held tokens satisfy the technique's requirements."""
        return can_use_technique(technique, self.state.tokens[side].tokens)

    def player_can_use_technique(self, technique: Technique) -> bool:
        return self.can_use_technique(Side.PLAYER, technique)

    def get_usable_options(self, side: Side) -> list[tuple[Category, Technique]]:
        """Every (category, technique) a side may pick right now."""
        return [
            (category, technique)
            for category in self.get_categories(side)
            for technique in self.get_techniques(side, category)
            if self.can_use_technique(side, technique)
        ]


def create_match(
    difficulty: Difficulty | str = Difficulty.MEDIUM,
    random_seed: Optional[int] = None,
    rng: Optional[RandomSource] = None,
) -> MatchController:
    """Create a controller around a fresh match state.

    Args:
        difficulty: AI difficulty for the match
        random_seed: Seed for reproducibility
        rng: Explicit random source (overrides random_seed)

    Returns:
        MatchController in the MATCH_START phase
    """
    return MatchController(
        state=create_match_state(difficulty),
        rng=rng,
        random_seed=random_seed,
    )
