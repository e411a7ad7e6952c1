"""Base opponent interface for Grapple.

This module defines the abstract base class for all opponent types, the
option enumeration both built-in opponents share, and the factory
functions.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Literal, Optional

from grapple.engine.dice import RandomSource
from grapple.models.catalog import CatalogIntegrityError, Category, Technique
from grapple.models.state import MatchState, Side
from grapple.models.techniques import (
    can_use_technique,
    get_available_categories,
    get_techniques_for_position_role,
)


class NoLegalCategoriesError(CatalogIntegrityError):
    """A role at a position has no categories to choose from."""


class NoUsableTechniquesError(CatalogIntegrityError):
    """No technique is selectable, even ignoring token requirements."""


@dataclass(frozen=True)
class SelectedAction:
    """A (category, technique) pick for one turn."""

    category: Category
    technique: Technique


def legal_categories(state: MatchState, side: Side) -> list[Category]:
    """Categories legal for a side at the current position.

    Raises:
        NoLegalCategoriesError: If the catalog offers none
    """
    role = state.role_of(side)
    categories = get_available_categories(state.position, role)
    if not categories:
        raise NoLegalCategoriesError(
            f"{side.value} has no available categories at {state.position.value} as {role.value}"
        )
    return categories


def usable_options(state: MatchState, side: Side) -> list[SelectedAction]:
    """Every legal pick whose token requirements the side currently meets."""
    role = state.role_of(side)
    held = state.tokens[side].tokens
    return [
        SelectedAction(category, technique)
        for category in legal_categories(state, side)
        for technique in get_techniques_for_position_role(state.position, role, category)
        if can_use_technique(technique, held)
    ]


def fallback_options(state: MatchState, side: Side) -> list[SelectedAction]:
    """Every legal pick ignoring token requirements.

    Techniques whose token reward the side already holds are left out.
    """
    role = state.role_of(side)
    held = state.tokens[side]
    return [
        SelectedAction(category, technique)
        for category in legal_categories(state, side)
        for technique in get_techniques_for_position_role(state.position, role, category)
        if technique.token_reward is None or technique.token_reward not in held
    ]


class Opponent(ABC):
    """Abstract base class for all opponent types.

    Opponents are stateless between turns; everything they need is read
    from the MatchState. Either side of a match can be driven by an
    Opponent, which is how simulations stand in for the human player.
    """

    def __init__(self, name: str = "Opponent"):
        """Initialize opponent.

        Args:
            name: Display name for the opponent
        """
        self.name = name

    @abstractmethod
    def choose_action(self, state: MatchState, side: Side = Side.AI) -> SelectedAction:
        """Choose a (category, technique) for this turn.

        Args:
            state: Current match state
            side: Side this opponent is playing

        Returns:
            The chosen action

        Raises:
            NoLegalCategoriesError: If the side has no legal categories
            NoUsableTechniquesError: If nothing is selectable at all
        """
        pass


# Type alias for opponent types
OpponentType = Literal[
    # Heuristic AI, one per difficulty
    "easy",
    "medium",
    "hard",
    # Baseline
    "random",
]


def get_opponent_by_type(
    opponent_type: OpponentType | str,
    rng: Optional[RandomSource] = None,
) -> Opponent:
    """Create opponent by type name.

    Args:
        opponent_type: Type of opponent to create
        rng: Random source the opponent draws from (default: unseeded)

    Returns:
        Opponent instance

    Raises:
        ValueError: If opponent type is unknown
    """
    # Import here to avoid circular imports
    from grapple.opponents.heuristic import HeuristicOpponent
    from grapple.opponents.simple import RandomOpponent

    type_name = opponent_type.lower().replace("-", "_").replace(" ", "_")

    if type_name in ("easy", "medium", "hard"):
        return HeuristicOpponent(difficulty=type_name, rng=rng)
    if type_name == "random":
        return RandomOpponent(rng=rng)

    raise ValueError(
        f"Unknown opponent type: {opponent_type}. "
        f"Valid types: {[t for types in list_opponent_types().values() for t in types]}"
    )


def list_opponent_types() -> dict[str, list[str]]:
    """List all available opponent types by category.

    Returns:
        Dictionary with categories as keys and list of types as values
    """
    return {
        "heuristic": ["easy", "medium", "hard"],
        "baseline": ["random"],
    }
