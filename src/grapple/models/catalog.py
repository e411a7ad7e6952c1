"""Catalog record types for Grapple.

This module defines the closed vocabulary of the match: positions, roles,
action categories, token types, and the technique record that ties them
together. The concrete tables live in grapple.models.positions and
grapple.models.techniques and are resolved once at import time.

Any lookup of a key that is not in the tables raises CatalogIntegrityError,
the single data-integrity fault of the engine.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CatalogIntegrityError(ValueError):
    """The static catalog is missing an entry the engine needs.

    This is never a recoverable runtime condition: it signals a gap in the
    position/technique tables and is propagated to the caller as-is.
    """


class Role(str, Enum):
    """Which side of a position a fighter occupies.

    Inherits from str for proper JSON serialization.
    """

    TOP = "top"
    BOTTOM = "bottom"

    @property
    def inverse(self) -> Role:
        """The role of the other fighter."""
        return Role.BOTTOM if self is Role.TOP else Role.TOP


class Initiative(str, Enum):
    """Which role inherently holds the initiative in a position."""

    TOP = "top"
    BOTTOM = "bottom"
    NEUTRAL = "neutral"


class Category(str, Enum):
    """Tactical class of an action.

    Determines which techniques are offered and feeds the matchup lookup.
    """

    ATTACK = "attack"
    CONTROL = "control"
    DEFENSE = "defense"
    REVERSAL = "reversal"


CATEGORY_ORDER: tuple[Category, ...] = (
    Category.ATTACK,
    Category.CONTROL,
    Category.DEFENSE,
    Category.REVERSAL,
)


class Risk(str, Enum):
    """Risk rating of a technique."""

    SAFE = "safe"
    NEUTRAL = "neutral"
    RISKY = "risky"


class TokenType(str, Enum):
    """Positional advantage markers a fighter can hold."""

    POSTURE_BROKEN = "posture_broken"
    INSIDE_POSITION = "inside_position"
    ARM_ISOLATED = "arm_isolated"
    BALANCE_COMPROMISED = "balance_compromised"
    LEG_ISOLATED = "leg_isolated"
    BACK_EXPOSED = "back_exposed"


class PositionId(str, Enum):
    """Named grappling configurations."""

    STANDING_NEUTRAL = "standing_neutral"
    CLOSED_GUARD = "closed_guard"
    OPEN_GUARD = "open_guard"
    HALF_GUARD = "half_guard"
    KNEE_SHIELD = "knee_shield"
    SIDE_CONTROL = "side_control"
    MOUNT = "mount"
    BACK_CONTROL = "back_control"
    TURTLE = "turtle"
    FRONT_HEADLOCK = "front_headlock"


class TokenInfo(BaseModel):
    """Display metadata for a token type."""

    model_config = ConfigDict(frozen=True)

    name: str
    icon: str
    description: str = ""


class CategoryInfo(BaseModel):
    """Display metadata for an action category."""

    model_config = ConfigDict(frozen=True)

    name: str
    icon: str
    hint: str


class Position(BaseModel):
    """A position in the match graph.

    Attributes:
        id: Position identifier
        name: Display name
        control: Static control value of the position (0-3), for display
        initiative: Which role inherently holds the initiative
        auto_clear_tokens: Tokens removed from both sides on entering
    """

    model_config = ConfigDict(frozen=True)

    id: PositionId
    name: str
    control: int = Field(default=0, ge=0, le=3)
    initiative: Initiative
    auto_clear_tokens: tuple[TokenType, ...] = ()


class Transition(BaseModel):
    """A technique's move to a new position.

    Attributes:
        position: Destination position
        user_becomes_top: Whether the fighter who lands the technique ends
            up on top
    """

    model_config = ConfigDict(frozen=True)

    position: PositionId
    user_becomes_top: bool


class Technique(BaseModel):
    """A specific move within a category.

    Attributes:
        id: Technique identifier (unique per position/role/category)
        name: Display name
        category: Category the technique belongs to
        modifier: Flat bonus added to the user's turn total
        is_submission: Whether a Dominant win with it ends the match
        transition: Position change applied when the technique wins
        scoring_points: Points awarded for a Major/Dominant win with a transition
        token_reward: Token the winner gains on a Major/Dominant win
        token_remove: Token stripped from the loser on a Major/Dominant win
        risk: Risk rating
        required_tokens: Tokens the user must hold (all of them) to use it
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    category: Category
    modifier: int = Field(default=0, ge=0)
    is_submission: bool = False
    transition: Optional[Transition] = None
    scoring_points: int = Field(default=0, ge=0)
    token_reward: Optional[TokenType] = None
    token_remove: Optional[TokenType] = None
    risk: Risk = Risk.NEUTRAL
    required_tokens: tuple[TokenType, ...] = ()

    @property
    def is_risky(self) -> bool:
        return self.risk == Risk.RISKY

    def describe(self) -> str:
        """Short one-line summary of what the technique does."""
        parts = []
        if self.is_submission:
            parts.append("Submission attempt")
        if self.transition is not None:
            parts.append(f"-> {self.transition.position.value}")
        if self.scoring_points:
            parts.append(f"{self.scoring_points} pts")
        if self.token_reward is not None:
            parts.append(f"Earns: {self.token_reward.value}")
        if self.token_remove is not None:
            parts.append(f"Removes opp: {self.token_remove.value}")
        if self.is_risky:
            parts.append("Risky")
        if not parts:
            parts.append("Maintain position")
        return " | ".join(parts)
