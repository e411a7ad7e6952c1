"""Position graph, token registry, and matchup table.

Read-only tables consumed by the engine and the AI. Lookups raise
CatalogIntegrityError for unknown keys.
"""

from __future__ import annotations

from grapple.models.catalog import (
    Category,
    CategoryInfo,
    CatalogIntegrityError,
    Initiative,
    Position,
    PositionId,
    TokenInfo,
    TokenType,
)

# =============================================================================
# Token Types
# =============================================================================

TOKEN_TYPES: dict[TokenType, TokenInfo] = {
    TokenType.POSTURE_BROKEN: TokenInfo(
        name="Posture Broken",
        icon="🙇",
        description="Opponent's posture is broken down.",
    ),
    TokenType.INSIDE_POSITION: TokenInfo(
        name="Inside Position",
        icon="🎯",
        description="Underhooks or inside grips established.",
    ),
    TokenType.ARM_ISOLATED: TokenInfo(
        name="Arm Isolated",
        icon="💪",
        description="An arm is separated from the opponent's body.",
    ),
    TokenType.BALANCE_COMPROMISED: TokenInfo(
        name="Balance Compromised",
        icon="🌀",
        description="Opponent's base is off.",
    ),
    TokenType.LEG_ISOLATED: TokenInfo(
        name="Leg Isolated",
        icon="🦵",
        description="A leg is trapped and controlled.",
    ),
    TokenType.BACK_EXPOSED: TokenInfo(
        name="Back Exposed",
        icon="🔙",
        description="Seatbelt secured, neck open.",
    ),
}


# =============================================================================
# Categories
# =============================================================================

CATEGORIES: dict[Category, CategoryInfo] = {
    Category.ATTACK: CategoryInfo(name="Attack", icon="⚔️", hint="Pass, take down, submit"),
    Category.CONTROL: CategoryInfo(name="Control", icon="✋", hint="Pin, grip, build pressure"),
    Category.DEFENSE: CategoryInfo(name="Defense", icon="🛡️", hint="Frame, recover, survive"),
    Category.REVERSAL: CategoryInfo(name="Reversal", icon="🔄", hint="Sweep, escape, turn it around"),
}

# Antisymmetric: MATCHUP_MODIFIERS[a][b] == -MATCHUP_MODIFIERS[b][a]
MATCHUP_MODIFIERS: dict[Category, dict[Category, int]] = {
    Category.ATTACK: {
        Category.ATTACK: 0,
        Category.CONTROL: 1,
        Category.DEFENSE: -1,
        Category.REVERSAL: -1,
    },
    Category.CONTROL: {
        Category.ATTACK: -1,
        Category.CONTROL: 0,
        Category.DEFENSE: 1,
        Category.REVERSAL: 1,
    },
    Category.DEFENSE: {
        Category.ATTACK: 1,
        Category.CONTROL: -1,
        Category.DEFENSE: 0,
        Category.REVERSAL: 0,
    },
    Category.REVERSAL: {
        Category.ATTACK: 1,
        Category.CONTROL: -1,
        Category.DEFENSE: 0,
        Category.REVERSAL: 0,
    },
}


# =============================================================================
# Positions
# =============================================================================

POSITIONS: dict[PositionId, Position] = {
    PositionId.STANDING_NEUTRAL: Position(
        id=PositionId.STANDING_NEUTRAL,
        name="Standing Neutral",
        control=0,
        initiative=Initiative.NEUTRAL,
        auto_clear_tokens=(TokenType.POSTURE_BROKEN, TokenType.LEG_ISOLATED, TokenType.BACK_EXPOSED),
    ),
    PositionId.CLOSED_GUARD: Position(
        id=PositionId.CLOSED_GUARD,
        name="Closed Guard",
        control=1,
        initiative=Initiative.BOTTOM,
        auto_clear_tokens=(TokenType.BALANCE_COMPROMISED, TokenType.BACK_EXPOSED),
    ),
    PositionId.OPEN_GUARD: Position(
        id=PositionId.OPEN_GUARD,
        name="Open Guard",
        control=0,
        initiative=Initiative.BOTTOM,
        auto_clear_tokens=(TokenType.POSTURE_BROKEN, TokenType.BACK_EXPOSED),
    ),
    PositionId.HALF_GUARD: Position(
        id=PositionId.HALF_GUARD,
        name="Half Guard",
        control=1,
        initiative=Initiative.TOP,
        auto_clear_tokens=(TokenType.BACK_EXPOSED,),
    ),
    PositionId.KNEE_SHIELD: Position(
        id=PositionId.KNEE_SHIELD,
        name="Knee Shield Half Guard",
        control=0,
        initiative=Initiative.BOTTOM,
        auto_clear_tokens=(TokenType.POSTURE_BROKEN,),
    ),
    PositionId.SIDE_CONTROL: Position(
        id=PositionId.SIDE_CONTROL,
        name="Side Control",
        control=2,
        initiative=Initiative.TOP,
        auto_clear_tokens=(TokenType.LEG_ISOLATED,),
    ),
    PositionId.MOUNT: Position(
        id=PositionId.MOUNT,
        name="Mount",
        control=3,
        initiative=Initiative.TOP,
        auto_clear_tokens=(TokenType.LEG_ISOLATED, TokenType.BALANCE_COMPROMISED),
    ),
    PositionId.BACK_CONTROL: Position(
        id=PositionId.BACK_CONTROL,
        name="Back Control",
        control=3,
        initiative=Initiative.TOP,
        auto_clear_tokens=(TokenType.LEG_ISOLATED,),
    ),
    PositionId.TURTLE: Position(
        id=PositionId.TURTLE,
        name="Turtle",
        control=1,
        initiative=Initiative.TOP,
        auto_clear_tokens=(TokenType.POSTURE_BROKEN,),
    ),
    PositionId.FRONT_HEADLOCK: Position(
        id=PositionId.FRONT_HEADLOCK,
        name="Front Headlock",
        control=1,
        initiative=Initiative.TOP,
        auto_clear_tokens=(TokenType.LEG_ISOLATED, TokenType.BACK_EXPOSED),
    ),
}


# =============================================================================
# Lookups
# =============================================================================


def get_position(position_id: PositionId | str) -> Position:
    """Look up a position record.

    Raises:
        CatalogIntegrityError: If the position is not in the graph
    """
    try:
        return POSITIONS[PositionId(position_id)]
    except (KeyError, ValueError):
        raise CatalogIntegrityError(f"Unknown position: {position_id!r}") from None


def get_token_info(token: TokenType | str) -> TokenInfo:
    """Look up display metadata for a token type."""
    try:
        return TOKEN_TYPES[TokenType(token)]
    except (KeyError, ValueError):
        raise CatalogIntegrityError(f"Unknown token type: {token!r}") from None


def get_category_info(category: Category | str) -> CategoryInfo:
    """Look up display metadata for a category."""
    try:
        return CATEGORIES[Category(category)]
    except (KeyError, ValueError):
        raise CatalogIntegrityError(f"Unknown category: {category!r}") from None


def get_matchup_modifier(category: Category, opponent_category: Category) -> int:
    """Modifier for using `category` against `opponent_category`.

    Defense beats attack, attack beats control, control beats defense and
    reversal, reversal beats attack. Mirror matchups are even.
    """
    try:
        return MATCHUP_MODIFIERS[Category(category)][Category(opponent_category)]
    except (KeyError, ValueError):
        raise CatalogIntegrityError(
            f"No matchup entry for {category!r} vs {opponent_category!r}"
        ) from None
