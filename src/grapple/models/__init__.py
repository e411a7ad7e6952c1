"""Grapple match models.

This module exports the catalog vocabulary and the match state structures.
"""

from .catalog import (
    CATEGORY_ORDER,
    Category,
    CategoryInfo,
    CatalogIntegrityError,
    Initiative,
    Position,
    PositionId,
    Risk,
    Role,
    Technique,
    TokenInfo,
    TokenType,
    Transition,
)
from .positions import (
    CATEGORIES,
    POSITIONS,
    TOKEN_TYPES,
    get_category_info,
    get_matchup_modifier,
    get_position,
    get_token_info,
)
from .state import (
    ControlCounter,
    ControlShift,
    Difficulty,
    MatchEndReason,
    MatchPhase,
    MatchState,
    OutcomeTier,
    PositionChange,
    Resolution,
    ScoreBreakdown,
    Side,
    SideCounter,
    SideTokens,
    TokenChange,
    TokenSet,
)
from .techniques import (
    TECHNIQUES,
    can_use_technique,
    get_available_categories,
    get_techniques_for_position_role,
    validate_catalog,
)

__all__ = [
    # Enums
    "Category",
    "Difficulty",
    "Initiative",
    "MatchEndReason",
    "MatchPhase",
    "OutcomeTier",
    "PositionId",
    "Risk",
    "Role",
    "Side",
    "TokenType",
    # Catalog records
    "CategoryInfo",
    "Position",
    "Technique",
    "TokenInfo",
    "Transition",
    # Catalog tables
    "CATEGORIES",
    "CATEGORY_ORDER",
    "POSITIONS",
    "TECHNIQUES",
    "TOKEN_TYPES",
    # Catalog functions
    "can_use_technique",
    "get_available_categories",
    "get_category_info",
    "get_matchup_modifier",
    "get_position",
    "get_techniques_for_position_role",
    "get_token_info",
    "validate_catalog",
    # State models
    "ControlCounter",
    "ControlShift",
    "MatchState",
    "PositionChange",
    "Resolution",
    "ScoreBreakdown",
    "SideCounter",
    "SideTokens",
    "TokenChange",
    "TokenSet",
    # Errors
    "CatalogIntegrityError",
]
