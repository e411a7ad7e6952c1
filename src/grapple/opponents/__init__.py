"""Opponent implementations for Grapple.

This module provides the opponent types a match can be played against:

1. Heuristic AI - Scored-and-weighted selection tuned by difficulty
2. Random baseline - Uniform pick among usable options

All opponents implement the Opponent base class interface and can drive
either side of a match.
"""

from grapple.opponents.base import (
    NoLegalCategoriesError,
    NoUsableTechniquesError,
    Opponent,
    OpponentType,
    SelectedAction,
    fallback_options,
    get_opponent_by_type,
    legal_categories,
    list_opponent_types,
    usable_options,
)
from grapple.opponents.heuristic import HeuristicOpponent, ai_select_action, score_option
from grapple.opponents.simple import RandomOpponent

__all__ = [
    # Base classes and types
    "Opponent",
    "OpponentType",
    "SelectedAction",
    # Errors
    "NoLegalCategoriesError",
    "NoUsableTechniquesError",
    # Option enumeration
    "fallback_options",
    "legal_categories",
    "usable_options",
    # Factory functions
    "get_opponent_by_type",
    "list_opponent_types",
    # Opponents
    "HeuristicOpponent",
    "RandomOpponent",
    "ai_select_action",
    "score_option",
]
