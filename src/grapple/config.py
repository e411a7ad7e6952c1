"""Runtime configuration for Grapple.

Module-level defaults that can be overridden via environment variables.
Match rules themselves live in grapple.parameters and are not configurable.
"""

import logging
import os
from typing import Optional

from grapple.models.state import Difficulty

# Default configuration (can be overridden via environment variables)
DEFAULT_AI_DIFFICULTY = Difficulty.MEDIUM
DEFAULT_LOG_LEVEL = "WARNING"


def get_ai_difficulty() -> Difficulty:
    """Get configured AI difficulty from environment.

    Unknown values fall back to the default.
    """
    value = os.environ.get("GRAPPLE_AI_DIFFICULTY", DEFAULT_AI_DIFFICULTY.value).lower()
    try:
        return Difficulty(value)
    except ValueError:
        return DEFAULT_AI_DIFFICULTY


def get_random_seed() -> Optional[int]:
    """Get configured random seed from environment, or None when unset.

    Raises:
        ValueError: If GRAPPLE_RANDOM_SEED is set but not an integer
    """
    value = os.environ.get("GRAPPLE_RANDOM_SEED")
    if value is None or value.strip() == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"GRAPPLE_RANDOM_SEED must be an integer, got {value!r}") from None


def get_log_level() -> int:
    """Get configured log level from environment as a logging constant."""
    name = os.environ.get("GRAPPLE_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING
