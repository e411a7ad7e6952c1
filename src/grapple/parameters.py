"""Match rules and balance parameters for Grapple.

This module is the SINGLE SOURCE OF TRUTH for the fixed rule constants and
the tunable AI heuristic weights.

Parameter Categories:
- Match Rules: win threshold, turn cap, token and control capacity
- Resolution: die size and outcome tier margins
- Token Economy: bonus token pool for dominant wins
- AI Decision: difficulty weights and heuristic scoring bonuses

Usage:
    from grapple.parameters import POINTS_TO_WIN, MAX_TURNS

Note: the match rules are fixed (no rule variants are configurable). The AI
weights are tuning knobs; see grapple.testing.batch_runner for the
simulation used to check them.
"""

# =============================================================================
# MATCH RULES
# =============================================================================

POINTS_TO_WIN = 12
"""Score at which a side wins on points.

Checked after every resolved turn, player side first. A submission on the
same turn takes priority over a points win.
"""

MAX_TURNS = 20
"""Turn cap. The match is decided on score, then advantages, then a coin
flip once the turn with this number has been resolved.
"""

MAX_TOKENS = 2
"""Maximum number of distinct tokens one side may hold."""

MAX_CONTROL = 2
"""Upper bound of each side's control counter (lower bound is 0).

The two counters move independently; nothing forces them to sum to a
constant, so both sides may hold control at the same time.
"""

INITIAL_POSITION = "standing_neutral"
"""Position every match starts from."""


# =============================================================================
# RESOLUTION
# =============================================================================

DIE_SIDES = 6
"""Faces on the die added to each side's turn total (uniform 1..DIE_SIDES)."""

MAJOR_MARGIN = 2
"""Smallest margin classified as a Major outcome (0-1 is Minor)."""

DOMINANT_MARGIN = 4
"""Smallest margin classified as a Dominant outcome.

Only Dominant wins can finish a submission, award a bonus token, or strip
the loser's oldest token.
"""


# =============================================================================
# TOKEN ECONOMY
# =============================================================================

BONUS_TOKEN_POOL: tuple[str, ...] = (
    "posture_broken",
    "inside_position",
    "arm_isolated",
    "balance_compromised",
    "leg_isolated",
)
"""Candidates for the bonus token drawn on a Dominant win whose technique
grants no reward. Tokens the winner already holds are excluded from the draw.
"""


# =============================================================================
# AI DECISION
# =============================================================================

OPTIMAL_WEIGHTS: dict[str, float] = {
    "easy": 0.40,
    "medium": 0.65,
    "hard": 0.85,
}
"""Probability that the AI picks from its top-scoring band.

Otherwise it picks uniformly from the remaining options (or from the top
band again when nothing else is left).
"""

TOP_TIER_BAND = 1.0
"""Options scoring within this distance of the best score form the top band."""

SUBMISSION_BASE_BONUS = 3.0
SUBMISSION_USABLE_BONUS = 4.0
SCORING_TRANSITION_MULTIPLIER = 1.5
ESCAPE_PER_OPPONENT_CONTROL = 2.0
TOKEN_EARN_BONUS = 3.0
TOKEN_STRIP_BONUS = 2.0
RISKY_PENALTY = 1.0
CONTROL_STRIP_PER_POINT = 2.0
CONTROL_BUILD_BONUS = 2.0
DEFENSE_UNDER_PRESSURE_BONUS = 2.0
SWEEP_PER_OPPONENT_CONTROL = 1.0
"""Heuristic weights for scoring (category, technique) options.

Tuning:
    - If the AI never finishes: raise SUBMISSION_USABLE_BONUS
    - If the AI stalls in bad positions: raise ESCAPE_PER_OPPONENT_CONTROL
    - Keep RISKY_PENALTY small; risky techniques carry the best modifiers
"""

FALLBACK_OPTION_WEIGHT = 1.0
"""Flat score given to every option when no usable technique exists and the
AI falls back to ignoring token requirements.
"""
