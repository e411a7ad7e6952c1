"""Match state models for Grapple.

This module defines the mutable MatchState owned by the MatchController and
the immutable Resolution record produced once per turn.

Invariants enforced here:
- A side holds at most MAX_TOKENS distinct tokens (TokenSet)
- Each side's control counter stays within [0, MAX_CONTROL]
- Scores and advantages are never negative
- A ScoreBreakdown total equals the sum of its five components
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from grapple.models.catalog import Category, PositionId, Role, Technique, TokenType
from grapple.parameters import INITIAL_POSITION, MAX_CONTROL, MAX_TOKENS


class Side(str, Enum):
    """One of the two competitors.

    Inherits from str for proper JSON serialization.
    """

    PLAYER = "player"
    AI = "ai"

    @property
    def opponent(self) -> Side:
        return Side.AI if self is Side.PLAYER else Side.PLAYER


class MatchPhase(str, Enum):
    """Phase of the match state machine."""

    MATCH_START = "match_start"
    TURN_START = "turn_start"
    ACTION_SELECTION = "action_selection"
    ACTION_LOCKED = "action_locked"
    RESOLUTION = "resolution"
    TURN_END = "turn_end"
    MATCH_END = "match_end"


class Difficulty(str, Enum):
    """AI difficulty. Fixed for the duration of a match."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class OutcomeTier(str, Enum):
    """Classification of a turn's margin."""

    MINOR = "minor"  # margin 0-1
    MAJOR = "major"  # margin 2-3
    DOMINANT = "dominant"  # margin 4+


class MatchEndReason(str, Enum):
    """How a match was decided."""

    SUBMISSION = "submission"
    POINTS = "points"
    TIME_SCORE = "time_score"  # Turn cap, higher score
    TIME_ADVANTAGES = "time_advantages"  # Turn cap, scores tied, more advantages
    TIME_RANDOM = "time_random"  # Turn cap, everything tied, coin flip


# =============================================================================
# Per-side containers
# =============================================================================


class TokenSet(BaseModel):
    """Bounded set of tokens held by one side.

    Capacity MAX_TOKENS, entries distinct, insertion order kept so the
    oldest token can be stripped first.
    """

    tokens: list[TokenType] = Field(default_factory=list)

    @field_validator("tokens")
    @classmethod
    def check_bounded_and_distinct(cls, v: list[TokenType]) -> list[TokenType]:
        """Reject sets over capacity or with duplicates."""
        if len(v) > MAX_TOKENS:
            raise ValueError(f"At most {MAX_TOKENS} tokens allowed, got {len(v)}")
        if len(set(v)) != len(v):
            raise ValueError(f"Tokens must be distinct, got {v}")
        return v

    def __contains__(self, token: object) -> bool:
        return token in self.tokens

    def __len__(self) -> int:
        return len(self.tokens)

    @property
    def is_full(self) -> bool:
        return len(self.tokens) >= MAX_TOKENS

    def add(self, token: TokenType) -> bool:
        """Append a token. Returns False (no change) if present or full."""
        if token in self.tokens or self.is_full:
            return False
        self.tokens.append(token)
        return True

    def remove(self, token: TokenType) -> bool:
        """Remove a token. Returns False if it was not held."""
        if token not in self.tokens:
            return False
        self.tokens.remove(token)
        return True

    def oldest(self) -> Optional[TokenType]:
        """Earliest-added token still held, or None."""
        return self.tokens[0] if self.tokens else None

    def as_tuple(self) -> tuple[TokenType, ...]:
        return tuple(self.tokens)


class SideCounter(BaseModel):
    """Integer counter per side (scores, advantages)."""

    model_config = ConfigDict(validate_assignment=True)

    player: int = Field(default=0, ge=0)
    ai: int = Field(default=0, ge=0)

    def __getitem__(self, side: Side) -> int:
        return getattr(self, Side(side).value)

    def __setitem__(self, side: Side, value: int) -> None:
        setattr(self, Side(side).value, value)


class ControlCounter(SideCounter):
    """Control points per side, each independently within [0, MAX_CONTROL]."""

    player: int = Field(default=0, ge=0, le=MAX_CONTROL)
    ai: int = Field(default=0, ge=0, le=MAX_CONTROL)


class SideTokens(BaseModel):
    """Token sets for both sides."""

    player: TokenSet = Field(default_factory=TokenSet)
    ai: TokenSet = Field(default_factory=TokenSet)

    def __getitem__(self, side: Side) -> TokenSet:
        return getattr(self, Side(side).value)


# =============================================================================
# Resolution record
# =============================================================================


class ScoreBreakdown(BaseModel):
    """One side's turn total and the five terms it is built from.

    Attributes:
        control: The side's control points
        matchup: Matchup modifier of the side's category vs the opponent's
        technique: The chosen technique's modifier
        tokens: Number of tokens the side holds
        die: The d6 roll
        total: Sum of all five terms
    """

    model_config = ConfigDict(frozen=True)

    control: int
    matchup: int
    technique: int
    tokens: int
    die: int = Field(..., ge=1)
    total: int

    @model_validator(mode="before")
    @classmethod
    def fill_total(cls, data: dict) -> dict:
        """Compute the total when it is not provided."""
        if isinstance(data, dict) and data.get("total") is None:
            data = dict(data)
            data["total"] = sum(
                data.get(k, 0) for k in ("control", "matchup", "technique", "tokens", "die")
            )
        return data

    @model_validator(mode="after")
    def check_total(self) -> ScoreBreakdown:
        """The total must be exactly the sum of its components."""
        expected = self.control + self.matchup + self.technique + self.tokens + self.die
        if self.total != expected:
            raise ValueError(f"Score total {self.total} != sum of components {expected}")
        return self


class TokenChange(BaseModel):
    """A token gained or lost by one side during a resolution."""

    model_config = ConfigDict(frozen=True)

    side: Side
    token: TokenType
    reason: str = ""  # reward, bonus, stripped, dominant_loss, auto_clear


class PositionChange(BaseModel):
    """A position transition applied during a resolution."""

    model_config = ConfigDict(frozen=True)

    from_position: PositionId
    to_position: PositionId
    player_is_top: bool


class ControlShift(BaseModel):
    """A single control point moved during a resolution."""

    model_config = ConfigDict(frozen=True)

    side: Side
    delta: int  # -1 (stripped from side) or +1 (built by side)
    new_value: int


class Resolution(BaseModel):
    """Result of resolving one turn. Never mutated after creation.

    A draw (margin 0) has winner, loser and winner_technique set to None and
    no effects recorded.
    """

    model_config = ConfigDict(frozen=True)

    player_score: ScoreBreakdown
    ai_score: ScoreBreakdown
    margin: int = Field(..., ge=0)
    tier: OutcomeTier
    winner: Optional[Side] = None
    loser: Optional[Side] = None
    winner_technique: Optional[Technique] = None
    points_awarded: int = Field(default=0, ge=0)
    advantages_awarded: int = Field(default=0, ge=0)
    tokens_gained: tuple[TokenChange, ...] = ()
    tokens_lost: tuple[TokenChange, ...] = ()
    position_change: Optional[PositionChange] = None
    control_shift: Optional[ControlShift] = None
    submission: bool = False
    narratives: tuple[str, ...] = ()

    @property
    def is_draw(self) -> bool:
        return self.winner is None

    def score_for(self, side: Side) -> ScoreBreakdown:
        return self.player_score if side == Side.PLAYER else self.ai_score


# =============================================================================
# Match state
# =============================================================================


class MatchState(BaseModel):
    """Complete state of one match.

    Created once per match, reset by start_match, mutated in place by the
    MatchController, and left as-is once the phase reaches MATCH_END.

    Attributes:
        phase: Current phase of the state machine
        turn_number: 0 before the match starts, 1 on the first turn
        position: Current position in the graph
        player_is_top: Whether the player holds the top role
        scores: Points per side
        advantages: Advantage points per side
        tokens: Token sets per side
        control: Control points per side
        player_category, player_technique: Player's locked selection
        ai_category, ai_technique: AI's locked selection
        last_resolution: Latest resolution, kept for display
        match_winner: Set once at MATCH_END
        match_end_reason: Set once at MATCH_END
        match_end_description: Human-readable ending text
        ai_difficulty: AI difficulty for the whole match
    """

    phase: MatchPhase = MatchPhase.MATCH_START
    turn_number: int = Field(default=0, ge=0)
    position: PositionId = PositionId(INITIAL_POSITION)
    player_is_top: bool = True

    scores: SideCounter = Field(default_factory=SideCounter)
    advantages: SideCounter = Field(default_factory=SideCounter)
    tokens: SideTokens = Field(default_factory=SideTokens)
    control: ControlCounter = Field(default_factory=ControlCounter)

    player_category: Optional[Category] = None
    player_technique: Optional[Technique] = None
    ai_category: Optional[Category] = None
    ai_technique: Optional[Technique] = None

    last_resolution: Optional[Resolution] = None

    match_winner: Optional[Side] = None
    match_end_reason: Optional[MatchEndReason] = None
    match_end_description: str = ""

    ai_difficulty: Difficulty = Difficulty.MEDIUM

    def role_of(self, side: Side) -> Role:
        """Top/bottom role of a side, derived from player_is_top."""
        player_role = Role.TOP if self.player_is_top else Role.BOTTOM
        return player_role if side == Side.PLAYER else player_role.inverse

    def category_of(self, side: Side) -> Optional[Category]:
        return self.player_category if side == Side.PLAYER else self.ai_category

    def technique_of(self, side: Side) -> Optional[Technique]:
        return self.player_technique if side == Side.PLAYER else self.ai_technique

    @property
    def is_over(self) -> bool:
        return self.phase == MatchPhase.MATCH_END

    # Serialization methods
    def to_json(self) -> str:
        """Serialize state to JSON string."""
        return self.model_dump_json(indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> MatchState:
        """Deserialize state from JSON string."""
        return cls.model_validate_json(json_str)

    def to_dict(self) -> dict:
        """Serialize state to dictionary."""
        return self.model_dump(mode="json")
