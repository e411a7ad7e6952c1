"""Unit tests for grapple.models.state module.

Tests cover:
- TokenSet: capacity, distinctness, insertion order
- SideCounter / ControlCounter: bounds enforced on assignment
- ScoreBreakdown: total computed and checked against its components
- MatchState: role derivation, JSON serialization
"""

import json

import pytest
from pydantic import ValidationError

from grapple.models.catalog import Category, PositionId, Role, TokenType
from grapple.models.state import (
    ControlCounter,
    MatchPhase,
    MatchState,
    ScoreBreakdown,
    Side,
    SideCounter,
    TokenSet,
)
from grapple.models.techniques import get_techniques_for_position_role


class TestTokenSet:
    """Tests for the bounded token set."""

    def test_add_twice(self):
        """Second add of the same token is refused and changes nothing."""
        tokens = TokenSet()

        assert tokens.add(TokenType.POSTURE_BROKEN) is True
        assert tokens.add(TokenType.POSTURE_BROKEN) is False
        assert tokens.as_tuple() == (TokenType.POSTURE_BROKEN,)

    def test_add_when_full(self):
        tokens = TokenSet(tokens=[TokenType.POSTURE_BROKEN, TokenType.ARM_ISOLATED])

        assert tokens.is_full
        assert tokens.add(TokenType.LEG_ISOLATED) is False
        assert len(tokens) == 2

    def test_remove_absent(self):
        tokens = TokenSet(tokens=[TokenType.ARM_ISOLATED])

        assert tokens.remove(TokenType.BACK_EXPOSED) is False
        assert tokens.remove(TokenType.ARM_ISOLATED) is True
        assert len(tokens) == 0

    def test_oldest_follows_insertion_order(self):
        tokens = TokenSet()
        assert tokens.oldest() is None

        tokens.add(TokenType.LEG_ISOLATED)
        tokens.add(TokenType.INSIDE_POSITION)

        assert tokens.oldest() == TokenType.LEG_ISOLATED

    def test_rejects_over_capacity(self):
        with pytest.raises(ValidationError):
            TokenSet(
                tokens=[TokenType.POSTURE_BROKEN, TokenType.ARM_ISOLATED, TokenType.LEG_ISOLATED]
            )

    def test_rejects_duplicates(self):
        with pytest.raises(ValidationError):
            TokenSet(tokens=[TokenType.ARM_ISOLATED, TokenType.ARM_ISOLATED])


class TestCounters:
    """Tests for per-side counters."""

    def test_item_access_by_side(self):
        counter = SideCounter()
        counter[Side.AI] += 3

        assert counter.ai == 3
        assert counter[Side.PLAYER] == 0

    def test_negative_rejected(self):
        counter = SideCounter()
        with pytest.raises(ValidationError):
            counter[Side.PLAYER] = -1

    def test_control_upper_bound(self):
        control = ControlCounter(player=2)
        with pytest.raises(ValidationError):
            control.player = 3

    def test_control_sides_are_independent(self):
        """Both sides may hold control at once."""
        control = ControlCounter(player=2, ai=1)
        assert (control.player, control.ai) == (2, 1)


class TestScoreBreakdown:
    """Tests for ScoreBreakdown."""

    def test_total_computed_when_missing(self):
        score = ScoreBreakdown(control=1, matchup=-1, technique=2, tokens=2, die=4)
        assert score.total == 8

    def test_mismatched_total_rejected(self):
        with pytest.raises(ValidationError):
            ScoreBreakdown(control=0, matchup=0, technique=1, tokens=0, die=3, total=5)

    def test_die_must_be_rolled(self):
        with pytest.raises(ValidationError):
            ScoreBreakdown(control=0, matchup=0, technique=0, tokens=0, die=0)


class TestMatchState:
    """Tests for MatchState."""

    def test_fresh_state(self):
        state = MatchState()

        assert state.phase == MatchPhase.MATCH_START
        assert state.turn_number == 0
        assert state.position == PositionId.STANDING_NEUTRAL
        assert state.last_resolution is None
        assert not state.is_over

    @pytest.mark.parametrize("player_is_top", [True, False])
    def test_roles_are_opposite(self, player_is_top):
        state = MatchState(player_is_top=player_is_top)

        assert state.role_of(Side.PLAYER) == (Role.TOP if player_is_top else Role.BOTTOM)
        assert state.role_of(Side.AI) == state.role_of(Side.PLAYER).inverse

    def test_json_keeps_selection_and_tokens(self):
        """A locked selection and held tokens survive serialization."""
        technique = get_techniques_for_position_role(
            PositionId.CLOSED_GUARD, Role.BOTTOM, Category.ATTACK
        )[0]
        state = MatchState(
            position=PositionId.CLOSED_GUARD,
            player_is_top=False,
            player_category=Category.ATTACK,
            player_technique=technique,
        )
        state.tokens.player.add(TokenType.ARM_ISOLATED)

        data = json.loads(state.to_json())
        restored = MatchState.from_json(state.to_json())

        assert data["tokens"]["player"]["tokens"] == ["arm_isolated"]
        assert restored.player_technique == technique
        assert restored.tokens.player.as_tuple() == (TokenType.ARM_ISOLATED,)
