"""Unit tests for grapple.engine.resolution module.

Tests cover:
1. calculate_score - five-term breakdown, player rolled before AI
2. classify_tier - margin bands and rejection of negative margins
3. Draws - no mutation at all, stalemate narrative
4. Submissions - only a Dominant win with a submission technique finishes
5. Control shift - strip before build, cap, any tier, winner's category only
6. Token economy - reward, bonus draw, strip, oldest-token loss, Minor exemption
7. Transitions - role assignment, points vs advantage, auto-clear
"""

import pytest
from pydantic import ValidationError

from grapple.engine.dice import ScriptedRandom
from grapple.engine.resolution import (
    MINOR_NARRATIVE,
    STALEMATE_NARRATIVE,
    calculate_score,
    classify_tier,
    resolve_turn,
)
from grapple.models.catalog import Category, PositionId, TokenType, Transition
from grapple.models.state import (
    ControlShift,
    OutcomeTier,
    PositionChange,
    ScoreBreakdown,
    Side,
    TokenChange,
)


# =============================================================================
# Scoring
# =============================================================================


class TestCalculateScore:
    """Tests for calculate_score."""

    def test_breakdown_carries_every_term(self, locked_state, make_technique, lock):
        """Total is control + matchup + technique + tokens + die."""
        locked_state.control.player = 1
        locked_state.tokens.player.add(TokenType.POSTURE_BROKEN)
        lock(
            locked_state,
            make_technique("grip", Category.CONTROL, 2),
            make_technique("frame", Category.DEFENSE, 1),
        )

        score = calculate_score(locked_state, Side.PLAYER, ScriptedRandom(ints=[5]))

        assert score == ScoreBreakdown(control=1, matchup=1, technique=2, tokens=1, die=5, total=10)

    def test_zero_terms_are_kept(self, locked_state, make_technique, lock):
        """A side with nothing but a die roll still reports every component."""
        lock(
            locked_state,
            make_technique("grip", Category.CONTROL, 2),
            make_technique("frame", Category.DEFENSE, 0),
        )

        score = calculate_score(locked_state, Side.AI, ScriptedRandom(ints=[3]))

        assert score.control == 0
        assert score.matchup == -1
        assert score.technique == 0
        assert score.tokens == 0
        assert score.total == 2

    def test_player_die_is_rolled_first(self, locked_state, make_technique, lock):
        """The first scripted roll belongs to the player, the second to the AI."""
        lock(locked_state, make_technique("a"), make_technique("b"))

        resolution = resolve_turn(locked_state, ScriptedRandom(ints=[4, 1]))

        assert resolution.player_score.die == 4
        assert resolution.ai_score.die == 1
        assert resolution.winner == Side.PLAYER


class TestClassifyTier:
    """Tests for classify_tier."""

    @pytest.mark.parametrize(
        "margin,expected",
        [
            (0, OutcomeTier.MINOR),
            (1, OutcomeTier.MINOR),
            (2, OutcomeTier.MAJOR),
            (3, OutcomeTier.MAJOR),
            (4, OutcomeTier.DOMINANT),
            (9, OutcomeTier.DOMINANT),
            (40, OutcomeTier.DOMINANT),
        ],
    )
    def test_margin_bands(self, margin, expected):
        assert classify_tier(margin) == expected

    def test_negative_margin_rejected(self):
        with pytest.raises(ValueError):
            classify_tier(-1)


# =============================================================================
# Draws and the basic exchange
# =============================================================================


class TestBasicExchange:
    """Tests for the plain Major exchange and for draws."""

    def test_major_exchange_without_transition_awards_advantage(
        self, locked_state, make_technique, lock
    ):
        """Modifiers 3 vs 1, dice 4 then 3: totals 7 and 4, Major win, one advantage."""
        lock(
            locked_state,
            make_technique("strong_frame", Category.DEFENSE, 3),
            make_technique("weak_frame", Category.DEFENSE, 1),
        )
        rng = ScriptedRandom(ints=[4, 3])

        resolution = resolve_turn(locked_state, rng)

        assert resolution.player_score.total == 7
        assert resolution.ai_score.total == 4
        assert resolution.margin == 3
        assert resolution.tier == OutcomeTier.MAJOR
        assert resolution.winner == Side.PLAYER
        assert resolution.loser == Side.AI
        assert resolution.position_change is None
        assert resolution.advantages_awarded == 1
        assert resolution.points_awarded == 0
        assert locked_state.advantages.player == 1
        assert locked_state.scores.player == 0
        assert locked_state.scores.ai == 0
        assert rng.remaining == (0, 0)

    def test_draw_changes_nothing(self, locked_state, make_technique, lock):
        """Equal totals leave every counter, token and the position untouched."""
        locked_state.control.player = 1
        locked_state.control.ai = 1
        locked_state.tokens.player.add(TokenType.ARM_ISOLATED)
        locked_state.tokens.ai.add(TokenType.INSIDE_POSITION)
        lock(
            locked_state,
            make_technique("grip", Category.CONTROL, 1, token_reward=TokenType.POSTURE_BROKEN),
            make_technique("grip", Category.CONTROL, 1, token_reward=TokenType.LEG_ISOLATED),
        )
        before = locked_state.model_dump()

        resolution = resolve_turn(locked_state, ScriptedRandom(ints=[3, 3]))

        assert resolution.is_draw
        assert resolution.winner is None
        assert resolution.margin == 0
        assert resolution.control_shift is None
        assert resolution.tokens_gained == ()
        assert STALEMATE_NARRATIVE in resolution.narratives
        assert locked_state.model_dump() == before

    def test_resolution_is_immutable(self, locked_state, make_technique, lock):
        lock(locked_state, make_technique("a"), make_technique("b"))
        resolution = resolve_turn(locked_state, ScriptedRandom(ints=[4, 1]))

        with pytest.raises(ValidationError):
            resolution.margin = 0


# =============================================================================
# Submissions
# =============================================================================


class TestSubmission:
    """Tests for submission finishes."""

    def test_dominant_submission_finishes_without_other_effects(
        self, locked_state, make_technique, lock
    ):
        """A Dominant submission applies no tokens, points or transition."""
        armbar = make_technique(
            "armbar",
            Category.ATTACK,
            2,
            name="Armbar",
            is_submission=True,
            token_reward=TokenType.ARM_ISOLATED,
            transition=Transition(position=PositionId.MOUNT, user_becomes_top=True),
            scoring_points=4,
        )
        lock(locked_state, armbar, make_technique("b", Category.ATTACK, 0))

        resolution = resolve_turn(locked_state, ScriptedRandom(ints=[6, 1]))

        assert resolution.tier == OutcomeTier.DOMINANT
        assert resolution.submission is True
        assert resolution.winner == Side.PLAYER
        assert resolution.winner_technique == armbar
        assert resolution.narratives == ("Armbar locked in! Submission!",)
        assert resolution.tokens_gained == ()
        assert resolution.points_awarded == 0
        assert locked_state.position == PositionId.STANDING_NEUTRAL
        assert len(locked_state.tokens.player) == 0
        assert locked_state.scores.player == 0

    def test_submission_at_major_does_not_finish(self, locked_state, make_technique, lock):
        """A submission technique winning at Major is treated as a plain win."""
        choke = make_technique("choke", Category.ATTACK, 0, is_submission=True)
        lock(locked_state, choke, make_technique("b", Category.ATTACK, 0))

        resolution = resolve_turn(locked_state, ScriptedRandom(ints=[5, 2]))

        assert resolution.tier == OutcomeTier.MAJOR
        assert resolution.submission is False
        assert resolution.advantages_awarded == 1

    def test_submission_at_minor_does_not_finish(self, locked_state, make_technique, lock):
        choke = make_technique("choke", Category.ATTACK, 0, is_submission=True)
        lock(locked_state, choke, make_technique("b", Category.ATTACK, 0))

        resolution = resolve_turn(locked_state, ScriptedRandom(ints=[4, 3]))

        assert resolution.tier == OutcomeTier.MINOR
        assert resolution.submission is False

    def test_ai_can_submit(self, locked_state, make_technique, lock):
        choke = make_technique("choke", Category.ATTACK, 2, is_submission=True)
        lock(locked_state, make_technique("a", Category.ATTACK, 0), choke)

        resolution = resolve_turn(locked_state, ScriptedRandom(ints=[1, 6]))

        assert resolution.submission is True
        assert resolution.winner == Side.AI


# =============================================================================
# Control
# =============================================================================


class TestControlShift:
    """Tests for control point movement."""

    def test_control_win_builds_winner_control(self, locked_state, make_technique, lock):
        lock(
            locked_state,
            make_technique("grip", Category.CONTROL, 0),
            make_technique("frame", Category.DEFENSE, 0),
        )

        resolution = resolve_turn(locked_state, ScriptedRandom(ints=[2, 2]))

        assert resolution.tier == OutcomeTier.MAJOR
        assert resolution.control_shift == ControlShift(side=Side.PLAYER, delta=1, new_value=1)
        assert locked_state.control.player == 1

    def test_strip_takes_priority_over_build(self, locked_state, make_technique, lock):
        locked_state.control.ai = 1
        lock(
            locked_state,
            make_technique("grip", Category.CONTROL, 0),
            make_technique("frame", Category.DEFENSE, 0),
        )

        resolution = resolve_turn(locked_state, ScriptedRandom(ints=[3, 1]))

        assert resolution.winner == Side.PLAYER
        assert resolution.control_shift == ControlShift(side=Side.AI, delta=-1, new_value=0)
        assert locked_state.control.ai == 0
        assert locked_state.control.player == 0

    def test_control_is_capped(self, locked_state, make_technique, lock):
        locked_state.control.player = 2
        lock(
            locked_state,
            make_technique("grip", Category.CONTROL, 0),
            make_technique("frame", Category.DEFENSE, 0),
        )

        resolution = resolve_turn(locked_state, ScriptedRandom(ints=[1, 3]))

        assert resolution.winner == Side.PLAYER
        assert resolution.control_shift is None
        assert locked_state.control.player == 2

    def test_control_shifts_on_minor_win(self, locked_state, make_technique, lock):
        """Control moves at any tier; a Minor win without transition gets no advantage."""
        lock(
            locked_state,
            make_technique("grip", Category.CONTROL, 0),
            make_technique("frame", Category.DEFENSE, 0),
        )

        resolution = resolve_turn(locked_state, ScriptedRandom(ints=[1, 2]))

        assert resolution.tier == OutcomeTier.MINOR
        assert locked_state.control.player == 1
        assert resolution.advantages_awarded == 0
        assert MINOR_NARRATIVE in resolution.narratives

    def test_losing_control_technique_shifts_nothing(self, locked_state, make_technique, lock):
        lock(
            locked_state,
            make_technique("frame", Category.DEFENSE, 0),
            make_technique("grip", Category.CONTROL, 0),
        )

        resolution = resolve_turn(locked_state, ScriptedRandom(ints=[6, 1]))

        assert resolution.winner == Side.PLAYER
        assert resolution.control_shift is None
        assert locked_state.control.player == 0
        assert locked_state.control.ai == 0


# =============================================================================
# Tokens
# =============================================================================


class TestTokenEconomy:
    """Tests for token rewards, bonus draws and removals."""

    def test_major_win_grants_reward(self, locked_state, make_technique, lock):
        lock(
            locked_state,
            make_technique("break", Category.ATTACK, 0, token_reward=TokenType.POSTURE_BROKEN),
            make_technique("b", Category.ATTACK, 0),
        )

        resolution = resolve_turn(locked_state, ScriptedRandom(ints=[4, 2]))

        assert resolution.tokens_gained == (
            TokenChange(side=Side.PLAYER, token=TokenType.POSTURE_BROKEN, reason="reward"),
        )
        assert TokenType.POSTURE_BROKEN in locked_state.tokens.player
        assert "You gain Posture Broken!" in resolution.narratives

    def test_minor_win_grants_no_tokens(self, locked_state, make_technique, lock):
        lock(
            locked_state,
            make_technique("break", Category.ATTACK, 0, token_reward=TokenType.POSTURE_BROKEN),
            make_technique("b", Category.ATTACK, 0),
        )

        resolution = resolve_turn(locked_state, ScriptedRandom(ints=[3, 2]))

        assert resolution.tier == OutcomeTier.MINOR
        assert resolution.tokens_gained == ()
        assert len(locked_state.tokens.player) == 0

    def test_dominant_win_draws_bonus_and_strips_oldest(self, locked_state, make_technique, lock):
        """No reward on a Dominant win: bonus from the pool; the loser drops its oldest token."""
        locked_state.tokens.ai.add(TokenType.LEG_ISOLATED)
        locked_state.tokens.ai.add(TokenType.INSIDE_POSITION)
        lock(
            locked_state,
            make_technique("a", Category.ATTACK, 3),
            make_technique("b", Category.ATTACK, 0),
        )
        rng = ScriptedRandom(ints=[6, 1, 2])

        resolution = resolve_turn(locked_state, rng)

        assert resolution.tier == OutcomeTier.DOMINANT
        assert resolution.tokens_gained == (
            TokenChange(side=Side.PLAYER, token=TokenType.ARM_ISOLATED, reason="bonus"),
        )
        assert resolution.tokens_lost == (
            TokenChange(side=Side.AI, token=TokenType.LEG_ISOLATED, reason="dominant_loss"),
        )
        assert locked_state.tokens.ai.as_tuple() == (TokenType.INSIDE_POSITION,)
        assert rng.remaining == (0, 0)

    def test_bonus_draw_skips_held_tokens(self, locked_state, make_technique, lock):
        locked_state.tokens.player.add(TokenType.POSTURE_BROKEN)
        lock(
            locked_state,
            make_technique("a", Category.ATTACK, 3),
            make_technique("b", Category.ATTACK, 0),
        )

        resolution = resolve_turn(locked_state, ScriptedRandom(ints=[6, 1, 0]))

        assert resolution.tokens_gained[0].token == TokenType.INSIDE_POSITION
        assert locked_state.tokens.player.as_tuple() == (
            TokenType.POSTURE_BROKEN,
            TokenType.INSIDE_POSITION,
        )

    def test_no_bonus_draw_when_winner_is_full(self, locked_state, make_technique, lock):
        locked_state.tokens.player.add(TokenType.POSTURE_BROKEN)
        locked_state.tokens.player.add(TokenType.ARM_ISOLATED)
        lock(
            locked_state,
            make_technique("a", Category.ATTACK, 2),
            make_technique("b", Category.ATTACK, 0),
        )
        rng = ScriptedRandom(ints=[6, 1])

        resolution = resolve_turn(locked_state, rng)

        assert resolution.tier == OutcomeTier.DOMINANT
        assert resolution.tokens_gained == ()
        assert len(locked_state.tokens.player) == 2
        assert rng.remaining == (0, 0)

    def test_token_remove_strips_loser(self, locked_state, make_technique, lock):
        locked_state.tokens.ai.add(TokenType.INSIDE_POSITION)
        lock(
            locked_state,
            make_technique("hand_fighting", Category.ATTACK, 0, token_remove=TokenType.INSIDE_POSITION),
            make_technique("b", Category.ATTACK, 0),
        )

        resolution = resolve_turn(locked_state, ScriptedRandom(ints=[5, 2]))

        assert resolution.tier == OutcomeTier.MAJOR
        assert resolution.tokens_lost == (
            TokenChange(side=Side.AI, token=TokenType.INSIDE_POSITION, reason="stripped"),
        )
        assert len(locked_state.tokens.ai) == 0
        assert "Opponent loses Inside Position!" in resolution.narratives

    def test_reward_already_held_is_not_reported(self, locked_state, make_technique, lock):
        locked_state.tokens.player.add(TokenType.POSTURE_BROKEN)
        lock(
            locked_state,
            make_technique("break", Category.ATTACK, 0, token_reward=TokenType.POSTURE_BROKEN),
            make_technique("b", Category.ATTACK, 0),
        )

        resolution = resolve_turn(locked_state, ScriptedRandom(ints=[3, 1]))

        assert resolution.tier == OutcomeTier.MAJOR
        assert resolution.tokens_gained == ()
        assert locked_state.tokens.player.as_tuple() == (TokenType.POSTURE_BROKEN,)

    def test_ai_reward_narrated_for_opponent(self, locked_state, make_technique, lock):
        lock(
            locked_state,
            make_technique("a", Category.ATTACK, 0),
            make_technique("lock", Category.ATTACK, 0, token_reward=TokenType.BALANCE_COMPROMISED),
        )

        resolution = resolve_turn(locked_state, ScriptedRandom(ints=[1, 4]))

        assert resolution.winner == Side.AI
        assert TokenType.BALANCE_COMPROMISED in locked_state.tokens.ai
        assert "Opponent gains Balance Compromised!" in resolution.narratives


# =============================================================================
# Transitions
# =============================================================================


class TestTransitions:
    """Tests for position changes and scoring."""

    @staticmethod
    def _moving(make_technique, to, top, points, modifier=0):
        return make_technique(
            "move",
            Category.ATTACK,
            modifier,
            transition=Transition(position=to, user_becomes_top=top),
            scoring_points=points,
        )

    def test_major_transition_scores_points(self, locked_state, make_technique, lock):
        locked_state.player_is_top = False
        lock(
            locked_state,
            self._moving(make_technique, PositionId.HALF_GUARD, True, 2, modifier=1),
            make_technique("b", Category.ATTACK, 0),
        )

        resolution = resolve_turn(locked_state, ScriptedRandom(ints=[4, 3]))

        assert resolution.tier == OutcomeTier.MAJOR
        assert locked_state.position == PositionId.HALF_GUARD
        assert locked_state.player_is_top is True
        assert locked_state.scores.player == 2
        assert resolution.points_awarded == 2
        assert resolution.advantages_awarded == 0
        assert resolution.position_change == PositionChange(
            from_position=PositionId.STANDING_NEUTRAL,
            to_position=PositionId.HALF_GUARD,
            player_is_top=True,
        )
        assert "Transition to Half Guard!" in resolution.narratives
        assert "You score 2 points!" in resolution.narratives

    def test_minor_transition_moves_and_awards_advantage(self, locked_state, make_technique, lock):
        lock(
            locked_state,
            self._moving(make_technique, PositionId.HALF_GUARD, True, 2, modifier=1),
            make_technique("b", Category.ATTACK, 0),
        )

        resolution = resolve_turn(locked_state, ScriptedRandom(ints=[3, 3]))

        assert resolution.tier == OutcomeTier.MINOR
        assert locked_state.position == PositionId.HALF_GUARD
        assert locked_state.scores.player == 0
        assert locked_state.advantages.player == 1

    def test_ai_transition_to_top_puts_player_underneath(self, locked_state, make_technique, lock):
        lock(
            locked_state,
            make_technique("a", Category.ATTACK, 0),
            self._moving(make_technique, PositionId.MOUNT, True, 2),
        )

        resolution = resolve_turn(locked_state, ScriptedRandom(ints=[1, 4]))

        assert resolution.winner == Side.AI
        assert locked_state.position == PositionId.MOUNT
        assert locked_state.player_is_top is False
        assert locked_state.scores.ai == 2

    def test_ai_transition_to_bottom_puts_player_on_top(self, locked_state, make_technique, lock):
        locked_state.player_is_top = False
        lock(
            locked_state,
            make_technique("a", Category.ATTACK, 0),
            self._moving(make_technique, PositionId.CLOSED_GUARD, False, 0),
        )

        resolution = resolve_turn(locked_state, ScriptedRandom(ints=[1, 4]))

        assert locked_state.position == PositionId.CLOSED_GUARD
        assert locked_state.player_is_top is True
        assert resolution.points_awarded == 0
        assert resolution.advantages_awarded == 0

    def test_entering_position_auto_clears_tokens(self, locked_state, make_technique, lock):
        """Auto-cleared tokens are removed from both sides and reported as lost."""
        locked_state.position = PositionId.TURTLE
        locked_state.tokens.player.add(TokenType.POSTURE_BROKEN)
        locked_state.tokens.ai.add(TokenType.LEG_ISOLATED)
        lock(
            locked_state,
            self._moving(make_technique, PositionId.STANDING_NEUTRAL, True, 0, modifier=3),
            make_technique("b", Category.ATTACK, 0),
        )

        resolution = resolve_turn(locked_state, ScriptedRandom(ints=[3, 3]))

        assert resolution.tier == OutcomeTier.MAJOR
        assert locked_state.position == PositionId.STANDING_NEUTRAL
        assert len(locked_state.tokens.player) == 0
        assert len(locked_state.tokens.ai) == 0
        assert resolution.tokens_lost == (
            TokenChange(side=Side.PLAYER, token=TokenType.POSTURE_BROKEN, reason="auto_clear"),
            TokenChange(side=Side.AI, token=TokenType.LEG_ISOLATED, reason="auto_clear"),
        )
        assert resolution.advantages_awarded == 0
