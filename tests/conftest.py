"""Shared pytest fixtures and markers for all tests."""

import pytest


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


@pytest.fixture
def locked_state():
    """Provide a match state on turn 1, ready to be resolved once selections are set."""
    from grapple.models.state import MatchPhase, MatchState
    return MatchState(phase=MatchPhase.ACTION_LOCKED, turn_number=1)


@pytest.fixture
def make_technique():
    """Factory for ad hoc techniques with controlled modifiers and effects."""
    from grapple.models.catalog import Category, Technique

    def _make(technique_id="test_move", category=Category.DEFENSE, modifier=0, **kwargs):
        kwargs.setdefault("name", technique_id.replace("_", " ").title())
        return Technique(id=technique_id, category=category, modifier=modifier, **kwargs)

    return _make


@pytest.fixture
def lock():
    """Store both sides' selections on a state, categories taken from the techniques."""

    def _lock(state, player_technique, ai_technique):
        state.player_category = player_technique.category
        state.player_technique = player_technique
        state.ai_category = ai_technique.category
        state.ai_technique = ai_technique
        return state

    return _lock
