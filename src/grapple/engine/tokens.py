"""Token management for Grapple.

Thin operations over the per-side TokenSets held in a MatchState. Every
removal is reported back as a TokenChange so the resolution can record it.
"""

from __future__ import annotations

from typing import Optional

from grapple.models.catalog import PositionId, TokenType
from grapple.models.positions import get_position
from grapple.models.state import MatchState, Side, TokenChange


class TokenManager:
    """Bounded token operations on one match's state."""

    def __init__(self, state: MatchState) -> None:
        self.state = state

    def add(self, side: Side, token: TokenType) -> bool:
        """Give a token to a side.

        Returns:
            False (no change) if the side already holds it or holds the
            maximum number of tokens; True otherwise
        """
        return self.state.tokens[side].add(TokenType(token))

    def remove(self, side: Side, token: TokenType) -> bool:
        """Take a token from a side. Returns False if it was not held."""
        return self.state.tokens[side].remove(TokenType(token))

    def remove_oldest(self, side: Side) -> Optional[TokenType]:
        """Remove the earliest-added token of a side, if any."""
        token = self.state.tokens[side].oldest()
        if token is not None:
            self.state.tokens[side].remove(token)
        return token

    def holds(self, side: Side, token: TokenType) -> bool:
        return TokenType(token) in self.state.tokens[side]

    def has_room(self, side: Side) -> bool:
        return not self.state.tokens[side].is_full

    def auto_clear(self, position_id: PositionId) -> list[TokenChange]:
        """Remove the destination position's auto-clear tokens from both sides.

        Absent tokens are ignored.

        Returns:
            The tokens actually removed, player side first
        """
        position = get_position(position_id)
        cleared: list[TokenChange] = []
        for token in position.auto_clear_tokens:
            for side in (Side.PLAYER, Side.AI):
                if self.remove(side, token):
                    cleared.append(TokenChange(side=side, token=token, reason="auto_clear"))
        return cleared
