"""
String enum definitions for match and profile statistics.
"""

from __future__ import annotations

from enum import StrEnum


class PlayerColor(StrEnum):
    """The two sides of a match."""

    YELLOW = "yellow"
    BLUE = "blue"


class MatchWinner(StrEnum):
    """Outcome of a finished match: one of the two colors, or a tie."""

    YELLOW = "yellow"
    BLUE = "blue"
    TIE = "tie"

    @property
    def color(self) -> PlayerColor | None:
        """Winning color, or None for a tie."""
        if self is MatchWinner.TIE:
            return None
        return PlayerColor(self.value)


class MatchOutcome(StrEnum):
    """Outcome of a match from one player's point of view."""

    WIN = "win"
    LOSS = "loss"
    TIE = "tie"


class OpponentType(StrEnum):
    """Partition of lifetime stats by the kind of opponent faced."""

    AI = "ai"
    HUMAN = "human"


class RadarAxis(StrEnum):
    """Six play-style axes, word-building first, then area control."""

    MULTI_WORD = "multi_word"
    VALUE = "value"
    INVESTMENT = "investment"
    TRAPPER = "trapper"
    AGGRESSION = "aggression"
    RESILIENCE = "resilience"
