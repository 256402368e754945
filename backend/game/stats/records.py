"""
Pydantic models for the per-turn match record.

Contains the immutable building blocks a match ledger is made of: board
coordinates, scored words, tangle events, move records, player identities
and the terminal match result. Board geometry and scoring rules live in the
game engine; these models only carry what the engine reported.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

from game.stats.enums import MatchWinner, PlayerColor

NUM_LINE_DIRECTIONS = 6


class HexCoord(BaseModel):
    """Board position. Opaque to the statistics core apart from equality."""

    model_config = ConfigDict(frozen=True)

    q: int
    r: int


class WordScored(BaseModel):
    """A word that was scored during a turn."""

    model_config = ConfigDict(frozen=True)

    word: str = Field(min_length=1)
    length_points: int = 0
    ownership_points: int = 0
    total_points: int = 0  # length_points + ownership_points
    positions: tuple[HexCoord, ...] = ()
    direction: int = Field(default=0, ge=0, lt=NUM_LINE_DIRECTIONS)
    own_tiles_in_word: int = Field(default=0, ge=0)
    total_tiles_in_word: int = Field(default=0, ge=0)


class TangleEvent(BaseModel):
    """A piece became tangled during a turn."""

    model_config = ConfigDict(frozen=True)

    tangled_player: PlayerColor
    piece_index: int = Field(ge=0)
    is_self_tangle: bool = False
    position: HexCoord


class MoveRecord(BaseModel):
    """One completed turn. Exactly one letter is cast per record."""

    model_config = ConfigDict(frozen=True)

    turn_number: int = Field(ge=0)
    player: PlayerColor
    piece_index: int = Field(ge=0)
    from_position: HexCoord
    to_position: HexCoord
    cast_position: HexCoord
    letter: str = Field(min_length=1, max_length=1)
    words_formed: tuple[WordScored, ...] = ()  # empty: nothing scored this turn
    points_earned: int = 0
    entered_cycle_mode: bool = False
    tiles_cycled: int = Field(default=0, ge=0)
    cast_on_opponent_line: bool = False
    moved_onto_opponent_line: bool = False
    tangle_events: tuple[TangleEvent, ...] = ()
    timestamp: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))

    @property
    def is_scoring(self) -> bool:
        return bool(self.words_formed)


class PlayerInfo(BaseModel):
    """Identity of one side of a match."""

    model_config = ConfigDict(frozen=True)

    player_id: str  # account id, "AI_<personality>" for AI players
    display_name: str
    is_ai: bool = False
    ai_personality: str | None = None  # only set for AI players

    @classmethod
    def create_ai(cls, personality: str) -> PlayerInfo:
        return cls(
            player_id=f"AI_{personality}",
            display_name=personality,
            is_ai=True,
            ai_personality=personality,
        )


class MatchResult(BaseModel):
    """Authoritative final result, set exactly once when a match ends."""

    model_config = ConfigDict(frozen=True)

    winner: MatchWinner
    yellow_final_score: int = 0
    blue_final_score: int = 0
    yellow_tangle_points: int = 0  # end-game tangle bonus
    blue_tangle_points: int = 0
    total_turns: int = Field(default=0, ge=0)
    was_forfeited: bool = False  # disconnection timeout
    forfeited_by: PlayerColor | None = None

    def final_score_for(self, color: PlayerColor) -> int:
        return self.yellow_final_score if color is PlayerColor.YELLOW else self.blue_final_score

    def tangle_points_for(self, color: PlayerColor) -> int:
        return self.yellow_tangle_points if color is PlayerColor.YELLOW else self.blue_tangle_points
