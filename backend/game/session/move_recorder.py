"""Build finalized MoveRecords from what the board reports around a turn.

The game engine calls begin_move() before a piece moves, set_destination()
once the destination is confirmed, and build_record() after the letter is
cast and scored. The recorder derives the opponent-line contact flags, the
per-word ownership counts and the tangles that are new this turn.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from game.stats.exceptions import InvalidStateError
from game.stats.line_contact import is_on_opponent_line
from game.stats.records import MoveRecord, TangleEvent, WordScored

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from game.stats.enums import PlayerColor
    from game.stats.line_contact import BoardGeometry
    from game.stats.records import HexCoord


@dataclass(frozen=True)
class FormedWord:
    """A word the scorer found after a cast, before ownership is counted."""

    letters: str
    positions: tuple[HexCoord, ...]
    direction: int


@dataclass(frozen=True)
class TangledPiece:
    """A piece currently trapped on the board."""

    owner: PlayerColor
    index: int
    position: HexCoord


def count_own_tiles(
    positions: Iterable[HexCoord],
    tile_owners: Mapping[HexCoord, PlayerColor],
    player: PlayerColor,
) -> int:
    """Count positions holding a tile cast by player."""
    return sum(1 for position in positions if tile_owners.get(position) is player)


def score_word(word: FormedWord, tile_owners: Mapping[HexCoord, PlayerColor], player: PlayerColor) -> WordScored:
    """Convert a formed word to a WordScored: one point per letter plus one per own tile."""
    own_tiles = count_own_tiles(word.positions, tile_owners, player)
    length = len(word.letters)
    return WordScored(
        word=word.letters,
        length_points=length,
        ownership_points=own_tiles,
        total_points=length + own_tiles,
        positions=word.positions,
        direction=word.direction,
        own_tiles_in_word=own_tiles,
        total_tiles_in_word=length,
    )


def new_tangle_events(
    before: Iterable[TangledPiece],
    after: Iterable[TangledPiece],
    mover: PlayerColor,
) -> tuple[TangleEvent, ...]:
    """Return events for pieces tangled after the move that were not tangled before it."""
    already_tangled = {(piece.owner, piece.index) for piece in before}
    return tuple(
        TangleEvent(
            tangled_player=piece.owner,
            piece_index=piece.index,
            is_self_tangle=piece.owner is mover,
            position=piece.position,
        )
        for piece in after
        if (piece.owner, piece.index) not in already_tangled
    )


class MoveRecorder:
    """Accumulate the before/after observations of one turn into a MoveRecord.

    Lifecycle per turn:
    1. begin_move(piece_index, from_position, tangled_before)
    2. set_destination(to_position)
    3. build_record(...) - returns the record and resets the recorder
    """

    def __init__(self, geometry: BoardGeometry) -> None:
        self._geometry = geometry
        self._piece_index: int | None = None
        self._from_position: HexCoord | None = None
        self._to_position: HexCoord | None = None
        self._tangled_before: tuple[TangledPiece, ...] = ()

    def begin_move(self, piece_index: int, from_position: HexCoord, tangled_before: Iterable[TangledPiece]) -> None:
        """Capture the piece about to move and which pieces are already tangled."""
        self._piece_index = piece_index
        self._from_position = from_position
        self._to_position = None
        self._tangled_before = tuple(tangled_before)

    def set_destination(self, to_position: HexCoord) -> None:
        if self._piece_index is None:
            raise InvalidStateError("set_destination called before begin_move")
        self._to_position = to_position

    def reset(self) -> None:
        self._piece_index = None
        self._from_position = None
        self._to_position = None
        self._tangled_before = ()

    def build_record(  # noqa: PLR0913
        self,
        *,
        turn_number: int,
        player: PlayerColor,
        cast_position: HexCoord,
        letter: str,
        words_formed: Sequence[FormedWord],
        points_earned: int,
        tile_owners: Mapping[HexCoord, PlayerColor],
        opponent_positions: Sequence[HexCoord],
        tangled_after: Iterable[TangledPiece],
        entered_cycle_mode: bool = False,
        tiles_cycled: int = 0,
        timestamp: datetime | None = None,
    ) -> MoveRecord:
        """
        Build the record for the turn in progress and reset the recorder.

        Args:
            turn_number: Turn counter reported by the game state
            player: Color that made the move
            cast_position: Where the letter tile was placed
            letter: The cast letter
            words_formed: Words found by the scorer after the cast
            points_earned: Total points the turn earned
            tile_owners: Owner of every tile on the board after the cast
            opponent_positions: Positions of the opponent's pieces
            tangled_after: Pieces tangled after the move resolved
            entered_cycle_mode: Whether the turn triggered cycle mode
            tiles_cycled: Tiles discarded when cycling
            timestamp: Completion time, defaults to now

        Raises:
            InvalidStateError: If begin_move/set_destination were not called

        """
        if self._piece_index is None or self._from_position is None or self._to_position is None:
            raise InvalidStateError("build_record called without begin_move and set_destination")

        record = MoveRecord(
            turn_number=turn_number,
            player=player,
            piece_index=self._piece_index,
            from_position=self._from_position,
            to_position=self._to_position,
            cast_position=cast_position,
            letter=letter,
            words_formed=tuple(score_word(word, tile_owners, player) for word in words_formed),
            points_earned=points_earned,
            entered_cycle_mode=entered_cycle_mode,
            tiles_cycled=tiles_cycled,
            cast_on_opponent_line=is_on_opponent_line(self._geometry, opponent_positions, cast_position),
            moved_onto_opponent_line=is_on_opponent_line(self._geometry, opponent_positions, self._to_position),
            tangle_events=new_tangle_events(self._tangled_before, tangled_after, player),
            timestamp=timestamp or datetime.now(tz=UTC),
        )
        self.reset()
        return record
