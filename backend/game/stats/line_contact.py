"""Detect when a position lies on a line radiating from an opponent piece.

Used to set the opponent-line contact flags of a move record. The board
itself is an external collaborator; only its line query is needed here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from game.stats.records import NUM_LINE_DIRECTIONS

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from game.stats.records import HexCoord


class BoardGeometry(Protocol):
    """Line-membership query provided by the board."""

    def line(self, origin: HexCoord, direction: int) -> Sequence[HexCoord]:
        """Return positions along the line from origin (exclusive) in direction 0-5."""
        ...


def is_on_piece_line(geometry: BoardGeometry, piece_position: HexCoord, target: HexCoord) -> bool:
    """Return True if target lies on any of the six lines from piece_position."""
    return any(target in geometry.line(piece_position, direction) for direction in range(NUM_LINE_DIRECTIONS))


def is_on_opponent_line(
    geometry: BoardGeometry,
    opponent_positions: Iterable[HexCoord],
    target: HexCoord,
) -> bool:
    """Return True if target lies on a line of any opponent piece."""
    return any(is_on_piece_line(geometry, position, target) for position in opponent_positions)


def blocked_pieces(
    geometry: BoardGeometry,
    opponent_positions: Iterable[HexCoord],
    target: HexCoord,
) -> list[HexCoord]:
    """Return positions of opponent pieces whose lines pass through target."""
    return [position for position in opponent_positions if is_on_piece_line(geometry, position, target)]


def count_blocked_lines(
    geometry: BoardGeometry,
    opponent_positions: Iterable[HexCoord],
    target: HexCoord,
) -> int:
    """Count opponent lines passing through target.

    Each direction of each piece counts at most once, so a position can
    block several lines of the same piece.
    """
    return sum(
        1
        for position in opponent_positions
        for direction in range(NUM_LINE_DIRECTIONS)
        if target in geometry.line(position, direction)
    )
