"""
Append-only record of a single match.

A MatchLedger is created at match start, grows by one MoveRecord per
completed turn and is closed by a single terminal complete() call. It is a
frozen model: every operation returns a new ledger and never mutates the
receiver. The ledger trusts its caller and performs no legality checks.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from game.stats.enums import PlayerColor
from game.stats.exceptions import InvalidStateError, MissingDataError
from game.stats.records import MatchResult, MoveRecord, PlayerInfo

if TYPE_CHECKING:
    from collections.abc import Sequence


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


def _require_identity(player: PlayerInfo | None, color: PlayerColor) -> PlayerInfo:
    if player is None or not player.player_id:
        raise MissingDataError(f"{color.value} player identity is missing")
    return player


class MatchLedger(BaseModel):
    """Complete history of a match, serializable for checkpoint and archive."""

    model_config = ConfigDict(frozen=True)

    match_id: str = Field(default_factory=lambda: uuid4().hex)
    started_at: datetime = Field(default_factory=_utc_now)
    ended_at: datetime | None = None  # None while the match is in progress

    yellow_player: PlayerInfo | None = None
    blue_player: PlayerInfo | None = None

    # initial state, for replay from the start
    initial_yellow_hand: tuple[str, ...] = ()
    initial_blue_hand: tuple[str, ...] = ()
    random_seed: int = 0  # tile bag reconstruction

    moves: tuple[MoveRecord, ...] = ()
    result: MatchResult | None = None

    @classmethod
    def create(
        cls,
        yellow: PlayerInfo | None,
        blue: PlayerInfo | None,
        seed: int = 0,
        *,
        started_at: datetime | None = None,
    ) -> MatchLedger:
        """Start a new ledger with a fresh id and start timestamp."""
        yellow = _require_identity(yellow, PlayerColor.YELLOW)
        blue = _require_identity(blue, PlayerColor.BLUE)
        return cls(
            started_at=started_at or _utc_now(),
            yellow_player=yellow,
            blue_player=blue,
            random_seed=seed,
        )

    @property
    def is_in_progress(self) -> bool:
        return self.ended_at is None

    @property
    def is_vs_ai(self) -> bool:
        return any(player is not None and player.is_ai for player in (self.yellow_player, self.blue_player))

    @property
    def ai_personality(self) -> str | None:
        """Personality of the AI opponent, None for human-only matches."""
        for player in (self.yellow_player, self.blue_player):
            if player is not None and player.is_ai:
                return player.ai_personality
        return None

    def player_for(self, color: PlayerColor) -> PlayerInfo:
        """Return the identity playing the given color.

        Raises MissingDataError if that identity was never recorded.
        """
        player = self.yellow_player if color is PlayerColor.YELLOW else self.blue_player
        return _require_identity(player, color)

    def color_of(self, player_id: str) -> PlayerColor | None:
        """Return the color played by player_id, or None if they are not in this match."""
        for color in PlayerColor:
            player = self.yellow_player if color is PlayerColor.YELLOW else self.blue_player
            if player is not None and player.player_id == player_id:
                return color
        return None

    def moves_by(self, color: PlayerColor) -> tuple[MoveRecord, ...]:
        return tuple(move for move in self.moves if move.player is color)

    def _require_in_progress(self, operation: str) -> None:
        if not self.is_in_progress:
            raise InvalidStateError(f"cannot {operation}: match {self.match_id} is already completed")

    def capture_initial_hands(self, yellow_hand: Sequence[str], blue_hand: Sequence[str]) -> MatchLedger:
        """Return a ledger carrying copies of both dealt hands."""
        self._require_in_progress("capture initial hands")
        return self.model_copy(
            update={
                "initial_yellow_hand": tuple(yellow_hand),
                "initial_blue_hand": tuple(blue_hand),
            },
        )

    def add_move(self, record: MoveRecord) -> MatchLedger:
        """Return a ledger with record appended after the existing moves."""
        self._require_in_progress("add move")
        return self.model_copy(update={"moves": (*self.moves, record)})

    def complete(self, result: MatchResult, *, ended_at: datetime | None = None) -> MatchLedger:
        """Close the ledger with its final result. Terminal, one-time transition."""
        self._require_in_progress("complete")
        return self.model_copy(update={"ended_at": ended_at or _utc_now(), "result": result})
