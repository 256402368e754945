"""
Per-match statistics derived from a completed match ledger.

calculate_match_stats() is a pure function: it reads a finished ledger and
returns a frozen MatchStats value. Final scores and tangle points come from
the ledger's MatchResult, which is authoritative over the per-move log.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from game.stats.enums import MatchWinner, PlayerColor
from game.stats.exceptions import InvalidStateError, MissingDataError
from game.stats.frequency import increment, most_frequent

if TYPE_CHECKING:
    from game.stats.ledger import MatchLedger
    from game.stats.records import MatchResult, MoveRecord


class PlayerMatchStats(BaseModel):
    """Statistics for one player in one match."""

    model_config = ConfigDict(frozen=True)

    player_id: str
    color: PlayerColor

    # score
    final_score: int = 0
    word_points: int = 0  # final_score - tangle_points
    tangle_points: int = 0

    # words
    longest_word: str | None = None
    longest_word_length: int = 0
    best_scoring_turn: int = 0
    best_scoring_word: str | None = None  # only when the best turn formed exactly one word
    total_words_scored: int = 0
    unique_words_scored: int = 0
    average_word_length: float = 0.0
    multi_word_plays: int = 0  # turns that scored two or more words

    # investment
    total_tiles_played: int = 0
    own_tiles_in_scored_words: int = 0
    total_tiles_in_scored_words: int = 0

    # efficiency
    total_turns: int = 0
    points_per_turn: float = 0.0
    turns_without_scoring: int = 0

    # cycling
    total_tiles_cycled: int = 0
    times_cycled: int = 0

    # tangles
    times_tangled: int = 0
    self_tangles: int = 0
    tangles_caused: int = 0
    was_tangled_this_match: bool = False

    # opponent-line contact
    casts_on_opponent_lines: int = 0
    moves_on_opponent_lines: int = 0

    letter_play_counts: dict[str, int] = Field(default_factory=dict)
    most_played_letter: str | None = None
    most_played_letter_count: int = 0

    word_play_counts: dict[str, int] = Field(default_factory=dict)
    most_played_word: str | None = None
    most_played_word_count: int = 0


class MatchStats(BaseModel):
    """Statistics for both players of a finished match."""

    model_config = ConfigDict(frozen=True)

    match_id: str
    ended_at: datetime
    was_vs_ai: bool = False
    ai_personality: str | None = None

    yellow_stats: PlayerMatchStats
    blue_stats: PlayerMatchStats

    winner: MatchWinner
    total_turns: int = 0
    total_words_on_board: int = 0  # words scored by both players

    def stats_for(self, color: PlayerColor) -> PlayerMatchStats:
        return self.yellow_stats if color is PlayerColor.YELLOW else self.blue_stats


@dataclass
class _PlayerTally:
    """Mutable accumulator for the single pass over one player's moves."""

    turns: int = 0
    turns_without_scoring: int = 0
    multi_word_plays: int = 0
    words: int = 0
    word_length_total: int = 0
    unique_words: set[str] = field(default_factory=set)
    longest_word: str | None = None
    longest_word_length: int = 0
    own_tiles_in_words: int = 0
    total_tiles_in_words: int = 0
    best_turn_points: int = 0
    best_turn_word: str | None = None
    times_cycled: int = 0
    tiles_cycled: int = 0
    casts_on_opponent_lines: int = 0
    moves_on_opponent_lines: int = 0
    times_tangled: int = 0
    self_tangles: int = 0
    tangles_caused: int = 0
    was_tangled: bool = False
    letter_counts: dict[str, int] = field(default_factory=dict)
    word_counts: dict[str, int] = field(default_factory=dict)

    def add_move(self, move: MoveRecord, color: PlayerColor) -> None:
        self.turns += 1
        increment(self.letter_counts, move.letter)

        words = move.words_formed
        if not words:
            self.turns_without_scoring += 1
        elif len(words) >= 2:
            self.multi_word_plays += 1

        for scored in words:
            self.words += 1
            self.word_length_total += len(scored.word)
            self.unique_words.add(scored.word)
            increment(self.word_counts, scored.word)
            self.own_tiles_in_words += scored.own_tiles_in_word
            self.total_tiles_in_words += scored.total_tiles_in_word
            if len(scored.word) > self.longest_word_length:
                self.longest_word = scored.word
                self.longest_word_length = len(scored.word)

        if move.points_earned > self.best_turn_points:
            self.best_turn_points = move.points_earned
            # several words in one turn leave no single best word
            self.best_turn_word = words[0].word if len(words) == 1 else None

        if move.entered_cycle_mode:
            self.times_cycled += 1
            self.tiles_cycled += move.tiles_cycled

        if move.cast_on_opponent_line:
            self.casts_on_opponent_lines += 1
        if move.moved_onto_opponent_line:
            self.moves_on_opponent_lines += 1

        for tangle in move.tangle_events:
            if tangle.tangled_player is color:
                self.times_tangled += 1
                self.was_tangled = True
                if tangle.is_self_tangle:
                    self.self_tangles += 1
            else:
                self.tangles_caused += 1


def _player_stats(ledger: MatchLedger, result: MatchResult, color: PlayerColor) -> PlayerMatchStats:
    tally = _PlayerTally()
    for move in ledger.moves_by(color):
        tally.add_move(move, color)

    final_score = result.final_score_for(color)
    tangle_points = result.tangle_points_for(color)
    top_letter = most_frequent(tally.letter_counts)
    top_word = most_frequent(tally.word_counts)

    return PlayerMatchStats(
        player_id=ledger.player_for(color).player_id,
        color=color,
        final_score=final_score,
        word_points=final_score - tangle_points,
        tangle_points=tangle_points,
        longest_word=tally.longest_word,
        longest_word_length=tally.longest_word_length,
        best_scoring_turn=tally.best_turn_points,
        best_scoring_word=tally.best_turn_word,
        total_words_scored=tally.words,
        unique_words_scored=len(tally.unique_words),
        average_word_length=tally.word_length_total / tally.words if tally.words > 0 else 0.0,
        multi_word_plays=tally.multi_word_plays,
        total_tiles_played=tally.turns,  # every turn casts exactly one tile
        own_tiles_in_scored_words=tally.own_tiles_in_words,
        total_tiles_in_scored_words=tally.total_tiles_in_words,
        total_turns=tally.turns,
        points_per_turn=final_score / tally.turns if tally.turns > 0 else 0.0,
        turns_without_scoring=tally.turns_without_scoring,
        total_tiles_cycled=tally.tiles_cycled,
        times_cycled=tally.times_cycled,
        times_tangled=tally.times_tangled,
        self_tangles=tally.self_tangles,
        tangles_caused=tally.tangles_caused,
        was_tangled_this_match=tally.was_tangled,
        casts_on_opponent_lines=tally.casts_on_opponent_lines,
        moves_on_opponent_lines=tally.moves_on_opponent_lines,
        letter_play_counts=tally.letter_counts,
        most_played_letter=top_letter[0] if top_letter else None,
        most_played_letter_count=top_letter[1] if top_letter else 0,
        word_play_counts=tally.word_counts,
        most_played_word=top_word[0] if top_word else None,
        most_played_word_count=top_word[1] if top_word else 0,
    )


def calculate_match_stats(ledger: MatchLedger) -> MatchStats:
    """
    Calculate complete match stats from a finished ledger.

    Args:
        ledger: A ledger that has been completed with a MatchResult

    Returns:
        Frozen MatchStats for both players

    Raises:
        InvalidStateError: If the ledger has no result or end time yet
        MissingDataError: If either player identity is absent

    """
    result = ledger.result
    if result is None or ledger.ended_at is None:
        raise InvalidStateError(f"cannot calculate stats for incomplete match {ledger.match_id}")
    if ledger.yellow_player is None or ledger.blue_player is None:
        raise MissingDataError(f"match {ledger.match_id} is missing a player identity")

    yellow_stats = _player_stats(ledger, result, PlayerColor.YELLOW)
    blue_stats = _player_stats(ledger, result, PlayerColor.BLUE)

    return MatchStats(
        match_id=ledger.match_id,
        ended_at=ledger.ended_at,
        was_vs_ai=ledger.is_vs_ai,
        ai_personality=ledger.ai_personality,
        yellow_stats=yellow_stats,
        blue_stats=blue_stats,
        winner=result.winner,
        total_turns=result.total_turns,
        total_words_on_board=yellow_stats.total_words_scored + blue_stats.total_words_scored,
    )
