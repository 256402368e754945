"""
Lifetime profile models: cumulative per-player aggregates.

A LifetimeProfile is split into two OpponentTypeStats blocks (vs AI and vs
human), carries all-time records and frequency tables, and keeps an
append-only history of radar snapshots. Instances are frozen; the lifetime
updater produces a new profile for every folded match.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from game.stats.enums import OpponentType, RadarAxis

PROFILE_SCHEMA_VERSION = 1


class OpponentTypeStats(BaseModel):
    """Monotonically increasing counters for one opponent category."""

    model_config = ConfigDict(frozen=True)

    games_played: int = 0
    wins: int = 0
    losses: int = 0
    ties: int = 0

    total_points_scored: int = 0
    total_turns_played: int = 0
    total_words_scored: int = 0
    total_multi_word_plays: int = 0
    total_tiles_cycled: int = 0
    total_times_cycled: int = 0
    total_times_tangled: int = 0
    total_self_tangles: int = 0
    total_tangles_caused: int = 0
    total_turns_without_scoring: int = 0
    total_casts_on_opponent_lines: int = 0
    total_moves_on_opponent_lines: int = 0

    # investment
    total_tiles_played: int = 0
    total_own_tiles_in_words: int = 0
    total_tiles_in_words: int = 0  # yours and your opponent's tiles in your scored words

    # resilience
    games_where_you_were_tangled: int = 0
    wins_while_tangled: int = 0

    # records within this category
    highest_score: int = 0
    longest_word: str | None = None
    longest_word_length: int = 0
    best_scoring_turn: int = 0

    @property
    def win_rate(self) -> float:
        return self.wins / self.games_played if self.games_played > 0 else 0.0

    @property
    def avg_points_per_game(self) -> float:
        return self.total_points_scored / self.games_played if self.games_played > 0 else 0.0

    @property
    def avg_points_per_turn(self) -> float:
        return self.total_points_scored / self.total_turns_played if self.total_turns_played > 0 else 0.0

    @property
    def avg_tiles_cycled_per_game(self) -> float:
        return self.total_tiles_cycled / self.games_played if self.games_played > 0 else 0.0


class RadarSnapshot(BaseModel):
    """Point-in-time play-style values, each normalized to [0, 1]."""

    model_config = ConfigDict(frozen=True)

    games_at_snapshot: int = Field(ge=0)
    captured_at: datetime

    # word-building hemisphere
    multi_word: float = Field(ge=0.0, le=1.0)
    value: float = Field(ge=0.0, le=1.0)
    investment: float = Field(ge=0.0, le=1.0)

    # area-control hemisphere
    trapper: float = Field(ge=0.0, le=1.0)
    aggression: float = Field(ge=0.0, le=1.0)
    resilience: float = Field(ge=0.0, le=1.0)

    def values(self) -> dict[RadarAxis, float]:
        """Axis values in canonical axis order."""
        return {axis: getattr(self, axis.value) for axis in RadarAxis}


class LifetimeProfile(BaseModel):
    """Aggregated stats across every folded match for one player."""

    model_config = ConfigDict(frozen=True)

    player_id: str
    display_name: str = ""

    vs_ai: OpponentTypeStats = Field(default_factory=OpponentTypeStats)
    vs_human: OpponentTypeStats = Field(default_factory=OpponentTypeStats)

    # all-time records with the match they were set in
    highest_score: int = 0
    highest_score_match_id: str | None = None
    longest_word: str | None = None
    longest_word_length: int = 0
    longest_word_match_id: str | None = None
    best_scoring_turn: int = 0
    best_scoring_turn_match_id: str | None = None

    # favorites, insertion-ordered for reproducible tie-breaks
    all_time_letter_counts: dict[str, int] = Field(default_factory=dict)
    favorite_letter: str | None = None
    all_time_word_counts: dict[str, int] = Field(default_factory=dict)
    favorite_word: str | None = None
    unique_words_ever_played: int = 0

    radar_history: tuple[RadarSnapshot, ...] = ()

    first_match_time: datetime | None = None
    last_match_time: datetime | None = None
    last_match_id: str | None = None  # most recently folded match
    schema_version: int = PROFILE_SCHEMA_VERSION

    @classmethod
    def create(cls, player_id: str, display_name: str = "") -> LifetimeProfile:
        return cls(player_id=player_id, display_name=display_name)

    def block_for(self, opponent_type: OpponentType) -> OpponentTypeStats:
        return self.vs_ai if opponent_type is OpponentType.AI else self.vs_human

    @property
    def total_games(self) -> int:
        return self.vs_ai.games_played + self.vs_human.games_played

    @property
    def total_wins(self) -> int:
        return self.vs_ai.wins + self.vs_human.wins

    @property
    def total_losses(self) -> int:
        return self.vs_ai.losses + self.vs_human.losses

    @property
    def total_ties(self) -> int:
        return self.vs_ai.ties + self.vs_human.ties

    @property
    def overall_win_rate(self) -> float:
        return self.total_wins / self.total_games if self.total_games > 0 else 0.0

    @property
    def latest_snapshot(self) -> RadarSnapshot | None:
        return self.radar_history[-1] if self.radar_history else None
