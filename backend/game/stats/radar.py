"""Six-axis play-style radar derived from a lifetime profile.

Both opponent-type blocks are summed into one set of raw counters, then each
axis maps its raw ratio onto [0, 1] with a linear min/max normalization:

- multi_word: multi-word plays per scoring turn
- value: points scored per tile played
- investment: share of your own tiles in the words you scored
- trapper: opponent pieces tangled per game
- aggression: plays touching opponent lines per turn
- resilience: win rate in games where you were tangled

An axis with no data reports NO_DATA_VALUE. Resilience is the exception:
a player who has played but was never tangled reports NEVER_TANGLED_RESILIENCE.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from types import MappingProxyType
from typing import TYPE_CHECKING

from game.stats.enums import RadarAxis
from game.stats.profile import RadarSnapshot

if TYPE_CHECKING:
    from game.stats.profile import LifetimeProfile, OpponentTypeStats

NO_DATA_VALUE = 0.5
NEVER_TANGLED_RESILIENCE = 1.0


@dataclass(frozen=True)
class AxisBounds:
    """Normalization range for one axis.

    baseline is the expected raw value for a typical player. It is kept for
    calibration and reference and does not enter the normalization.
    """

    baseline: float
    lower: float
    upper: float


AXIS_BOUNDS: MappingProxyType[RadarAxis, AxisBounds] = MappingProxyType(
    {
        RadarAxis.MULTI_WORD: AxisBounds(baseline=0.20, lower=0.0, upper=0.50),
        RadarAxis.VALUE: AxisBounds(baseline=5.0, lower=2.0, upper=10.0),
        RadarAxis.INVESTMENT: AxisBounds(baseline=0.60, lower=0.30, upper=0.90),
        RadarAxis.TRAPPER: AxisBounds(baseline=0.5, lower=0.0, upper=1.5),
        RadarAxis.AGGRESSION: AxisBounds(baseline=0.25, lower=0.0, upper=0.70),
        RadarAxis.RESILIENCE: AxisBounds(baseline=0.40, lower=0.0, upper=0.80),
    },
)


@dataclass(frozen=True)
class CombinedCounters:
    """Raw counters summed over both opponent-type blocks."""

    games_played: int = 0
    wins: int = 0
    turns_played: int = 0
    turns_without_scoring: int = 0
    multi_word_plays: int = 0
    total_points_scored: int = 0
    tiles_played: int = 0
    own_tiles_in_words: int = 0
    total_tiles_in_words: int = 0
    tangles_caused: int = 0
    casts_on_opponent_lines: int = 0
    moves_on_opponent_lines: int = 0
    games_where_you_were_tangled: int = 0
    wins_while_tangled: int = 0

    @classmethod
    def combine(cls, *blocks: OpponentTypeStats) -> CombinedCounters:
        return cls(
            games_played=sum(b.games_played for b in blocks),
            wins=sum(b.wins for b in blocks),
            turns_played=sum(b.total_turns_played for b in blocks),
            turns_without_scoring=sum(b.total_turns_without_scoring for b in blocks),
            multi_word_plays=sum(b.total_multi_word_plays for b in blocks),
            total_points_scored=sum(b.total_points_scored for b in blocks),
            tiles_played=sum(b.total_tiles_played for b in blocks),
            own_tiles_in_words=sum(b.total_own_tiles_in_words for b in blocks),
            total_tiles_in_words=sum(b.total_tiles_in_words for b in blocks),
            tangles_caused=sum(b.total_tangles_caused for b in blocks),
            casts_on_opponent_lines=sum(b.total_casts_on_opponent_lines for b in blocks),
            moves_on_opponent_lines=sum(b.total_moves_on_opponent_lines for b in blocks),
            games_where_you_were_tangled=sum(b.games_where_you_were_tangled for b in blocks),
            wins_while_tangled=sum(b.wins_while_tangled for b in blocks),
        )


def normalize(value: float, lower: float, upper: float) -> float:
    """Map value linearly onto [0, 1]; values outside the range are clamped."""
    if upper <= lower:
        return NO_DATA_VALUE
    return max(0.0, min(1.0, (value - lower) / (upper - lower)))


def _normalize_axis(axis: RadarAxis, raw: float) -> float:
    bounds = AXIS_BOUNDS[axis]
    return normalize(raw, bounds.lower, bounds.upper)


def multi_word_score(c: CombinedCounters) -> float:
    scoring_turns = c.turns_played - c.turns_without_scoring
    if scoring_turns <= 0:
        return NO_DATA_VALUE
    return _normalize_axis(RadarAxis.MULTI_WORD, c.multi_word_plays / scoring_turns)


def value_score(c: CombinedCounters) -> float:
    if c.tiles_played <= 0:
        return NO_DATA_VALUE
    return _normalize_axis(RadarAxis.VALUE, c.total_points_scored / c.tiles_played)


def investment_score(c: CombinedCounters) -> float:
    if c.total_tiles_in_words <= 0:
        return NO_DATA_VALUE
    return _normalize_axis(RadarAxis.INVESTMENT, c.own_tiles_in_words / c.total_tiles_in_words)


def trapper_score(c: CombinedCounters) -> float:
    if c.games_played <= 0:
        return NO_DATA_VALUE
    return _normalize_axis(RadarAxis.TRAPPER, c.tangles_caused / c.games_played)


def aggression_score(c: CombinedCounters) -> float:
    if c.turns_played <= 0:
        return NO_DATA_VALUE
    # a turn offers two contact chances (move and cast); either or both count
    contact_plays = c.casts_on_opponent_lines + c.moves_on_opponent_lines
    return _normalize_axis(RadarAxis.AGGRESSION, contact_plays / c.turns_played)


def resilience_score(c: CombinedCounters) -> float:
    """Win rate when tangled.

    No games played gives NO_DATA_VALUE; games played without ever being
    tangled gives NEVER_TANGLED_RESILIENCE.
    """
    if c.games_played <= 0:
        return NO_DATA_VALUE
    if c.games_where_you_were_tangled <= 0:
        return NEVER_TANGLED_RESILIENCE
    return _normalize_axis(RadarAxis.RESILIENCE, c.wins_while_tangled / c.games_where_you_were_tangled)


def create_snapshot(profile: LifetimeProfile, *, captured_at: datetime | None = None) -> RadarSnapshot:
    """Create a radar snapshot from the profile's current cumulative counters."""
    combined = CombinedCounters.combine(profile.vs_ai, profile.vs_human)
    return RadarSnapshot(
        games_at_snapshot=profile.total_games,
        captured_at=captured_at or datetime.now(tz=UTC),
        multi_word=multi_word_score(combined),
        value=value_score(combined),
        investment=investment_score(combined),
        trapper=trapper_score(combined),
        aggression=aggression_score(combined),
        resilience=resilience_score(combined),
    )
