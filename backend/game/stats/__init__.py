"""Match statistics and player profiling: ledger, calculators and lifetime profile."""

from game.stats.enums import MatchOutcome, MatchWinner, OpponentType, PlayerColor, RadarAxis
from game.stats.exceptions import InvalidStateError, MissingDataError, StatsError
from game.stats.ledger import MatchLedger
from game.stats.match_stats import MatchStats, PlayerMatchStats, calculate_match_stats
from game.stats.profile import PROFILE_SCHEMA_VERSION, LifetimeProfile, OpponentTypeStats, RadarSnapshot
from game.stats.radar import create_snapshot
from game.stats.records import HexCoord, MatchResult, MoveRecord, PlayerInfo, TangleEvent, WordScored
from game.stats.updater import SNAPSHOT_INTERVAL, rebuild_profile, update_from_match

__all__ = [
    "PROFILE_SCHEMA_VERSION",
    "SNAPSHOT_INTERVAL",
    "HexCoord",
    "InvalidStateError",
    "LifetimeProfile",
    "MatchLedger",
    "MatchOutcome",
    "MatchResult",
    "MatchStats",
    "MatchWinner",
    "MissingDataError",
    "MoveRecord",
    "OpponentType",
    "OpponentTypeStats",
    "PlayerColor",
    "PlayerInfo",
    "PlayerMatchStats",
    "RadarAxis",
    "RadarSnapshot",
    "StatsError",
    "TangleEvent",
    "WordScored",
    "calculate_match_stats",
    "create_snapshot",
    "rebuild_profile",
    "update_from_match",
]
