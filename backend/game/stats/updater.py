"""
Fold per-match statistics into a player's lifetime profile.

update_from_match() is not idempotent: it must be called exactly once per
finished match, after a successful calculate_match_stats(). It returns a new
LifetimeProfile and never mutates its input, so a failure part-way through
leaves the caller's profile untouched.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from game.stats.enums import MatchOutcome, MatchWinner, OpponentType, PlayerColor
from game.stats.frequency import merge_counts, most_frequent
from game.stats.match_stats import calculate_match_stats
from game.stats.profile import LifetimeProfile
from game.stats.radar import create_snapshot

if TYPE_CHECKING:
    from collections.abc import Iterable

    from game.stats.ledger import MatchLedger
    from game.stats.match_stats import MatchStats, PlayerMatchStats
    from game.stats.profile import OpponentTypeStats
    from game.stats.records import PlayerInfo

logger = structlog.get_logger()

# A radar snapshot is appended whenever total games reaches a multiple of this.
SNAPSHOT_INTERVAL = 50

# OpponentTypeStats running sum -> PlayerMatchStats per-match counter
_SUMMED_COUNTERS: tuple[tuple[str, str], ...] = (
    ("total_points_scored", "final_score"),
    ("total_turns_played", "total_turns"),
    ("total_words_scored", "total_words_scored"),
    ("total_multi_word_plays", "multi_word_plays"),
    ("total_tiles_cycled", "total_tiles_cycled"),
    ("total_times_cycled", "times_cycled"),
    ("total_times_tangled", "times_tangled"),
    ("total_self_tangles", "self_tangles"),
    ("total_tangles_caused", "tangles_caused"),
    ("total_turns_without_scoring", "turns_without_scoring"),
    ("total_casts_on_opponent_lines", "casts_on_opponent_lines"),
    ("total_moves_on_opponent_lines", "moves_on_opponent_lines"),
    ("total_tiles_played", "total_tiles_played"),
    ("total_own_tiles_in_words", "own_tiles_in_scored_words"),
    ("total_tiles_in_words", "total_tiles_in_scored_words"),
)


def classify_outcome(winner: MatchWinner, player_color: PlayerColor) -> MatchOutcome:
    """Classify a match result from player_color's point of view."""
    if winner is MatchWinner.TIE:
        return MatchOutcome.TIE
    if winner.color is player_color:
        return MatchOutcome.WIN
    return MatchOutcome.LOSS


def _updated_block(block: OpponentTypeStats, player: PlayerMatchStats, outcome: MatchOutcome) -> OpponentTypeStats:
    updates: dict[str, Any] = {
        "games_played": block.games_played + 1,
        "wins": block.wins + (outcome is MatchOutcome.WIN),
        "losses": block.losses + (outcome is MatchOutcome.LOSS),
        "ties": block.ties + (outcome is MatchOutcome.TIE),
    }
    for block_field, match_field in _SUMMED_COUNTERS:
        updates[block_field] = getattr(block, block_field) + getattr(player, match_field)

    if player.was_tangled_this_match:
        updates["games_where_you_were_tangled"] = block.games_where_you_were_tangled + 1
        if outcome is MatchOutcome.WIN:
            updates["wins_while_tangled"] = block.wins_while_tangled + 1

    if player.final_score > block.highest_score:
        updates["highest_score"] = player.final_score
    if player.longest_word_length > block.longest_word_length:
        updates["longest_word"] = player.longest_word
        updates["longest_word_length"] = player.longest_word_length
    if player.best_scoring_turn > block.best_scoring_turn:
        updates["best_scoring_turn"] = player.best_scoring_turn

    return block.model_copy(update=updates)


def _record_updates(profile: LifetimeProfile, player: PlayerMatchStats, match_id: str) -> dict[str, Any]:
    updates: dict[str, Any] = {}
    if player.final_score > profile.highest_score:
        updates["highest_score"] = player.final_score
        updates["highest_score_match_id"] = match_id
    if player.longest_word_length > profile.longest_word_length:
        updates["longest_word"] = player.longest_word
        updates["longest_word_length"] = player.longest_word_length
        updates["longest_word_match_id"] = match_id
    if player.best_scoring_turn > profile.best_scoring_turn:
        updates["best_scoring_turn"] = player.best_scoring_turn
        updates["best_scoring_turn_match_id"] = match_id
    return updates


def _favorite_updates(profile: LifetimeProfile, player: PlayerMatchStats) -> dict[str, Any]:
    letter_counts = merge_counts(profile.all_time_letter_counts, player.letter_play_counts)
    word_counts = merge_counts(profile.all_time_word_counts, player.word_play_counts)
    top_letter = most_frequent(letter_counts)
    top_word = most_frequent(word_counts)
    return {
        "all_time_letter_counts": letter_counts,
        "favorite_letter": top_letter[0] if top_letter else None,
        "all_time_word_counts": word_counts,
        "favorite_word": top_word[0] if top_word else None,
        "unique_words_ever_played": len(word_counts),
    }


def update_from_match(
    profile: LifetimeProfile,
    stats: MatchStats,
    player_color: PlayerColor,
) -> LifetimeProfile:
    """
    Return a new profile with one finished match folded in.

    Args:
        profile: The player's current lifetime profile
        stats: Stats calculated from the finished match
        player_color: Which color the profile's player had in that match

    Returns:
        New LifetimeProfile. A radar snapshot is appended when the total game
        count becomes a positive multiple of SNAPSHOT_INTERVAL.

    """
    player = stats.stats_for(player_color)
    opponent_type = OpponentType.AI if stats.was_vs_ai else OpponentType.HUMAN
    outcome = classify_outcome(stats.winner, player_color)

    block_key = "vs_ai" if opponent_type is OpponentType.AI else "vs_human"
    updates: dict[str, Any] = {
        block_key: _updated_block(profile.block_for(opponent_type), player, outcome),
        **_record_updates(profile, player, stats.match_id),
        **_favorite_updates(profile, player),
        "last_match_time": stats.ended_at,
        "last_match_id": stats.match_id,
    }
    if profile.first_match_time is None:
        updates["first_match_time"] = stats.ended_at

    updated = profile.model_copy(update=updates)

    total_games = updated.total_games
    if total_games > 0 and total_games % SNAPSHOT_INTERVAL == 0:
        snapshot = create_snapshot(updated, captured_at=stats.ended_at)
        updated = updated.model_copy(update={"radar_history": (*updated.radar_history, snapshot)})
        logger.info("radar snapshot captured", player_id=profile.player_id, games=total_games)

    return updated


def rebuild_profile(player: PlayerInfo, ledgers: Iterable[MatchLedger]) -> LifetimeProfile:
    """
    Reconstruct a profile from scratch by replaying archived ledgers.

    Completed ledgers the player took part in are folded oldest first
    (by end time, then match id). In-progress ledgers and matches the
    player did not play are skipped.
    """
    played: list[tuple[MatchLedger, PlayerColor]] = []
    for ledger in ledgers:
        color = ledger.color_of(player.player_id)
        if ledger.ended_at is not None and color is not None:
            played.append((ledger, color))
    played.sort(key=lambda item: (item[0].ended_at, item[0].match_id))

    profile = LifetimeProfile.create(player.player_id, player.display_name)
    for ledger, color in played:
        profile = update_from_match(profile, calculate_match_stats(ledger), color)
    logger.info("profile rebuilt", player_id=player.player_id, matches=len(played))
    return profile
