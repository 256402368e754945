"""Match lifecycle for statistics tracking on behalf of the local player.

StatsSession owns the local player's lifetime profile and at most one
in-progress ledger. The ledger is checkpointed after every move so an
interrupted match can be resumed.

End-of-match ordering:
1. complete the ledger with the authoritative result
2. calculate match stats
3. fold them into the profile in memory
4. archive the ledger and save the profile
5. only then delete the in-progress checkpoint

A crash at any step leaves either a resumable checkpoint or a fully updated
profile. A checkpoint that survives step 5 is recognised on resume and
dropped without counting the match twice. Abandoning a match drops the
checkpoint and leaves the profile alone.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from game.stats.exceptions import InvalidStateError, MissingDataError
from game.stats.ledger import MatchLedger
from game.stats.match_stats import calculate_match_stats
from game.stats.updater import update_from_match

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from game.session.stats_store import StatsRepository
    from game.stats.enums import PlayerColor
    from game.stats.match_stats import MatchStats
    from game.stats.profile import LifetimeProfile
    from game.stats.records import MatchResult, MoveRecord, PlayerInfo

logger = structlog.get_logger()


class StatsSession:
    """Track the local player's current match and lifetime profile."""

    def __init__(self, repository: StatsRepository, local_player: PlayerInfo) -> None:
        self._repository = repository
        self._local_player = local_player
        self._profile = repository.load_profile(local_player)
        self._current: MatchLedger | None = None
        self._last_match_stats: MatchStats | None = None

    @property
    def profile(self) -> LifetimeProfile:
        return self._profile

    @property
    def current_ledger(self) -> MatchLedger | None:
        return self._current

    @property
    def last_match_stats(self) -> MatchStats | None:
        """Stats of the most recently finished match, for the end screen."""
        return self._last_match_stats

    @property
    def move_count(self) -> int:
        return len(self._current.moves) if self._current is not None else 0

    def _require_current(self, operation: str) -> MatchLedger:
        if self._current is None:
            raise InvalidStateError(f"cannot {operation}: no match in progress")
        return self._current

    def local_color(self, ledger: MatchLedger) -> PlayerColor:
        """Return the color the local player has in ledger."""
        color = ledger.color_of(self._local_player.player_id)
        if color is None:
            raise MissingDataError(
                f"local player {self._local_player.player_id} is not part of match {ledger.match_id}",
            )
        return color

    def start_match(  # noqa: PLR0913
        self,
        yellow: PlayerInfo,
        blue: PlayerInfo,
        *,
        yellow_hand: Sequence[str] = (),
        blue_hand: Sequence[str] = (),
        seed: int = 0,
        started_at: datetime | None = None,
    ) -> MatchLedger:
        """Start tracking a new match and checkpoint it immediately."""
        ledger = MatchLedger.create(yellow, blue, seed, started_at=started_at)
        ledger = ledger.capture_initial_hands(yellow_hand, blue_hand)
        self.local_color(ledger)

        if self._current is not None:
            logger.warning("replacing unfinished match", match_id=self._current.match_id)
        self._repository.save_current_match(ledger)
        self._current = ledger
        structlog.contextvars.bind_contextvars(match_id=ledger.match_id)
        logger.info("match started", vs_ai=ledger.is_vs_ai)
        return ledger

    def try_resume(self) -> MatchLedger | None:
        """Reload a checkpointed in-progress match, if there is one.

        A checkpoint whose match already sits in the archive is left over
        from an end_match that failed to delete it. It is not resumed: the
        archived match is folded into the profile if the profile has not
        seen it yet, and the checkpoint is dropped.
        """
        ledger = self._repository.load_current_match()
        if ledger is None or not ledger.is_in_progress:
            return None
        archived = self._repository.load_archived_match(ledger.match_id)
        if archived is not None:
            self._recover_archived(archived)
            return None
        self._current = ledger
        structlog.contextvars.bind_contextvars(match_id=ledger.match_id)
        logger.info("match resumed", turn=len(ledger.moves))
        return ledger

    def _recover_archived(self, archived: MatchLedger) -> None:
        if self._profile.last_match_id != archived.match_id:
            stats = calculate_match_stats(archived)
            profile = update_from_match(self._profile, stats, self.local_color(archived))
            self._repository.save_profile(profile)
            self._profile = profile
            logger.warning("folded archived match missing from profile", match_id=archived.match_id)
        self._repository.delete_current_match()
        logger.warning("dropped checkpoint of already archived match", match_id=archived.match_id)

    def record_move(self, record: MoveRecord) -> None:
        """Append a finalized move and checkpoint the ledger."""
        ledger = self._require_current("record move").add_move(record)
        self._repository.save_current_match(ledger)
        self._current = ledger

    def end_match(self, result: MatchResult, *, ended_at: datetime | None = None) -> MatchStats:
        """Finish the current match, update the profile and persist both."""
        ledger = self._require_current("end match").complete(result, ended_at=ended_at)
        stats = calculate_match_stats(ledger)
        profile = update_from_match(self._profile, stats, self.local_color(ledger))

        try:
            self._repository.archive_match(ledger)
            self._repository.save_profile(profile)
        except OSError:
            logger.exception("failed to persist finished match, checkpoint kept")
            raise

        # profile and archive are durable from here on
        self._profile = profile
        self._last_match_stats = stats
        self._current = None
        try:
            self._repository.delete_current_match()
        except OSError:
            logger.exception("failed to delete checkpoint of archived match")
            raise
        finally:
            structlog.contextvars.unbind_contextvars("match_id")
        logger.info("match ended", match_id=ledger.match_id, winner=result.winner, total_games=profile.total_games)
        return stats

    def abandon_match(self) -> None:
        """Drop the current match without recording any stats."""
        if self._current is None:
            return
        logger.info("match abandoned")
        self._repository.delete_current_match()
        self._current = None
        structlog.contextvars.unbind_contextvars("match_id")
