"""Map match ledgers and lifetime profiles onto blob storage keys.

Layout:
- current_match: checkpoint of the single in-progress ledger
- archive/<match_id>: completed ledgers
- profiles/<player_id>: lifetime profiles

Aggregates are encoded as pydantic JSON. A blob that exists but cannot be
decoded raises StatsLoadError instead of being replaced, so an unreadable
profile is never silently overwritten with an empty one.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from game.stats.exceptions import InvalidStateError
from game.stats.ledger import MatchLedger
from game.stats.profile import PROFILE_SCHEMA_VERSION, LifetimeProfile

if TYPE_CHECKING:
    from game.stats.records import PlayerInfo
    from shared.storage import StatsStorage

logger = structlog.get_logger()

CURRENT_MATCH_KEY = "current_match"
ARCHIVE_PREFIX = "archive"
PROFILE_PREFIX = "profiles"


class StatsLoadError(Exception):
    """Raised when a stored ledger or profile cannot be decoded."""


class StatsRepository:
    """Persist ledgers and profiles through an opaque StatsStorage."""

    def __init__(self, storage: StatsStorage) -> None:
        self._storage = storage

    # -- in-progress checkpoint ------------------------------------------

    def save_current_match(self, ledger: MatchLedger) -> None:
        self._storage.save(CURRENT_MATCH_KEY, ledger.model_dump_json())

    def load_current_match(self) -> MatchLedger | None:
        content = self._storage.load(CURRENT_MATCH_KEY)
        if content is None:
            return None
        return _decode_ledger(content, CURRENT_MATCH_KEY)

    def has_current_match(self) -> bool:
        return self._storage.load(CURRENT_MATCH_KEY) is not None

    def delete_current_match(self) -> None:
        self._storage.delete(CURRENT_MATCH_KEY)

    # -- archive -----------------------------------------------------------

    def archive_match(self, ledger: MatchLedger) -> None:
        """Store a completed ledger under its match id."""
        if ledger.is_in_progress:
            raise InvalidStateError(f"cannot archive match {ledger.match_id}: still in progress")
        self._storage.save(f"{ARCHIVE_PREFIX}/{ledger.match_id}", ledger.model_dump_json(indent=2))
        logger.info("archived match", match_id=ledger.match_id)

    def load_archived_match(self, match_id: str) -> MatchLedger | None:
        key = f"{ARCHIVE_PREFIX}/{match_id}"
        content = self._storage.load(key)
        if content is None:
            return None
        return _decode_ledger(content, key)

    def load_all_archived_matches(self) -> list[MatchLedger]:
        ledgers = []
        for key in self._storage.list_keys(ARCHIVE_PREFIX):
            content = self._storage.load(key)
            if content is not None:
                ledgers.append(_decode_ledger(content, key))
        return ledgers

    # -- lifetime profiles ---------------------------------------------------

    def save_profile(self, profile: LifetimeProfile) -> None:
        self._storage.save(f"{PROFILE_PREFIX}/{profile.player_id}", profile.model_dump_json(indent=2))

    def load_profile(self, player: PlayerInfo) -> LifetimeProfile:
        """Load the player's profile, creating an empty one if none is stored."""
        key = f"{PROFILE_PREFIX}/{player.player_id}"
        content = self._storage.load(key)
        if content is None:
            logger.info("creating new lifetime profile", player_id=player.player_id)
            return LifetimeProfile.create(player.player_id, player.display_name)
        try:
            profile = LifetimeProfile.model_validate_json(content)
        except ValidationError as exc:
            raise StatsLoadError(f"Failed to parse lifetime profile from {key}") from exc
        if profile.schema_version != PROFILE_SCHEMA_VERSION:
            raise StatsLoadError(
                f"Profile schema version mismatch in {key}: "
                f"expected {PROFILE_SCHEMA_VERSION}, got {profile.schema_version}",
            )
        return profile


def _decode_ledger(content: str, key: str) -> MatchLedger:
    try:
        return MatchLedger.model_validate_json(content)
    except ValidationError as exc:
        raise StatsLoadError(f"Failed to parse match ledger from {key}") from exc
