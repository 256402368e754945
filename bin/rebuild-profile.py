"""Rebuild the local player's lifetime profile from archived match ledgers.

Replays every completed ledger in the archive through the match stats
calculator and lifetime updater, oldest first, and prints a summary. With
--write the rebuilt profile replaces the stored one.

Usage:
    uv run python bin/rebuild-profile.py
    uv run python bin/rebuild-profile.py --data-dir path/to/stats --write
"""

from __future__ import annotations

import argparse
import logging
import sys

from game.server.settings import StatsSettings
from game.session.stats_store import StatsLoadError, StatsRepository
from game.stats.updater import rebuild_profile
from shared.logging import setup_logging
from shared.storage import LocalStatsStorage


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--data-dir", help="stats storage directory (default: STATS_DATA_DIR)")
    parser.add_argument("--write", action="store_true", help="save the rebuilt profile")
    args = parser.parse_args()

    setup_logging(level=logging.WARNING)
    settings = StatsSettings()
    data_dir = args.data_dir or settings.data_dir
    repository = StatsRepository(LocalStatsStorage(data_dir))
    player = settings.local_player()

    try:
        ledgers = repository.load_all_archived_matches()
    except StatsLoadError as exc:
        print(f"Cannot read archive in {data_dir}: {exc}")
        return 1

    profile = rebuild_profile(player, ledgers)

    print(f"Player: {profile.display_name} ({profile.player_id})")
    print(f"  Archived matches: {len(ledgers)}")
    print(f"  Games folded:     {profile.total_games}")
    print(f"  Record:           {profile.total_wins}W {profile.total_losses}L {profile.total_ties}T")
    print(f"  Highest score:    {profile.highest_score}")
    print(f"  Longest word:     {profile.longest_word or '-'}")
    print(f"  Favorite letter:  {profile.favorite_letter or '-'}")
    print(f"  Radar snapshots:  {len(profile.radar_history)}")
    latest = profile.latest_snapshot
    if latest is not None:
        for axis, value in latest.values().items():
            print(f"    {axis.value:<11} {value:.2f}")

    if args.write:
        repository.save_profile(profile)
        print(f"Saved rebuilt profile to {data_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
