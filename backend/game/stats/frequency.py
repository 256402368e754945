"""Frequency table helpers with reproducible tie-breaking.

Letter and word play counts are kept in insertion-ordered dicts. Picking a
favorite scans the table linearly in that order and keeps the first key that
reaches the maximum, so equal counts always resolve to the key seen first.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping


def most_frequent(counts: Mapping[str, int]) -> tuple[str, int] | None:
    """Return (key, count) of the first key with the highest count, or None if empty."""
    best: tuple[str, int] | None = None
    for key, count in counts.items():
        if best is None or count > best[1]:
            best = (key, count)
    return best


def increment(counts: dict[str, int], key: str, amount: int = 1) -> None:
    """Add amount to counts[key], appending the key if it is new."""
    counts[key] = counts.get(key, 0) + amount


def merge_counts(target: Mapping[str, int], source: Mapping[str, int]) -> dict[str, int]:
    """Return a new table with source summed into target.

    Existing keys keep their position; keys new to target are appended in
    source order.
    """
    merged = dict(target)
    for key, count in source.items():
        increment(merged, key, count)
    return merged
