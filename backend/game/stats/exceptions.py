"""Typed exceptions for the statistics core.

Calculators fail fast with a StatsError subclass when handed structurally
invalid input, instead of producing degenerate aggregates. Division-prone
ratios never raise; they fall back to documented defaults.
"""


class StatsError(Exception):
    """Base exception for statistics processing failures."""


class InvalidStateError(StatsError):
    """Operation attempted outside the ledger's valid lifecycle phase.

    Examples: appending a move to a completed ledger, completing a ledger
    twice, or computing stats for a match that has no result yet.
    """


class MissingDataError(StatsError):
    """A required identity or result field is absent."""
