"""Core rules engine for two-player cribbage."""

__all__ = [
    "cards",
    "deck",
    "rng",
    "scoring",
    "state",
    "actions",
    "exceptions",
    "dealing",
    "pegging",
    "counting",
    "game",
    "rules_schema",
    "serialize",
    "service",
]
