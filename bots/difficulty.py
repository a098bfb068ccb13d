"""Built-in computer difficulty profiles."""

from __future__ import annotations

import logging
from typing import Dict, Union

from cribbage.rules_schema import DifficultyProfile

logger = logging.getLogger(__name__)

DEFAULT_DIFFICULTY = "normal"

DIFFICULTY_PROFILES: Dict[str, DifficultyProfile] = {
    "normal": DifficultyProfile(
        name="Normal",
        description="Classic computer opponent",
        discard_strategy="heuristic",
        pegging_strategy="heuristic",
        counting_error_rate=0.10,
        counting_error_range=2,
    ),
    "expert": DifficultyProfile(
        name="Expert",
        description="Evaluates every possible cut card and sometimes overcounts as a bluff",
        discard_strategy="expected-value",
        pegging_strategy="expert",
        counting_error_rate=0.0,
        counting_error_range=0,
        overcount_rate=0.15,
        overcount_range=2,
    ),
}


def resolve_difficulty(difficulty: Union[str, DifficultyProfile, None] = None) -> DifficultyProfile:
    """Return the profile for ``difficulty``; unknown names fall back to normal."""
    if isinstance(difficulty, DifficultyProfile):
        return difficulty
    name = difficulty or DEFAULT_DIFFICULTY
    profile = DIFFICULTY_PROFILES.get(name)
    if profile is None:
        logger.warning("Unknown difficulty %r; using %s", name, DEFAULT_DIFFICULTY)
        profile = DIFFICULTY_PROFILES[DEFAULT_DIFFICULTY]
    return profile
