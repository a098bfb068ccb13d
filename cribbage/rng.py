"""Swappable random source shared by dealing and the computer players.

By default the platform generator is used. ``seed_rng`` pins every consumer to
a Mulberry32 stream so whole games replay identically.
"""

from __future__ import annotations

import logging
import os
from random import Random
from typing import Optional

logger = logging.getLogger(__name__)

SEED_ENV_VAR = "TEST_DECK_SEED"

_MASK32 = 0xFFFFFFFF


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK32


class Mulberry32(Random):
    """32-bit Mulberry32 generator exposed through the ``random.Random`` API."""

    def __init__(self, seed: int = 0) -> None:
        self._state = 0
        super().__init__(seed)

    def seed(self, a=None, version: int = 2) -> None:
        if a is None:
            a = int.from_bytes(os.urandom(4), "little")
        self._state = int(a) & _MASK32
        self.gauss_next = None

    def random(self) -> float:
        self._state = (self._state + 0x6D2B79F5) & _MASK32
        t = self._state
        t = _imul(t ^ (t >> 15), 1 | t)
        t = ((t + _imul(t ^ (t >> 7), 61 | t)) & _MASK32) ^ t
        return ((t ^ (t >> 14)) & _MASK32) / 4294967296

    def getstate(self):
        return self._state, self.gauss_next

    def setstate(self, state) -> None:
        self._state, self.gauss_next = state


_source: Random = Random()


def get_rng() -> Random:
    """Return the shared random source."""
    return _source


def seed_rng(seed: Optional[int]) -> Random:
    """Pin the shared source to ``seed``, or restore the platform source with ``None``."""
    global _source
    if seed is None:
        _source = Random()
    else:
        _source = Mulberry32(seed)
    logger.debug("Random source reseeded with %r", seed)
    return _source


def set_rng(source: Random) -> Random:
    """Install an arbitrary ``Random`` instance as the shared source."""
    global _source
    _source = source
    return _source


def seed_from_env() -> Optional[int]:
    """Seed the shared source from ``TEST_DECK_SEED`` when it is set."""
    raw = os.environ.get(SEED_ENV_VAR)
    if not raw:
        return None
    try:
        seed = int(raw, 10)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", SEED_ENV_VAR, raw)
        return None
    seed_rng(seed)
    return seed


def ai_random(rng: Optional[Random] = None) -> float:
    return (rng or _source).random()
