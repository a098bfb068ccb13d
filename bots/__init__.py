"""Computer players and bot strategies for cribbage."""

from .base import BotStrategy
from .computer import ComputerBot, select_claim, select_discard, select_muggins_response, select_play
from .difficulty import DIFFICULTY_PROFILES, resolve_difficulty
from .random_bot import RandomBot

__all__ = [
    "BotStrategy",
    "ComputerBot",
    "RandomBot",
    "DIFFICULTY_PROFILES",
    "resolve_difficulty",
    "select_discard",
    "select_play",
    "select_claim",
    "select_muggins_response",
]
