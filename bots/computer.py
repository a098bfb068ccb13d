"""Computer player decisions, routed by difficulty profile."""

from __future__ import annotations

import logging
from random import Random
from typing import List, Optional, Sequence, Union

from cribbage.cards import Card
from cribbage.counting import MAX_HAND_SCORE
from cribbage.rng import ai_random
from cribbage.rules_schema import DifficultyProfile
from cribbage.state import GameState, Player

from . import discard_ev, discard_heuristic, pegging_expert, pegging_heuristic
from .base import BotStrategy, actual_count
from .difficulty import resolve_difficulty

logger = logging.getLogger(__name__)

Difficulty = Union[str, DifficultyProfile, None]


def select_discard(
    hand: Sequence[Card],
    is_dealer: bool,
    difficulty: Difficulty = "normal",
    rng: Optional[Random] = None,
) -> List[Card]:
    """Return the four cards to keep; the other two go to the crib."""
    profile = resolve_difficulty(difficulty)
    if profile.discard_strategy == "expected-value":
        return discard_ev.select_discard(hand, is_dealer)
    return discard_heuristic.select_discard(hand, is_dealer)


def select_play(
    hand: Sequence[Card],
    round_cards: Sequence[Card],
    current_count: int,
    difficulty: Difficulty = "normal",
    rng: Optional[Random] = None,
) -> Optional[Card]:
    """Return the card to peg, or ``None`` when a go is the only option."""
    profile = resolve_difficulty(difficulty)
    if profile.pegging_strategy == "expert":
        return pegging_expert.select_play(hand, round_cards, current_count)
    return pegging_heuristic.select_play(hand, round_cards, current_count, rng=rng)


def select_claim(actual: int, difficulty: Difficulty = "normal", rng: Optional[Random] = None) -> int:
    """Return the score the computer announces for a hand worth ``actual``.

    Normal players occasionally miscount by the profile's error range in either
    direction; the expert sometimes overcounts on purpose to bait a muggins call.
    """
    profile = resolve_difficulty(difficulty)
    claimed = actual
    if profile.counting_error_rate and actual > 0 and ai_random(rng) < profile.counting_error_rate:
        error = -profile.counting_error_range if ai_random(rng) < 0.5 else profile.counting_error_range
        claimed = max(0, actual + error)
        logger.debug("Computer counting error: actual %d, claiming %d", actual, claimed)
    elif profile.overcount_rate and ai_random(rng) < profile.overcount_rate:
        claimed = actual + profile.overcount_range
        logger.debug("Computer overcount bluff: actual %d, claiming %d", actual, claimed)
    return min(claimed, MAX_HAND_SCORE)


def select_muggins_response(claimed: int, actual: int) -> bool:
    """Return True when the computer should call muggins on a claim."""
    return claimed > actual


class ComputerBot(BotStrategy):
    """The app's computer opponent wrapped as an arena strategy."""

    def __init__(self, difficulty: Difficulty = "normal", rng: Optional[Random] = None) -> None:
        self.profile = resolve_difficulty(difficulty)
        self.name = f"Computer ({self.profile.name})"
        self._rng = rng

    def choose_discard(self, state: GameState, player: Player) -> Sequence[Card]:
        hand = list(state.hands.get(player))
        kept = select_discard(hand, state.dealer is player, self.profile, rng=self._rng)
        return [card for card in hand if card not in kept]

    def choose_play(self, state: GameState, player: Player) -> Optional[Card]:
        play = state.play_state
        return select_play(
            play.play_hands.get(player), play.round_cards, play.current_count, self.profile, rng=self._rng
        )

    def choose_claim(self, state: GameState, player: Player) -> int:
        return select_claim(actual_count(state), self.profile, rng=self._rng)

    def call_muggins(self, state: GameState, player: Player) -> bool:
        counting = state.counting_state
        return select_muggins_response(counting.claimed_score, actual_count(state))
