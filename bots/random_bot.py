"""Random baseline bot."""

from __future__ import annotations

import random
from typing import Optional, Sequence

from cribbage.cards import Card
from cribbage.mechanics import playable_cards
from cribbage.state import GameState, Phase, Player

from .base import BotStrategy


class RandomBot(BotStrategy):
    name = "Random"

    def __init__(self, seed: Optional[int] = None, muggins_rate: float = 0.1) -> None:
        self._rng = random.Random(seed)
        self.muggins_rate = muggins_rate

    def choose_cut_index(self, state: GameState, player: Player) -> Optional[int]:
        taken = None
        if state.phase is Phase.CUTTING_FOR_DEALER:
            taken = state.cut_for_dealer.cards.get(player.opponent)
        choices = [index for index, card in enumerate(state.remaining_deck) if card != taken]
        return self._rng.choice(choices)

    def choose_discard(self, state: GameState, player: Player) -> Sequence[Card]:
        return self._rng.sample(list(state.hands.get(player)), 2)

    def choose_play(self, state: GameState, player: Player) -> Optional[Card]:
        legal = playable_cards(state, player)
        if not legal:
            return None
        return self._rng.choice(legal)

    def call_muggins(self, state: GameState, player: Player) -> bool:
        return self._rng.random() < self.muggins_rate
