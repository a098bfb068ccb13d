"""Common bot strategy interfaces."""

from __future__ import annotations

from typing import Optional, Sequence

from cribbage.cards import Card
from cribbage.counting import current_count_phase, hand_to_count
from cribbage.mechanics import playable_cards
from cribbage.scoring import score_hand
from cribbage.state import GameState, Player


def actual_count(state: GameState) -> int:
    """True value of the hand or crib currently being counted."""
    cards, is_crib = hand_to_count(state, current_count_phase(state))
    return score_hand(cards, state.cut_card, is_crib).score


class BotStrategy:
    """Base class for bot policies.

    Bots only read the state they are handed; the arena turns their choices
    into actions.
    """

    name: str = "BaseBot"

    def choose_cut_index(self, state: GameState, player: Player) -> Optional[int]:
        """Return a deck index to cut at, or None for a random cut."""
        return None

    def choose_discard(self, state: GameState, player: Player) -> Sequence[Card]:
        """Return exactly two cards to send to the crib."""
        return list(state.hands.get(player)[-2:])

    def choose_play(self, state: GameState, player: Player) -> Optional[Card]:
        """Return the card to peg, or None to say go."""
        legal = playable_cards(state, player)
        return legal[0] if legal else None

    def choose_claim(self, state: GameState, player: Player) -> int:
        """Return the score to announce for the hand being counted."""
        return actual_count(state)

    def call_muggins(self, state: GameState, player: Player) -> bool:
        """Return True to challenge the opponent's claimed count."""
        return False
