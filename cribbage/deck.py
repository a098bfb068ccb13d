"""Deck creation and dealing utilities for cribbage."""

from __future__ import annotations

from random import Random
from typing import List, Optional, Sequence, Tuple

from .cards import Card, RANK_ORDER, SUIT_ORDER
from .rng import get_rng

HAND_SIZE = 6


def build_deck() -> List[Card]:
    """Return the ordered 52-card deck."""
    return [Card(rank, suit) for suit in SUIT_ORDER for rank in RANK_ORDER]


def shuffle_deck(cards: Sequence[Card], *, rng: Optional[Random] = None) -> List[Card]:
    """Return a shuffled copy of ``cards``; the input is left untouched."""
    shuffled = list(cards)
    (rng or get_rng()).shuffle(shuffled)
    return shuffled


def deal_two_player(
    *,
    rng: Optional[Random] = None,
    deck: Optional[Sequence[Card]] = None,
) -> Tuple[Tuple[Card, ...], Tuple[Card, ...], Tuple[Card, ...]]:
    """Deal two 6-card hands; returns (player1 hand, player2 hand, rest of deck).

    An injected ``deck`` is dealt in order without shuffling.
    """
    if deck is not None:
        cards = list(deck)
    else:
        cards = shuffle_deck(build_deck(), rng=rng)
    if len(cards) < 2 * HAND_SIZE + 1:
        raise ValueError("Deck must hold at least 13 cards to deal and cut.")
    if len(set(cards)) != len(cards):
        raise ValueError("Deck must not contain duplicate cards.")

    hand1 = tuple(cards[0:HAND_SIZE])
    hand2 = tuple(cards[HAND_SIZE : 2 * HAND_SIZE])
    rest = tuple(cards[2 * HAND_SIZE :])
    return hand1, hand2, rest
