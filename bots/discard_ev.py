"""Expected-value discard used by the expert computer player.

Every keep/discard split is scored against all 46 unseen cut cards. The crib's
contribution comes from a static table of average crib values per discarded
rank pair, added for the dealer and subtracted for the pone.
"""

from __future__ import annotations

import logging
from itertools import combinations
from typing import Dict, List, Sequence

from cribbage.cards import Card, cards_label
from cribbage.deck import HAND_SIZE, build_deck
from cribbage.scoring import KEEP_SIZE, score_hand

logger = logging.getLogger(__name__)

DEFAULT_CRIB_VALUE = 3.5

# Average crib points contributed by a discarded pair, keyed low rank first.
CRIB_DISCARD_VALUES: Dict[str, float] = {
    "A-A": 5.4, "A-2": 4.6, "A-3": 4.3, "A-4": 5.1, "A-5": 5.9, "A-6": 3.8, "A-7": 3.7,
    "A-8": 3.6, "A-9": 3.4, "A-10": 3.6, "A-J": 3.7, "A-Q": 3.6, "A-K": 3.5,
    "2-2": 5.8, "2-3": 5.1, "2-4": 4.4, "2-5": 6.0, "2-6": 4.1, "2-7": 4.0, "2-8": 3.9,
    "2-9": 3.6, "2-10": 3.7, "2-J": 3.8, "2-Q": 3.7, "2-K": 3.6,
    "3-3": 5.4, "3-4": 4.3, "3-5": 6.0, "3-6": 4.1, "3-7": 4.4, "3-8": 3.8, "3-9": 3.5,
    "3-10": 3.6, "3-J": 3.7, "3-Q": 3.6, "3-K": 3.5,
    "4-4": 5.4, "4-5": 6.3, "4-6": 4.4, "4-7": 4.0, "4-8": 3.8, "4-9": 3.5, "4-10": 3.6,
    "4-J": 3.7, "4-Q": 3.6, "4-K": 3.5,
    "5-5": 8.5, "5-6": 6.1, "5-7": 5.6, "5-8": 5.5, "5-9": 5.1, "5-10": 6.1, "5-J": 6.5,
    "5-Q": 6.1, "5-K": 6.0,
    "6-6": 5.6, "6-7": 5.5, "6-8": 4.9, "6-9": 5.2, "6-10": 3.7, "6-J": 3.8, "6-Q": 3.7,
    "6-K": 3.6,
    "7-7": 5.7, "7-8": 5.5, "7-9": 4.4, "7-10": 3.6, "7-J": 3.7, "7-Q": 3.6, "7-K": 3.5,
    "8-8": 5.5, "8-9": 4.2, "8-10": 3.5, "8-J": 3.6, "8-Q": 3.5, "8-K": 3.4,
    "9-9": 5.1, "9-10": 3.6, "9-J": 3.7, "9-Q": 3.6, "9-K": 3.5,
    "10-10": 4.0, "10-J": 4.1, "10-Q": 3.9, "10-K": 3.8,
    "J-J": 4.5, "J-Q": 4.0, "J-K": 3.9,
    "Q-Q": 4.4, "Q-K": 3.8,
    "K-K": 4.3,
}


def crib_value(discarded: Sequence[Card]) -> float:
    low, high = sorted(discarded, key=lambda card: card.order)
    return CRIB_DISCARD_VALUES.get(f"{low.rank.value}-{high.rank.value}", DEFAULT_CRIB_VALUE)


def expected_hand_value(kept: Sequence[Card], unseen: Sequence[Card]) -> float:
    total = sum(score_hand(kept, cut).score for cut in unseen)
    return total / len(unseen)


def select_discard(hand: Sequence[Card], is_dealer: bool) -> List[Card]:
    """Return the four cards to keep with the best expected hand plus crib value."""
    hand = list(hand)
    if len(hand) != HAND_SIZE:
        logger.error("Expected-value discard called with %d cards", len(hand))
        return hand[:KEEP_SIZE]

    unseen = [card for card in build_deck() if card not in hand]
    best: List[Card] = []
    best_score = float("-inf")
    best_parts = (0.0, 0.0)
    for i, j in combinations(range(len(hand)), 2):
        kept = [card for index, card in enumerate(hand) if index not in (i, j)]
        hand_ev = expected_hand_value(kept, unseen)
        crib_ev = crib_value((hand[i], hand[j]))
        combined = hand_ev + (crib_ev if is_dealer else -crib_ev)
        if combined > best_score:
            best_score = combined
            best = kept
            best_parts = (hand_ev, crib_ev)

    if len(best) != KEEP_SIZE:
        logger.error("Expected-value discard produced %d cards", len(best))
        return hand[:KEEP_SIZE]
    logger.debug(
        "EV discard kept %s: hand %.2f, crib %.2f, combined %.2f, dealer=%s",
        cards_label(best),
        best_parts[0],
        best_parts[1],
        best_score,
        is_dealer,
    )
    return best
