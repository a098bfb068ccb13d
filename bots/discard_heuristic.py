"""Fast discard heuristic used by the normal computer player."""

from __future__ import annotations

import logging
from itertools import combinations
from typing import List, Sequence

from cribbage.cards import Card, Rank, is_ten_card
from cribbage.deck import HAND_SIZE
from cribbage.scoring import KEEP_SIZE

logger = logging.getLogger(__name__)


def _split_score(kept: Sequence[Card], discarded: Sequence[Card], is_dealer: bool) -> float:
    score = 0.0
    for a, b in combinations(kept, 2):
        if a.value + b.value == 15:
            score += 2
        if a.rank is b.rank:
            score += 2

    # Three ranks within a span of three are one card away from a run.
    ranks = sorted(card.order for card in kept)
    for index in range(len(ranks) - 2):
        if ranks[index + 2] - ranks[index] <= 2:
            score += 1

    score += 2 * sum(1 for card in kept if card.rank is Rank.FIVE)

    crib_penalty = 0.3 if is_dealer else 1.0
    for card in discarded:
        if card.rank is Rank.FIVE:
            score -= 2 * crib_penalty
        if is_ten_card(card):
            score -= crib_penalty
    return score


def select_discard(hand: Sequence[Card], is_dealer: bool) -> List[Card]:
    """Return the four cards to keep out of a six-card hand."""
    hand = list(hand)
    if len(hand) != HAND_SIZE:
        logger.error("Discard heuristic called with %d cards", len(hand))
        return hand[:KEEP_SIZE]

    best: List[Card] = []
    best_score = -1000.0
    for i, j in combinations(range(len(hand)), 2):
        kept = [card for index, card in enumerate(hand) if index not in (i, j)]
        score = _split_score(kept, (hand[i], hand[j]), is_dealer)
        if score > best_score:
            best_score = score
            best = kept

    if len(best) != KEEP_SIZE:
        logger.error("Discard heuristic produced %d cards", len(best))
        return hand[:KEEP_SIZE]
    return best
