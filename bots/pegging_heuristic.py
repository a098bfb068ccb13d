"""Pegging heuristic used by the normal computer player.

Immediate points dominate; the positional rules steer away from counts that
hand the opponent an easy fifteen or thirty-one. A small jitter from the shared
random source keeps play from being fully predictable.
"""

from __future__ import annotations

from random import Random
from typing import Optional, Sequence

from cribbage.cards import Card, Rank
from cribbage.mechanics import MAX_COUNT, legal_plays
from cribbage.rng import ai_random
from cribbage.scoring import score_pegging

JITTER = 0.5


def _card_score(card: Card, hand_size: int, round_cards: Sequence[Card], current_count: int) -> float:
    new_count = current_count + card.value
    score = score_pegging(tuple(round_cards) + (card,), new_count).score * 10.0

    if current_count == 0:
        if card.value == 5:
            score -= 15
        if card.value < 5:
            score += 5
        if card.value == 4:
            score += 3
        if card.value == 10:
            score += 1

    remaining = MAX_COUNT - new_count
    if remaining == 10:
        score -= 8
    if remaining == 5:
        score -= 10
    if new_count == 21:
        score -= 6
    if new_count == MAX_COUNT:
        score += 5
    if 1 <= remaining <= 4:
        score -= 3

    if round_cards:
        last = round_cards[-1]
        if card.rank is last.rank:
            score += 5
        if abs(card.order - last.order) == 1:
            score -= 2

    # Low cards are worth more late in the count.
    if card.value <= 4 and current_count < 20:
        score -= 2
    if card.rank is Rank.ACE and hand_size > 2:
        score -= 3
    return score


def select_play(
    hand: Sequence[Card],
    round_cards: Sequence[Card],
    current_count: int,
    rng: Optional[Random] = None,
) -> Optional[Card]:
    """Pick a card to peg, or ``None`` when nothing fits under 31."""
    valid = legal_plays(hand, current_count)
    if not valid:
        return None
    if len(valid) == 1:
        return valid[0]

    best: Optional[Card] = None
    best_score = -1000.0
    for card in valid:
        score = _card_score(card, len(hand), round_cards, current_count)
        score += ai_random(rng) * JITTER
        if score > best_score:
            best_score = score
            best = card
    return best
