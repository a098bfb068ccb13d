"""Deterministic pegging used by the expert computer player."""

from __future__ import annotations

from collections import Counter
from typing import Optional, Sequence

from cribbage.cards import Card, Rank, is_ten_card
from cribbage.mechanics import MAX_COUNT, legal_plays
from cribbage.scoring import score_pegging


def _card_score(
    card: Card,
    hand_size: int,
    round_cards: Sequence[Card],
    current_count: int,
    rank_counts: Counter,
) -> float:
    new_count = current_count + card.value
    score = score_pegging(tuple(round_cards) + (card,), new_count).score * 15.0

    if current_count == 0:
        lead_bonus = {5: -20, 4: 8, 3: 6, 2: 5, 1: 4, 10: -2}
        score += lead_bonus.get(card.value, 0)

    remaining = MAX_COUNT - new_count
    if new_count == 5:
        score -= 14
    if remaining == 5:
        score -= 12
    if new_count == 21:
        score -= 10
    if remaining == 10:
        score -= 8
    if new_count == 15:
        score += 12
    if new_count == MAX_COUNT:
        score += 10
    if 1 <= remaining <= 4:
        score -= 5

    if round_cards:
        last = round_cards[-1]
        if card.rank is last.rank:
            # Two already down means this card makes trips.
            score += 8 if rank_counts[card.rank] >= 2 else 4
        if abs(card.order - last.order) == 1:
            score -= 3

    # Trap: 15 now invites a ten, leaving 25 for a 6 to reach 31.
    if current_count == 11 and card.value == 4:
        score += 3

    if current_count < 15 and card.value <= 3 and hand_size > 2:
        score -= 4
    if card.rank is Rank.ACE and hand_size > 2:
        score -= 5
    if current_count >= 22:
        score += 10 - card.value

    if is_ten_card(card):
        score += 0.5 * sum(1 for played in round_cards if is_ten_card(played))
    return score


def select_play(hand: Sequence[Card], round_cards: Sequence[Card], current_count: int) -> Optional[Card]:
    """Pick a card to peg, or ``None`` when nothing fits under 31."""
    valid = legal_plays(hand, current_count)
    if not valid:
        return None
    if len(valid) == 1:
        return valid[0]

    rank_counts = Counter(card.rank for card in round_cards)
    best: Optional[Card] = None
    best_score = float("-inf")
    for card in valid:
        score = _card_score(card, len(hand), round_cards, current_count, rank_counts)
        if score > best_score:
            best_score = score
            best = card
    return best
