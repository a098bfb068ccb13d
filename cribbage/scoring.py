"""Hand and pegging scoring for cribbage."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import combinations
from typing import List, Sequence, Tuple

from .cards import Card, Rank, cards_label, sort_cards

logger = logging.getLogger(__name__)

FIFTEEN = 15
THIRTY_ONE = 31
KEEP_SIZE = 4

# Points for the trailing same-rank run in pegging, keyed by how many cards match.
PEGGING_SET_POINTS = {2: (2, "pair for 2"), 3: (6, "three of a kind for 6"), 4: (12, "four of a kind for 12")}

MAX_PEGGING_RUN = 7


@dataclass(frozen=True)
class HandScore:
    score: int
    breakdown: Tuple[str, ...]


@dataclass(frozen=True)
class PeggingScore:
    score: int
    reason: str


def _is_run(cards: Sequence[Card]) -> bool:
    orders = sorted(card.order for card in cards)
    return all(later == earlier + 1 for earlier, later in zip(orders, orders[1:]))


def _fifteens(cards: Sequence[Card]) -> List[str]:
    events = []
    for size in range(2, len(cards) + 1):
        for combo in combinations(cards, size):
            if sum(card.value for card in combo) == FIFTEEN:
                events.append(f"Fifteen ({'+'.join(str(card) for card in combo)}): 2")
    return events


def _pairs(cards: Sequence[Card]) -> List[str]:
    return [f"Pair ({first}-{second}): 2" for first, second in combinations(cards, 2) if first.rank is second.rank]


def _runs(cards: Sequence[Card]) -> Tuple[int, List[str]]:
    """Return (run length, events) for every instance of the longest run."""
    for size in range(len(cards), 2, -1):
        runs = [sort_cards(combo) for combo in combinations(cards, size) if _is_run(combo)]
        if runs:
            return size, [f"Run of {size} ({'-'.join(str(card) for card in run)}): {size}" for run in runs]
    return 0, []


def _flush(hand: Sequence[Card], cut_card: Card, is_crib: bool) -> Tuple[int, List[str]]:
    suits = {card.suit for card in hand}
    if len(hand) != KEEP_SIZE or len(suits) != 1:
        return 0, []
    suit = next(iter(suits))
    if cut_card.suit is suit:
        return 5, [f"Flush (5 {suit}): 5"]
    if is_crib:
        return 0, []
    return 4, [f"Flush (4 {suit}): 4"]


def _nobs(hand: Sequence[Card], cut_card: Card) -> List[str]:
    return [
        f"Nobs ({card} matches cut card {cut_card}): 1"
        for card in hand
        if card.rank is Rank.JACK and card.suit is cut_card.suit
    ]


def score_hand(hand: Sequence[Card], cut_card: Card, is_crib: bool = False) -> HandScore:
    """Score a four-card hand (or crib) together with the starter card.

    The result does not depend on the order of ``hand``: cards are put into
    rank order before any combination is enumerated.
    """
    if len(hand) != KEEP_SIZE:
        logger.error("score_hand called with %d cards (%s); scoring as given", len(hand), cards_label(hand))

    ordered_hand = sort_cards(hand)
    all_cards = sort_cards([*ordered_hand, cut_card])

    breakdown: List[str] = []
    score = 0

    fifteens = _fifteens(all_cards)
    score += 2 * len(fifteens)
    breakdown.extend(fifteens)

    pairs = _pairs(all_cards)
    score += 2 * len(pairs)
    breakdown.extend(pairs)

    run_length, runs = _runs(all_cards)
    score += run_length * len(runs)
    breakdown.extend(runs)

    flush_points, flush = _flush(ordered_hand, cut_card, is_crib)
    score += flush_points
    breakdown.extend(flush)

    nobs = _nobs(ordered_hand, cut_card)
    score += len(nobs)
    breakdown.extend(nobs)

    return HandScore(score=score, breakdown=tuple(breakdown))


def score_pegging(round_cards: Sequence[Card], current_count: int) -> PeggingScore:
    """Score the card just appended to ``round_cards`` at ``current_count``."""
    if not round_cards:
        return PeggingScore(score=0, reason="")

    score = 0
    reasons: List[str] = []

    if current_count == FIFTEEN:
        score += 2
        reasons.append("fifteen for 2")

    if current_count == THIRTY_ONE:
        score += 2
        reasons.append("thirty-one for 2")

    last_rank = round_cards[-1].rank
    matching = 1
    for card in reversed(round_cards[:-1]):
        if card.rank is not last_rank:
            break
        matching += 1
    if matching in PEGGING_SET_POINTS:
        points, reason = PEGGING_SET_POINTS[matching]
        score += points
        reasons.append(reason)

    for length in range(min(MAX_PEGGING_RUN, len(round_cards)), 2, -1):
        if _is_run(round_cards[-length:]):
            score += length
            reasons.append(f"run of {length} for {length}")
            break

    return PeggingScore(score=score, reason=" and ".join(reasons))
