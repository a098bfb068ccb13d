"""Card-related data structures and helpers for cribbage."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Mapping


class Suit(Enum):
    SPADES = "♠"
    HEARTS = "♥"
    DIAMONDS = "♦"
    CLUBS = "♣"

    def __str__(self) -> str:
        return self.value


class Rank(Enum):
    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"

    def __str__(self) -> str:
        return self.value


# Rank order from ace (low) to king for runs and cutting for dealer.
RANK_ORDER: list[Rank] = list(Rank)

RANK_STRENGTH: dict[Rank, int] = {rank: index + 1 for index, rank in enumerate(RANK_ORDER)}

# Pip values used for fifteens and the pegging count.
RANK_VALUES: dict[Rank, int] = {
    rank: min(RANK_STRENGTH[rank], 10) for rank in RANK_ORDER
}

SUIT_ORDER: list[Suit] = list(Suit)


@dataclass(frozen=True)
class Card:
    """Immutable representation of a playing card."""

    rank: Rank
    suit: Suit

    @property
    def value(self) -> int:
        return RANK_VALUES[self.rank]

    @property
    def order(self) -> int:
        return RANK_STRENGTH[self.rank]

    def __str__(self) -> str:
        return f"{self.rank.value}{self.suit.value}"


def card_sort_key(card: Card) -> tuple[int, int]:
    return RANK_STRENGTH[card.rank], SUIT_ORDER.index(card.suit)


def sort_cards(cards: Iterable[Card]) -> List[Card]:
    return sorted(cards, key=card_sort_key)


def is_ten_card(card: Card) -> bool:
    return card.value == 10


def parse_card(text: str) -> Card:
    """Parse a short label such as ``"10♦"`` or ``"J♣"``."""
    text = text.strip()
    if len(text) < 2:
        raise ValueError(f"Cannot parse card from {text!r}")
    rank_text, suit_text = text[:-1], text[-1]
    try:
        return Card(Rank(rank_text.upper()), Suit(suit_text))
    except ValueError as exc:
        raise ValueError(f"Cannot parse card from {text!r}") from exc


def parse_cards(text: str) -> List[Card]:
    return [parse_card(part) for part in text.split()]


def serialize_card(card: Card) -> dict[str, str]:
    return {"rank": card.rank.name.lower(), "suit": card.suit.name.lower()}


def deserialize_card(payload: Mapping[str, str]) -> Card:
    try:
        rank_name = payload["rank"].upper()
        suit_name = payload["suit"].upper()
        return Card(Rank[rank_name], Suit[suit_name])
    except (KeyError, AttributeError, TypeError) as exc:
        raise ValueError(f"Malformed card payload: {payload!r}") from exc


def card_label(card: Card) -> str:
    return f"{card.rank.name.title()} of {card.suit.name.title()}"


def cards_label(cards: Iterable[Card]) -> str:
    return " ".join(str(card) for card in cards)
