"""Immutable game state records for cribbage.

Every transition builds a new ``GameState``; nested records are updated with
``dataclasses.replace`` through the small helpers below.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from random import Random
from typing import Generic, Optional, Sequence, Tuple, TypeVar

from .cards import Card
from .deck import build_deck, deal_two_player, shuffle_deck

T = TypeVar("T")

WINNING_SCORE = 121


class Player(Enum):
    PLAYER1 = "player1"
    PLAYER2 = "player2"

    @property
    def opponent(self) -> "Player":
        return Player.PLAYER2 if self is Player.PLAYER1 else Player.PLAYER1

    def __str__(self) -> str:
        return self.value


class Phase(Enum):
    CUTTING_FOR_DEALER = "cuttingForDealer"
    DEALING = "dealing"
    DISCARDING = "discarding"
    CUT = "cut"
    PLAYING = "playing"
    COUNTING = "counting"
    GAME_OVER = "gameOver"


class CountPhase(Enum):
    NON_DEALER = "nonDealer"
    DEALER = "dealer"
    CRIB = "crib"


@dataclass(frozen=True)
class PerPlayer(Generic[T]):
    """One value per player, addressed by ``Player``."""

    player1: T
    player2: T

    @classmethod
    def both(cls, value: T) -> "PerPlayer[T]":
        return cls(value, value)

    def get(self, player: Player) -> T:
        return self.player1 if player is Player.PLAYER1 else self.player2

    def set(self, player: Player, value: T) -> "PerPlayer[T]":
        if player is Player.PLAYER1:
            return replace(self, player1=value)
        return replace(self, player2=value)

    def items(self) -> Tuple[Tuple[Player, T], Tuple[Player, T]]:
        return (Player.PLAYER1, self.player1), (Player.PLAYER2, self.player2)


@dataclass(frozen=True)
class PlayedCard:
    card: Card
    player: Player


@dataclass(frozen=True)
class CutForDealerState:
    cards: PerPlayer[Optional[Card]] = field(default_factory=lambda: PerPlayer.both(None))
    dealer: Optional[Player] = None
    acknowledged: PerPlayer[bool] = field(default_factory=lambda: PerPlayer.both(False))


@dataclass(frozen=True)
class PlayState:
    play_hands: PerPlayer[Tuple[Card, ...]] = field(default_factory=lambda: PerPlayer.both(()))
    current_count: int = 0
    played_cards: Tuple[PlayedCard, ...] = ()
    round_cards: Tuple[Card, ...] = ()
    last_played_by: Optional[Player] = None
    said_go: PerPlayer[bool] = field(default_factory=lambda: PerPlayer.both(False))

    def reset_count(self) -> "PlayState":
        return replace(self, current_count=0, round_cards=(), said_go=PerPlayer.both(False))


@dataclass(frozen=True)
class HandRecord:
    """One counted hand or crib in the order it was resolved."""

    phase: CountPhase
    player: Player
    hand: Tuple[Card, ...]
    score: int
    breakdown: Tuple[str, ...]
    claimed: Optional[int] = None
    actual: Optional[int] = None
    muggins: Optional[str] = None


@dataclass(frozen=True)
class CountingState:
    phase: Optional[CountPhase] = None
    hands_scored: Tuple[HandRecord, ...] = ()
    claimed_score: Optional[int] = None
    actual_score: Optional[int] = None
    actual_breakdown: Tuple[str, ...] = ()
    counted_hand: Tuple[Card, ...] = ()
    waiting_for_verification: bool = False

    def clear_claim(self) -> "CountingState":
        return replace(
            self,
            claimed_score=None,
            actual_score=None,
            actual_breakdown=(),
            counted_hand=(),
            waiting_for_verification=False,
        )


@dataclass(frozen=True)
class PendingScore:
    """An unconfirmed pegging score; only ``player`` may accept it."""

    player: Player
    points: int
    reason: str
    reset_round: bool = False
    needs_last_card: bool = False
    is_his_heels: bool = False


@dataclass(frozen=True)
class PeggingEvent:
    player: Player
    kind: str
    card: Optional[Card] = None
    count: int = 0
    points: int = 0
    reason: str = ""


@dataclass(frozen=True)
class GameState:
    phase: Phase
    round: int = 1
    dealer: Optional[Player] = None
    hands: PerPlayer[Tuple[Card, ...]] = field(default_factory=lambda: PerPlayer.both(()))
    discards: PerPlayer[Tuple[Card, ...]] = field(default_factory=lambda: PerPlayer.both(()))
    crib: Tuple[Card, ...] = ()
    cut_card: Optional[Card] = None
    remaining_deck: Tuple[Card, ...] = ()
    cut_for_dealer: CutForDealerState = field(default_factory=CutForDealerState)
    play_state: PlayState = field(default_factory=PlayState)
    counting_state: CountingState = field(default_factory=CountingState)
    pending_pegging_score: Optional[PendingScore] = None
    pegging_history: Tuple[PeggingEvent, ...] = ()
    pegging_points: PerPlayer[int] = field(default_factory=lambda: PerPlayer.both(0))

    @property
    def non_dealer(self) -> Optional[Player]:
        return self.dealer.opponent if self.dealer is not None else None

    def update(self, **changes) -> "GameState":
        return replace(self, **changes)

    def update_play(self, **changes) -> "GameState":
        return replace(self, play_state=replace(self.play_state, **changes))

    def update_counting(self, **changes) -> "GameState":
        return replace(self, counting_state=replace(self.counting_state, **changes))

    def log_pegging(self, event: PeggingEvent) -> "GameState":
        return replace(self, pegging_history=self.pegging_history + (event,))


def _dealt_state(
    dealer: Player,
    round_number: int,
    *,
    rng: Optional[Random],
    deck: Optional[Sequence[Card]],
) -> GameState:
    hand1, hand2, rest = deal_two_player(rng=rng, deck=deck)
    return GameState(
        phase=Phase.DISCARDING,
        round=round_number,
        dealer=dealer,
        hands=PerPlayer(hand1, hand2),
        remaining_deck=rest,
        cut_for_dealer=CutForDealerState(dealer=dealer, acknowledged=PerPlayer.both(True)),
    )


def initialize_game_state(
    dealer: Optional[Player] = None,
    test_deck: Optional[Sequence[Card]] = None,
    *,
    rng: Optional[Random] = None,
) -> GameState:
    """Create the state for a new game.

    Without a dealer the game opens with the cut for dealer; with one, hands
    are dealt straight away (player1 receives the first six cards).
    """
    if dealer is not None:
        return _dealt_state(dealer, 1, rng=rng, deck=test_deck)
    deck = tuple(test_deck) if test_deck is not None else tuple(shuffle_deck(build_deck(), rng=rng))
    return GameState(phase=Phase.CUTTING_FOR_DEALER, round=1, remaining_deck=deck)


def start_new_round(
    state: GameState,
    player1_score: int,
    player2_score: int,
    test_deck: Optional[Sequence[Card]] = None,
    *,
    rng: Optional[Random] = None,
) -> GameState:
    """Deal the next hand with the other dealer, or end the game at 121."""
    if player1_score >= WINNING_SCORE or player2_score >= WINNING_SCORE:
        return state.update(phase=Phase.GAME_OVER, pending_pegging_score=None)
    dealer = state.dealer.opponent if state.dealer is not None else Player.PLAYER1
    return _dealt_state(dealer, state.round + 1, rng=rng, deck=test_deck)
