"""Shared rule checks: phases, card membership and legal pegging plays."""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from .cards import Card
from .exceptions import IllegalPayload, IllegalPhase
from .state import GameState, Phase, Player

MAX_COUNT = 31


def require_phase(state: GameState, *phases: Phase) -> None:
    if state.phase not in phases:
        expected = " or ".join(phase.value for phase in phases)
        raise IllegalPhase(f"Action not allowed in phase {state.phase.value}. Expected {expected}.")


def remove_cards(hand: Sequence[Card], cards: Iterable[Card]) -> Tuple[Card, ...]:
    """Return ``hand`` without ``cards``; every card must be present."""
    remaining = list(hand)
    for card in cards:
        try:
            remaining.remove(card)
        except ValueError as exc:
            raise IllegalPayload(f"Card {card} not in hand") from exc
    return tuple(remaining)


def legal_plays(hand: Iterable[Card], current_count: int) -> List[Card]:
    """Return the cards that keep the count at or below 31."""
    return [card for card in hand if current_count + card.value <= MAX_COUNT]


def can_play(hand: Iterable[Card], current_count: int) -> bool:
    return any(current_count + card.value <= MAX_COUNT for card in hand)


def playable_cards(state: GameState, player: Player) -> List[Card]:
    """Cards ``player`` may legally peg right now (empty outside the play)."""
    if state.phase is not Phase.PLAYING or state.pending_pegging_score is not None:
        return []
    play = state.play_state
    return legal_plays(play.play_hands.get(player), play.current_count)


def hands_exhausted(state: GameState) -> bool:
    hands = state.play_state.play_hands
    return not hands.player1 and not hands.player2


def next_to_play(state: GameState, player: Player) -> Player:
    """Whose turn follows ``player``: the opponent if they can play, else whoever can."""
    play = state.play_state
    opponent = player.opponent
    if can_play(play.play_hands.get(opponent), play.current_count):
        return opponent
    if can_play(play.play_hands.get(player), play.current_count):
        return player
    # Nobody can play: whoever still holds cards has to say go.
    return opponent if play.play_hands.get(opponent) else player
