"""Cutting for dealer, the deal, discarding to the crib and the starter cut."""

from __future__ import annotations

import logging
from dataclasses import replace
from random import Random
from typing import Optional, Sequence

from .actions import ActionResult, rule_action
from .cards import Card, Rank, cards_label
from .deck import deal_two_player, shuffle_deck
from .exceptions import IllegalActor, IllegalPayload, PreconditionFailed
from .mechanics import remove_cards, require_phase
from .rng import get_rng
from .state import GameState, PendingScore, PerPlayer, Phase, PlayState, Player

logger = logging.getLogger(__name__)

DISCARD_COUNT = 2
HIS_HEELS_POINTS = 2


def _pick_index(deck_size: int, index: Optional[int], rng: Optional[Random]) -> int:
    if deck_size == 0:
        raise PreconditionFailed("No cards left to cut")
    if index is None:
        return (rng or get_rng()).randrange(deck_size)
    if not isinstance(index, int) or not 0 <= index < deck_size:
        raise IllegalPayload(f"Cut index must be between 0 and {deck_size - 1}")
    return index


@rule_action
def cut_for_dealer(
    state: GameState,
    player: Player,
    index: Optional[int] = None,
    *,
    rng: Optional[Random] = None,
) -> ActionResult:
    """Draw a card to decide the first dealer; the lower rank deals."""
    require_phase(state, Phase.CUTTING_FOR_DEALER)
    cut = state.cut_for_dealer
    if cut.dealer is not None:
        raise PreconditionFailed("Dealer already decided")
    if cut.cards.get(player) is not None:
        raise PreconditionFailed("Already cut for dealer")

    deck = state.remaining_deck
    opponent_card = cut.cards.get(player.opponent)
    if index is None and opponent_card is not None:
        candidates = [position for position, card in enumerate(deck) if card != opponent_card]
        chosen = candidates[_pick_index(len(candidates), None, rng)]
    else:
        chosen = _pick_index(len(deck), index, rng)
    card = deck[chosen]
    if card == opponent_card:
        raise IllegalPayload("That card was already cut by the opponent")

    cards = cut.cards.set(player, card)
    if opponent_card is None:
        new_state = state.update(cut_for_dealer=replace(cut, cards=cards))
        return ActionResult(
            success=True,
            new_state=new_state,
            description=f"Cut {card} for dealer",
            next_turn=player.opponent,
        )

    if card.order == opponent_card.order:
        reshuffled = tuple(shuffle_deck(deck, rng=rng))
        logger.debug("Cut for dealer tied on %s; reshuffling", card.rank)
        new_state = state.update(
            remaining_deck=reshuffled,
            cut_for_dealer=replace(cut, cards=PerPlayer.both(None)),
        )
        return ActionResult(
            success=True,
            new_state=new_state,
            description=f"Cut {card} - same rank as {opponent_card}, cut again",
            next_turn=player.opponent,
        )

    dealer = player if card.order < opponent_card.order else player.opponent
    new_state = state.update(dealer=dealer, cut_for_dealer=replace(cut, cards=cards, dealer=dealer))
    return ActionResult(
        success=True,
        new_state=new_state,
        description=f"Cut {card} against {opponent_card} - {dealer} deals",
        next_turn=player.opponent,
    )


@rule_action
def acknowledge_dealer(state: GameState, player: Player) -> ActionResult:
    require_phase(state, Phase.CUTTING_FOR_DEALER)
    cut = state.cut_for_dealer
    if cut.dealer is None:
        raise PreconditionFailed("Dealer has not been decided yet")
    if cut.acknowledged.get(player):
        raise PreconditionFailed("Already acknowledged the dealer")

    acknowledged = cut.acknowledged.set(player, True)
    new_state = state.update(cut_for_dealer=replace(cut, acknowledged=acknowledged))
    both = acknowledged.player1 and acknowledged.player2
    return ActionResult(
        success=True,
        new_state=new_state,
        description=f"Acknowledged {cut.dealer} as dealer",
        next_turn=cut.dealer if both else player.opponent,
    )


@rule_action
def deal(
    state: GameState,
    player: Player,
    deck: Optional[Sequence[Card]] = None,
    *,
    rng: Optional[Random] = None,
) -> ActionResult:
    """Dealer deals six cards each; an injected ``deck`` is dealt in order."""
    require_phase(state, Phase.CUTTING_FOR_DEALER)
    cut = state.cut_for_dealer
    if cut.dealer is None:
        raise PreconditionFailed("Dealer has not been decided yet")
    if player is not cut.dealer:
        raise IllegalActor("Only the dealer may deal")
    if not (cut.acknowledged.player1 and cut.acknowledged.player2):
        raise PreconditionFailed("Both players must acknowledge the dealer first")

    source = deck if deck is not None else shuffle_deck(state.remaining_deck, rng=rng)
    try:
        hand1, hand2, rest = deal_two_player(deck=source)
    except ValueError as exc:
        raise IllegalPayload(str(exc)) from exc

    new_state = state.update(
        phase=Phase.DISCARDING,
        hands=PerPlayer(hand1, hand2),
        discards=PerPlayer.both(()),
        crib=(),
        cut_card=None,
        remaining_deck=rest,
    )
    return ActionResult(
        success=True,
        new_state=new_state,
        description="Dealt 6 cards to each player",
        next_turn=player.opponent,
    )


@rule_action
def discard(state: GameState, player: Player, cards: Sequence[Card]) -> ActionResult:
    """Send two cards from ``player``'s hand to the crib."""
    require_phase(state, Phase.DISCARDING)
    cards = tuple(cards or ())
    if len(cards) != DISCARD_COUNT:
        raise IllegalPayload("Must discard exactly 2 cards")
    if len(set(cards)) != DISCARD_COUNT:
        raise IllegalPayload("Cannot discard the same card twice")
    if state.discards.get(player):
        raise PreconditionFailed("Already discarded")

    kept = remove_cards(state.hands.get(player), cards)
    new_state = state.update(
        hands=state.hands.set(player, kept),
        discards=state.discards.set(player, cards),
        crib=state.crib + cards,
    )

    if not new_state.discards.get(player.opponent):
        return ActionResult(
            success=True,
            new_state=new_state,
            description="Discarded 2 cards to crib",
            next_turn=player.opponent,
        )

    new_state = new_state.update(
        phase=Phase.CUT,
        play_state=PlayState(play_hands=new_state.hands),
    )
    logger.debug("Crib complete: %s", cards_label(new_state.crib))
    return ActionResult(
        success=True,
        new_state=new_state,
        description="Discarded 2 cards. Both players ready - waiting for cut.",
        next_turn=state.non_dealer,
    )


@rule_action
def cut_starter(
    state: GameState,
    player: Player,
    index: Optional[int] = None,
    *,
    rng: Optional[Random] = None,
) -> ActionResult:
    """Non-dealer reveals the starter; a jack is his heels for the dealer."""
    require_phase(state, Phase.CUT)
    if state.cut_card is not None:
        raise PreconditionFailed("Starter already cut")
    if player is not state.non_dealer:
        raise IllegalActor("Only the non-dealer may cut the starter")

    deck = state.remaining_deck
    chosen = _pick_index(len(deck), index, rng)
    starter = deck[chosen]
    new_state = state.update(cut_card=starter, remaining_deck=deck[:chosen] + deck[chosen + 1 :])

    if starter.rank is Rank.JACK:
        pending = PendingScore(
            player=state.dealer,
            points=HIS_HEELS_POINTS,
            reason="his heels for 2",
            is_his_heels=True,
        )
        return ActionResult(
            success=True,
            new_state=new_state.update(pending_pegging_score=pending),
            description=f"Cut {starter} - His Heels! Dealer scores 2.",
            next_turn=state.dealer,
        )

    return ActionResult(
        success=True,
        new_state=new_state.update(phase=Phase.PLAYING),
        description=f"Cut {starter}",
        next_turn=player,
    )
