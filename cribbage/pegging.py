"""The play: pegging cards, saying go and accepting pending scores.

A score produced by a play or a go is parked in ``pending_pegging_score``;
until the scoring player accepts it no other play or go is accepted.
"""

from __future__ import annotations

import logging
from typing import Optional

from .actions import ActionResult, rule_action
from .cards import Card
from .exceptions import IllegalActor, IllegalPayload, PreconditionFailed
from .mechanics import MAX_COUNT, can_play, hands_exhausted, next_to_play, remove_cards, require_phase
from .scoring import score_pegging
from .state import (
    CountPhase,
    GameState,
    PeggingEvent,
    PendingScore,
    Phase,
    PlayedCard,
    Player,
)

logger = logging.getLogger(__name__)

LAST_CARD_POINTS = 1
GO_POINTS = 1
THIRTY_ONE_GO_POINTS = 2

PENDING_SCORE_ERROR = "A pending score must be accepted first"


def _require_no_pending(state: GameState) -> None:
    if state.pending_pegging_score is not None:
        raise PreconditionFailed(PENDING_SCORE_ERROR)


def _enter_counting(state: GameState) -> GameState:
    return state.update(phase=Phase.COUNTING).update_counting(phase=CountPhase.NON_DEALER)


@rule_action
def play(state: GameState, player: Player, card: Optional[Card]) -> ActionResult:
    """Peg ``card``; ``None`` is a go."""
    if card is None:
        return go(state, player)

    require_phase(state, Phase.PLAYING)
    _require_no_pending(state)

    play_state = state.play_state
    hand = play_state.play_hands.get(player)
    if card not in hand:
        raise IllegalPayload("Card not in hand")
    count = play_state.current_count + card.value
    if count > MAX_COUNT:
        raise IllegalPayload("Would exceed 31")

    round_cards = play_state.round_cards + (card,)
    scored = score_pegging(round_cards, count)
    new_state = state.update_play(
        play_hands=play_state.play_hands.set(player, remove_cards(hand, [card])),
        played_cards=play_state.played_cards + (PlayedCard(card, player),),
        round_cards=round_cards,
        current_count=count,
        last_played_by=player,
        said_go=play_state.said_go.set(player.opponent, False),
    )
    new_state = new_state.log_pegging(
        PeggingEvent(player=player, kind="play", card=card, count=count, points=scored.score, reason=scored.reason)
    )
    if count == MAX_COUNT:
        new_state = new_state.update(play_state=new_state.play_state.reset_count())

    description = f"Played {card} (count: {count})"
    finished = hands_exhausted(new_state)

    if scored.score > 0:
        pending = PendingScore(
            player=player,
            points=scored.score,
            reason=scored.reason,
            needs_last_card=finished and count < MAX_COUNT,
            reset_round=finished and count < MAX_COUNT,
        )
        return ActionResult(
            success=True,
            new_state=new_state.update(pending_pegging_score=pending),
            description=f"{description} - {scored.reason}",
            next_turn=player,
        )

    if finished:
        # No pending score is posted for a pointless final card; its last-card
        # point is credited directly.
        new_state = new_state.update(
            pegging_points=new_state.pegging_points.set(
                player, new_state.pegging_points.get(player) + LAST_CARD_POINTS
            ),
            play_state=new_state.play_state.reset_count(),
        )
        new_state = new_state.log_pegging(
            PeggingEvent(player=player, kind="score", count=count, points=LAST_CARD_POINTS, reason="last card for 1")
        )
        return ActionResult(
            success=True,
            new_state=_enter_counting(new_state),
            description=f"{description} - last card for 1",
            next_turn=state.non_dealer,
            score_change=LAST_CARD_POINTS,
            score_player=player,
        )

    return ActionResult(
        success=True,
        new_state=new_state,
        description=description,
        next_turn=next_to_play(new_state, player),
    )


@rule_action
def go(state: GameState, player: Player) -> ActionResult:
    """Declare a go; legal only when ``player`` holds no playable card."""
    require_phase(state, Phase.PLAYING)
    _require_no_pending(state)

    play_state = state.play_state
    count = play_state.current_count
    if can_play(play_state.play_hands.get(player), count):
        raise IllegalPayload("You have a playable card; go is not allowed")

    said_go = play_state.said_go.set(player, True)
    new_state = state.update_play(said_go=said_go)
    new_state = new_state.log_pegging(PeggingEvent(player=player, kind="go", count=count))

    opponent = player.opponent
    opponent_blocked = said_go.get(opponent) or not can_play(play_state.play_hands.get(opponent), count)
    if not opponent_blocked:
        return ActionResult(
            success=True,
            new_state=new_state,
            description='Said "Go"',
            next_turn=opponent,
        )

    scorer = play_state.last_played_by
    if scorer is None:
        logger.debug("Go with no card played this count; resetting without score")
        new_state = new_state.update(play_state=new_state.play_state.reset_count())
        return ActionResult(
            success=True,
            new_state=new_state,
            description='Said "Go" - count resets',
            next_turn=next_to_play(new_state, player),
        )

    if count == MAX_COUNT:
        points, reason = THIRTY_ONE_GO_POINTS, "31 for 2"
    else:
        points, reason = GO_POINTS, "go for 1"
    pending = PendingScore(player=scorer, points=points, reason=reason, reset_round=True)
    return ActionResult(
        success=True,
        new_state=new_state.update(pending_pegging_score=pending),
        description=f'Said "Go" - {scorer} scores {reason}',
        next_turn=scorer,
    )


@rule_action
def accept_pegging_score(state: GameState, player: Player) -> ActionResult:
    """Confirm the pending score; only its owner may accept it."""
    pending = state.pending_pegging_score
    if pending is None:
        raise PreconditionFailed("No pending score to accept")
    if player is not pending.player:
        raise IllegalActor("Only the scoring player may accept this score")
    require_phase(state, Phase.PLAYING, Phase.CUT)

    new_state = state.update(
        pending_pegging_score=None,
        pegging_points=state.pegging_points.set(player, state.pegging_points.get(player) + pending.points),
    )
    new_state = new_state.log_pegging(
        PeggingEvent(
            player=player,
            kind="score",
            count=state.play_state.current_count,
            points=pending.points,
            reason=pending.reason,
        )
    )
    description = f"Accepted {pending.points} for {pending.reason}"
    scored = dict(score_change=pending.points, score_player=player)

    if pending.is_his_heels:
        return ActionResult(
            success=True,
            new_state=new_state.update(phase=Phase.PLAYING),
            description=description,
            next_turn=state.non_dealer,
            **scored,
        )

    if pending.needs_last_card:
        last_card = PendingScore(
            player=player,
            points=LAST_CARD_POINTS,
            reason="last card for 1",
            reset_round=pending.reset_round,
        )
        return ActionResult(
            success=True,
            new_state=new_state.update(pending_pegging_score=last_card),
            description=f"{description} - last card for 1 pending",
            next_turn=player,
            **scored,
        )

    if pending.reset_round:
        new_state = new_state.update(play_state=new_state.play_state.reset_count())

    if hands_exhausted(new_state):
        return ActionResult(
            success=True,
            new_state=_enter_counting(new_state),
            description=description,
            next_turn=state.non_dealer,
            **scored,
        )

    return ActionResult(
        success=True,
        new_state=new_state,
        description=description,
        next_turn=next_to_play(new_state, player),
        **scored,
    )
