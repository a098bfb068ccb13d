"""The show: counting hands and crib, directly or by claim and verification.

Hands are counted non-dealer first, then the dealer's hand, then the crib
(counted by the dealer). With claims the engine computes the true score but
only the claimed value is awarded unless a muggins call proves an overcount.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Tuple

from .actions import ActionResult, rule_action
from .cards import Card
from .exceptions import IllegalActor, IllegalPayload, PreconditionFailed
from .mechanics import require_phase
from .scoring import score_hand
from .state import CountPhase, GameState, HandRecord, Phase, Player

logger = logging.getLogger(__name__)

MAX_HAND_SCORE = 29

NEXT_COUNT_PHASE = {
    CountPhase.NON_DEALER: CountPhase.DEALER,
    CountPhase.DEALER: CountPhase.CRIB,
    CountPhase.CRIB: None,
}

MUGGINS_CORRECT = "correct"
MUGGINS_WRONG = "wrong"
MUGGINS_UNDERCOUNT = "undercount"


def current_count_phase(state: GameState) -> CountPhase:
    return state.counting_state.phase or CountPhase.NON_DEALER


def expected_counter(state: GameState, phase: CountPhase) -> Player:
    return state.non_dealer if phase is CountPhase.NON_DEALER else state.dealer


def hand_to_count(state: GameState, phase: CountPhase) -> Tuple[Tuple[Card, ...], bool]:
    """Return (cards, is_crib) for the given counting step."""
    if phase is CountPhase.CRIB:
        return state.crib, True
    return state.hands.get(expected_counter(state, phase)), False


def _label(phase: CountPhase) -> str:
    return "crib" if phase is CountPhase.CRIB else "hand"


def _require_counter(state: GameState, player: Player) -> CountPhase:
    require_phase(state, Phase.COUNTING)
    if state.counting_state.waiting_for_verification:
        raise PreconditionFailed("A claimed count is waiting for verification")
    phase = current_count_phase(state)
    expected = expected_counter(state, phase)
    if player is not expected:
        raise IllegalActor(f"Not your turn to count. Waiting for {expected}")
    return phase


def _require_verifier(state: GameState, player: Player) -> CountPhase:
    require_phase(state, Phase.COUNTING)
    counting = state.counting_state
    if not counting.waiting_for_verification:
        raise PreconditionFailed("No claimed count is waiting for verification")
    phase = current_count_phase(state)
    if player is not expected_counter(state, phase).opponent:
        raise IllegalActor("Only the opponent may verify or challenge a count")
    return phase


def _record_and_advance(state: GameState, record: HandRecord) -> Tuple[GameState, Player]:
    """Log ``record``, move to the next counting step and return who acts next."""
    next_phase = NEXT_COUNT_PHASE[record.phase]
    counting = state.counting_state.clear_claim()
    new_state = state.update(
        counting_state=replace(counting, phase=next_phase, hands_scored=counting.hands_scored + (record,))
    )
    if next_phase is None:
        logger.debug("Round %d counted; waiting for the next deal", state.round)
        return new_state.update(phase=Phase.DEALING), state.non_dealer
    return new_state, expected_counter(state, next_phase)


@rule_action
def count(state: GameState, player: Player) -> ActionResult:
    """Score the current hand and award the true value at once."""
    phase = _require_counter(state, player)
    cards, is_crib = hand_to_count(state, phase)
    result = score_hand(cards, state.cut_card, is_crib)

    record = HandRecord(
        phase=phase,
        player=player,
        hand=cards,
        score=result.score,
        breakdown=result.breakdown,
        actual=result.score,
    )
    new_state, next_turn = _record_and_advance(state, record)
    return ActionResult(
        success=True,
        new_state=new_state,
        description=f"Counted {_label(phase)}: {result.score} points",
        next_turn=next_turn,
        score_change=result.score,
        score_player=player,
        score_breakdown=result.breakdown,
        counted_hand=cards,
        count_phase=phase,
    )


@rule_action
def claim_count(state: GameState, player: Player, claimed: int) -> ActionResult:
    """Announce a score for the current hand; the opponent verifies or calls muggins."""
    phase = _require_counter(state, player)
    if isinstance(claimed, bool) or not isinstance(claimed, int):
        raise IllegalPayload("Claimed score must be a whole number")
    if not 0 <= claimed <= MAX_HAND_SCORE:
        raise IllegalPayload(f"Claimed score must be between 0 and {MAX_HAND_SCORE}")

    cards, is_crib = hand_to_count(state, phase)
    result = score_hand(cards, state.cut_card, is_crib)
    new_state = state.update_counting(
        phase=phase,
        claimed_score=claimed,
        actual_score=result.score,
        actual_breakdown=result.breakdown,
        counted_hand=cards,
        waiting_for_verification=True,
    )
    return ActionResult(
        success=True,
        new_state=new_state,
        description=f"Claimed {claimed} points for {_label(phase)}",
        next_turn=player.opponent,
        counted_hand=cards,
        count_phase=phase,
    )


@rule_action
def verify_count(state: GameState, player: Player) -> ActionResult:
    """Accept the claim; the counter receives exactly what they claimed."""
    phase = _require_verifier(state, player)
    counting = state.counting_state
    counter = player.opponent
    claimed = counting.claimed_score

    record = HandRecord(
        phase=phase,
        player=counter,
        hand=counting.counted_hand,
        score=claimed,
        breakdown=counting.actual_breakdown,
        claimed=claimed,
        actual=counting.actual_score,
    )
    new_state, next_turn = _record_and_advance(state, record)
    return ActionResult(
        success=True,
        new_state=new_state,
        description=f"Count verified: {counter} scores {claimed} for {_label(phase)}",
        next_turn=next_turn,
        score_change=claimed,
        score_player=counter,
        score_breakdown=counting.actual_breakdown,
        counted_hand=counting.counted_hand,
        count_phase=phase,
    )


@rule_action
def call_muggins(state: GameState, player: Player) -> ActionResult:
    """Challenge the claim.

    An overcount gives the counter nothing and the caller the excess; a correct
    or short claim stands as claimed.
    """
    phase = _require_verifier(state, player)
    counting = state.counting_state
    counter = player.opponent
    claimed = counting.claimed_score
    actual = counting.actual_score

    if claimed > actual:
        outcome = MUGGINS_CORRECT
        awarded, score_player, score_change = 0, player, claimed - actual
        description = f"Muggins! {counter} claimed {claimed} but the hand is worth {actual}; {player} scores {score_change}"
    elif claimed == actual:
        outcome = MUGGINS_WRONG
        awarded, score_player, score_change = claimed, counter, claimed
        description = f"Wrong muggins call: {counter}'s count of {claimed} was correct"
    else:
        outcome = MUGGINS_UNDERCOUNT
        awarded, score_player, score_change = claimed, counter, claimed
        description = f"{counter} undercounted: claimed {claimed} of {actual} and keeps {claimed}"
    logger.debug("Muggins by %s: claimed=%s actual=%s outcome=%s", player, claimed, actual, outcome)

    record = HandRecord(
        phase=phase,
        player=counter,
        hand=counting.counted_hand,
        score=awarded,
        breakdown=counting.actual_breakdown,
        claimed=claimed,
        actual=actual,
        muggins=outcome,
    )
    new_state, next_turn = _record_and_advance(state, record)
    return ActionResult(
        success=True,
        new_state=new_state,
        description=description,
        next_turn=next_turn,
        score_change=score_change,
        score_player=score_player,
        score_breakdown=counting.actual_breakdown,
        counted_hand=counting.counted_hand,
        count_phase=phase,
        muggins_outcome=outcome,
    )
