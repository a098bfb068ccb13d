"""Single entry point for the cribbage state machine.

``apply`` routes each action to its handler. Every handler is a pure function of
the state it receives; the computer player's moves go through the same path.
"""

from __future__ import annotations

import logging
from random import Random
from typing import Callable, Dict, Optional

from . import counting, dealing, pegging
from .actions import (
    ACTION_TYPES,
    AcceptPeggingScore,
    AcknowledgeDealer,
    Action,
    ActionResult,
    CallMuggins,
    ClaimCount,
    Count,
    CutForDealer,
    CutStarter,
    Deal,
    Discard,
    Go,
    Play,
    VerifyCount,
)
from .exceptions import IllegalPayload
from .state import GameState, Player, initialize_game_state, start_new_round

logger = logging.getLogger(__name__)

Handler = Callable[[GameState, Player, Action, Optional[Random]], ActionResult]

HANDLERS: Dict[type, Handler] = {
    CutForDealer: lambda state, player, action, rng: dealing.cut_for_dealer(state, player, action.index, rng=rng),
    AcknowledgeDealer: lambda state, player, action, rng: dealing.acknowledge_dealer(state, player),
    Deal: lambda state, player, action, rng: dealing.deal(state, player, action.deck, rng=rng),
    Discard: lambda state, player, action, rng: dealing.discard(state, player, action.cards),
    CutStarter: lambda state, player, action, rng: dealing.cut_starter(state, player, action.index, rng=rng),
    Play: lambda state, player, action, rng: pegging.play(state, player, action.card),
    Go: lambda state, player, action, rng: pegging.go(state, player),
    AcceptPeggingScore: lambda state, player, action, rng: pegging.accept_pegging_score(state, player),
    Count: lambda state, player, action, rng: counting.count(state, player),
    ClaimCount: lambda state, player, action, rng: counting.claim_count(state, player, action.claimed),
    VerifyCount: lambda state, player, action, rng: counting.verify_count(state, player),
    CallMuggins: lambda state, player, action, rng: counting.call_muggins(state, player),
}

if set(HANDLERS) != set(ACTION_TYPES):
    raise RuntimeError("Every action type needs exactly one handler.")


def apply(state: GameState, player: Player, action: Action, *, rng: Optional[Random] = None) -> ActionResult:
    """Validate and apply ``action`` by ``player``; never mutates ``state``."""
    if not isinstance(player, Player):
        return ActionResult.fail(f"Unknown player: {player!r}", IllegalPayload.kind)
    handler = HANDLERS.get(type(action))
    if handler is None:
        return ActionResult.fail(f"Unknown action: {action!r}", IllegalPayload.kind)
    result = handler(state, player, action, rng)
    if result.success:
        logger.debug("%s by %s: %s", type(action).__name__, player, result.description)
    return result


__all__ = [
    "apply",
    "initialize_game_state",
    "start_new_round",
    "HANDLERS",
]
