"""Action types accepted by the state machine and the result they produce."""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Union, get_args

from .cards import Card
from .exceptions import CribbageError
from .state import CountPhase, GameState, Player

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CutForDealer:
    index: Optional[int] = None


@dataclass(frozen=True)
class AcknowledgeDealer:
    pass


@dataclass(frozen=True)
class Deal:
    deck: Optional[Tuple[Card, ...]] = None


@dataclass(frozen=True)
class Discard:
    cards: Tuple[Card, ...]


@dataclass(frozen=True)
class CutStarter:
    index: Optional[int] = None


@dataclass(frozen=True)
class Play:
    """Play ``card``; ``None`` declares a go."""

    card: Optional[Card]


@dataclass(frozen=True)
class Go:
    pass


@dataclass(frozen=True)
class AcceptPeggingScore:
    pass


@dataclass(frozen=True)
class Count:
    pass


@dataclass(frozen=True)
class ClaimCount:
    claimed: int


@dataclass(frozen=True)
class VerifyCount:
    pass


@dataclass(frozen=True)
class CallMuggins:
    pass


Action = Union[
    CutForDealer,
    AcknowledgeDealer,
    Deal,
    Discard,
    CutStarter,
    Play,
    Go,
    AcceptPeggingScore,
    Count,
    ClaimCount,
    VerifyCount,
    CallMuggins,
]

ACTION_TYPES: Tuple[type, ...] = get_args(Action)

# Wire names, shared by serialization and the service layer.
ACTION_NAMES: dict[type, str] = {
    CutForDealer: "cut-for-dealer",
    AcknowledgeDealer: "acknowledge-dealer",
    Deal: "deal",
    Discard: "discard",
    CutStarter: "cut",
    Play: "play",
    Go: "go",
    AcceptPeggingScore: "accept-pegging-score",
    Count: "count",
    ClaimCount: "claim-count",
    VerifyCount: "verify-count",
    CallMuggins: "call-muggins",
}


@dataclass(frozen=True)
class ActionResult:
    success: bool
    new_state: Optional[GameState] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    description: Optional[str] = None
    next_turn: Optional[Player] = None
    score_change: int = 0
    score_player: Optional[Player] = None
    score_breakdown: Tuple[str, ...] = ()
    counted_hand: Tuple[Card, ...] = ()
    count_phase: Optional[CountPhase] = None
    muggins_outcome: Optional[str] = None

    @classmethod
    def fail(cls, error: str, kind: str = "error") -> "ActionResult":
        return cls(success=False, error=error, error_kind=kind)


def rule_action(handler: Callable[..., ActionResult]) -> Callable[..., ActionResult]:
    """Turn rule violations raised by ``handler`` into a failed result."""

    @functools.wraps(handler)
    def wrapper(state: GameState, player: Player, *args, **kwargs) -> ActionResult:
        try:
            return handler(state, player, *args, **kwargs)
        except CribbageError as exc:
            logger.warning("Rejected %s by %s: %s", handler.__name__, player, exc)
            return ActionResult.fail(str(exc), exc.kind)

    return wrapper
