"""Convenience service layer for UIs, servers and bots.

``GameService`` owns one match: the current state, the match scores and whose
turn it is. It rejects out-of-turn moves before they reach the rules engine and
produces per-player views that never leak the opponent's cards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from random import Random
from typing import Any, Mapping, Optional, Sequence

from .actions import Action, ActionResult
from .cards import Card, card_label, serialize_card
from .counting import current_count_phase, expected_counter
from .exceptions import IllegalActor, IllegalPayload, IllegalPhase
from .game import apply
from .mechanics import playable_cards
from .serialize import action_from_dict, state_from_dict, state_to_dict
from .state import GameState, PerPlayer, Phase, Player, WINNING_SCORE, initialize_game_state, start_new_round

logger = logging.getLogger(__name__)

NOT_YOUR_TURN = "It's not your turn"

# Phases in which both players act independently.
_FREE_PHASES = (Phase.CUTTING_FOR_DEALER, Phase.DISCARDING)


@dataclass
class RequiredAction:
    type: str
    label: Optional[str] = None
    detail: Optional[str] = None


@dataclass
class PlayedCardView:
    player: str
    card: dict
    label: str


@dataclass
class CountView:
    phase: Optional[str]
    counter: Optional[str]
    counted_hand: list[dict]
    claimed_score: Optional[int]
    actual_score: Optional[int]
    actual_breakdown: list[str]
    waiting_for_verification: bool
    hands_scored: list[dict]


@dataclass
class GameView:
    perspective: str
    phase: str
    round: int
    dealer: Optional[str]
    current_turn: Optional[str]
    is_my_turn: bool
    my_score: int
    opponent_score: int
    winner: Optional[str]
    hand: list[dict]
    hand_labels: list[str]
    play_hand: list[dict]
    playable: list[dict]
    opponent_card_count: int
    crib_size: int
    cut_card: Optional[dict]
    current_count: int
    round_cards: list[dict]
    played_cards: list[PlayedCardView]
    pending_score: Optional[dict]
    counting: CountView
    required_action: RequiredAction
    pegging_history: list[dict] = field(default_factory=list)


class GameService:
    """Facade around the rules engine for one two-player match."""

    def __init__(
        self,
        state: Optional[GameState] = None,
        *,
        scores: Optional[PerPlayer[int]] = None,
        current_turn: Optional[Player] = None,
        rng: Optional[Random] = None,
    ) -> None:
        self.rng = rng
        self.state = state or initialize_game_state(rng=rng)
        self.scores: PerPlayer[int] = scores or PerPlayer.both(0)
        self.current_turn = current_turn

    # Match lifecycle ---------------------------------------------------

    @property
    def winner(self) -> Optional[Player]:
        for player, score in self.scores.items():
            if score >= WINNING_SCORE:
                return player
        return None

    def is_over(self) -> bool:
        return self.state.phase is Phase.GAME_OVER

    def start_next_round(self, test_deck: Optional[Sequence[Card]] = None) -> GameState:
        """Deal the next hand once the crib has been counted."""
        if self.state.phase is not Phase.DEALING:
            raise RuntimeError(f"Cannot start a new round during {self.state.phase.value}.")
        self.state = start_new_round(
            self.state, self.scores.player1, self.scores.player2, test_deck, rng=self.rng
        )
        self.current_turn = None
        logger.info("Round %d dealt by %s (%d-%d)", self.state.round, self.state.dealer, *self._score_pair())
        return self.state

    # Actions -----------------------------------------------------------

    def submit(self, player: Player, action: Action) -> ActionResult:
        """Apply ``action`` for ``player`` and update turn and match scores."""
        if self.state.phase is Phase.GAME_OVER:
            return ActionResult.fail("The game is over", IllegalPhase.kind)
        if (
            self.state.phase not in _FREE_PHASES
            and self.current_turn is not None
            and player is not self.current_turn
        ):
            return ActionResult.fail(NOT_YOUR_TURN, IllegalActor.kind)

        result = apply(self.state, player, action, rng=self.rng)
        if not result.success:
            return result

        self.state = result.new_state
        self.current_turn = result.next_turn or player.opponent
        if result.score_change and result.score_player is not None:
            scorer = result.score_player
            self.scores = self.scores.set(scorer, self.scores.get(scorer) + result.score_change)
            self._check_game_over()
        return result

    def submit_payload(self, player: Player, payload: Mapping[str, Any]) -> ActionResult:
        """Like ``submit`` but takes a plain-data action."""
        try:
            action = action_from_dict(payload)
        except ValueError as exc:
            return ActionResult.fail(str(exc), IllegalPayload.kind)
        return self.submit(player, action)

    # Views -------------------------------------------------------------

    def get_view(self, perspective: Player) -> GameView:
        state = self.state
        play = state.play_state
        hand = list(state.hands.get(perspective))
        playable = playable_cards(state, perspective)
        if self.current_turn is not perspective:
            playable = []
        pending = state.pending_pegging_score
        cut_card = state.cut_card

        return GameView(
            perspective=perspective.value,
            phase=state.phase.value,
            round=state.round,
            dealer=state.dealer.value if state.dealer else None,
            current_turn=self.current_turn.value if self.current_turn else None,
            is_my_turn=self.current_turn is perspective,
            my_score=self.scores.get(perspective),
            opponent_score=self.scores.get(perspective.opponent),
            winner=self.winner.value if self.winner else None,
            hand=[serialize_card(card) for card in hand],
            hand_labels=[card_label(card) for card in hand],
            play_hand=[serialize_card(card) for card in play.play_hands.get(perspective)],
            playable=[serialize_card(card) for card in playable],
            opponent_card_count=self._opponent_card_count(perspective),
            crib_size=len(state.crib),
            cut_card=serialize_card(cut_card) if cut_card else None,
            current_count=play.current_count,
            round_cards=[serialize_card(card) for card in play.round_cards],
            played_cards=[
                PlayedCardView(player=entry.player.value, card=serialize_card(entry.card), label=card_label(entry.card))
                for entry in play.played_cards
            ],
            pending_score=None
            if pending is None
            else {"player": pending.player.value, "points": pending.points, "reason": pending.reason},
            counting=self._count_view(),
            required_action=self.required_action(perspective),
            pegging_history=[
                {
                    "player": event.player.value,
                    "kind": event.kind,
                    "card": serialize_card(event.card) if event.card else None,
                    "count": event.count,
                    "points": event.points,
                    "reason": event.reason,
                }
                for event in state.pegging_history
            ],
        )

    def required_action(self, player: Player) -> RequiredAction:
        """What ``player`` has to do next; ``wait`` when it is not up to them."""
        state = self.state
        phase = state.phase

        if phase is Phase.GAME_OVER:
            return RequiredAction("game_over", "Play Again")

        if phase is Phase.CUTTING_FOR_DEALER:
            cut = state.cut_for_dealer
            if cut.dealer is None:
                if cut.cards.get(player) is None:
                    return RequiredAction("cut_for_dealer", "Tap deck to cut")
                return RequiredAction("wait")
            if not cut.acknowledged.get(player):
                return RequiredAction("acknowledge_dealer", "Start Game")
            if player is cut.dealer and cut.acknowledged.get(player.opponent):
                return RequiredAction("deal", "Deal")
            return RequiredAction("wait")

        if phase is Phase.DISCARDING:
            if state.discards.get(player):
                return RequiredAction("wait")
            return RequiredAction("discard", "Discard to Crib", "Select 2 cards for the crib")

        pending = state.pending_pegging_score
        if pending is not None:
            if pending.player is player:
                return RequiredAction("accept_score", f"Accept {pending.points} Points", pending.reason)
            return RequiredAction("wait")

        if phase is Phase.CUT:
            if player is state.non_dealer:
                return RequiredAction("cut_starter", "Tap to cut starter")
            return RequiredAction("wait")

        if phase is Phase.PLAYING:
            if self.current_turn is not None and self.current_turn is not player:
                return RequiredAction("wait")
            if playable_cards(state, player):
                return RequiredAction("play_card")
            return RequiredAction("say_go", 'Say "Go"')

        if phase is Phase.COUNTING:
            counting = state.counting_state
            counter = expected_counter(state, current_count_phase(state))
            if counting.waiting_for_verification:
                if player is counter.opponent:
                    return RequiredAction("verify_count", None, f"{counter} claims {counting.claimed_score}")
                return RequiredAction("wait")
            if player is counter:
                return RequiredAction("count", None, f"Count your {current_count_phase(state).value}")
            return RequiredAction("wait")

        if phase is Phase.DEALING:
            if player is state.non_dealer:
                return RequiredAction("start_round", "Next Hand")
            return RequiredAction("wait")

        logger.warning("No required action for phase %s", phase)
        return RequiredAction("unknown", "Continue")

    # Persistence -------------------------------------------------------

    def to_dict(self) -> dict:
        return {
            "state": state_to_dict(self.state),
            "scores": {player.value: score for player, score in self.scores.items()},
            "current_turn": self.current_turn.value if self.current_turn else None,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any], *, rng: Optional[Random] = None) -> "GameService":
        scores = payload.get("scores") or {}
        turn = payload.get("current_turn")
        return cls(
            state_from_dict(payload["state"]),
            scores=PerPlayer(int(scores.get("player1", 0)), int(scores.get("player2", 0))),
            current_turn=Player(turn) if turn else None,
            rng=rng,
        )

    # Helpers -----------------------------------------------------------

    def _score_pair(self) -> tuple[int, int]:
        return self.scores.player1, self.scores.player2

    def _check_game_over(self) -> None:
        if self.winner is None:
            return
        self.state = start_new_round(self.state, self.scores.player1, self.scores.player2)
        self.current_turn = None
        logger.info("%s wins %d-%d", self.winner, *self._score_pair())

    def _opponent_card_count(self, perspective: Player) -> int:
        if self.state.phase is Phase.PLAYING:
            return len(self.state.play_state.play_hands.get(perspective.opponent))
        return len(self.state.hands.get(perspective.opponent))

    def _count_view(self) -> CountView:
        state = self.state
        counting = state.counting_state
        waiting = counting.waiting_for_verification
        counter = None
        if state.phase is Phase.COUNTING and counting.phase is not None:
            counter = expected_counter(state, counting.phase).value
        return CountView(
            phase=counting.phase.value if counting.phase else None,
            counter=counter,
            counted_hand=[serialize_card(card) for card in counting.counted_hand],
            claimed_score=counting.claimed_score,
            actual_score=None if waiting else counting.actual_score,
            actual_breakdown=[] if waiting else list(counting.actual_breakdown),
            waiting_for_verification=waiting,
            hands_scored=[
                {
                    "phase": record.phase.value,
                    "player": record.player.value,
                    "hand": [serialize_card(card) for card in record.hand],
                    "score": record.score,
                    "claimed": record.claimed,
                    "actual": record.actual,
                    "muggins": record.muggins,
                }
                for record in counting.hands_scored
            ],
        )
