"""Plain-data (JSON-safe) encoding of game state and actions.

The caller persists ``state_to_dict`` output between actions and rebuilds the
state with ``state_from_dict``. Malformed payloads raise ``ValueError``.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, List, Mapping, Optional, Tuple

from .actions import (
    ACTION_NAMES,
    Action,
    ClaimCount,
    CutForDealer,
    CutStarter,
    Deal,
    Discard,
    Play,
)
from .cards import Card, deserialize_card, serialize_card
from .state import (
    CountingState,
    CountPhase,
    CutForDealerState,
    GameState,
    HandRecord,
    PeggingEvent,
    PendingScore,
    PerPlayer,
    Phase,
    PlayedCard,
    Player,
    PlayState,
)


def _cards(cards: Iterable[Card]) -> List[dict]:
    return [serialize_card(card) for card in cards]


def _load_cards(payload: Iterable[Mapping[str, str]]) -> Tuple[Card, ...]:
    return tuple(deserialize_card(item) for item in payload)


def _optional_card(card: Optional[Card]) -> Optional[dict]:
    return serialize_card(card) if card is not None else None


def _load_optional_card(payload: Optional[Mapping[str, str]]) -> Optional[Card]:
    return deserialize_card(payload) if payload is not None else None


def _player(player: Optional[Player]) -> Optional[str]:
    return player.value if player is not None else None


def _load_player(value: Optional[str]) -> Optional[Player]:
    return Player(value) if value is not None else None


def _per_player(values: PerPlayer, encode: Callable[[Any], Any]) -> dict:
    return {player.value: encode(value) for player, value in values.items()}


def _load_per_player(payload: Mapping[str, Any], decode: Callable[[Any], Any]) -> PerPlayer:
    return PerPlayer(decode(payload[Player.PLAYER1.value]), decode(payload[Player.PLAYER2.value]))


def _same(value: Any) -> Any:
    return value


def state_to_dict(state: GameState) -> dict:
    cut = state.cut_for_dealer
    play = state.play_state
    counting = state.counting_state
    pending = state.pending_pegging_score
    return {
        "phase": state.phase.value,
        "round": state.round,
        "dealer": _player(state.dealer),
        "hands": _per_player(state.hands, _cards),
        "discards": _per_player(state.discards, _cards),
        "crib": _cards(state.crib),
        "cut_card": _optional_card(state.cut_card),
        "remaining_deck": _cards(state.remaining_deck),
        "cut_for_dealer": {
            "cards": _per_player(cut.cards, _optional_card),
            "dealer": _player(cut.dealer),
            "acknowledged": _per_player(cut.acknowledged, _same),
        },
        "play_state": {
            "play_hands": _per_player(play.play_hands, _cards),
            "current_count": play.current_count,
            "played_cards": [
                {"card": serialize_card(entry.card), "played_by": entry.player.value} for entry in play.played_cards
            ],
            "round_cards": _cards(play.round_cards),
            "last_played_by": _player(play.last_played_by),
            "said_go": _per_player(play.said_go, _same),
        },
        "counting_state": {
            "phase": counting.phase.value if counting.phase is not None else None,
            "hands_scored": [
                {
                    "phase": record.phase.value,
                    "player": record.player.value,
                    "hand": _cards(record.hand),
                    "score": record.score,
                    "breakdown": list(record.breakdown),
                    "claimed": record.claimed,
                    "actual": record.actual,
                    "muggins": record.muggins,
                }
                for record in counting.hands_scored
            ],
            "claimed_score": counting.claimed_score,
            "actual_score": counting.actual_score,
            "actual_breakdown": list(counting.actual_breakdown),
            "counted_hand": _cards(counting.counted_hand),
            "waiting_for_verification": counting.waiting_for_verification,
        },
        "pending_pegging_score": None
        if pending is None
        else {
            "player": pending.player.value,
            "points": pending.points,
            "reason": pending.reason,
            "reset_round": pending.reset_round,
            "needs_last_card": pending.needs_last_card,
            "is_his_heels": pending.is_his_heels,
        },
        "pegging_history": [
            {
                "player": event.player.value,
                "kind": event.kind,
                "card": _optional_card(event.card),
                "count": event.count,
                "points": event.points,
                "reason": event.reason,
            }
            for event in state.pegging_history
        ],
        "pegging_points": _per_player(state.pegging_points, _same),
    }


def state_from_dict(payload: Mapping[str, Any]) -> GameState:
    try:
        cut = payload["cut_for_dealer"]
        play = payload["play_state"]
        counting = payload["counting_state"]
        pending = payload.get("pending_pegging_score")
        return GameState(
            phase=Phase(payload["phase"]),
            round=int(payload["round"]),
            dealer=_load_player(payload.get("dealer")),
            hands=_load_per_player(payload["hands"], _load_cards),
            discards=_load_per_player(payload["discards"], _load_cards),
            crib=_load_cards(payload["crib"]),
            cut_card=_load_optional_card(payload.get("cut_card")),
            remaining_deck=_load_cards(payload["remaining_deck"]),
            cut_for_dealer=CutForDealerState(
                cards=_load_per_player(cut["cards"], _load_optional_card),
                dealer=_load_player(cut.get("dealer")),
                acknowledged=_load_per_player(cut["acknowledged"], bool),
            ),
            play_state=PlayState(
                play_hands=_load_per_player(play["play_hands"], _load_cards),
                current_count=int(play["current_count"]),
                played_cards=tuple(
                    PlayedCard(deserialize_card(entry["card"]), Player(entry["played_by"]))
                    for entry in play["played_cards"]
                ),
                round_cards=_load_cards(play["round_cards"]),
                last_played_by=_load_player(play.get("last_played_by")),
                said_go=_load_per_player(play["said_go"], bool),
            ),
            counting_state=CountingState(
                phase=CountPhase(counting["phase"]) if counting.get("phase") is not None else None,
                hands_scored=tuple(
                    HandRecord(
                        phase=CountPhase(record["phase"]),
                        player=Player(record["player"]),
                        hand=_load_cards(record["hand"]),
                        score=int(record["score"]),
                        breakdown=tuple(record["breakdown"]),
                        claimed=record.get("claimed"),
                        actual=record.get("actual"),
                        muggins=record.get("muggins"),
                    )
                    for record in counting["hands_scored"]
                ),
                claimed_score=counting.get("claimed_score"),
                actual_score=counting.get("actual_score"),
                actual_breakdown=tuple(counting.get("actual_breakdown", ())),
                counted_hand=_load_cards(counting.get("counted_hand", ())),
                waiting_for_verification=bool(counting.get("waiting_for_verification", False)),
            ),
            pending_pegging_score=None
            if pending is None
            else PendingScore(
                player=Player(pending["player"]),
                points=int(pending["points"]),
                reason=pending["reason"],
                reset_round=bool(pending.get("reset_round", False)),
                needs_last_card=bool(pending.get("needs_last_card", False)),
                is_his_heels=bool(pending.get("is_his_heels", False)),
            ),
            pegging_history=tuple(
                PeggingEvent(
                    player=Player(event["player"]),
                    kind=event["kind"],
                    card=_load_optional_card(event.get("card")),
                    count=int(event.get("count", 0)),
                    points=int(event.get("points", 0)),
                    reason=event.get("reason", ""),
                )
                for event in payload.get("pegging_history", ())
            ),
            pegging_points=_load_per_player(payload["pegging_points"], int),
        )
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Malformed game state payload: {exc}") from exc


_ACTION_BY_NAME = {name: action_type for action_type, name in ACTION_NAMES.items()}


def action_to_dict(action: Action) -> dict:
    payload: dict = {"type": ACTION_NAMES[type(action)]}
    if isinstance(action, (CutForDealer, CutStarter)):
        payload["index"] = action.index
    elif isinstance(action, Deal):
        payload["deck"] = _cards(action.deck) if action.deck is not None else None
    elif isinstance(action, Discard):
        payload["cards"] = _cards(action.cards)
    elif isinstance(action, Play):
        payload["card"] = _optional_card(action.card)
    elif isinstance(action, ClaimCount):
        payload["claimed"] = action.claimed
    return payload


def action_from_dict(payload: Mapping[str, Any]) -> Action:
    try:
        action_type = _ACTION_BY_NAME[payload["type"]]
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Unknown action payload: {payload!r}") from exc

    try:
        if action_type in (CutForDealer, CutStarter):
            return action_type(index=payload.get("index"))
        if action_type is Deal:
            deck = payload.get("deck")
            return Deal(deck=_load_cards(deck) if deck is not None else None)
        if action_type is Discard:
            return Discard(cards=_load_cards(payload["cards"]))
        if action_type is Play:
            return Play(card=_load_optional_card(payload.get("card")))
        if action_type is ClaimCount:
            # Left as sent; claim_count rejects anything but a whole number.
            return ClaimCount(claimed=payload["claimed"])
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Malformed {payload['type']} payload: {exc}") from exc
    return action_type()
