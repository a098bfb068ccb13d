"""Simple bot arena: full matches to 121 driven through the game service."""

from __future__ import annotations

import argparse
import logging
from random import Random
from typing import Callable, Dict, Iterable, Mapping

from cribbage.actions import (
    AcceptPeggingScore,
    AcknowledgeDealer,
    Action,
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
from cribbage.rng import Mulberry32
from cribbage.service import GameService
from cribbage.state import Phase, Player

from .base import BotStrategy
from .computer import ComputerBot
from .random_bot import RandomBot

logger = logging.getLogger(__name__)

MAX_ROUNDS = 500

# Each factory takes a seed for the bot's own random choices.
BOT_REGISTRY: Dict[str, Callable[[int], BotStrategy]] = {
    "first": lambda seed: BotStrategy(),
    "random": RandomBot,
    "normal": lambda seed: ComputerBot("normal", rng=Mulberry32(seed)),
    "expert": lambda seed: ComputerBot("expert", rng=Mulberry32(seed)),
}


def _choose_action(kind: str, service: GameService, player: Player, bot: BotStrategy, claim_counts: bool) -> Action:
    state = service.state
    if kind == "cut_for_dealer":
        return CutForDealer(bot.choose_cut_index(state, player))
    if kind == "acknowledge_dealer":
        return AcknowledgeDealer()
    if kind == "deal":
        return Deal()
    if kind == "discard":
        return Discard(tuple(bot.choose_discard(state, player)))
    if kind == "cut_starter":
        return CutStarter(bot.choose_cut_index(state, player))
    if kind == "accept_score":
        return AcceptPeggingScore()
    if kind == "play_card":
        return Play(bot.choose_play(state, player))
    if kind == "say_go":
        return Go()
    if kind == "count":
        return ClaimCount(bot.choose_claim(state, player)) if claim_counts else Count()
    if kind == "verify_count":
        return CallMuggins() if bot.call_muggins(state, player) else VerifyCount()
    raise RuntimeError(f"Arena cannot resolve required action {kind!r}.")


def _round_summary(service: GameService) -> dict:
    counting = service.state.counting_state
    return {
        "round": service.state.round,
        "dealer": service.state.dealer.value if service.state.dealer else None,
        "scores": [service.scores.player1, service.scores.player2],
        "pegging": [service.state.pegging_points.player1, service.state.pegging_points.player2],
        "hands": [
            {"phase": record.phase.value, "player": record.player.value, "score": record.score, "muggins": record.muggins}
            for record in counting.hands_scored
        ],
    }


def play_step(service: GameService, bots: Mapping[Player, BotStrategy], *, claim_counts: bool = True) -> None:
    """Let whichever player has something to do make one move."""
    for player in Player:
        required = service.required_action(player)
        if required.type == "wait":
            continue
        action = _choose_action(required.type, service, player, bots[player], claim_counts)
        result = service.submit(player, action)
        if not result.success:
            raise RuntimeError(f"{bots[player].name} made an illegal move ({action}): {result.error}")
        return
    raise RuntimeError(f"No player can act in phase {service.state.phase.value}.")


def run_match(
    bot_a: BotStrategy,
    bot_b: BotStrategy,
    *,
    seed: int | None = None,
    claim_counts: bool = True,
) -> dict:
    """Play one match to 121; ``bot_a`` sits in seat player1."""
    rng = Mulberry32(seed) if seed is not None else Random()
    service = GameService(rng=rng)
    bots = {Player.PLAYER1: bot_a, Player.PLAYER2: bot_b}
    history = []
    while not service.is_over():
        if service.state.phase is Phase.DEALING:
            history.append(_round_summary(service))
            if len(history) >= MAX_ROUNDS:
                raise RuntimeError("Match did not finish.")
            service.start_next_round()
            continue
        play_step(service, bots, claim_counts=claim_counts)
    history.append(_round_summary(service))

    winner = service.winner
    logger.info("%s beat %s %d-%d", bots[winner].name, bots[winner.opponent].name, service.scores.player1, service.scores.player2)
    return {
        "scores": [service.scores.player1, service.scores.player2],
        "winner": winner.value,
        "rounds": len(history),
        "history": history,
    }


def main(argv: Iterable[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run cribbage bot matches.")
    parser.add_argument("--bot-a", default="normal", choices=BOT_REGISTRY.keys())
    parser.add_argument("--bot-b", default="expert", choices=BOT_REGISTRY.keys())
    parser.add_argument("--n", type=int, default=10, help="Number of matches to play.")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--direct-count", action="store_true", help="Count hands directly instead of claiming.")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    wins = {Player.PLAYER1.value: 0, Player.PLAYER2.value: 0}
    for idx in range(args.n):
        seed = args.seed + idx
        bot_a = BOT_REGISTRY[args.bot_a](seed)
        bot_b = BOT_REGISTRY[args.bot_b](seed + 10_000)
        results = run_match(bot_a, bot_b, seed=seed, claim_counts=not args.direct_count)
        wins[results["winner"]] += 1
        print(f"Match {idx + 1}: {results['scores'][0]}-{results['scores'][1]} in {results['rounds']} hands")

    print(f"{args.bot_a} (player1) wins: {wins['player1']}/{args.n}")
    print(f"{args.bot_b} (player2) wins: {wins['player2']}/{args.n}")


if __name__ == "__main__":
    main()
