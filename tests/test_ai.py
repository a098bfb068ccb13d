import logging
from random import Random

import pytest

from bots.computer import select_claim, select_discard, select_muggins_response, select_play
from bots.difficulty import DIFFICULTY_PROFILES, resolve_difficulty
from bots.discard_ev import CRIB_DISCARD_VALUES, crib_value
from cribbage.cards import parse_card, parse_cards
from cribbage.rng import Mulberry32, seed_rng


class ScriptedRandom(Random):
    """Returns the given values from ``random()`` in order."""

    def __init__(self, values):
        self.values = list(values)
        super().__init__(0)

    def random(self):
        return self.values.pop(0)


HAND = parse_cards("5♥ 5♦ 5♠ J♥ 4♥ 6♥")


@pytest.mark.parametrize("difficulty", ["normal", "expert"])
@pytest.mark.parametrize("is_dealer", [True, False])
def test_discard_keeps_four_cards_from_hand(difficulty, is_dealer):
    kept = select_discard(HAND, is_dealer, difficulty)
    assert len(kept) == 4
    assert set(kept) <= set(HAND)


def test_heuristic_discard_keeps_the_fives_and_jack():
    assert set(select_discard(HAND, True, "normal")) == set(parse_cards("5♥ 5♦ 5♠ J♥"))


def test_discard_falls_back_on_wrong_size(caplog):
    with caplog.at_level(logging.ERROR):
        kept = select_discard(HAND[:5], False, "expert")
    assert kept == HAND[:4]
    assert "called with 5 cards" in caplog.text


def test_expert_discard_ignores_randomness():
    hand = parse_cards("2♣ 7♦ 8♠ 9♥ Q♣ K♦")
    first = select_discard(hand, False, "expert", rng=Mulberry32(1))
    second = select_discard(hand, False, "expert", rng=Mulberry32(2))
    assert first == second


def test_crib_table_lookup_is_order_independent():
    assert len(CRIB_DISCARD_VALUES) == 91
    assert crib_value(parse_cards("5♠ 5♥")) == 8.5
    assert crib_value(parse_cards("K♠ A♥")) == crib_value(parse_cards("A♥ K♠")) == 3.5
    assert crib_value(parse_cards("J♦ 5♣")) == 6.5


@pytest.mark.parametrize("difficulty", ["normal", "expert"])
def test_never_lead_a_five(difficulty):
    played = select_play(parse_cards("5♠ 4♦ K♣ 9♥"), [], 0, difficulty, rng=Mulberry32(3))
    assert played == parse_card("4♦")


def test_heuristic_takes_the_fifteen():
    for seed in range(5):
        played = select_play(parse_cards("2♦ 5♠ 9♥"), parse_cards("K♣"), 10, "normal", rng=Mulberry32(seed))
        assert played == parse_card("5♠")


def test_expert_makes_trips():
    played = select_play(parse_cards("8♣ 2♠ 7♦"), parse_cards("7♠ 7♥"), 14, "expert")
    assert played == parse_card("7♦")


def test_play_edge_cases():
    assert select_play(parse_cards("5♠ K♦"), parse_cards("K♠ Q♠ 8♠"), 28, "normal") is None
    assert select_play(parse_cards("2♠ K♦"), parse_cards("K♠ Q♠ 8♠"), 28, "expert") == parse_card("2♠")


def test_heuristic_play_is_reproducible_with_a_seed():
    hand = parse_cards("3♠ 4♦ 6♣ 8♥")
    picks = [select_play(hand, parse_cards("9♣"), 9, "normal", rng=Mulberry32(17)) for _ in range(3)]
    assert picks[0] == picks[1] == picks[2]


def test_expert_play_ignores_randomness():
    hand = parse_cards("3♠ 4♦ 6♣ 8♥")
    picks = {select_play(hand, parse_cards("9♣"), 9, "expert", rng=Mulberry32(seed)) for seed in range(10)}
    assert len(picks) == 1


def test_heuristic_play_follows_the_shared_seed():
    hand = parse_cards("3♠ 4♦ 6♣ 8♥")
    picks = []
    try:
        for _ in range(3):
            seed_rng(99)
            picks.append(select_play(hand, parse_cards("9♣"), 9, "normal"))
    finally:
        seed_rng(None)
    assert picks[0] is not None
    assert picks[0] == picks[1] == picks[2]


def test_unknown_difficulty_falls_back_to_normal(caplog):
    with caplog.at_level(logging.WARNING, logger="bots.difficulty"):
        profile = resolve_difficulty("nightmare")
    assert profile is DIFFICULTY_PROFILES["normal"]
    assert "Unknown difficulty" in caplog.text


@pytest.mark.parametrize(
    "difficulty,actual,draws,claimed",
    [
        ("normal", 10, (0.05, 0.3), 8),
        ("normal", 10, (0.05, 0.7), 12),
        ("normal", 1, (0.05, 0.3), 0),
        ("normal", 10, (0.5,), 10),
        ("normal", 0, (), 0),
        ("expert", 10, (0.1,), 12),
        ("expert", 28, (0.1,), 29),
        ("expert", 10, (0.9,), 10),
    ],
)
def test_select_claim(difficulty, actual, draws, claimed):
    assert select_claim(actual, difficulty, rng=ScriptedRandom(draws)) == claimed


def test_muggins_only_on_proven_overcount():
    assert select_muggins_response(10, 8)
    assert not select_muggins_response(8, 8)
    assert not select_muggins_response(6, 8)
