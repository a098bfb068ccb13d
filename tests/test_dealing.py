from cribbage.actions import (
    AcceptPeggingScore,
    AcknowledgeDealer,
    CutForDealer,
    CutStarter,
    Deal,
    Discard,
    Play,
)
from cribbage.cards import parse_card, parse_cards
from cribbage.deck import build_deck
from cribbage.game import apply, initialize_game_state
from cribbage.rng import Mulberry32
from cribbage.state import PerPlayer, Phase, Player

P1, P2 = Player.PLAYER1, Player.PLAYER2


def ok(state, player, action, **kwargs):
    result = apply(state, player, action, **kwargs)
    assert result.success, result.error
    return result


def dealt_state():
    # player1 deals and holds A♠-6♠; player2 holds 7♠-Q♠; K♠ tops the rest.
    return initialize_game_state(dealer=P1, test_deck=build_deck())


def test_lower_cut_deals():
    state = initialize_game_state(test_deck=build_deck())
    assert state.phase is Phase.CUTTING_FOR_DEALER

    first = ok(state, P1, CutForDealer(index=0))
    assert first.next_turn is P2
    assert first.new_state.cut_for_dealer.cards.player1 == parse_card("A♠")

    second = ok(first.new_state, P2, CutForDealer(index=1))
    assert second.new_state.dealer is P1
    assert second.new_state.cut_for_dealer.dealer is P1
    assert len(second.new_state.remaining_deck) == 52


def test_equal_ranks_cut_again():
    state = initialize_game_state(test_deck=build_deck())
    state = ok(state, P1, CutForDealer(index=0)).new_state
    result = ok(state, P2, CutForDealer(index=13), rng=Mulberry32(5))
    cut = result.new_state.cut_for_dealer
    assert cut.cards == PerPlayer(None, None)
    assert cut.dealer is None
    assert sorted(result.new_state.remaining_deck, key=build_deck().index) == build_deck()


def test_cut_for_dealer_rejections():
    state = initialize_game_state(test_deck=build_deck())
    cut = ok(state, P1, CutForDealer(index=0)).new_state

    again = apply(cut, P1, CutForDealer(index=5))
    assert not again.success and again.error == "Already cut for dealer"

    same_card = apply(cut, P2, CutForDealer(index=0))
    assert not same_card.success and same_card.error_kind == "payload"

    out_of_range = apply(cut, P2, CutForDealer(index=52))
    assert not out_of_range.success and out_of_range.error_kind == "payload"

    early_ack = apply(cut, P2, AcknowledgeDealer())
    assert not early_ack.success


def test_random_cut_never_repeats_opponent_card():
    state = initialize_game_state(test_deck=build_deck())
    state = ok(state, P1, CutForDealer(index=0)).new_state
    for seed in range(20):
        result = ok(state, P2, CutForDealer(), rng=Mulberry32(seed))
        assert result.new_state.cut_for_dealer.cards.player2 != parse_card("A♠")


def test_only_dealer_deals_after_both_acknowledge():
    state = initialize_game_state(test_deck=build_deck())
    state = ok(state, P1, CutForDealer(index=0)).new_state
    state = ok(state, P2, CutForDealer(index=1)).new_state

    state = ok(state, P1, AcknowledgeDealer()).new_state
    early = apply(state, P1, Deal())
    assert not early.success
    assert early.error == "Both players must acknowledge the dealer first"

    acked = ok(state, P2, AcknowledgeDealer())
    assert acked.next_turn is P1
    state = acked.new_state

    wrong = apply(state, P2, Deal())
    assert not wrong.success and wrong.error == "Only the dealer may deal"

    dealt = ok(state, P1, Deal(deck=tuple(build_deck())))
    state = dealt.new_state
    assert state.phase is Phase.DISCARDING
    assert list(state.hands.player1) == build_deck()[:6]
    assert list(state.hands.player2) == build_deck()[6:12]
    assert len(state.remaining_deck) == 40


def test_random_deal_gives_six_each():
    state = initialize_game_state(test_deck=build_deck())
    state = ok(state, P1, CutForDealer(index=12)).new_state
    state = ok(state, P2, CutForDealer(index=1)).new_state
    assert state.dealer is P2
    state = ok(state, P1, AcknowledgeDealer()).new_state
    state = ok(state, P2, AcknowledgeDealer()).new_state
    state = ok(state, P2, Deal(), rng=Mulberry32(11)).new_state
    hands = state.hands.player1 + state.hands.player2
    assert len(state.hands.player1) == len(state.hands.player2) == 6
    assert len(set(hands + state.remaining_deck)) == 52


def test_discard_validation():
    state = dealt_state()
    for cards, message in [
        (parse_cards("A♠"), "Must discard exactly 2 cards"),
        (parse_cards("A♠ A♠"), "Cannot discard the same card twice"),
        (parse_cards("A♠ 7♠"), "Card 7♠ not in hand"),
    ]:
        result = apply(state, P1, Discard(tuple(cards)))
        assert not result.success
        assert result.error == message

    first = ok(state, P1, Discard(tuple(parse_cards("A♠ 2♠"))))
    assert first.new_state.phase is Phase.DISCARDING
    again = apply(first.new_state, P1, Discard(tuple(parse_cards("3♠ 4♠"))))
    assert not again.success and again.error == "Already discarded"


def test_both_discards_move_to_cut():
    state = dealt_state()
    state = ok(state, P1, Discard(tuple(parse_cards("A♠ 2♠")))).new_state
    result = ok(state, P2, Discard(tuple(parse_cards("7♠ 8♠"))))
    state = result.new_state
    assert state.phase is Phase.CUT
    assert result.next_turn is P2
    assert state.crib == tuple(parse_cards("A♠ 2♠ 7♠ 8♠"))
    assert state.hands.player1 == tuple(parse_cards("3♠ 4♠ 5♠ 6♠"))
    assert state.play_state.play_hands == state.hands
    # The six dealt cards are always hand plus discards.
    for player in (P1, P2):
        assert len(state.hands.get(player) + state.discards.get(player)) == 6


def discarded_state():
    state = dealt_state()
    state = ok(state, P1, Discard(tuple(parse_cards("A♠ 2♠")))).new_state
    return ok(state, P2, Discard(tuple(parse_cards("7♠ 8♠")))).new_state


def test_non_dealer_cuts_starter():
    state = discarded_state()
    wrong = apply(state, P1, CutStarter(index=0))
    assert not wrong.success and wrong.error == "Only the non-dealer may cut the starter"

    result = ok(state, P2, CutStarter(index=0))
    assert result.new_state.cut_card == parse_card("K♠")
    assert result.new_state.phase is Phase.PLAYING
    assert result.next_turn is P2
    assert len(result.new_state.remaining_deck) == 39


def test_his_heels_waits_for_dealer_acceptance():
    state = discarded_state()
    # J♥ sits at index 11 of the undealt cards.
    result = ok(state, P2, CutStarter(index=11))
    state = result.new_state
    assert state.cut_card == parse_card("J♥")
    assert state.phase is Phase.CUT
    assert result.next_turn is P1
    pending = state.pending_pegging_score
    assert (pending.player, pending.points, pending.is_his_heels) == (P1, 2, True)

    assert not apply(state, P2, Play(parse_card("3♠"))).success
    assert apply(state, P2, AcceptPeggingScore()).error_kind == "actor"
    assert apply(state, P2, CutStarter(index=0)).error == "Starter already cut"

    accepted = ok(state, P1, AcceptPeggingScore())
    assert accepted.new_state.phase is Phase.PLAYING
    assert accepted.new_state.pegging_points == PerPlayer(2, 0)
    assert accepted.next_turn is P2
    assert accepted.score_change == 2
