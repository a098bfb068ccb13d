from cribbage.actions import AcceptPeggingScore, Count, CutStarter, Discard, Go, Play
from cribbage.cards import parse_card, parse_cards
from cribbage.deck import build_deck
from cribbage.game import apply, initialize_game_state, start_new_round
from cribbage.mechanics import playable_cards
from cribbage.state import Phase, Player

P1, P2 = Player.PLAYER1, Player.PLAYER2


def stacked_deck(dealer_cards, pone_cards, starter):
    """player1 receives ``dealer_cards``; ``starter`` is the first undealt card."""
    top = parse_cards(dealer_cards) + parse_cards(pone_cards) + [parse_card(starter)]
    return top + [card for card in build_deck() if card not in top]


def ok(state, player, action):
    result = apply(state, player, action)
    assert result.success, result.error
    return result


def play_out(state, turn):
    while state.phase is Phase.PLAYING:
        pending = state.pending_pegging_score
        if pending is not None:
            result = ok(state, pending.player, AcceptPeggingScore())
        else:
            legal = playable_cards(state, turn)
            result = ok(state, turn, Play(legal[0]) if legal else Go())
        state, turn = result.new_state, result.next_turn
    return state, turn


def play_hand(deck, dealer_discards, pone_discards):
    state = initialize_game_state(dealer=P1, test_deck=deck)
    state = ok(state, P1, Discard(tuple(parse_cards(dealer_discards)))).new_state
    state = ok(state, P2, Discard(tuple(parse_cards(pone_discards)))).new_state
    result = ok(state, P2, CutStarter(index=0))
    state, turn = play_out(result.new_state, result.next_turn)
    assert state.phase is Phase.COUNTING
    assert turn is P2

    scores = []
    for player in (P2, P1, P1):
        result = ok(state, player, Count())
        scores.append(result.score_change)
        state = result.new_state
    return state, scores


def test_discard_game_through_counting():
    deck = stacked_deck("5♥ 5♦ 5♠ J♥ 4♥ 6♥", "10♣ 10♦ 6♣ K♠ Q♦ 9♥", "5♣")
    state, scores = play_hand(deck, "4♥ 6♥", "K♠ Q♦")

    assert state.crib == tuple(parse_cards("4♥ 6♥ K♠ Q♦"))
    assert state.cut_card == parse_card("5♣")
    # J♥ does not match the 5♣ starter, so there is no nobs point.
    assert scores == [8, 28, 9]
    assert state.phase is Phase.DEALING
    assert len(state.counting_state.hands_scored) == 3
    assert state.pegging_points.player1 + state.pegging_points.player2 > 0


def test_perfect_hand_through_counting():
    deck = stacked_deck("5♠ 5♣ 5♦ J♥ 4♣ 6♣", "10♠ 10♦ 6♦ K♠ Q♦ 9♥", "5♥")
    state, scores = play_hand(deck, "4♣ 6♣", "K♠ Q♦")
    assert scores == [8, 29, 9]
    assert state.counting_state.hands_scored[1].hand == tuple(parse_cards("5♠ 5♣ 5♦ J♥"))


def test_every_card_is_pegged_once():
    deck = stacked_deck("5♥ 5♦ 5♠ J♥ 4♥ 6♥", "10♣ 10♦ 6♣ K♠ Q♦ 9♥", "5♣")
    state, _ = play_hand(deck, "4♥ 6♥", "K♠ Q♦")
    played = state.play_state.played_cards
    assert len(played) == 8
    assert sorted(str(entry.card) for entry in played if entry.player is P1) == sorted(
        str(card) for card in state.hands.player1
    )


def test_new_round_alternates_dealer():
    deck = stacked_deck("5♥ 5♦ 5♠ J♥ 4♥ 6♥", "10♣ 10♦ 6♣ K♠ Q♦ 9♥", "5♣")
    state, _ = play_hand(deck, "4♥ 6♥", "K♠ Q♦")

    next_round = start_new_round(state, 40, 52, test_deck=build_deck())
    assert next_round.phase is Phase.DISCARDING
    assert next_round.dealer is P2
    assert next_round.round == 2
    assert list(next_round.hands.player1) == build_deck()[:6]
    assert next_round.crib == ()
    assert next_round.cut_card is None
    assert next_round.counting_state.hands_scored == ()
    assert next_round.pegging_history == ()


def test_new_round_ends_game_at_121():
    state = initialize_game_state(dealer=P1, test_deck=build_deck())
    assert start_new_round(state, 121, 80).phase is Phase.GAME_OVER
    assert start_new_round(state, 60, 125).phase is Phase.GAME_OVER
    assert start_new_round(state, 120, 120).phase is Phase.DISCARDING
