from cribbage.actions import AcceptPeggingScore, Go, Play
from cribbage.cards import parse_card, parse_cards
from cribbage.game import apply
from cribbage.pegging import PENDING_SCORE_ERROR
from cribbage.serialize import state_to_dict
from cribbage.state import CountPhase, GameState, PerPlayer, Phase, Player, PlayState

P1, P2 = Player.PLAYER1, Player.PLAYER2


def playing_state(p1, p2, round_cards="", last=None):
    """Mid-play state with player1 dealing; the count is the sum of ``round_cards``."""
    hands = PerPlayer(tuple(parse_cards(p1)), tuple(parse_cards(p2)))
    played = tuple(parse_cards(round_cards))
    return GameState(
        phase=Phase.PLAYING,
        dealer=P1,
        hands=hands,
        cut_card=parse_card("K♦"),
        play_state=PlayState(
            play_hands=hands,
            current_count=sum(card.value for card in played),
            round_cards=played,
            last_played_by=last,
        ),
    )


def ok(state, player, action):
    result = apply(state, player, action)
    assert result.success, result.error
    return result


def test_run_and_fifteen_become_pending_score():
    state = playing_state("5♥ Q♦", "4♠ 6♣ K♣")
    result = ok(state, P2, Play(parse_card("4♠")))
    assert result.next_turn is P1
    result = ok(result.new_state, P1, Play(parse_card("5♥")))
    result = ok(result.new_state, P2, Play(parse_card("6♣")))

    state = result.new_state
    assert state.play_state.current_count == 15
    assert state.pending_pegging_score.points == 5
    assert state.pending_pegging_score.reason == "fifteen for 2 and run of 3 for 3"
    assert result.next_turn is P2
    assert result.score_change == 0
    assert state.pegging_points == PerPlayer(0, 0)

    accepted = ok(state, P2, AcceptPeggingScore())
    assert accepted.score_change == 5
    assert accepted.score_player is P2
    assert accepted.new_state.pegging_points == PerPlayer(0, 5)
    assert accepted.new_state.pending_pegging_score is None
    assert accepted.next_turn is P1


def test_pending_score_blocks_everything_else():
    state = playing_state("5♥ Q♦", "6♣ K♣", round_cards="4♠ 5♠", last=P1)
    pending = ok(state, P2, Play(parse_card("6♣"))).new_state

    for player, action in [(P1, Play(parse_card("Q♦"))), (P2, Play(parse_card("K♣"))), (P1, Go()), (P2, Go())]:
        result = apply(pending, player, action)
        assert not result.success
        assert result.error == PENDING_SCORE_ERROR

    other = apply(pending, P1, AcceptPeggingScore())
    assert not other.success
    assert other.error_kind == "actor"


def test_thirty_one_resets_count_at_once():
    state = playing_state("3♦", "Q♥ 2♥", round_cards="K♣ J♣ A♣", last=P1)
    result = ok(state, P2, Play(parse_card("Q♥")))
    play = result.new_state.play_state
    assert play.current_count == 0
    assert play.round_cards == ()
    assert result.new_state.pending_pegging_score.reason == "thirty-one for 2"

    accepted = ok(result.new_state, P2, AcceptPeggingScore())
    assert accepted.new_state.pegging_points.player2 == 2
    assert accepted.next_turn is P1


def test_go_scores_for_last_player_to_play():
    state = playing_state("7♦", "9♥ 8♥", round_cards="K♣ J♣ 5♣", last=P1)
    result = ok(state, P2, Go())
    pending = result.new_state.pending_pegging_score
    assert (pending.player, pending.points, pending.reason) == (P1, 1, "go for 1")
    assert pending.reset_round
    assert result.next_turn is P1

    accepted = ok(result.new_state, P1, AcceptPeggingScore())
    assert accepted.new_state.play_state.current_count == 0
    assert accepted.new_state.pegging_points.player1 == 1
    assert accepted.next_turn is P2


def test_go_rejected_with_playable_card():
    state = playing_state("7♦", "9♥ 2♥", round_cards="K♣ J♣ 5♣", last=P1)
    result = apply(state, P2, Go())
    assert not result.success
    assert result.error == "You have a playable card; go is not allowed"


def test_go_passes_turn_then_last_card_goes_straight_to_counting():
    state = playing_state("6♦", "9♥", round_cards="K♣ J♣ 5♣", last=P1)
    result = ok(state, P2, Go())
    assert result.new_state.pending_pegging_score is None
    assert result.new_state.play_state.said_go.player2
    assert result.next_turn is P1

    result = ok(result.new_state, P1, Play(parse_card("6♦")))
    assert result.new_state.play_state.current_count == 0
    result = ok(result.new_state, P1, AcceptPeggingScore())
    assert result.next_turn is P2

    last = ok(result.new_state, P2, Play(parse_card("9♥")))
    state = last.new_state
    assert state.phase is Phase.COUNTING
    assert state.counting_state.phase is CountPhase.NON_DEALER
    assert state.pending_pegging_score is None
    assert state.pegging_points == PerPlayer(2, 1)
    assert last.score_change == 1 and last.score_player is P2
    assert state.pegging_history[-1].reason == "last card for 1"


def test_final_scoring_card_chains_last_card_then_counting():
    state = playing_state("", "5♥", round_cards="K♣", last=P1)
    result = ok(state, P2, Play(parse_card("5♥")))
    pending = result.new_state.pending_pegging_score
    assert pending.reason == "fifteen for 2"
    assert pending.needs_last_card and pending.reset_round

    result = ok(result.new_state, P2, AcceptPeggingScore())
    assert result.score_change == 2
    assert result.new_state.phase is Phase.PLAYING
    chained = result.new_state.pending_pegging_score
    assert (chained.player, chained.points, chained.reason) == (P2, 1, "last card for 1")
    assert chained.reset_round and not chained.needs_last_card

    result = ok(result.new_state, P2, AcceptPeggingScore())
    assert result.score_change == 1
    assert result.new_state.phase is Phase.COUNTING
    assert result.new_state.play_state.current_count == 0
    assert result.new_state.pegging_points.player2 == 3


def test_final_card_making_31_has_no_extra_last_card():
    state = playing_state("", "10♥", round_cards="K♣ J♣ A♣", last=P1)
    result = ok(state, P2, Play(parse_card("10♥")))
    assert not result.new_state.pending_pegging_score.needs_last_card

    result = ok(result.new_state, P2, AcceptPeggingScore())
    assert result.new_state.phase is Phase.COUNTING
    assert result.new_state.pegging_points.player2 == 2


def test_rejected_plays_leave_state_untouched():
    state = playing_state("5♥ Q♦", "9♥ K♣", round_cards="K♠ 5♠ 9♠", last=P1)
    before = state_to_dict(state)

    for player, action, message in [
        (P2, Play(parse_card("5♥")), "Card not in hand"),
        (P2, Play(parse_card("K♣")), "Would exceed 31"),
        (P1, AcceptPeggingScore(), "No pending score to accept"),
    ]:
        result = apply(state, player, action)
        assert not result.success
        assert result.new_state is None
        assert result.error == message

    assert state_to_dict(state) == before


def test_play_outside_pegging_phase_is_rejected():
    state = playing_state("5♥", "9♥").update(phase=Phase.COUNTING)
    result = apply(state, P2, Play(parse_card("9♥")))
    assert not result.success
    assert result.error_kind == "phase"
