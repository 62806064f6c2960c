import pytest

from mus.betting import Bet, BetAction, BettingRound, BettingStatus, OutcomeKind
from mus.errors import InvalidActionForState, InvalidRaise, TurnViolation
from mus.hands import Phase
from mus.seating import Team


def test_all_pass_rotates_from_mano_and_needs_comparison():
    betting = BettingRound(phase=Phase.GRAND, mano=2)
    order = []
    for _ in range(4):
        order.append(betting.current_seat)
        outcome = betting.act(betting.current_seat, Bet.paso())

    assert order == [2, 3, 0, 1]
    assert outcome.kind is OutcomeKind.ALL_PASS
    assert outcome.needs_comparison
    assert betting.is_resolved()
    assert betting.current_seat is None


def test_out_of_turn_bet_is_rejected_without_mutation():
    betting = BettingRound(phase=Phase.GRAND, mano=0)
    with pytest.raises(TurnViolation):
        betting.act(1, Bet.imido())
    assert betting.bets == []
    assert betting.status is BettingStatus.NO_BET
    assert betting.current_seat == 0


def test_imido_then_iduki_is_called_for_one():
    betting = BettingRound(phase=Phase.PETIT, mano=0)
    betting.act(0, Bet.imido())
    assert betting.status is BettingStatus.OPEN_BET
    assert betting.current_seat == 1

    outcome = betting.act(1, Bet.iduki())

    assert outcome.kind is OutcomeKind.CALLED
    assert outcome.stake == 1
    assert outcome.needs_comparison


def test_raise_and_double_fold_is_walkover():
    betting = BettingRound(phase=Phase.GRAND, mano=0)
    betting.act(0, Bet.paso())
    betting.act(1, Bet.imido())
    assert betting.current_seat == 2

    betting.act(2, Bet.gehiago(3))
    assert betting.current_seat == 3
    assert betting.stake == 2
    assert betting.raised_total == 3
    assert betting.bets[-1].amount == 3

    betting.act(3, Bet.tira())
    assert betting.current_seat == 1
    with pytest.raises(TurnViolation):
        betting.act(3, Bet.iduki())

    outcome = betting.act(1, Bet.tira())
    assert outcome.kind is OutcomeKind.WALKOVER
    assert outcome.winner is Team.AB
    assert outcome.stake == 2


def test_partner_can_answer_after_a_fold():
    betting = BettingRound(phase=Phase.GRAND, mano=0)
    betting.act(0, Bet.imido())
    betting.act(1, Bet.tira())
    assert betting.eliminated == {1}
    assert betting.current_seat == 3

    outcome = betting.act(3, Bet.iduki())
    assert outcome.kind is OutcomeKind.CALLED


@pytest.mark.parametrize("amount", [None, 0, -2])
def test_gehiago_needs_positive_amount(amount):
    betting = BettingRound(phase=Phase.GRAND, mano=0)
    betting.act(0, Bet.imido())
    with pytest.raises(InvalidRaise):
        betting.act(1, Bet(BetAction.GEHIAGO, amount))
    assert betting.raise_count == 0
    assert betting.current_seat == 1
    assert len(betting.bets) == 1


def test_actions_must_fit_the_bet_state():
    betting = BettingRound(phase=Phase.GRAND, mano=0)
    with pytest.raises(InvalidActionForState):
        betting.act(0, Bet.iduki())
    with pytest.raises(InvalidActionForState):
        betting.act(0, Bet.kanta())
    betting.act(0, Bet.imido())
    with pytest.raises(InvalidActionForState):
        betting.act(1, Bet.paso())


def test_hordago_allows_only_tira_or_kanta():
    betting = BettingRound(phase=Phase.GRAND, mano=0)
    betting.act(0, Bet.hordago())
    assert betting.hordago
    assert betting.legal_actions(1) == [BetAction.TIRA, BetAction.KANTA]
    assert betting.legal_actions(2) == []
    with pytest.raises(InvalidActionForState):
        betting.act(1, Bet.gehiago(2))

    outcome = betting.act(1, Bet.kanta())
    assert outcome.kind is OutcomeKind.KANTA
    assert outcome.needs_comparison


def test_hordago_answered_by_two_folds_goes_to_declarer():
    betting = BettingRound(phase=Phase.JEU, mano=0)
    betting.act(0, Bet.paso())
    betting.act(1, Bet.hordago())
    betting.act(2, Bet.tira())
    assert betting.current_seat == 0

    outcome = betting.act(0, Bet.tira())
    assert outcome.kind is OutcomeKind.HORDAGO_WALKOVER
    assert outcome.winner is Team.CD


def test_hordago_in_answer_to_open_bet():
    betting = BettingRound(phase=Phase.GRAND, mano=0)
    betting.act(0, Bet.imido())
    betting.act(1, Bet.hordago())
    assert betting.status is BettingStatus.HORDAGO
    assert betting.current_seat == 2


def test_resolved_round_rejects_further_actions():
    betting = BettingRound(phase=Phase.GRAND, mano=0)
    betting.act(0, Bet.imido())
    betting.act(1, Bet.iduki())
    with pytest.raises(InvalidActionForState):
        betting.act(2, Bet.paso())


def test_raise_reinstates_folded_seats():
    betting = BettingRound(phase=Phase.GRAND, mano=0)
    betting.act(0, Bet.imido())
    betting.act(1, Bet.tira())
    assert betting.eliminated == {1}
    assert betting.current_seat == 3

    betting.act(3, Bet.gehiago(1))
    assert betting.eliminated == set()
    assert betting.current_seat == 0

    betting.act(0, Bet.tira())
    assert betting.current_seat == 2
    betting.act(2, Bet.gehiago(1))
    assert betting.eliminated == set()
    assert betting.current_seat == 3

    betting.act(3, Bet.tira())
    assert betting.current_seat == 1
    # Seat 1 folded earlier but is back in after the raises.
    outcome = betting.act(1, Bet.iduki())
    assert outcome.kind is OutcomeKind.CALLED
    assert outcome.stake == 3
