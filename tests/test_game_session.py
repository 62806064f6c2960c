import pytest

from mus.betting import Bet
from mus.cards import CARD_CATALOG, Rank, Suit, catalog_card
from mus.errors import InvalidActionForState
from mus.game import GameSession
from mus.negotiation import Vote
from mus.rules_schema import RuleSet
from mus.scoring import PendingPrime, PhaseResult, ResolutionReason, determine_winner, margin_to_win, round_delta
from mus.hands import Phase
from mus.seating import Team


def plain_deck():
    return list(CARD_CATALOG)


def play_all_pass(engine):
    engine.vote(engine.mano, Vote.JOSTA)
    while not engine.is_complete():
        engine.bet(engine.current_actor, Bet.paso())


def test_mano_rotates_after_each_round():
    session = GameSession(seed=1)
    for expected_mano in (0, 1, 2, 3):
        engine = session.start_round()
        assert engine.mano == expected_mano
        play_all_pass(engine)
        session.finish_round()
    assert len(session.round_history) == 4
    assert session.mano == 0


def test_cannot_start_over_an_unfinished_round():
    session = GameSession(seed=1)
    session.start_round()
    with pytest.raises(InvalidActionForState):
        session.start_round()
    with pytest.raises(InvalidActionForState):
        session.finish_round()


def test_completed_round_is_adopted_when_next_round_starts():
    session = GameSession(seed=5)
    play_all_pass(session.start_round(plain_deck()))
    session.start_round(plain_deck())
    assert len(session.round_history) == 1
    assert session.scores == list(session.round_history[0].new_scores)


def test_live_scores_track_the_running_round():
    session = GameSession(seed=2)
    engine = session.start_round()
    engine.vote(0, Vote.JOSTA)
    for _ in range(4):
        engine.bet(engine.current_actor, Bet.paso())
    assert sum(session.live_scores()) == 1
    assert session.scores == [0, 0]


def test_game_ends_and_blocks_new_rounds():
    session = GameSession(seed=3, rules=RuleSet(win_score=30), scores=[29, 0])
    engine = session.start_round()
    engine.vote(0, Vote.JOSTA)
    engine.bet(0, Bet.hordago())
    engine.bet(1, Bet.tira())
    engine.bet(3, Bet.tira())

    result = session.finish_round()
    assert result.game_over
    assert session.winner is Team.AB
    assert session.scores[0] == 30
    assert session.mano == 0
    with pytest.raises(InvalidActionForState):
        session.start_round()


def test_determine_winner_rules():
    assert determine_winner([39, 20], 40, mano=0) is None
    assert determine_winner([41, 40], 40, mano=1) is Team.AB
    assert determine_winner([38, 42], 40, mano=0) is Team.CD
    assert determine_winner([40, 40], 40, mano=1) is Team.CD
    assert determine_winner([30, 30], 30, mano=2) is Team.AB


def test_margin_and_round_delta():
    assert margin_to_win([12, 3], Team.AB, 40) == 28
    assert margin_to_win([45, 3], Team.AB, 40) == 0
    results = [
        PhaseResult(phase=Phase.GRAND, winner=Team.AB, points=2, reason=ResolutionReason.REVEALED),
        PhaseResult(phase=Phase.PAIRES, winner=None, points=0, reason=ResolutionReason.SKIPPED),
    ]
    primes = [PendingPrime(team=Team.CD, points=3, phase=Phase.JEU)]
    assert round_delta(results, primes) == (2, 3)


def test_hand_cards_stay_in_catalog_across_rounds():
    session = GameSession(seed=9)
    for _ in range(3):
        engine = session.start_round()
        dealt = [card for hand in engine.hands for card in hand]
        assert all(any(card is original for original in CARD_CATALOG) for card in dealt)
        play_all_pass(engine)
        session.finish_round()


def test_stacked_deck_round_through_session():
    king = catalog_card(Rank.KING, Suit.COINS)
    deck = plain_deck()
    deck.remove(king)
    deck.insert(0, king)
    engine = GameSession().start_round(deck)
    assert engine.hands[0][0] is king
