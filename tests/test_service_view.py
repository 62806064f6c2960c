from mus.cards import CARD_CATALOG, Rank, Suit, catalog_card
from mus.game import GameSession
from mus.service import MusService


def stacked_deck(hands):
    chosen = [card for hand in hands for card in hand]
    return chosen + [card for card in CARD_CATALOG if card not in chosen]


def hand(suit, *ranks):
    return [catalog_card(rank, suit) for rank in ranks]


HANDS = [
    [catalog_card(Rank.KING, Suit.COINS), catalog_card(Rank.KING, Suit.CUPS), catalog_card(Rank.FOUR, Suit.COINS), catalog_card(Rank.FIVE, Suit.COINS)],
    hand(Suit.COINS, Rank.ACE, Rank.TWO, Rank.SIX, Rank.SEVEN),
    [catalog_card(Rank.JACK, Suit.COINS), catalog_card(Rank.KNIGHT, Suit.COINS), catalog_card(Rank.ACE, Suit.CUPS), catalog_card(Rank.TWO, Suit.CUPS)],
    hand(Suit.CUPS, Rank.FOUR, Rank.FIVE, Rank.SIX, Rank.SEVEN),
]


def stacked_service():
    service = MusService(GameSession(seed=4))
    service.session.start_round(stacked_deck(HANDS))
    return service


def test_start_round_returns_initial_view():
    service = MusService(GameSession(seed=4))
    result = service.start_round(seat=1)

    assert result.success
    assert result.events[0] == {"type": "round_started", "mano": 0}
    view = result.view
    assert view.seat == 1
    assert view.team == "CD"
    assert view.scores == [0, 0]
    assert view.round.stage == "mus_decision"
    assert view.round.current_actor == 0
    assert len(view.round.hand) == 4
    assert view.round.deck_size == 24


def test_snapshot_only_exposes_own_hand():
    service = stacked_service()
    view = service.snapshot(2)
    assert view.round.hand == [
        {"rank": "jack", "suit": "coins"},
        {"rank": "knight", "suit": "coins"},
        {"rank": "ace", "suit": "cups"},
        {"rank": "two", "suit": "cups"},
    ]
    assert view.round.hand_labels[0] == "Jack of Coins"
    assert "hands" not in vars(view.round)


def test_string_votes_are_case_insensitive():
    service = stacked_service()
    result = service.vote(0, "JOSTA")
    assert result.success
    assert result.view.round.stage == "betting_grand"
    assert result.view.round.betting.legal_actions == ["paso", "imido", "hordago"]
    assert [event["type"] for event in result.events] == ["vote_recorded", "negotiation_ended", "betting_opened"]


def test_rejections_carry_error_codes():
    service = stacked_service()
    assert service.vote(0, "maybe").code == "invalid_action"
    assert service.vote(7, "mus").code == "invalid_action"
    assert service.bet(0, "paso").code == "invalid_action"

    for seat in range(4):
        assert service.vote(seat, "mus").success
    discard = service.discard(0, [])
    assert not discard.success
    assert discard.code == "invalid_cardinality"
    assert discard.view is None


def test_betting_rejections():
    service = stacked_service()
    service.vote(0, "josta")
    assert service.bet(2, "paso").code == "turn_violation"
    assert service.bet(0, "imido").success
    assert service.bet(1, "gehiago").code == "invalid_raise"
    assert service.bet(1, "fold").code == "invalid_action"

    raised = service.bet(1, "GEHIAGO", 4)
    assert raised.success
    betting = raised.view.round.betting
    assert betting.stake == 2
    assert betting.raised_total == 4
    assert betting.bets[-1] == {"seat": 1, "action": "gehiago", "amount": 4}
    assert betting.current_seat == 2


def test_completed_round_is_finished_automatically():
    service = stacked_service()
    service.vote(0, "josta")
    result = None
    for _ in range(3):
        for _ in range(4):
            seat = service.session.current_round.current_actor
            result = service.bet(seat, "paso")
            assert result.success

    types = [event["type"] for event in result.events]
    assert "round_complete" in types
    assert types[-1] == "mano_rotated"
    assert not service.has_active_round()
    assert service.session.mano == 1
    view = result.view
    assert view.round is None
    assert view.rounds_played == 1
    assert view.last_round["scores"] == [4, 0]
    assert [item["phase"] for item in view.last_round["phase_results"]] == ["grand", "petit", "paires", "puntuak"]
    assert view.last_round["primes"] == [
        {"team": "AB", "points": 1, "phase": "paires"},
        {"team": "AB", "points": 1, "phase": "puntuak"},
    ]


def test_turn_token_changes_on_every_commit():
    service = stacked_service()
    first = service.turn_token()
    service.vote(0, "mus")
    second = service.turn_token()
    service.vote(0, "mus")
    assert first != second
    assert service.turn_token() == second
