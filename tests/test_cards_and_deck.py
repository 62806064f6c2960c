from random import Random

import pytest

from mus.cards import CARD_CATALOG, Card, Rank, Suit, card_label, catalog_card, deserialize_card, serialize_card
from mus.deck import DECK_SIZE, Deck, build_deck, deal_four_player


def test_catalog_holds_forty_unique_cards():
    assert len(CARD_CATALOG) == DECK_SIZE == 40
    assert len(set(CARD_CATALOG)) == 40
    assert len(build_deck()) == 40


def test_rank_values_follow_mus_table():
    king = catalog_card(Rank.KING, Suit.COINS)
    three = catalog_card(Rank.THREE, Suit.CUPS)
    knight = catalog_card(Rank.KNIGHT, Suit.SWORDS)
    ace = catalog_card(Rank.ACE, Suit.CLUBS)

    assert king.grand_value > three.grand_value > knight.grand_value
    assert ace.petit_value < knight.petit_value < three.petit_value < king.petit_value
    assert three.game_value == knight.game_value == king.game_value == 10
    assert ace.game_value == 1


def test_serialization_returns_catalog_instances():
    card = catalog_card(Rank.JACK, Suit.SWORDS)
    payload = serialize_card(card)
    assert payload == {"rank": "jack", "suit": "swords"}
    assert deserialize_card(payload) is card
    assert deserialize_card({"rank": "JACK", "suit": "Swords"}) is card
    assert card_label(card) == "Jack of Swords"
    assert str(card) == "Jack of Swords"


def test_shuffled_deck_is_deterministic_for_a_seed():
    first = Deck.shuffled(Random(11))
    second = Deck.shuffled(Random(11))
    assert first.cards == second.cards
    assert sorted(first.cards, key=CARD_CATALOG.index) == list(CARD_CATALOG)


def test_stacked_deck_rejects_duplicates():
    order = list(CARD_CATALOG)
    order[1] = order[0]
    with pytest.raises(ValueError):
        Deck.stacked(order)
    with pytest.raises(ValueError):
        Deck.stacked(CARD_CATALOG[:39])


def test_stacked_deck_maps_equal_cards_to_catalog():
    order = [Card(card.rank, card.suit) for card in CARD_CATALOG]
    deck = Deck.stacked(order)
    assert all(drawn is original for drawn, original in zip(deck.cards, CARD_CATALOG))


def test_deal_gives_each_seat_four_cards_in_order():
    deck = Deck.stacked(CARD_CATALOG)
    hands = deal_four_player(deck)
    for seat, hand in enumerate(hands):
        assert hand == list(CARD_CATALOG[seat * 4 : seat * 4 + 4])
    assert len(deck) == 24


def test_draw_recycles_discards_when_short():
    deck = Deck.stacked(CARD_CATALOG, rng=Random(2))
    drawn = deck.draw(38)
    deck.discard(drawn[:4])

    replacement = deck.draw(4)

    assert len(replacement) == 4
    assert len(deck) + len(deck.discards) == 2
    assert set(replacement) <= set(CARD_CATALOG[38:]) | set(drawn[:4])


def test_draw_fails_when_cards_are_exhausted():
    deck = Deck.stacked(CARD_CATALOG)
    deck.draw(40)
    with pytest.raises(ValueError):
        deck.draw(1)
