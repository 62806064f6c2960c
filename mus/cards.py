"""Card-related data structures and helpers for Mus."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Mapping, Tuple


class Suit(Enum):
    COINS = auto()
    CUPS = auto()
    SWORDS = auto()
    CLUBS = auto()

    def __str__(self) -> str:
        return self.name.lower()


class Rank(Enum):
    ACE = auto()
    TWO = auto()
    THREE = auto()
    FOUR = auto()
    FIVE = auto()
    SIX = auto()
    SEVEN = auto()
    JACK = auto()
    KNIGHT = auto()
    KING = auto()

    def __str__(self) -> str:
        return self.name.lower()


# High-card ranking for Grand; threes and kings sit above every other rank.
GRAND_VALUES: dict[Rank, int] = {
    Rank.ACE: 1,
    Rank.TWO: 2,
    Rank.THREE: 13,
    Rank.FOUR: 3,
    Rank.FIVE: 4,
    Rank.SIX: 5,
    Rank.SEVEN: 6,
    Rank.JACK: 7,
    Rank.KNIGHT: 8,
    Rank.KING: 14,
}

# Low-card ranking for Petit; the smallest value wins.
PETIT_VALUES: dict[Rank, int] = {
    Rank.ACE: 1,
    Rank.TWO: 2,
    Rank.THREE: 11,
    Rank.FOUR: 3,
    Rank.FIVE: 4,
    Rank.SIX: 5,
    Rank.SEVEN: 6,
    Rank.JACK: 7,
    Rank.KNIGHT: 8,
    Rank.KING: 12,
}

# Point values summed for Jeu and Puntuak.
GAME_VALUES: dict[Rank, int] = {
    Rank.ACE: 1,
    Rank.TWO: 2,
    Rank.THREE: 10,
    Rank.FOUR: 4,
    Rank.FIVE: 5,
    Rank.SIX: 6,
    Rank.SEVEN: 7,
    Rank.JACK: 10,
    Rank.KNIGHT: 10,
    Rank.KING: 10,
}


@dataclass(frozen=True)
class Card:
    """Immutable representation of a playing card."""

    rank: Rank
    suit: Suit

    @property
    def grand_value(self) -> int:
        return GRAND_VALUES[self.rank]

    @property
    def petit_value(self) -> int:
        return PETIT_VALUES[self.rank]

    @property
    def game_value(self) -> int:
        return GAME_VALUES[self.rank]

    def __str__(self) -> str:
        return card_label(self)


def _build_catalog() -> Tuple[Card, ...]:
    return tuple(Card(rank, suit) for suit in Suit for rank in Rank)


# The 40 physical cards. Decks and hands only ever hold these instances.
CARD_CATALOG: Tuple[Card, ...] = _build_catalog()

_CATALOG_INDEX: Dict[Tuple[Rank, Suit], Card] = {(card.rank, card.suit): card for card in CARD_CATALOG}


def catalog_card(rank: Rank, suit: Suit) -> Card:
    """Return the catalog instance for the given rank and suit."""
    return _CATALOG_INDEX[(rank, suit)]


def serialize_card(card: Card) -> dict[str, str]:
    return {"rank": card.rank.name.lower(), "suit": card.suit.name.lower()}


def deserialize_card(payload: Mapping[str, str]) -> Card:
    rank_name = payload["rank"].upper()
    suit_name = payload["suit"].upper()
    return catalog_card(Rank[rank_name], Suit[suit_name])


def card_label(card: Card) -> str:
    return f"{card.rank.name.title()} of {card.suit.name.title()}"
