"""Deck creation and dealing utilities for Mus."""

from __future__ import annotations

from dataclasses import dataclass, field
from random import Random
from typing import Iterable, List, Optional, Sequence

from .cards import CARD_CATALOG, Card, catalog_card

HAND_SIZE = 4
SEAT_COUNT = 4
DECK_SIZE = len(CARD_CATALOG)


def build_deck() -> List[Card]:
    """Return the ordered 40-card deck."""
    return list(CARD_CATALOG)


@dataclass
class Deck:
    """Shuffled draw pile plus the discard pile of the current round."""

    cards: List[Card]
    rng: Random = field(default_factory=Random)
    discards: List[Card] = field(default_factory=list)

    @classmethod
    def shuffled(cls, rng: Optional[Random] = None) -> "Deck":
        rng = rng or Random()
        cards = build_deck()
        rng.shuffle(cards)
        return cls(cards=cards, rng=rng)

    @classmethod
    def stacked(cls, order: Sequence[Card], rng: Optional[Random] = None) -> "Deck":
        """Build a deck from an explicit card order (front is drawn first)."""
        cards = [catalog_card(card.rank, card.suit) for card in order]
        if len(cards) != DECK_SIZE or len(set(cards)) != DECK_SIZE:
            raise ValueError("Deck must contain each of the 40 cards exactly once.")
        return cls(cards=cards, rng=rng or Random())

    def __len__(self) -> int:
        return len(self.cards)

    def draw(self, count: int) -> List[Card]:
        if count > len(self.cards):
            self._recycle_discards()
        if count > len(self.cards):
            raise ValueError("Not enough cards left to draw.")
        drawn = self.cards[:count]
        del self.cards[:count]
        return drawn

    def discard(self, cards: Iterable[Card]) -> None:
        self.discards.extend(cards)

    def _recycle_discards(self) -> None:
        recycled = list(self.discards)
        self.rng.shuffle(recycled)
        self.cards.extend(recycled)
        self.discards.clear()


def deal_four_player(deck: Deck) -> List[List[Card]]:
    """Deal four cards to each seat in seat order."""
    return [deck.draw(HAND_SIZE) for _ in range(SEAT_COUNT)]
