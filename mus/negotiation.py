"""Mus negotiation: the keep-or-play vote and the discard/redraw exchange."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List, Optional, Sequence, Set

from .cards import Card
from .deck import HAND_SIZE, Deck
from .errors import InvalidActionForState, InvalidCardinality, TurnViolation
from .seating import seats_from, validate_seat

MIN_DISCARD = 1
MAX_DISCARD = 4


class Vote(Enum):
    MUS = "mus"
    JOSTA = "josta"

    def __str__(self) -> str:
        return self.value


class NegotiationStage(Enum):
    VOTING = auto()
    DISCARDING = auto()
    CLOSED = auto()


@dataclass
class MusNegotiation:
    """Manage the vote/discard loop that precedes betting.

    ``hands`` is shared with the round engine; discards replace cards in place.
    """

    mano: int
    hands: List[List[Card]]
    deck: Deck
    stage: NegotiationStage = NegotiationStage.VOTING
    votes: Dict[int, Vote] = field(default_factory=dict)
    discarded: Set[int] = field(default_factory=set)
    exchanges: int = 0

    def vote(self, seat: int, choice: Vote) -> bool:
        """Record a vote in mano order. Returns True when the vote closes the negotiation."""
        validate_seat(seat)
        if self.stage is not NegotiationStage.VOTING:
            raise InvalidActionForState("Votes are only accepted while the mus decision is open.")
        if seat in self.votes:
            raise TurnViolation(f"Seat {seat} has already voted this round.")
        expected = self.next_voter()
        if seat != expected:
            raise TurnViolation(f"Not seat {seat}'s turn to vote; seat {expected} votes next.")

        self.votes[seat] = choice
        if choice is Vote.JOSTA:
            self.stage = NegotiationStage.CLOSED
            return True
        if len(self.votes) == len(self.hands):
            self.stage = NegotiationStage.DISCARDING
            self.discarded = set()
        return False

    def discard(self, seat: int, indices: Sequence[int]) -> List[Card]:
        """Swap the selected cards for fresh ones from the deck; return the discarded cards."""
        validate_seat(seat)
        if self.stage is not NegotiationStage.DISCARDING:
            raise InvalidActionForState("Discards are only accepted after a unanimous mus vote.")
        if seat in self.discarded:
            raise TurnViolation(f"Seat {seat} has already discarded this exchange.")
        positions = _validate_indices(indices)

        hand = self.hands[seat]
        thrown = [hand[index] for index in positions]
        replacements = self.deck.draw(len(positions))
        for index, card in zip(positions, replacements):
            hand[index] = card
        self.deck.discard(thrown)
        self.discarded.add(seat)

        if len(self.discarded) == len(self.hands):
            self._reopen_vote()
        return thrown

    def next_voter(self) -> Optional[int]:
        """First seat in mano order still expected to vote."""
        if self.stage is not NegotiationStage.VOTING:
            return None
        return next((seat for seat in seats_from(self.mano) if seat not in self.votes), None)

    def pending_discards(self) -> List[int]:
        if self.stage is not NegotiationStage.DISCARDING:
            return []
        return [seat for seat in seats_from(self.mano) if seat not in self.discarded]

    def is_closed(self) -> bool:
        return self.stage is NegotiationStage.CLOSED

    def _reopen_vote(self) -> None:
        self.exchanges += 1
        self.votes = {}
        self.discarded = set()
        self.stage = NegotiationStage.VOTING


def _validate_indices(indices: Sequence[int]) -> List[int]:
    positions = list(indices)
    if not MIN_DISCARD <= len(positions) <= MAX_DISCARD:
        raise InvalidCardinality(
            f"Discard between {MIN_DISCARD} and {MAX_DISCARD} cards, got {len(positions)}."
        )
    if len(set(positions)) != len(positions):
        raise InvalidCardinality("Discard indices must be distinct.")
    if any(not isinstance(index, int) or not 0 <= index < HAND_SIZE for index in positions):
        raise InvalidCardinality(f"Discard indices must be between 0 and {HAND_SIZE - 1}.")
    return sorted(positions)
