"""Common bot strategy interfaces."""

from __future__ import annotations

from typing import Sequence

from mus.betting import Bet, BetAction
from mus.game import RoundEngine
from mus.negotiation import Vote

MAX_EXCHANGES = 3


class BotStrategy:
    """Base class for bot policies.

    Bots see the same round engine a seat would and answer with values the
    action API accepts. They only ever read their own hand.
    """

    name: str = "BaseBot"
    max_exchanges: int = MAX_EXCHANGES

    def vote(self, engine: RoundEngine, seat: int) -> Vote:
        """Vote, forcing josta once the table has exchanged ``max_exchanges`` times."""
        if engine.negotiation.exchanges >= self.max_exchanges:
            return Vote.JOSTA
        return self.decide_vote(engine, seat)

    def decide_vote(self, engine: RoundEngine, seat: int) -> Vote:
        return Vote.JOSTA

    def decide_discard(self, engine: RoundEngine, seat: int) -> Sequence[int]:
        """Return 1-4 hand indices to throw away."""
        return [0]

    def decide_bet(self, engine: RoundEngine, seat: int) -> Bet:
        assert engine.betting is not None
        legal = engine.betting.legal_actions(seat)
        if BetAction.PASO in legal:
            return Bet.paso()
        if BetAction.IDUKI in legal:
            return Bet.iduki()
        return Bet.tira()
