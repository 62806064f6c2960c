"""Random baseline bot."""

from __future__ import annotations

import random
from typing import Optional, Sequence

from mus.betting import Bet, BetAction
from mus.game import RoundEngine
from mus.negotiation import Vote

from .base import BotStrategy


class RandomBot(BotStrategy):
    name = "Random"

    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)

    def decide_vote(self, engine: RoundEngine, seat: int) -> Vote:
        return self._rng.choice([Vote.MUS, Vote.JOSTA])

    def decide_discard(self, engine: RoundEngine, seat: int) -> Sequence[int]:
        count = self._rng.randint(1, 4)
        return sorted(self._rng.sample(range(4), count))

    def decide_bet(self, engine: RoundEngine, seat: int) -> Bet:
        assert engine.betting is not None
        legal = engine.betting.legal_actions(seat)
        if not legal:
            raise RuntimeError("No legal bets available for bot.")
        action = self._rng.choice(legal)
        if action is BetAction.GEHIAGO:
            return Bet.gehiago(self._rng.randint(1, 2))
        return Bet(action)
