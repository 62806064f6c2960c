"""Heuristic bots with table personalities."""

from __future__ import annotations

import random
from typing import Optional, Sequence

from mus.betting import Bet, BetAction, BettingStatus
from mus.cards import Card
from mus.game import RoundEngine
from mus.hands import (
    JEU_ORDER,
    Phase,
    best_grand,
    best_petit,
    detect_pair_pattern,
    has_jeu,
    jeu_total,
)
from mus.negotiation import Vote

from .base import BotStrategy

MAX_GRAND = 14
MAX_PETIT = 12


def hand_quality(cards: Sequence[Card]) -> float:
    """Rough 0..1 score of a four-card hand across all phases."""
    score = (best_grand(cards) / MAX_GRAND) * 0.25
    score += ((MAX_PETIT + 1 - best_petit(cards)) / MAX_PETIT) * 0.25
    score += (int(detect_pair_pattern(cards)) / 3) * 0.25
    total = jeu_total(cards)
    if has_jeu(cards):
        score += 0.25
    else:
        score += (total / 40) * 0.15
    return min(score, 1.0)


def phase_strength(phase: Phase, cards: Sequence[Card]) -> float:
    if phase is Phase.GRAND:
        return best_grand(cards) / MAX_GRAND
    if phase is Phase.PETIT:
        return (MAX_PETIT + 1 - best_petit(cards)) / MAX_PETIT
    if phase is Phase.PAIRES:
        return int(detect_pair_pattern(cards)) / 3
    if phase is Phase.JEU:
        total = jeu_total(cards)
        if total not in JEU_ORDER:
            return 0.3
        return 1 - JEU_ORDER.index(total) / len(JEU_ORDER)
    return min(jeu_total(cards) / 30, 1.0)


def card_keep_value(card: Card, hand: Sequence[Card]) -> float:
    score = card.grand_value * 0.3
    score += (MAX_PETIT - card.petit_value) * 0.2
    score += card.game_value * 0.3
    same_rank = sum(1 for other in hand if other.rank is card.rank)
    if same_rank >= 2:
        score += 20 * same_rank
    return score


class HeuristicBot(BotStrategy):
    """Hand-strength driven bot; subclasses tune how boldly it bets."""

    name = "Heuristic"
    aggressiveness = 0.5
    mus_threshold = 0.5

    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)

    def decide_vote(self, engine: RoundEngine, seat: int) -> Vote:
        quality = hand_quality(engine.hands[seat])
        return Vote.MUS if quality < self.mus_threshold else Vote.JOSTA

    def decide_discard(self, engine: RoundEngine, seat: int) -> Sequence[int]:
        hand = engine.hands[seat]
        ranked = sorted(range(len(hand)), key=lambda index: card_keep_value(hand[index], hand))
        count = self._rng.randint(1, 3)
        return sorted(ranked[:count])

    def decide_bet(self, engine: RoundEngine, seat: int) -> Bet:
        betting = engine.betting
        assert betting is not None
        strength = phase_strength(betting.phase, engine.hands[seat])

        if betting.status is BettingStatus.NO_BET:
            return self._opening_bet(strength)
        if betting.status is BettingStatus.HORDAGO:
            return Bet.kanta() if strength > 0.75 else Bet.tira()

        last_raise = next(
            (record for record in reversed(betting.bets) if record.action in (BetAction.IMIDO, BetAction.GEHIAGO)),
            None,
        )
        if last_raise is not None and last_raise.action is BetAction.GEHIAGO:
            if strength > 0.7 and betting.raise_count < 3:
                return Bet.gehiago(self._rng.randint(1, 2))
            if strength > 0.5:
                return Bet.iduki()
            return Bet.tira()

        if strength > 0.75 and self._rng.random() < self.aggressiveness:
            return Bet.gehiago(self._rng.randint(1, 2))
        if strength > 0.6 and self._rng.random() < self.aggressiveness * 0.5:
            return Bet.hordago()
        if strength > 0.4:
            return Bet.iduki()
        return Bet.tira()

    def _opening_bet(self, strength: float) -> Bet:
        if strength > 0.8 and self._rng.random() < self.aggressiveness * 0.3:
            return Bet.hordago()
        if strength > 0.65 and self._rng.random() < self.aggressiveness:
            return Bet.imido()
        return Bet.paso()


class AggressiveBot(HeuristicBot):
    name = "Aggressive"
    aggressiveness = 0.8
    mus_threshold = 0.4


class CautiousBot(HeuristicBot):
    name = "Cautious"
    aggressiveness = 0.3
    mus_threshold = 0.7


class BalancedBot(HeuristicBot):
    name = "Balanced"


class BluffBot(HeuristicBot):
    name = "Bluff"
    aggressiveness = 0.9

    def decide_vote(self, engine: RoundEngine, seat: int) -> Vote:
        return Vote.MUS if self._rng.random() > 0.5 else Vote.JOSTA
