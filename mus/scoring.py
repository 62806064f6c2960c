"""Phase results, deferred primes and win detection for Mus."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .hands import Phase, TeamHands, team_jeu, team_pairs
from .rules_schema import RuleSet
from .seating import Team, team_of


class ResolutionReason(Enum):
    ALL_PASS = "all_pass"
    WALKOVER = "walkover"
    REVEALED = "revealed"
    QUALIFIED = "qualified"
    SKIPPED = "skipped"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PendingPrime:
    team: Team
    points: int
    phase: Phase


@dataclass(frozen=True)
class PhaseResult:
    phase: Phase
    winner: Optional[Team]
    points: int
    reason: ResolutionReason
    prime: int = 0
    hordago: bool = False
    details: dict = field(default_factory=dict)


@dataclass(frozen=True)
class RoundScoreResult:
    new_scores: Tuple[int, int]
    phase_results: Tuple[PhaseResult, ...]
    primes: Tuple[PendingPrime, ...]
    winner: Optional[Team]

    @property
    def game_over(self) -> bool:
        return self.winner is not None


def prime_for(phase: Phase, winner_hands: TeamHands, rules: RuleSet) -> int:
    """Deferred bonus owed to the winner of an uncontested Paires, Jeu or Puntuak."""
    if phase is Phase.PAIRES:
        return int(team_pairs(winner_hands))
    if phase is Phase.JEU:
        total = team_jeu(winner_hands)
        if total is None:
            return 0
        return rules.jeu_prime_thirty_one if total == 31 else rules.jeu_prime
    if phase is Phase.PUNTUAK:
        return rules.puntuak_prime
    return 0


def all_pass_award(phase: Phase, winner_hands: TeamHands, rules: RuleSet) -> Tuple[int, int]:
    """Return ``(immediate points, prime)`` for a phase every seat passed on."""
    if phase in (Phase.GRAND, Phase.PETIT):
        return rules.pass_points, 0
    return 0, prime_for(phase, winner_hands, rules)


def apply_points(scores: List[int], team: Team, points: int) -> None:
    if points < 0:
        raise ValueError("Scores never decrease.")
    scores[team.value] += points


def margin_to_win(scores: Sequence[int], team: Team, win_score: int) -> int:
    return max(0, win_score - scores[team.value])


def determine_winner(scores: Sequence[int], win_score: int, mano: int) -> Optional[Team]:
    """Return the team that has reached ``win_score``, if any."""
    ab, cd = scores[Team.AB.value], scores[Team.CD.value]
    if ab < win_score and cd < win_score:
        return None
    if ab == cd:
        return team_of(mano)
    return Team.AB if ab > cd else Team.CD


def round_delta(results: Sequence[PhaseResult], primes: Sequence[PendingPrime]) -> Tuple[int, int]:
    """Net points per team earned in a round (phase points plus primes)."""
    delta = [0, 0]
    for result in results:
        if result.winner is not None:
            delta[result.winner.value] += result.points
    for prime in primes:
        delta[prime.team.value] += prime.points
    return delta[0], delta[1]
