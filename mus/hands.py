"""Hand evaluation and per-phase comparison for Mus.

All functions are pure. Team-level helpers take the two partners' hands as an
explicit pair so that pair and Jeu potential is always judged per player.
"""

from __future__ import annotations

from collections import Counter
from enum import Enum, IntEnum
from typing import Iterable, Optional, Sequence, Tuple

from .cards import Card
from .seating import Team, team_of

JEU_THRESHOLD = 31

# Jeu totals from best to worst.
JEU_ORDER: Tuple[int, ...] = (31, 32, 40, 39, 38, 37, 36, 35, 34, 33)

TeamHands = Tuple[Sequence[Card], Sequence[Card]]


class Phase(Enum):
    GRAND = "grand"
    PETIT = "petit"
    PAIRES = "paires"
    JEU = "jeu"
    PUNTUAK = "puntuak"

    def __str__(self) -> str:
        return self.value


class PairPattern(IntEnum):
    NONE = 0
    PAIR = 1
    BRELAN = 2
    DOUBLE_PAIR = 3


def best_grand(cards: Iterable[Card]) -> int:
    return max(card.grand_value for card in cards)


def best_petit(cards: Iterable[Card]) -> int:
    return min(card.petit_value for card in cards)


def detect_pair_pattern(hand: Sequence[Card]) -> PairPattern:
    counts = sorted(Counter(card.rank for card in hand).values(), reverse=True)
    if counts[0] == 4:
        return PairPattern.DOUBLE_PAIR
    if counts[0] == 3:
        return PairPattern.BRELAN
    if counts[0] == 2:
        if len(counts) > 1 and counts[1] == 2:
            return PairPattern.DOUBLE_PAIR
        return PairPattern.PAIR
    return PairPattern.NONE


def jeu_total(hand: Sequence[Card]) -> int:
    return sum(card.game_value for card in hand)


def has_jeu(hand: Sequence[Card]) -> bool:
    return jeu_total(hand) >= JEU_THRESHOLD


def jeu_rank(total: int) -> int:
    """Rank a Jeu total by desirability; 0 means no Jeu."""
    if total not in JEU_ORDER:
        return 0
    return len(JEU_ORDER) - JEU_ORDER.index(total)


def compare_jeu_totals(a: int, b: int) -> int:
    return jeu_rank(a) - jeu_rank(b)


# Team aggregation ----------------------------------------------------------


def team_grand(hands: TeamHands) -> int:
    return max(best_grand(hand) for hand in hands)


def team_petit(hands: TeamHands) -> int:
    return min(best_petit(hand) for hand in hands)


def team_pairs(hands: TeamHands) -> PairPattern:
    best = detect_pair_pattern(hands[0])
    other = detect_pair_pattern(hands[1])
    if other > best:
        best = other
    return best


def team_jeu(hands: TeamHands) -> Optional[int]:
    """Return the larger of the two members' sums, or None if neither hand reaches 31."""
    if not any(has_jeu(hand) for hand in hands):
        return None
    return max(jeu_total(hand) for hand in hands)


def team_puntuak(hands: TeamHands) -> int:
    return max(jeu_total(hand) for hand in hands)


def team_has_pairs(hands: TeamHands) -> bool:
    return team_pairs(hands) is not PairPattern.NONE


def team_has_jeu(hands: TeamHands) -> bool:
    return team_jeu(hands) is not None


def compare_teams(phase: Phase, ab: TeamHands, cd: TeamHands) -> int:
    """Positive when AB holds the better cards for ``phase``, negative for CD, 0 on a tie."""
    if phase is Phase.GRAND:
        return team_grand(ab) - team_grand(cd)
    if phase is Phase.PETIT:
        # Lower petit value is stronger.
        return team_petit(cd) - team_petit(ab)
    if phase is Phase.PAIRES:
        return int(team_pairs(ab)) - int(team_pairs(cd))
    if phase is Phase.JEU:
        return compare_jeu_totals(team_jeu(ab) or 0, team_jeu(cd) or 0)
    if phase is Phase.PUNTUAK:
        return team_puntuak(ab) - team_puntuak(cd)
    raise ValueError(f"Unknown phase {phase!r}.")


def hands_for_team(hands: Sequence[Sequence[Card]], team: Team) -> TeamHands:
    first, second = team.seats
    return hands[first], hands[second]


def phase_winner(phase: Phase, hands: Sequence[Sequence[Card]], mano: int) -> Team:
    """Return the team winning ``phase``; exact ties go to the mano's team."""
    result = compare_teams(phase, hands_for_team(hands, Team.AB), hands_for_team(hands, Team.CD))
    if result > 0:
        return Team.AB
    if result < 0:
        return Team.CD
    return team_of(mano)


def describe_phase(phase: Phase, hands: Sequence[Sequence[Card]]) -> dict:
    """Structured per-team values used in phase result details."""
    details = {}
    for team in Team:
        team_hands = hands_for_team(hands, team)
        if phase is Phase.GRAND:
            value: object = team_grand(team_hands)
        elif phase is Phase.PETIT:
            value = team_petit(team_hands)
        elif phase is Phase.PAIRES:
            value = team_pairs(team_hands).name.lower()
        elif phase is Phase.JEU:
            value = team_jeu(team_hands)
        else:
            value = team_puntuak(team_hands)
        details[team.name] = value
    return details
