"""Seat and partnership helpers.

Seats 0 and 2 form team AB, seats 1 and 3 form team CD. Turn order always runs
0 -> 1 -> 2 -> 3 -> 0, so consecutive seats belong to opposite teams.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Optional, Tuple

from .errors import InvalidActionForState

SEATS: Tuple[int, ...] = (0, 1, 2, 3)


class Team(Enum):
    AB = 0
    CD = 1

    @property
    def seats(self) -> Tuple[int, int]:
        return (0, 2) if self is Team.AB else (1, 3)

    @property
    def opponent(self) -> "Team":
        return Team.CD if self is Team.AB else Team.AB

    def __str__(self) -> str:
        return self.name


def team_of(seat: int) -> Team:
    return Team.AB if seat % 2 == 0 else Team.CD


def partner_of(seat: int) -> int:
    return (seat + 2) % 4


def validate_seat(seat: int) -> int:
    if seat not in SEATS:
        raise InvalidActionForState(f"Seat must be one of {SEATS}, got {seat!r}.")
    return seat


def next_seat(
    after: int,
    *,
    skip: Iterable[int] = (),
    team: Optional[Team] = None,
) -> Optional[int]:
    """Return the next seat in turn order after ``after``.

    Seats in ``skip`` are passed over and, when ``team`` is given, only that
    team's seats qualify. Returns None when no seat qualifies.
    """
    skipped = set(skip)
    for offset in range(1, len(SEATS) + 1):
        candidate = (after + offset) % len(SEATS)
        if candidate in skipped:
            continue
        if team is not None and team_of(candidate) is not team:
            continue
        return candidate
    return None


def seats_from(mano: int) -> Tuple[int, ...]:
    """Seats in acting order starting with the mano."""
    return tuple((mano + offset) % len(SEATS) for offset in range(len(SEATS)))
