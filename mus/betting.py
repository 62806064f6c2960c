"""Per-phase betting state machine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, Set

from .errors import InvalidActionForState, InvalidRaise, TurnViolation
from .hands import Phase
from .seating import SEATS, Team, next_seat, team_of, validate_seat

BASE_STAKE = 1


class BetAction(Enum):
    PASO = "paso"
    IMIDO = "imido"
    GEHIAGO = "gehiago"
    IDUKI = "iduki"
    TIRA = "tira"
    HORDAGO = "hordago"
    KANTA = "kanta"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Bet:
    """A betting action; only GEHIAGO carries an amount."""

    action: BetAction
    amount: Optional[int] = None

    @classmethod
    def paso(cls) -> "Bet":
        return cls(BetAction.PASO)

    @classmethod
    def imido(cls) -> "Bet":
        return cls(BetAction.IMIDO)

    @classmethod
    def gehiago(cls, amount: int) -> "Bet":
        return cls(BetAction.GEHIAGO, amount)

    @classmethod
    def iduki(cls) -> "Bet":
        return cls(BetAction.IDUKI)

    @classmethod
    def tira(cls) -> "Bet":
        return cls(BetAction.TIRA)

    @classmethod
    def hordago(cls) -> "Bet":
        return cls(BetAction.HORDAGO)

    @classmethod
    def kanta(cls) -> "Bet":
        return cls(BetAction.KANTA)


@dataclass(frozen=True)
class BetRecord:
    seat: int
    action: BetAction
    amount: Optional[int] = None


class BettingStatus(Enum):
    NO_BET = auto()
    OPEN_BET = auto()
    HORDAGO = auto()
    RESOLVED = auto()


class OutcomeKind(Enum):
    ALL_PASS = auto()
    WALKOVER = auto()
    CALLED = auto()
    HORDAGO_WALKOVER = auto()
    KANTA = auto()


@dataclass(frozen=True)
class BettingOutcome:
    kind: OutcomeKind
    stake: int
    winner: Optional[Team] = None

    @property
    def needs_comparison(self) -> bool:
        return self.winner is None


_LEGAL_ACTIONS = {
    BettingStatus.NO_BET: (BetAction.PASO, BetAction.IMIDO, BetAction.HORDAGO),
    BettingStatus.OPEN_BET: (BetAction.TIRA, BetAction.IDUKI, BetAction.GEHIAGO, BetAction.HORDAGO),
    BettingStatus.HORDAGO: (BetAction.TIRA, BetAction.KANTA),
    BettingStatus.RESOLVED: (),
}


@dataclass
class BettingRound:
    """Turn-based wagering among the four seats for one phase."""

    phase: Phase
    mano: int
    status: BettingStatus = BettingStatus.NO_BET
    current_seat: Optional[int] = field(init=False)
    bets: List[BetRecord] = field(default_factory=list)
    base_stake: int = 0
    raise_count: int = 0
    raised_total: int = 0
    hordago: bool = False
    aggressor: Optional[Team] = None
    eliminated: Set[int] = field(default_factory=set)
    outcome: Optional[BettingOutcome] = None
    _passes: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        validate_seat(self.mano)
        self.current_seat = self.mano

    @property
    def stake(self) -> int:
        return self.base_stake + self.raise_count

    def legal_actions(self, seat: Optional[int] = None) -> List[BetAction]:
        if seat is not None and seat != self.current_seat:
            return []
        return list(_LEGAL_ACTIONS[self.status])

    def is_resolved(self) -> bool:
        return self.status is BettingStatus.RESOLVED

    def act(self, seat: int, bet: Bet) -> Optional[BettingOutcome]:
        """Apply ``bet`` for ``seat``; return the outcome if the phase resolved."""
        self._ensure_turn(seat)
        if bet.action not in _LEGAL_ACTIONS[self.status]:
            raise InvalidActionForState(
                f"{bet.action.name} is not allowed while the bet is {self.status.name.lower()}."
            )

        action = bet.action
        if action is BetAction.PASO:
            self._paso(seat)
        elif action is BetAction.IMIDO:
            self._imido(seat)
        elif action is BetAction.GEHIAGO:
            self._gehiago(seat, bet.amount)
        elif action is BetAction.IDUKI:
            self._record(seat, action)
            self._resolve(OutcomeKind.CALLED)
        elif action is BetAction.TIRA:
            self._tira(seat)
        elif action is BetAction.HORDAGO:
            self._hordago(seat)
        elif action is BetAction.KANTA:
            self._record(seat, action)
            self._resolve(OutcomeKind.KANTA)
        else:
            raise InvalidActionForState(f"Unknown bet action {action!r}.")
        return self.outcome

    # Transitions -------------------------------------------------------

    def _paso(self, seat: int) -> None:
        self._record(seat, BetAction.PASO)
        self._passes += 1
        if self._passes == len(SEATS):
            self._resolve(OutcomeKind.ALL_PASS)
        else:
            self.current_seat = next_seat(seat)

    def _imido(self, seat: int) -> None:
        self._record(seat, BetAction.IMIDO)
        self.base_stake = BASE_STAKE
        self.status = BettingStatus.OPEN_BET
        self._hand_turn_to_opponents(seat)

    def _gehiago(self, seat: int, amount: Optional[int]) -> None:
        if amount is None or isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise InvalidRaise(f"Raise amount must be a positive integer, got {amount!r}.")
        self._record(seat, BetAction.GEHIAGO, amount)
        self.raise_count += 1
        self.raised_total += amount
        self.eliminated.clear()
        self._hand_turn_to_opponents(seat)

    def _tira(self, seat: int) -> None:
        self._record(seat, BetAction.TIRA)
        self.eliminated.add(seat)
        folding_team = team_of(seat)
        if all(member in self.eliminated for member in folding_team.seats):
            winner = folding_team.opponent
            if self.hordago:
                self._resolve(OutcomeKind.HORDAGO_WALKOVER, winner=winner)
            else:
                self._resolve(OutcomeKind.WALKOVER, winner=winner)
            return
        self.current_seat = next_seat(seat, skip=self.eliminated, team=folding_team)

    def _hordago(self, seat: int) -> None:
        self._record(seat, BetAction.HORDAGO)
        self.hordago = True
        self.status = BettingStatus.HORDAGO
        self.eliminated.clear()
        self._hand_turn_to_opponents(seat)

    # Helpers -----------------------------------------------------------

    def _hand_turn_to_opponents(self, seat: int) -> None:
        self.aggressor = team_of(seat)
        self.current_seat = next_seat(seat, skip=self.eliminated, team=self.aggressor.opponent)

    def _record(self, seat: int, action: BetAction, amount: Optional[int] = None) -> None:
        self.bets.append(BetRecord(seat=seat, action=action, amount=amount))

    def _resolve(self, kind: OutcomeKind, winner: Optional[Team] = None) -> None:
        self.status = BettingStatus.RESOLVED
        self.current_seat = None
        self.outcome = BettingOutcome(kind=kind, stake=self.stake, winner=winner)

    def _ensure_turn(self, seat: int) -> None:
        validate_seat(seat)
        if self.status is BettingStatus.RESOLVED:
            raise InvalidActionForState(f"Betting on {self.phase} is already resolved.")
        if seat in self.eliminated:
            raise TurnViolation(f"Seat {seat} has folded and cannot act in {self.phase}.")
        if seat != self.current_seat:
            raise TurnViolation(f"Not seat {seat}'s turn; seat {self.current_seat} must act.")
