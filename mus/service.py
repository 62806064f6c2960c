"""Convenience service layer for transports, UIs and bots."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Union

from .betting import Bet, BetAction
from .cards import card_label, serialize_card
from .errors import InvalidActionForState, MusError
from .game import GameSession, RoundEngine, RoundStage
from .negotiation import Vote
from .scoring import PendingPrime, PhaseResult, RoundScoreResult
from .seating import team_of, validate_seat

logger = logging.getLogger(__name__)


@dataclass
class BettingView:
    phase: str
    current_seat: Optional[int]
    bets: list[dict]
    base_stake: int
    raise_count: int
    raised_total: int
    stake: int
    hordago: bool
    eliminated: list[int]
    legal_actions: list[str]


@dataclass
class RoundView:
    stage: str
    phase: Optional[str]
    mano: int
    current_actor: Optional[int]
    hand: list[dict]
    hand_labels: list[str]
    deck_size: int
    votes: dict[int, str]
    discarded: list[int]
    exchanges: int
    betting: Optional[BettingView]
    phase_results: list[dict]
    pending_primes: list[dict]


@dataclass
class SessionView:
    seat: int
    team: str
    scores: list[int]
    win_score: int
    mano: int
    rounds_played: int
    game_over: bool
    winner: Optional[str]
    round: Optional[RoundView]
    last_round: Optional[dict] = None


@dataclass
class ActionResult:
    success: bool
    code: Optional[str] = None
    error: Optional[str] = None
    events: list[dict] = field(default_factory=list)
    view: Optional[SessionView] = None


class MusService:
    """Facade around GameSession exposing the action API and per-seat snapshots."""

    def __init__(self, session: Optional[GameSession] = None) -> None:
        self.session = session or GameSession()

    # Session lifecycle -------------------------------------------------

    def start_round(self, seat: int = 0) -> ActionResult:
        return self._run(seat, lambda: self.session.start_round())

    def has_active_round(self) -> bool:
        return self.session.current_round is not None

    def turn_token(self) -> tuple:
        """Changes whenever any action commits; bound to pending bot actions."""
        current = self.session.current_round
        version = current.version if current is not None else -1
        return (len(self.session.round_history), current is not None, version)

    # Actions -----------------------------------------------------------

    def vote(self, seat: int, vote: Union[Vote, str]) -> ActionResult:
        def apply() -> None:
            self._require_round().vote(seat, parse_vote(vote))

        return self._run(seat, apply)

    def discard(self, seat: int, indices: Sequence[int]) -> ActionResult:
        return self._run(seat, lambda: self._require_round().discard(seat, list(indices)))

    def bet(self, seat: int, action: Union[Bet, BetAction, str], amount: Optional[int] = None) -> ActionResult:
        def apply() -> None:
            self._require_round().bet(seat, parse_bet(action, amount))

        return self._run(seat, apply)

    # Views -------------------------------------------------------------

    def snapshot(self, seat: int) -> SessionView:
        validate_seat(seat)
        session = self.session
        current = session.current_round
        last_round = _round_summary(session.round_history[-1]) if session.round_history else None
        return SessionView(
            seat=seat,
            team=team_of(seat).name,
            scores=session.live_scores(),
            win_score=session.rules.win_score,
            mano=current.mano if current is not None else session.mano,
            rounds_played=len(session.round_history),
            game_over=session.is_over(),
            winner=session.winner.name if session.winner else None,
            round=self._round_view(current, seat) if current is not None else None,
            last_round=last_round,
        )

    def _round_view(self, engine: RoundEngine, seat: int) -> RoundView:
        negotiation = engine.negotiation
        own_hand = list(engine.hands[seat])
        phase = engine.current_phase
        return RoundView(
            stage=stage_label(engine),
            phase=phase.value if phase else None,
            mano=engine.mano,
            current_actor=engine.current_actor,
            hand=[serialize_card(card) for card in own_hand],
            hand_labels=[card_label(card) for card in own_hand],
            deck_size=len(engine.deck),
            votes={voter: choice.value for voter, choice in negotiation.votes.items()},
            discarded=sorted(negotiation.discarded),
            exchanges=negotiation.exchanges,
            betting=self._betting_view(engine, seat),
            phase_results=[_phase_result_payload(result) for result in engine.phase_results],
            pending_primes=[_prime_payload(prime) for prime in engine.primes],
        )

    def _betting_view(self, engine: RoundEngine, seat: int) -> Optional[BettingView]:
        betting = engine.betting
        if betting is None:
            return None
        return BettingView(
            phase=betting.phase.value,
            current_seat=betting.current_seat,
            bets=[
                {"seat": record.seat, "action": record.action.value, "amount": record.amount}
                for record in betting.bets
            ],
            base_stake=betting.base_stake,
            raise_count=betting.raise_count,
            raised_total=betting.raised_total,
            stake=betting.stake,
            hordago=betting.hordago,
            eliminated=sorted(betting.eliminated),
            legal_actions=[action.value for action in betting.legal_actions(seat)],
        )

    # Helpers -----------------------------------------------------------

    def _run(self, seat: int, apply: Callable[[], object]) -> ActionResult:
        events_before = self._event_cursor()
        try:
            validate_seat(seat)
            apply()
        except MusError as exc:
            logger.debug("Rejected action from seat %s: %s", seat, exc)
            return ActionResult(success=False, code=exc.code, error=str(exc))

        current = self.session.current_round
        events: List[Dict[str, object]] = []
        if current is not None:
            events = list(current.events[events_before:])
            if current.is_complete():
                result = self.session.finish_round()
                if result.winner is not None:
                    events.append({"type": "game_over", "winner": result.winner.name})
                else:
                    events.append({"type": "mano_rotated", "mano": self.session.mano})
        return ActionResult(success=True, events=events, view=self.snapshot(seat))

    def _event_cursor(self) -> int:
        current = self.session.current_round
        return len(current.events) if current is not None else 0

    def _require_round(self) -> RoundEngine:
        if self.session.current_round is None:
            raise InvalidActionForState("No active round; start a round first.")
        return self.session.current_round


def stage_label(engine: RoundEngine) -> str:
    if engine.stage is RoundStage.BETTING and engine.current_phase is not None:
        return f"betting_{engine.current_phase.value}"
    return engine.stage.name.lower()


def parse_vote(value: Union[Vote, str]) -> Vote:
    if isinstance(value, Vote):
        return value
    try:
        return Vote(str(value).strip().lower())
    except ValueError as exc:
        raise InvalidActionForState(f"Unknown vote {value!r}; expected 'mus' or 'josta'.") from exc


def parse_bet(action: Union[Bet, BetAction, str], amount: Optional[int] = None) -> Bet:
    if isinstance(action, Bet):
        return action
    if not isinstance(action, BetAction):
        try:
            action = BetAction(str(action).strip().lower())
        except ValueError as exc:
            raise InvalidActionForState(f"Unknown bet action {action!r}.") from exc
    if action is BetAction.GEHIAGO:
        return Bet(action, amount)
    return Bet(action)


def _phase_result_payload(result: PhaseResult) -> dict:
    return {
        "phase": result.phase.value,
        "winner": result.winner.name if result.winner else None,
        "points": result.points,
        "prime": result.prime,
        "reason": result.reason.value,
        "hordago": result.hordago,
        "details": dict(result.details),
    }


def _prime_payload(prime: PendingPrime) -> dict:
    return {"team": prime.team.name, "points": prime.points, "phase": prime.phase.value}


def _round_summary(result: RoundScoreResult) -> dict:
    return {
        "scores": list(result.new_scores),
        "phase_results": [_phase_result_payload(item) for item in result.phase_results],
        "primes": [_prime_payload(prime) for prime in result.primes],
        "winner": result.winner.name if result.winner else None,
    }
