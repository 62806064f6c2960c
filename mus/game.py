"""High-level round and game orchestration for Mus."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from random import Random
from typing import Dict, List, Optional, Sequence

from .betting import Bet, BetAction, BettingOutcome, BettingRound, OutcomeKind
from .cards import Card
from .deck import DECK_SIZE, Deck, deal_four_player
from .errors import InvalidActionForState
from .hands import Phase, describe_phase, hands_for_team, phase_winner, team_has_jeu, team_has_pairs
from .negotiation import MusNegotiation, NegotiationStage, Vote
from .rules_schema import RuleSet
from .scoring import (
    PendingPrime,
    PhaseResult,
    ResolutionReason,
    RoundScoreResult,
    all_pass_award,
    apply_points,
    determine_winner,
    margin_to_win,
    prime_for,
)
from .seating import Team, validate_seat

logger = logging.getLogger(__name__)

PHASE_ORDER = (Phase.GRAND, Phase.PETIT, Phase.PAIRES, Phase.JEU)


class RoundStage(Enum):
    MUS_DECISION = auto()
    MUS_DISCARD = auto()
    BETTING = auto()
    COMPLETE = auto()


@dataclass
class RoundEngine:
    """Manage a single round of Mus: deal, negotiation, the four phases and primes."""

    mano: int
    scores: List[int] = field(default_factory=lambda: [0, 0])
    rules: RuleSet = field(default_factory=RuleSet)
    rng: Optional[Random] = None
    deck_order: Optional[Sequence[Card]] = None

    stage: RoundStage = field(init=False, default=RoundStage.MUS_DECISION)
    deck: Deck = field(init=False)
    hands: List[List[Card]] = field(init=False)
    negotiation: MusNegotiation = field(init=False)
    phases: List[Phase] = field(init=False, default_factory=lambda: list(PHASE_ORDER))
    phase_index: int = field(init=False, default=0)
    betting: Optional[BettingRound] = field(init=False, default=None)
    phase_results: List[PhaseResult] = field(init=False, default_factory=list)
    primes: List[PendingPrime] = field(init=False, default_factory=list)
    events: List[Dict[str, object]] = field(init=False, default_factory=list)
    version: int = field(init=False, default=0)
    hordago_winner: Optional[Team] = field(init=False, default=None)
    primes_paid: bool = field(init=False, default=False)
    result: Optional[RoundScoreResult] = field(init=False, default=None)

    def __post_init__(self) -> None:
        validate_seat(self.mano)
        self.scores = list(self.scores)
        if self.deck_order is not None:
            self.deck = Deck.stacked(self.deck_order, rng=self.rng)
        else:
            self.deck = Deck.shuffled(self.rng)
        self.hands = deal_four_player(self.deck)
        self.negotiation = MusNegotiation(mano=self.mano, hands=self.hands, deck=self.deck)
        self._emit("round_started", mano=self.mano)

    # Actions -----------------------------------------------------------

    def vote(self, seat: int, choice: Vote) -> None:
        self._ensure_stage(RoundStage.MUS_DECISION)
        closed = self.negotiation.vote(seat, choice)
        self._emit("vote_recorded", seat=seat, vote=choice.value)
        if closed:
            logger.info("Seat %s called josta; betting starts", seat)
            self._emit("negotiation_ended", seat=seat)
            self._begin_phases()
        elif self.negotiation.stage is NegotiationStage.DISCARDING:
            self.stage = RoundStage.MUS_DISCARD
            self._emit("discard_opened")
        self._bump()

    def discard(self, seat: int, indices: Sequence[int]) -> List[Card]:
        self._ensure_stage(RoundStage.MUS_DISCARD)
        thrown = self.negotiation.discard(seat, indices)
        self._emit("discard_applied", seat=seat, count=len(thrown))
        if self.negotiation.stage is NegotiationStage.VOTING:
            self.stage = RoundStage.MUS_DECISION
            self._emit("vote_reopened", exchanges=self.negotiation.exchanges)
        self._bump()
        return thrown

    def bet(self, seat: int, bet: Bet) -> Optional[BettingOutcome]:
        self._ensure_stage(RoundStage.BETTING)
        assert self.betting is not None
        outcome = self.betting.act(seat, bet)
        self._emit("bet_placed", seat=seat, action=bet.action.value, amount=bet.amount)
        if bet.action is BetAction.TIRA and outcome is None:
            self._emit("seat_eliminated", seat=seat)
        if outcome is not None:
            self._resolve_betting(outcome)
        self._bump()
        return outcome

    # Queries -----------------------------------------------------------

    @property
    def current_phase(self) -> Optional[Phase]:
        if self.stage is not RoundStage.BETTING:
            return None
        return self.phases[self.phase_index]

    @property
    def current_actor(self) -> Optional[int]:
        if self.stage is RoundStage.MUS_DECISION:
            return self.negotiation.next_voter()
        if self.stage is RoundStage.MUS_DISCARD:
            pending = self.negotiation.pending_discards()
            return pending[0] if pending else None
        if self.stage is RoundStage.BETTING and self.betting is not None:
            return self.betting.current_seat
        return None

    def card_count(self) -> int:
        return len(self.deck) + sum(len(hand) for hand in self.hands) + len(self.deck.discards)

    def is_complete(self) -> bool:
        return self.stage is RoundStage.COMPLETE

    # Phase flow --------------------------------------------------------

    def _begin_phases(self) -> None:
        self.phases = list(PHASE_ORDER)
        self.phase_index = 0
        self._open_next_phase()

    def _open_next_phase(self) -> None:
        while self.phase_index < len(self.phases):
            phase = self.phases[self.phase_index]
            if phase is Phase.PAIRES:
                if self._settle_without_betting(phase, team_has_pairs):
                    continue
            elif phase is Phase.JEU:
                qualified = [team for team in Team if team_has_jeu(hands_for_team(self.hands, team))]
                if not qualified:
                    phase = Phase.PUNTUAK
                    self.phases[self.phase_index] = phase
                    self._emit("phase_relabelled", phase=phase.value)
                elif self._settle_without_betting(phase, team_has_jeu):
                    continue

            self.betting = BettingRound(phase=phase, mano=self.mano)
            self.stage = RoundStage.BETTING
            self._emit("betting_opened", phase=phase.value, seat=self.betting.current_seat)
            return
        self._close_round()

    def _settle_without_betting(self, phase: Phase, qualifies) -> bool:
        """Skip or award a phase that fewer than two teams qualify for.

        Returns True when the phase was settled and the caller should move on.
        """
        qualified = [team for team in Team if qualifies(hands_for_team(self.hands, team))]
        if len(qualified) == 2:
            return False
        if not qualified:
            self._record(PhaseResult(phase=phase, winner=None, points=0, reason=ResolutionReason.SKIPPED))
            self._emit("phase_skipped", phase=phase.value)
        else:
            winner = qualified[0]
            prime = prime_for(phase, hands_for_team(self.hands, winner), self.rules)
            self._stash_prime(winner, prime, phase)
            self._record(
                PhaseResult(
                    phase=phase,
                    winner=winner,
                    points=0,
                    reason=ResolutionReason.QUALIFIED,
                    prime=prime,
                    details=describe_phase(phase, self.hands),
                )
            )
            self._emit("phase_qualified", phase=phase.value, team=winner.name, prime=prime)
        self.phase_index += 1
        return True

    def _resolve_betting(self, outcome: BettingOutcome) -> None:
        assert self.betting is not None
        phase = self.betting.phase
        kind = outcome.kind
        prime = 0
        hordago = kind in (OutcomeKind.HORDAGO_WALKOVER, OutcomeKind.KANTA)
        details: dict = {}

        if outcome.needs_comparison:
            winner = phase_winner(phase, self.hands, self.mano)
            details = describe_phase(phase, self.hands)
        else:
            assert outcome.winner is not None
            winner = outcome.winner

        if kind is OutcomeKind.ALL_PASS:
            points, prime = all_pass_award(phase, hands_for_team(self.hands, winner), self.rules)
            reason = ResolutionReason.ALL_PASS
        elif kind is OutcomeKind.CALLED:
            points = outcome.stake
            reason = ResolutionReason.REVEALED
        elif kind is OutcomeKind.WALKOVER:
            points = outcome.stake
            reason = ResolutionReason.WALKOVER
        elif kind is OutcomeKind.HORDAGO_WALKOVER:
            self._pay_primes()
            points = margin_to_win(self.scores, winner, self.rules.win_score)
            reason = ResolutionReason.WALKOVER
        else:
            self._pay_primes()
            points = margin_to_win(self.scores, winner, self.rules.win_score)
            reason = ResolutionReason.REVEALED

        apply_points(self.scores, winner, points)
        self._stash_prime(winner, prime, phase)
        self._record(
            PhaseResult(
                phase=phase,
                winner=winner,
                points=points,
                reason=reason,
                prime=prime,
                hordago=hordago,
                details=details,
            )
        )
        logger.info("Phase %s won by %s for %s point(s) (%s)", phase, winner, points, reason)
        self._emit("phase_resolved", phase=phase.value, team=winner.name, points=points, reason=reason.value)

        self.betting = None
        self.phase_index += 1
        if hordago:
            self.hordago_winner = winner
            self._close_round()
        else:
            self._open_next_phase()

    def _close_round(self) -> None:
        self._pay_primes()
        winner = self.hordago_winner or determine_winner(self.scores, self.rules.win_score, self.mano)
        self.result = RoundScoreResult(
            new_scores=(self.scores[0], self.scores[1]),
            phase_results=tuple(self.phase_results),
            primes=tuple(self.primes),
            winner=winner,
        )
        self.betting = None
        self.stage = RoundStage.COMPLETE
        logger.info("Round complete, scores AB=%s CD=%s", self.scores[0], self.scores[1])
        self._emit("round_complete", scores=list(self.scores), winner=winner.name if winner else None)

    # Helpers -----------------------------------------------------------

    def _pay_primes(self) -> None:
        """Add stashed primes to the scores once per round."""
        if self.primes_paid:
            return
        for prime in self.primes:
            apply_points(self.scores, prime.team, prime.points)
        self.primes_paid = True

    def _stash_prime(self, team: Team, points: int, phase: Phase) -> None:
        if points > 0:
            self.primes.append(PendingPrime(team=team, points=points, phase=phase))

    def _record(self, result: PhaseResult) -> None:
        self.phase_results.append(result)

    def _emit(self, kind: str, **payload: object) -> None:
        self.events.append({"type": kind, **payload})

    def _bump(self) -> None:
        self.version += 1
        assert self.card_count() == DECK_SIZE

    def _ensure_stage(self, expected: RoundStage) -> None:
        if self.stage is not expected:
            raise InvalidActionForState(
                f"Action not allowed in stage {self.stage.name.lower()}; expected {expected.name.lower()}."
            )


@dataclass
class GameSession:
    """Track scores and the mano across rounds until a team wins."""

    seed: Optional[int] = None
    rules: RuleSet = field(default_factory=RuleSet)
    scores: List[int] = field(default_factory=lambda: [0, 0])
    mano: int = 0
    rng: Random = field(init=False)
    current_round: Optional[RoundEngine] = field(default=None, init=False)
    round_history: List[RoundScoreResult] = field(default_factory=list)
    winner: Optional[Team] = field(default=None, init=False)

    def __post_init__(self) -> None:
        validate_seat(self.mano)
        self.rng = Random(self.seed)

    def start_round(self, deck: Optional[Sequence[Card]] = None) -> RoundEngine:
        if self.current_round is not None:
            if not self.current_round.is_complete():
                raise InvalidActionForState("The current round has not finished yet.")
            self.finish_round()
        if self.winner is not None:
            raise InvalidActionForState(f"The game is over; team {self.winner} won.")
        self.current_round = RoundEngine(
            mano=self.mano,
            scores=list(self.scores),
            rules=self.rules,
            rng=self.rng,
            deck_order=deck,
        )
        logger.info("Round %s dealt, mano is seat %s", len(self.round_history) + 1, self.mano)
        return self.current_round

    def finish_round(self) -> RoundScoreResult:
        if self.current_round is None:
            raise InvalidActionForState("No active round.")
        if not self.current_round.is_complete():
            raise InvalidActionForState("Cannot finish a round before its phases are resolved.")
        result = self.current_round.result
        assert result is not None
        self.scores = list(result.new_scores)
        self.round_history.append(result)
        self.current_round = None
        if result.winner is not None:
            self.winner = result.winner
            logger.info("Game over: team %s wins %s-%s", result.winner, self.scores[0], self.scores[1])
        else:
            self.mano = (self.mano + 1) % 4
        return result

    def live_scores(self) -> List[int]:
        if self.current_round is not None:
            return list(self.current_round.scores)
        return list(self.scores)

    def is_over(self) -> bool:
        return self.winner is not None
