"""Simple four-seat bot arena for Mus."""

from __future__ import annotations

import argparse
from typing import Dict, Iterable, Optional, Sequence

from mus.game import GameSession, RoundEngine, RoundStage
from mus.rules_schema import RuleSet

from .base import BotStrategy
from .heuristic import AggressiveBot, BalancedBot, BluffBot, CautiousBot
from .random_bot import RandomBot

BOT_REGISTRY: Dict[str, type[BotStrategy]] = {
    "aggressive": AggressiveBot,
    "cautious": CautiousBot,
    "balanced": BalancedBot,
    "bluff": BluffBot,
    "random": RandomBot,
}


def _resolve_negotiation(engine: RoundEngine, bots: Sequence[BotStrategy]) -> None:
    while engine.stage in (RoundStage.MUS_DECISION, RoundStage.MUS_DISCARD):
        seat = engine.current_actor
        if seat is None:
            raise RuntimeError("Negotiation stalled without a seat to act.")
        if engine.stage is RoundStage.MUS_DECISION:
            engine.vote(seat, bots[seat].vote(engine, seat))
        else:
            engine.discard(seat, list(bots[seat].decide_discard(engine, seat)))


def _play_phases(engine: RoundEngine, bots: Sequence[BotStrategy]) -> None:
    while engine.stage is RoundStage.BETTING:
        seat = engine.current_actor
        if seat is None:
            raise RuntimeError("Betting stalled without a seat to act.")
        engine.bet(seat, bots[seat].decide_bet(engine, seat))


def play_round(engine: RoundEngine, bots: Sequence[BotStrategy]) -> None:
    if len(bots) != 4:
        raise ValueError("Mus needs exactly four bots.")
    _resolve_negotiation(engine, bots)
    _play_phases(engine, bots)


def run_match(
    bots: Sequence[BotStrategy],
    *,
    seed: int | None = None,
    rules: Optional[RuleSet] = None,
    max_rounds: int = 200,
) -> dict:
    session = GameSession(seed=seed, rules=rules or RuleSet())
    history = []
    while not session.is_over() and len(history) < max_rounds:
        engine = session.start_round()
        play_round(engine, bots)
        result = session.finish_round()
        history.append(
            {
                "scores": result.new_scores,
                "phases": [(item.phase.value, item.winner.name if item.winner else None, item.points) for item in result.phase_results],
                "primes": [(prime.team.name, prime.points) for prime in result.primes],
            }
        )
    return {
        "scores": session.scores,
        "winner": session.winner.name if session.winner else None,
        "rounds": len(history),
        "history": history,
    }


def main(argv: Iterable[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run a four-bot Mus match.")
    parser.add_argument(
        "--bots",
        nargs=4,
        default=["balanced", "aggressive", "cautious", "bluff"],
        choices=BOT_REGISTRY.keys(),
        help="Bot for each seat 0-3 (seats 0/2 are team AB).",
    )
    parser.add_argument("--games", type=int, default=1, help="Number of games to play.")
    parser.add_argument("--win-score", type=int, default=40, choices=[30, 40])
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args(argv)

    rules = RuleSet(win_score=args.win_score)
    wins = {"AB": 0, "CD": 0}
    for game_index in range(args.games):
        bots = [BOT_REGISTRY[name](seed=args.seed + game_index * 4 + seat) for seat, name in enumerate(args.bots)]
        results = run_match(bots, seed=args.seed + game_index, rules=rules)
        if results["winner"]:
            wins[results["winner"]] += 1
        print(f"Game {game_index + 1}: scores {results['scores']} after {results['rounds']} rounds, winner {results['winner']}")

    print(f"Wins -> AB: {wins['AB']}, CD: {wins['CD']}")


if __name__ == "__main__":
    main()
