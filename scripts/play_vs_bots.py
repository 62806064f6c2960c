#!/usr/bin/env python3
"""Interactive CLI to play Mus at seat 0 with a bot partner against two bots."""

from __future__ import annotations

import argparse
from typing import Dict, List, Optional

from bots.base import BotStrategy
from bots.bot_arena import BOT_REGISTRY
from bots.scheduler import apply_bot_decision, due_bot_seat
from mus.game import GameSession
from mus.rules_schema import RuleSet
from mus.service import ActionResult, MusService, SessionView

HUMAN_SEAT = 0


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play Mus with a bot partner against two bots.")
    parser.add_argument("--partner", default="balanced", choices=BOT_REGISTRY.keys(), help="Bot at seat 2.")
    parser.add_argument("--opponents", default="aggressive", choices=BOT_REGISTRY.keys(), help="Bots at seats 1 and 3.")
    parser.add_argument("--win-score", type=int, default=40, choices=[30, 40])
    parser.add_argument("--seed", type=int, default=None)
    return parser.parse_args()


def build_bots(partner: str, opponents: str, seed: Optional[int]) -> Dict[int, BotStrategy]:
    base = seed if seed is not None else 0
    return {
        1: BOT_REGISTRY[opponents](seed=base + 1),
        2: BOT_REGISTRY[partner](seed=base + 2),
        3: BOT_REGISTRY[opponents](seed=base + 3),
    }


def print_events(result: ActionResult) -> None:
    for event in result.events:
        kind = event["type"]
        if kind == "vote_recorded":
            print(f"  Seat {event['seat']} votes {event['vote']}")
        elif kind == "discard_applied":
            print(f"  Seat {event['seat']} changes {event['count']} card(s)")
        elif kind == "bet_placed":
            amount = f" {event['amount']}" if event.get("amount") else ""
            print(f"  Seat {event['seat']}: {event['action']}{amount}")
        elif kind == "phase_resolved":
            print(f"  >> {event['phase']} to {event['team']} for {event['points']} ({event['reason']})")
        elif kind == "phase_skipped":
            print(f"  >> {event['phase']} skipped, nobody qualifies")
        elif kind == "phase_qualified":
            print(f"  >> {event['phase']} to {event['team']} uncontested, prime {event['prime']}")
        elif kind == "phase_relabelled":
            print("  >> nobody has jeu, playing puntuak")
        elif kind == "round_complete":
            print(f"\nRound complete. Scores AB={event['scores'][0]} CD={event['scores'][1]}")
        elif kind == "game_over":
            print(f"Game over, team {event['winner']} wins!")


def print_view(view: SessionView) -> None:
    round_view = view.round
    print("\n============================")
    print(f"Scores -> AB (you): {view.scores[0]}, CD: {view.scores[1]}  (first to {view.win_score})")
    if round_view is None:
        return
    print(f"Stage: {round_view.stage}   Mano: seat {round_view.mano}")
    if round_view.betting is not None:
        betting = round_view.betting
        print(f"Stake: {betting.stake}{'  HORDAGO!' if betting.hordago else ''}")
    print("Your hand:")
    for index, label in enumerate(round_view.hand_labels):
        print(f"  [{index}] {label}")


def prompt(text: str) -> str:
    choice = input(text).strip().lower()
    if choice == "q":
        raise KeyboardInterrupt
    return choice


def human_turn(service: MusService) -> ActionResult:
    view = service.snapshot(HUMAN_SEAT)
    print_view(view)
    round_view = view.round
    assert round_view is not None
    if round_view.stage == "mus_decision":
        return service.vote(HUMAN_SEAT, prompt("Vote mus or josta (q to quit): "))
    if round_view.stage == "mus_discard":
        raw = prompt("Indices to discard, e.g. 0 2 (q to quit): ")
        try:
            indices: List[int] = [int(part) for part in raw.split()]
        except ValueError:
            indices = []
        return service.discard(HUMAN_SEAT, indices)
    assert round_view.betting is not None
    print(f"Legal: {', '.join(round_view.betting.legal_actions)}")
    parts = prompt("Your bet (gehiago takes an amount; q to quit): ").split()
    if not parts:
        return service.bet(HUMAN_SEAT, "")
    amount = int(parts[1]) if len(parts) > 1 and parts[1].isdigit() else None
    return service.bet(HUMAN_SEAT, parts[0], amount)


def play_game(service: MusService, bots: Dict[int, BotStrategy]) -> None:
    while not service.session.is_over():
        result = service.start_round(HUMAN_SEAT)
        print(f"\n===== Round {len(service.session.round_history) + 1} =====")
        print_events(result)
        while service.has_active_round():
            seat = due_bot_seat(service, bots)
            if seat is not None:
                result = apply_bot_decision(service, seat, bots[seat])
            else:
                result = human_turn(service)
                if not result.success:
                    print(f"Rejected: {result.error}")
                    continue
            print_events(result)


def main() -> None:
    args = parse_args()
    session = GameSession(seed=args.seed, rules=RuleSet(win_score=args.win_score))
    service = MusService(session)
    bots = build_bots(args.partner, args.opponents, args.seed)
    try:
        play_game(service, bots)
    except KeyboardInterrupt:
        print("\nExiting early.")


if __name__ == "__main__":
    main()
