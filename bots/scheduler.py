"""Deferred bot actions bound to a room's turn pointer.

Each room has at most one pending bot task. The task remembers the turn token
it was scheduled for; any committed action changes the token, and the stale
task is cancelled (or drops its decision if it already woke up).
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Awaitable, Callable, Dict, Mapping, Optional, Tuple

from mus.game import RoundStage
from mus.service import ActionResult, MusService

from .base import BotStrategy

logger = logging.getLogger(__name__)

OnAction = Callable[[str, int, ActionResult], Awaitable[None]]


def due_bot_seat(service: MusService, bots: Mapping[int, BotStrategy]) -> Optional[int]:
    """Return the bot seat expected to act next, if any."""
    engine = service.session.current_round
    if engine is None:
        return None
    if engine.stage is RoundStage.MUS_DISCARD:
        return next((seat for seat in engine.negotiation.pending_discards() if seat in bots), None)
    seat = engine.current_actor
    return seat if seat in bots else None


def apply_bot_decision(service: MusService, seat: int, bot: BotStrategy) -> ActionResult:
    engine = service.session.current_round
    if engine is None:
        raise RuntimeError("No active round for the bot to act in.")
    if engine.stage is RoundStage.MUS_DECISION:
        return service.vote(seat, bot.vote(engine, seat))
    if engine.stage is RoundStage.MUS_DISCARD:
        return service.discard(seat, list(bot.decide_discard(engine, seat)))
    return service.bet(seat, bot.decide_bet(engine, seat))


class BotScheduler:
    """Schedule one cancellable bot action per room."""

    def __init__(
        self,
        *,
        delay: Tuple[float, float] = (0.8, 2.0),
        rng: Optional[random.Random] = None,
        on_action: Optional[OnAction] = None,
    ) -> None:
        self.delay = delay
        self._rng = rng or random.Random()
        self._on_action = on_action
        self._tasks: Dict[str, Tuple[tuple, asyncio.Task[None]]] = {}

    def sync(self, key: str, service: MusService, bots: Mapping[int, BotStrategy]) -> Optional[asyncio.Task[None]]:
        """Make the pending task for ``key`` match the room's current turn.

        Must be called from a running event loop after every committed action.
        """
        token = service.turn_token()
        pending = self._tasks.get(key)
        if pending is not None:
            pending_token, task = pending
            if pending_token == token and not task.done():
                return task
            self.cancel(key)

        seat = due_bot_seat(service, bots)
        if seat is None:
            return None
        task = asyncio.create_task(self._act_later(key, service, bots, seat, token))
        self._tasks[key] = (token, task)
        return task

    def cancel(self, key: str) -> None:
        pending = self._tasks.pop(key, None)
        if pending is not None:
            pending[1].cancel()

    def cancel_all(self) -> None:
        for key in list(self._tasks):
            self.cancel(key)

    def is_pending(self, key: str) -> bool:
        pending = self._tasks.get(key)
        return pending is not None and not pending[1].done()

    async def _act_later(
        self,
        key: str,
        service: MusService,
        bots: Mapping[int, BotStrategy],
        seat: int,
        token: tuple,
    ) -> None:
        low, high = self.delay
        try:
            await asyncio.sleep(self._rng.uniform(low, high))
        except asyncio.CancelledError:
            logger.debug("Bot action for seat %s in room %s cancelled", seat, key)
            raise

        if service.turn_token() != token:
            logger.debug("Dropping stale bot action for seat %s in room %s", seat, key)
            return

        bot = bots[seat]
        result = apply_bot_decision(service, seat, bot)
        if result.success:
            logger.debug("Bot %s at seat %s acted in room %s", bot.name, seat, key)
        else:
            logger.warning("Bot %s at seat %s was rejected in room %s: %s", bot.name, seat, key, result.error)
        if self._tasks.get(key, (None, None))[0] == token:
            self._tasks.pop(key, None)
        if self._on_action is not None:
            await self._on_action(key, seat, result)
        if result.success:
            self.sync(key, service, bots)
