"""Room membership and the in-memory room store."""

from __future__ import annotations

import logging
import random
import string
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Iterator, List, Optional

from bots.base import BotStrategy
from mus.game import GameSession
from mus.rules_schema import RuleSet
from mus.scoring import RoundScoreResult
from mus.seating import team_of
from mus.service import MusService

logger = logging.getLogger(__name__)

ROOM_SIZE = 4
ROOM_ID_LENGTH = 6


class RoomError(RuntimeError):
    """Base class for membership errors."""


class RoomNotFound(RoomError):
    """Raised when no room exists for the given id."""


class RoomFull(RoomError):
    """Raised when a fifth player tries to join."""


class RoomNotReady(RoomError):
    """Raised when a game action is attempted without four seated players."""


class RoomState(Enum):
    WAITING = auto()
    LOBBY = auto()
    PLAYING = auto()


def _empty_stats() -> Dict[str, int]:
    return {"rounds_played": 0, "phases_won": 0, "points_won": 0, "games_won": 0}


@dataclass
class Player:
    seat: int
    name: str
    connected: bool = True
    bot: Optional[BotStrategy] = None
    stats: Dict[str, int] = field(default_factory=_empty_stats)

    @property
    def is_bot(self) -> bool:
        return self.bot is not None

    def public(self) -> dict:
        return {
            "seat": self.seat,
            "name": self.name,
            "team": team_of(self.seat).name,
            "connected": self.connected,
            "is_bot": self.is_bot,
            "stats": dict(self.stats),
        }


@dataclass
class Room:
    """Four seats plus the engine instance they play on."""

    room_id: str
    rules: RuleSet = field(default_factory=RuleSet)
    players: List[Player] = field(default_factory=list)
    service: Optional[MusService] = None

    @property
    def state(self) -> RoomState:
        if len(self.players) < ROOM_SIZE:
            return RoomState.WAITING
        if self.service is None:
            return RoomState.LOBBY
        return RoomState.PLAYING

    @property
    def bots(self) -> Dict[int, BotStrategy]:
        return {player.seat: player.bot for player in self.players if player.bot is not None}

    def add_player(self, name: str, bot: Optional[BotStrategy] = None) -> Player:
        if len(self.players) >= ROOM_SIZE:
            raise RoomFull(f"Room {self.room_id} is full.")
        player = Player(seat=len(self.players), name=name, bot=bot)
        self.players.append(player)
        logger.info("[%s] %s joined at seat %s", self.room_id, name, player.seat)
        return player

    def remove_player(self, seat: int) -> Player:
        player = self.player(seat)
        self.players.remove(player)
        for index, remaining in enumerate(self.players):
            remaining.seat = index
        if len(self.players) < ROOM_SIZE and self.service is not None:
            logger.info("[%s] game cancelled, %s players left", self.room_id, len(self.players))
            self.service = None
        return player

    def set_connected(self, seat: int, connected: bool) -> Player:
        player = self.player(seat)
        player.connected = connected
        return player

    def player(self, seat: int) -> Player:
        for player in self.players:
            if player.seat == seat:
                return player
        raise RoomError(f"No player at seat {seat} in room {self.room_id}.")

    def ensure_ready(self) -> MusService:
        if len(self.players) != ROOM_SIZE:
            raise RoomNotReady("Four players are required.")
        if self.service is None:
            raise RoomNotReady("The game has not been started.")
        return self.service

    def start_game(self, seed: Optional[int] = None) -> MusService:
        if len(self.players) != ROOM_SIZE:
            raise RoomNotReady("Four players are required to start.")
        self.service = MusService(GameSession(seed=seed, rules=self.rules))
        logger.info("[%s] new game started", self.room_id)
        return self.service

    def record_round(self, result: RoundScoreResult) -> None:
        for player in self.players:
            team = team_of(player.seat)
            player.stats["rounds_played"] += 1
            for phase in result.phase_results:
                if phase.winner is team:
                    player.stats["phases_won"] += 1
                    player.stats["points_won"] += phase.points
            player.stats["points_won"] += sum(prime.points for prime in result.primes if prime.team is team)
            if result.winner is team:
                player.stats["games_won"] += 1

    def public(self) -> dict:
        return {
            "room_id": self.room_id,
            "state": self.state.name,
            "players": [player.public() for player in self.players],
            "scores": self.service.session.live_scores() if self.service else [0, 0],
        }


class RoomStore:
    """Live rooms keyed by room id."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rooms: Dict[str, Room] = {}
        self._rng = rng or random.Random()

    def create(self, rules: Optional[RuleSet] = None) -> Room:
        room_id = self._new_id()
        room = Room(room_id=room_id, rules=rules or RuleSet())
        self._rooms[room_id] = room
        logger.info("[%s] room created", room_id)
        return room

    def get(self, room_id: str) -> Room:
        room = self._rooms.get(room_id.upper())
        if room is None:
            raise RoomNotFound(f"Room {room_id} not found.")
        return room

    def destroy(self, room_id: str) -> None:
        if self._rooms.pop(room_id.upper(), None) is not None:
            logger.info("[%s] room deleted", room_id)

    def player_count(self) -> int:
        return sum(len(room.players) for room in self._rooms.values())

    def __len__(self) -> int:
        return len(self._rooms)

    def __iter__(self) -> Iterator[Room]:
        return iter(list(self._rooms.values()))

    def _new_id(self) -> str:
        alphabet = string.ascii_uppercase + string.digits
        while True:
            room_id = "".join(self._rng.choice(alphabet) for _ in range(ROOM_ID_LENGTH))
            if room_id not in self._rooms:
                return room_id
