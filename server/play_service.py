"""REST service hosting Mus rooms for humans and bots."""

from __future__ import annotations

import logging
import os
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from bots.bot_arena import BOT_REGISTRY
from bots.scheduler import BotScheduler
from mus.errors import MusError
from mus.rules_schema import load_rules
from mus.service import ActionResult

from .rooms import Room, RoomError, RoomFull, RoomNotFound, RoomNotReady, RoomStore

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

RULES = load_rules(os.environ.get("MUS_RULES"))


class CreateRoomRequest(BaseModel):
    player_name: str = Field(..., min_length=1, max_length=32)


class JoinRequest(BaseModel):
    player_name: str = Field(..., min_length=1, max_length=32)


class AddBotsRequest(BaseModel):
    count: int = Field(1, ge=1, le=3)
    personality: Literal["aggressive", "cautious", "balanced", "bluff", "random"] = "balanced"


class SeatRequest(BaseModel):
    seat: int = Field(..., ge=0, le=3)


class PresenceRequest(SeatRequest):
    connected: bool


class StartRequest(BaseModel):
    seat: int = Field(0, ge=0, le=3)
    seed: Optional[int] = None


class VoteRequest(SeatRequest):
    vote: Literal["mus", "josta"]


class DiscardRequest(SeatRequest):
    indices: List[int]


class BetRequest(SeatRequest):
    action: Literal["paso", "imido", "gehiago", "iduki", "tira", "hordago", "kanta"]
    amount: Optional[int] = None


store = RoomStore()


async def _after_bot_action(room_id: str, seat: int, result: ActionResult) -> None:
    try:
        room = store.get(room_id)
    except RoomNotFound:
        return
    _record_finished_round(room, result)


scheduler = BotScheduler(
    delay=(RULES.bot_delay.min_seconds, RULES.bot_delay.max_seconds),
    on_action=_after_bot_action,
)


app = FastAPI(title="Mus Play Service")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def ensure_room(room_id: str) -> Room:
    try:
        return store.get(room_id)
    except RoomNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


def ensure_service(room: Room):
    try:
        return room.ensure_ready()
    except RoomNotReady as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _record_finished_round(room: Room, result: ActionResult) -> None:
    if room.service is None or not result.success:
        return
    if any(event["type"] == "round_complete" for event in result.events):
        room.record_round(room.service.session.round_history[-1])


def finish_action(room: Room, result: ActionResult) -> Dict[str, object]:
    if not result.success:
        logger.debug("[%s] action rejected: %s", room.room_id, result.error)
        raise HTTPException(status_code=400, detail={"code": result.code, "message": result.error})
    _record_finished_round(room, result)
    if room.service is not None:
        scheduler.sync(room.room_id, room.service, room.bots)
    return {"room": room.public(), "result": asdict(result)}


@app.get("/health")
async def health() -> Dict[str, object]:
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "activeRooms": len(store),
        "activePlayers": store.player_count(),
    }


@app.get("/stats")
async def stats() -> Dict[str, object]:
    rooms = [
        {
            "roomId": room.room_id,
            "state": room.state.name,
            "playersCount": len(room.players),
            "scores": room.service.session.live_scores() if room.service else [0, 0],
        }
        for room in store
    ]
    return {"rooms": rooms, "totalRooms": len(store), "totalPlayers": store.player_count()}


@app.post("/rooms", status_code=201)
async def create_room(request: CreateRoomRequest) -> Dict[str, object]:
    room = store.create(rules=RULES)
    player = room.add_player(request.player_name)
    return {"room_id": room.room_id, "seat": player.seat, "room": room.public()}


@app.post("/rooms/{room_id}/join")
async def join_room(room_id: str, request: JoinRequest) -> Dict[str, object]:
    room = ensure_room(room_id)
    try:
        player = room.add_player(request.player_name)
    except RoomFull as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"room_id": room.room_id, "seat": player.seat, "room": room.public()}


@app.post("/rooms/{room_id}/bots")
async def add_bots(room_id: str, request: AddBotsRequest) -> Dict[str, object]:
    room = ensure_room(room_id)
    bot_cls = BOT_REGISTRY[request.personality]
    try:
        for _ in range(request.count):
            bot = bot_cls()
            room.add_player(f"{bot.name}Bot-{len(room.players)}", bot=bot)
    except RoomFull as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"room": room.public()}


@app.post("/rooms/{room_id}/leave")
async def leave_room(room_id: str, request: SeatRequest) -> Dict[str, object]:
    room = ensure_room(room_id)
    try:
        player = room.remove_player(request.seat)
    except RoomError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    scheduler.cancel(room.room_id)
    if not room.players:
        store.destroy(room.room_id)
        return {"room": None, "left": player.name}
    return {"room": room.public(), "left": player.name}


@app.post("/rooms/{room_id}/presence")
async def set_presence(room_id: str, request: PresenceRequest) -> Dict[str, object]:
    room = ensure_room(room_id)
    try:
        room.set_connected(request.seat, request.connected)
    except RoomError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {"room": room.public()}


@app.post("/rooms/{room_id}/start")
async def start_round(room_id: str, request: StartRequest) -> Dict[str, object]:
    room = ensure_room(room_id)
    try:
        if room.service is None or room.service.session.is_over():
            room.start_game(seed=request.seed)
    except RoomNotReady as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    service = ensure_service(room)
    return finish_action(room, service.start_round(request.seat))


@app.post("/rooms/{room_id}/vote")
async def vote(room_id: str, request: VoteRequest) -> Dict[str, object]:
    room = ensure_room(room_id)
    service = ensure_service(room)
    return finish_action(room, service.vote(request.seat, request.vote))


@app.post("/rooms/{room_id}/discard")
async def discard(room_id: str, request: DiscardRequest) -> Dict[str, object]:
    room = ensure_room(room_id)
    service = ensure_service(room)
    return finish_action(room, service.discard(request.seat, request.indices))


@app.post("/rooms/{room_id}/bet")
async def bet(room_id: str, request: BetRequest) -> Dict[str, object]:
    room = ensure_room(room_id)
    service = ensure_service(room)
    return finish_action(room, service.bet(request.seat, request.action, request.amount))


@app.get("/rooms/{room_id}/state")
async def room_state(room_id: str, seat: int) -> Dict[str, object]:
    room = ensure_room(room_id)
    if room.service is None:
        return {"room": room.public(), "view": None}
    try:
        view = room.service.snapshot(seat)
    except MusError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"room": room.public(), "view": asdict(view)}
