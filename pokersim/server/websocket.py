"""
WebSocket handling for real-time game communication.

This module provides:
- TableRoom: one table, its connections and the pacing scheduler that
  plays bots, runs out all-in boards and starts the next hand
- GameManager: Manages multiple table rooms
- WebSocket endpoint: Handles real-time player connections and game actions
"""

from __future__ import annotations
from typing import Dict, List, Optional, Any, Tuple
from dataclasses import dataclass, field
import asyncio
import logging

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from pokersim.config import TableConfig, AdviceSettings
from pokersim.core.game import TexasHoldemGame
from pokersim.core.rules import ActionType, GamePhase, seat_names
from pokersim.core.state import ActionEvent, GameState
from pokersim.services.advice import AdviceService
from pokersim.server.routes import hand_result
from pokersim.server.schemas import WSJoinMessage, WSActionMessage, WSErrorMessage


logger = logging.getLogger(__name__)

# Scheduler steps
STEP_RUNOUT = "runout"
STEP_BOT = "bot"
STEP_NEXT_HAND = "next_hand"


@dataclass
class TableRoom:
    """
    A table with its game instance and connected clients.

    The scheduler is the only place that waits: it sleeps for the bot
    think time, the runout delay or the showdown pause, then applies one
    step. If the game state changed while it slept (a human acted, the
    table was reset) the step is dropped and the next one recomputed.
    """
    room_id: str
    game: TexasHoldemGame
    connections: Dict[str, WebSocket] = field(default_factory=dict)
    events: List[ActionEvent] = field(default_factory=list)
    result_hand: int = 0
    _task: Optional[asyncio.Task] = field(default=None, repr=False)
    _wake: Optional[asyncio.Event] = field(default=None, repr=False)

    def __post_init__(self):
        self.game.subscribe(self._on_action)

    def _on_action(self, event: ActionEvent, state: GameState) -> None:
        self.events.append(event)

    # ============= Messaging =============

    async def broadcast(self, message: Dict[str, Any], exclude: Optional[str] = None):
        """Broadcast a message to all connected clients."""
        for client_id, ws in list(self.connections.items()):
            if client_id != exclude:
                try:
                    await ws.send_json(message)
                except Exception as e:
                    logger.error(f"Error sending to {client_id}: {e}")

    def state_message(self) -> Dict[str, Any]:
        human = self.game.human_player
        return {
            "type": "state",
            **self.game.get_state(for_player_id=human.id if human else None)
        }

    async def send_state_to_all(self):
        """Flush pending action events, then send the table state."""
        events, self.events = self.events, []
        for event in events:
            await self.broadcast({"type": "action", **event.to_dict()})
        await self.broadcast(self.state_message())

        if self.game.phase == GamePhase.SHOWDOWN and self.result_hand != self.game.state.hand_number:
            self.result_hand = self.game.state.hand_number
            await self.send_result()

    async def send_result(self):
        """Send hand result to all clients."""
        await self.broadcast({"type": "result", **hand_result(self.game)})

    # ============= Scheduler =============

    def pending_step(self) -> Tuple[Optional[str], Optional[float]]:
        """
        The next scheduler step and the delay before it.

        Returns (None, None) when the table waits for outside input: the
        human seat is to act, no hand has been started, or the session
        is over.
        """
        game = self.game
        config = game.config

        if game.needs_runout():
            return STEP_RUNOUT, config.runout_delay

        if game.is_hand_running():
            player = game.state.current_player
            if player is not None and player.is_bot:
                return STEP_BOT, game.rng.uniform(config.bot_delay_min, config.bot_delay_max)
            return None, None

        if game.phase == GamePhase.SHOWDOWN and not game.is_game_over():
            return STEP_NEXT_HAND, config.showdown_delay

        return None, None

    async def step(self, expected: Optional[str] = None) -> bool:
        """
        Apply the pending step now (no delay).

        Args:
            expected: Only apply the step if it is still this one

        Returns:
            True if the table advanced
        """
        kind, _ = self.pending_step()
        if kind is None or (expected is not None and kind != expected):
            return False

        if kind == STEP_RUNOUT:
            self.game.proceed()
        elif kind == STEP_BOT:
            result = self.game.play_bot_turn()
            if result is not None and not result.success:
                logger.error(f"Room {self.room_id}: bot action rejected: {result.message}")
        else:
            if not self.game.start_next_hand():
                logger.info(f"Room {self.room_id}: {self.game.state.message}")

        await self.send_state_to_all()
        return True

    async def _run(self):
        while True:
            kind, delay = self.pending_step()
            if kind is None:
                self._wake.clear()
                await self._wake.wait()
                continue

            snapshot = self.game.state
            await asyncio.sleep(delay)
            if self.game.state is not snapshot:
                continue
            await self.step(expected=kind)

    def start(self) -> None:
        """Start the scheduler if it is not running."""
        if self._task is None or self._task.done():
            self._wake = asyncio.Event()
            self._task = asyncio.create_task(self._run())
            logger.info(f"Room {self.room_id}: scheduler started")

    def wake(self) -> None:
        """Recompute the pending step after outside input."""
        if self._wake is not None:
            self._wake.set()

    def stop(self) -> None:
        """Cancel any pending bot, runout or next-hand step."""
        if self._task is not None:
            self._task.cancel()
            self._task = None
            logger.info(f"Room {self.room_id}: scheduler stopped")


class GameManager:
    """
    Manages multiple table rooms and client connections.

    Usage:
        manager = GameManager()
        room_id = manager.create_room(TableConfig())
        response = await manager.handle_message(room_id, client_id, message)
        await manager.disconnect(room_id, client_id)
    """

    def __init__(self, advice_service: Optional[AdviceService] = None):
        self.rooms: Dict[str, TableRoom] = {}
        self._room_counter = 0
        self._advice_service = advice_service

    @property
    def advice_service(self) -> AdviceService:
        if self._advice_service is None:
            self._advice_service = AdviceService(AdviceSettings.from_env())
        return self._advice_service

    def create_room(self, config: Optional[TableConfig] = None, room_id: Optional[str] = None) -> str:
        """Create a new table room."""
        if room_id is None:
            self._room_counter += 1
            room_id = f"room-{self._room_counter}"

        game = TexasHoldemGame(config or TableConfig())
        self.rooms[room_id] = TableRoom(room_id=room_id, game=game)
        logger.info(f"Created room {room_id} with {game.num_players} players")

        return room_id

    def get_room(self, room_id: str) -> Optional[TableRoom]:
        """Get a room by ID."""
        return self.rooms.get(room_id)

    async def disconnect(self, room_id: str, client_id: str):
        """Disconnect a client; the last one out stops the scheduler."""
        room = self.get_room(room_id)
        if room and client_id in room.connections:
            del room.connections[client_id]
            logger.info(f"Client {client_id} disconnected from {room_id}")

            if not room.connections:
                room.stop()
            else:
                await room.broadcast({
                    "type": "player_left",
                    "player_id": client_id
                })

    async def handle_message(
        self,
        room_id: str,
        client_id: str,
        message: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Handle a message from a client.

        Args:
            room_id: The room ID
            client_id: The client ID
            message: The message dict with 'type' and optional data

        Returns:
            Response dict
        """
        room = self.get_room(room_id)
        if room is None:
            return _error("Room not found")

        msg_type = message.get("type", "")

        if msg_type == "action":
            response = await self._handle_action(room, message)
        elif msg_type == "start_hand":
            response = await self._handle_start_hand(room)
        elif msg_type == "get_state":
            response = room.state_message()
        elif msg_type == "difficulty":
            response = self._handle_difficulty(room, message)
        elif msg_type == "advice":
            response = await self._handle_advice(room)
        elif msg_type == "reset":
            response = await self._handle_reset(room)
        else:
            response = _error(f"Unknown message type: {msg_type}")

        room.wake()
        return response

    async def _handle_action(self, room: TableRoom, message: Dict[str, Any]) -> Dict[str, Any]:
        """Handle a game action from the human seat."""
        game = room.game
        human = game.human_player
        if human is None:
            return _error("No human seat at this table")

        try:
            msg = WSActionMessage(**message)
            action_type = ActionType.parse(msg.action)
        except (ValidationError, ValueError):
            return _error(f"Invalid action: {message.get('action')}")

        result = game.submit_action(human.id, action_type, msg.amount)
        if not result.success:
            return _error(result.message)

        await room.send_state_to_all()

        return {
            "type": "action_result",
            "success": True,
            "action": action_type.value,
            "amount": result.amount
        }

    async def _handle_start_hand(self, room: TableRoom) -> Dict[str, Any]:
        """Handle starting a new hand."""
        game = room.game

        if game.is_hand_running():
            return _error("Hand already in progress")
        if not game.start_next_hand():
            await room.send_state_to_all()
            return _error(game.state.message)

        await room.send_state_to_all()

        return {
            "type": "hand_started",
            "hand_number": game.state.hand_number
        }

    def _handle_difficulty(self, room: TableRoom, message: Dict[str, Any]) -> Dict[str, Any]:
        try:
            level = room.game.set_difficulty(str(message.get("level", "")))
        except ValueError as e:
            return _error(str(e))
        return {"type": "difficulty", "difficulty": level.value}

    async def _handle_advice(self, room: TableRoom) -> Dict[str, Any]:
        human = room.game.human_player
        if human is None:
            return _error("No human seat at this table")
        text = await self.advice_service.get_advice(room.game.state, human.id)
        return {"type": "advice", "advice": text}

    async def _handle_reset(self, room: TableRoom) -> Dict[str, Any]:
        room.game.initialize_game()
        room.events = []
        await room.send_state_to_all()
        return {"type": "reset", "success": True}


def _error(message: str) -> Dict[str, Any]:
    return WSErrorMessage(message=message).model_dump()


# Global game manager instance
game_manager = GameManager()


async def websocket_endpoint(websocket: WebSocket):
    """
    WebSocket endpoint for game communication.

    Protocol:
    1. Client connects and sends: {"type": "join", "room_id": "...", "player_id": "..."}
    2. Server sends game state
    3. Client sends actions: {"type": "action", "action": "CALL"}
       and table commands: start_hand, get_state, difficulty, advice, reset
    4. Server broadcasts action events, state updates and hand results;
       bots, runouts and the next hand are paced server-side
    """
    room_id: Optional[str] = None
    client_id: Optional[str] = None

    try:
        # Wait for join message
        await websocket.accept()
        try:
            join = WSJoinMessage(**await websocket.receive_json())
        except ValidationError:
            await websocket.send_json(_error("First message must be join with room_id and player_id"))
            await websocket.close()
            return

        room_id, client_id = join.room_id, join.player_id

        # Auto-create room for convenience
        room = game_manager.get_room(room_id)
        if room is None:
            game_manager.create_room(TableConfig(seat_names=tuple(seat_names(join.player_count))), room_id=room_id)
            room = game_manager.get_room(room_id)

        # Register connection
        room.connections[client_id] = websocket
        logger.info(f"Client {client_id} joined {room_id}")

        # Send initial state
        await websocket.send_json(room.state_message())
        room.start()

        # Message loop
        while True:
            message = await websocket.receive_json()
            response = await game_manager.handle_message(room_id, client_id, message)
            await websocket.send_json(response)

    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected: {client_id}")
    except Exception as e:
        logger.error(f"WebSocket error: {e}")
    finally:
        if room_id and client_id:
            await game_manager.disconnect(room_id, client_id)
