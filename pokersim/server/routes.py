"""
HTTP API Routes for pokersim.

These routes drive a single table: the human seat acts through
/take_action, and the client paces the bots and the all-in runout by
calling /proceed. The WebSocket endpoint offers the same table with
server-side pacing.
"""

from typing import Dict, Any, Optional
import logging
import random

from fastapi import APIRouter, Depends, HTTPException

from pokersim import __version__
from pokersim.config import AdviceSettings
from pokersim.core.game import TexasHoldemGame
from pokersim.core.rules import ActionType
from pokersim.services.advice import AdviceService
from pokersim.server.schemas import (
    InitGameRequest, StartHandRequest, ActionRequest, DifficultyRequest,
    AdviceRequest, AdviceResponse,
)

router = APIRouter()
logger = logging.getLogger(__name__)

# Global game instance for single-table mode
_game: Optional[TexasHoldemGame] = None
_advice_service: Optional[AdviceService] = None


def get_game() -> TexasHoldemGame:
    """Get the current game instance."""
    if _game is None:
        raise HTTPException(status_code=400, detail="Game not initialized")
    return _game


def get_advice_service() -> AdviceService:
    """Advice service configured from the environment, created on first use."""
    global _advice_service
    if _advice_service is None:
        _advice_service = AdviceService(AdviceSettings.from_env())
    return _advice_service


def _acting_seat(game: TexasHoldemGame, player_id: Optional[int]) -> int:
    if player_id is not None:
        return player_id
    human = game.human_player
    if human is None:
        raise HTTPException(status_code=400, detail="No human seat at this table")
    return human.id


def hand_result(game: TexasHoldemGame) -> Dict[str, Any]:
    """Winners, revealed cards and board once the pot has been awarded."""
    winners = []
    for winner in game.state.winners:
        player = game.state.get_player(winner.player_id)
        winners.append({
            "id": winner.player_id,
            "won": winner.amount,
            "hand_name": winner.hand_name,
            "stack": player.chips if player else 0,
        })

    players_cards = [
        {"id": p.id, "cards": [card.to_dict() for card in p.hole_cards]}
        for p in game.players
        if p.hole_cards and p.is_in_hand
    ]

    return {
        "winners": winners,
        "players_cards": players_cards,
        "pot": game.state.pot,
        "board": [card.to_dict() for card in game.state.community_cards],
    }


@router.get("/")
async def index() -> Dict[str, Any]:
    """Service banner."""
    return {"name": "pokersim", "version": __version__}


@router.post("/init_game")
async def init_game(req: InitGameRequest) -> Dict[str, Any]:
    """
    Initialize a new game with the specified number of players.

    This creates a new game instance and prepares it for play.
    """
    global _game

    try:
        config = req.to_config()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    rng = random.Random(req.seed) if req.seed is not None else None
    _game = TexasHoldemGame(config, rng=rng)
    logger.info(f"Game initialized with {req.player_count} players")

    return {
        "success": True,
        "message": f"Game initialized with {req.player_count} players",
        "player_count": req.player_count,
        "difficulty": _game.state.difficulty.value,
    }


@router.post("/start_hand")
async def start_hand(req: Optional[StartHandRequest] = None) -> Dict[str, Any]:
    """
    Start a new hand.

    Deals cards and posts blinds. Without a dealer index the button moves
    to the next seat that still has chips.
    """
    game = get_game()

    if game.is_hand_running():
        raise HTTPException(status_code=400, detail="Hand already in progress")

    if req is not None and req.dealer_index is not None:
        if req.dealer_index >= game.num_players:
            raise HTTPException(status_code=400, detail="Invalid dealer index")
        started = game.start_new_hand(req.dealer_index)
    else:
        started = game.start_next_hand()

    if not started:
        return {
            "success": False,
            "game_over": True,
            "message": game.state.message,
        }

    return {
        "success": True,
        "message": f"Hand #{game.state.hand_number} started",
        "hand_number": game.state.hand_number,
    }


@router.get("/get_game_state")
async def get_game_state(player_id: Optional[int] = None) -> Dict[str, Any]:
    """
    Get the current game state.

    Returns public information and private information for the requested
    seat (default: the human seat).
    """
    game = get_game()
    seat = player_id if player_id is not None else (game.human_player.id if game.human_player else None)
    return game.get_state(for_player_id=seat)


@router.post("/take_action")
async def take_action(req: ActionRequest) -> Dict[str, Any]:
    """
    Take a game action.

    Processes the action and returns the result.
    If the hand ends, includes winner information.
    """
    game = get_game()

    # Parse action type
    try:
        action_type = ActionType.parse(req.action_type)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid action type: {req.action_type}")

    result = game.submit_action(_acting_seat(game, req.player_id), action_type, req.amount)

    if not result.success:
        return {"error": result.message}

    response: Dict[str, Any] = {
        "success": True,
        "message": result.message,
        "action_type": result.action_type.value if result.action_type else None,
        "amount": result.amount,
    }

    # Check if hand is over
    if not game.is_hand_running():
        response.update(hand_result(game))

    return response


@router.post("/proceed")
async def proceed() -> Dict[str, Any]:
    """
    Advance the table by one paced step.

    Plays the bot whose turn it is, or deals the next runout street.
    Does nothing while the human seat is to act.
    """
    game = get_game()
    step = "idle"

    if game.needs_runout():
        game.proceed()
        step = "runout"
    elif game.is_hand_running():
        result = game.play_bot_turn()
        if result is not None:
            step = "bot_action"
            if not result.success:
                logger.error(f"Bot action rejected: {result.message}")

    response: Dict[str, Any] = {"step": step, **game.get_state(
        for_player_id=game.human_player.id if game.human_player else None
    )}
    if step != "idle" and not game.is_hand_running():
        response.update(hand_result(game))
    return response


@router.post("/difficulty")
async def set_difficulty(req: DifficultyRequest) -> Dict[str, Any]:
    """Change bot difficulty; applies from the next bot decision."""
    game = get_game()
    try:
        level = game.set_difficulty(req.level)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True, "difficulty": level.value}


@router.get("/legal_actions")
async def get_legal_actions(player_id: Optional[int] = None) -> Dict[str, Any]:
    """
    Get legal actions for the seat to act (or the given seat).
    """
    game = get_game()

    if not game.is_hand_running():
        return {"actions": [], "message": "No hand in progress"}

    return {"actions": game.get_legal_actions(player_id)}


@router.post("/advice", response_model=AdviceResponse)
async def advice(
    req: Optional[AdviceRequest] = None,
    service: AdviceService = Depends(get_advice_service),
) -> AdviceResponse:
    """Coaching advice for the human seat (never changes the game)."""
    game = get_game()
    seat = _acting_seat(game, req.player_id if req else None)
    text = await service.get_advice(game.state, seat)
    return AdviceResponse(advice=text)


@router.post("/reset_game")
async def reset_game() -> Dict[str, Any]:
    """
    Reset the game (for development/testing).
    """
    global _game
    _game = None
    return {"success": True, "message": "Game reset"}
