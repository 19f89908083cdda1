"""
Pydantic schemas for API request/response validation.
"""

from typing import Optional
from pydantic import BaseModel, Field

from pokersim.config import TableConfig
from pokersim.core.rules import (
    Difficulty, DEFAULT_SMALL_BLIND, DEFAULT_BIG_BLIND, DEFAULT_STARTING_CHIPS,
    MIN_PLAYERS, MAX_PLAYERS, seat_names,
)


# ============= Request Schemas =============

class InitGameRequest(BaseModel):
    """Request to initialize a game."""
    player_count: int = Field(ge=MIN_PLAYERS, le=MAX_PLAYERS, default=6)
    small_blind: int = Field(gt=0, default=DEFAULT_SMALL_BLIND)
    big_blind: int = Field(gt=0, default=DEFAULT_BIG_BLIND)
    starting_chips: int = Field(gt=0, default=DEFAULT_STARTING_CHIPS)
    difficulty: str = Field(default=Difficulty.MEDIUM.value, description="Easy, Medium or Hard")
    side_pots: bool = False
    seed: Optional[int] = Field(default=None, description="Seed for reproducible deals")

    def to_config(self) -> TableConfig:
        """Raises ValueError for inconsistent settings or an unknown difficulty."""
        return TableConfig(
            small_blind=self.small_blind,
            big_blind=self.big_blind,
            starting_chips=self.starting_chips,
            seat_names=tuple(seat_names(self.player_count)),
            difficulty=Difficulty.parse(self.difficulty),
            side_pots=self.side_pots,
        )


class StartHandRequest(BaseModel):
    """Request to start a hand; without a dealer the button moves on."""
    dealer_index: Optional[int] = Field(default=None, ge=0)


class ActionRequest(BaseModel):
    """Request to take a game action."""
    action_type: str = Field(..., description="Action type: FOLD, CHECK, CALL, RAISE, ALL_IN")
    amount: Optional[int] = Field(default=None, ge=0, description="New total bet for RAISE")
    player_id: Optional[int] = Field(default=None, description="Acting seat (default: the human seat)")


class DifficultyRequest(BaseModel):
    """Request to change bot difficulty."""
    level: str


class AdviceRequest(BaseModel):
    """Request coaching advice for a seat."""
    player_id: Optional[int] = None


# ============= Response Schemas =============

class AdviceResponse(BaseModel):
    """Coach text for a seat."""
    advice: str


# ============= WebSocket Message Schemas =============

class WSJoinMessage(BaseModel):
    """WebSocket join room message."""
    type: str = "join"
    room_id: str
    player_id: str
    player_count: int = Field(ge=MIN_PLAYERS, le=MAX_PLAYERS, default=6)


class WSActionMessage(BaseModel):
    """WebSocket action message."""
    type: str = "action"
    action: str  # FOLD, CHECK, CALL, RAISE, ALL_IN
    amount: Optional[int] = None


class WSErrorMessage(BaseModel):
    """WebSocket error message."""
    type: str = "error"
    message: str
