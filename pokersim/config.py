"""
Configuration for a poker table and the advice service.

Table settings are plain pydantic models so the HTTP layer can accept
them directly; advice settings are read from the environment.
"""

from __future__ import annotations
import os
from typing import Optional, Tuple

from pydantic import BaseModel, Field, model_validator

from pokersim.core.rules import (
    Difficulty,
    DEFAULT_SMALL_BLIND, DEFAULT_BIG_BLIND, DEFAULT_STARTING_CHIPS,
    DEFAULT_SEAT_NAMES, MIN_PLAYERS, MAX_PLAYERS,
)


class TableConfig(BaseModel):
    """Settings for one table session."""
    small_blind: int = Field(gt=0, default=DEFAULT_SMALL_BLIND)
    big_blind: int = Field(gt=0, default=DEFAULT_BIG_BLIND)
    starting_chips: int = Field(gt=0, default=DEFAULT_STARTING_CHIPS)
    seat_names: Tuple[str, ...] = DEFAULT_SEAT_NAMES
    human_seat: Optional[int] = 0
    difficulty: Difficulty = Difficulty.MEDIUM
    side_pots: bool = False

    # Caller-side pacing (seconds)
    bot_delay_min: float = Field(ge=0, default=1.0)
    bot_delay_max: float = Field(ge=0, default=2.0)
    runout_delay: float = Field(ge=0, default=0.5)
    showdown_delay: float = Field(ge=0, default=8.0)

    @model_validator(mode="after")
    def _check_table(self) -> TableConfig:
        if self.big_blind < self.small_blind:
            raise ValueError("big_blind must be at least small_blind")
        if not MIN_PLAYERS <= len(self.seat_names) <= MAX_PLAYERS:
            raise ValueError(f"Number of players must be {MIN_PLAYERS}-{MAX_PLAYERS}")
        if self.human_seat is not None and not 0 <= self.human_seat < len(self.seat_names):
            raise ValueError("human_seat must be a valid seat index")
        if self.bot_delay_max < self.bot_delay_min:
            raise ValueError("bot_delay_max must be at least bot_delay_min")
        return self

    @property
    def num_players(self) -> int:
        return len(self.seat_names)


DEFAULT_ADVICE_MODEL = "gpt-4o-mini"


class AdviceSettings(BaseModel):
    """
    Connection settings for the text-generation service behind advice.

    Read from POKERSIM_AI_API_KEY, POKERSIM_AI_BASE_URL, POKERSIM_AI_MODEL
    and POKERSIM_AI_TIMEOUT.
    """
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    model: str = DEFAULT_ADVICE_MODEL
    timeout: float = Field(gt=0, default=10.0)
    max_tokens: int = Field(gt=0, default=120)

    @classmethod
    def from_env(cls) -> AdviceSettings:
        return cls(
            api_key=os.getenv("POKERSIM_AI_API_KEY") or None,
            base_url=os.getenv("POKERSIM_AI_BASE_URL") or None,
            model=os.getenv("POKERSIM_AI_MODEL", DEFAULT_ADVICE_MODEL),
            timeout=float(os.getenv("POKERSIM_AI_TIMEOUT", "10")),
        )

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)
