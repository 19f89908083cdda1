"""
The authoritative game state.

One GameState exists per running session. Engine transitions never mutate
the state they are given: they copy it, change the copy and return it, so
a caller holding an older snapshot (a UI, a stale network request) never
sees it change underneath.
"""

from __future__ import annotations
import copy
from typing import List, Optional, Dict, Any
from dataclasses import dataclass, field

from pokersim.core.card import Card, Deck
from pokersim.core.player import Player
from pokersim.core.rules import (
    GamePhase, ActionType, Difficulty,
    DEFAULT_BIG_BLIND, DEFAULT_SMALL_BLIND,
)


@dataclass(frozen=True)
class Winner:
    """A pot award."""
    player_id: int
    amount: int
    hand_name: str

    def to_dict(self) -> Dict[str, Any]:
        return {"player_id": self.player_id, "amount": self.amount, "hand_name": self.hand_name}


@dataclass(frozen=True)
class ActionEvent:
    """A completed action with its resolved chip movement."""
    player_id: int
    action: ActionType
    amount: int      # Chips moved from stack to pot by this action
    total_bet: int   # Seat's bet for the round after the action
    phase: GamePhase

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "action": self.action.value,
            "amount": self.amount,
            "total_bet": self.total_bet,
            "phase": self.phase.name,
        }


@dataclass
class GameState:
    """
    Single table state.

    `pot` equals the sum of every seat's total_hand_bet while a hand runs.
    `current_player_index` is None when nobody is to act: between hands,
    and while an all-in board is being run out.
    """
    players: List[Player] = field(default_factory=list)
    deck: Deck = field(default_factory=lambda: Deck([]))
    community_cards: List[Card] = field(default_factory=list)
    pot: int = 0
    current_bet: int = 0
    min_raise: int = DEFAULT_BIG_BLIND
    dealer_index: int = 0
    current_player_index: Optional[int] = None
    phase: GamePhase = GamePhase.WAITING
    winners: List[Winner] = field(default_factory=list)
    message: str = ""
    difficulty: Difficulty = Difficulty.MEDIUM
    small_blind: int = DEFAULT_SMALL_BLIND
    big_blind: int = DEFAULT_BIG_BLIND
    hand_number: int = 0
    side_pots: bool = False
    last_event: Optional[ActionEvent] = None

    def copy(self) -> GameState:
        """Deep copy used by every transition."""
        return copy.deepcopy(self)

    @property
    def current_player(self) -> Optional[Player]:
        if self.current_player_index is None:
            return None
        return self.players[self.current_player_index]

    @property
    def is_hand_running(self) -> bool:
        return self.phase not in (GamePhase.WAITING, GamePhase.SHOWDOWN)

    def get_player(self, player_id: int) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def seat_of(self, player_id: int) -> Optional[int]:
        for i, player in enumerate(self.players):
            if player.id == player_id:
                return i
        return None

    def to_dict(self, for_player_id: Optional[int] = None, reveal_all: bool = False) -> Dict[str, Any]:
        """
        Read-only snapshot for presentation.

        Hole cards are shown for `for_player_id`, and for every seat still
        in the hand once the pot has been awarded (or when reveal_all).
        """
        show_all = reveal_all or (self.phase == GamePhase.SHOWDOWN and len(self.winners) > 0)
        players = []
        for p in self.players:
            hide = not (show_all and p.is_in_hand) and p.id != for_player_id
            players.append(p.to_dict(hide_cards=hide))

        return {
            "phase": self.phase.name,
            "phase_label": self.phase.value,
            "hand_number": self.hand_number,
            "pot": self.pot,
            "current_bet": self.current_bet,
            "min_raise": self.min_raise,
            "board": [c.to_dict() for c in self.community_cards],
            "dealer_index": self.dealer_index,
            "current_player_index": self.current_player_index,
            "players": players,
            "winners": [w.to_dict() for w in self.winners],
            "message": self.message,
            "difficulty": self.difficulty.value,
            "small_blind": self.small_blind,
            "big_blind": self.big_blind,
            "last_event": self.last_event.to_dict() if self.last_event else None,
        }
