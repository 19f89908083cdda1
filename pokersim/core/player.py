"""
Player (seat) class for Texas Hold'em.

Manages seat state including:
- Chip count
- Hole cards
- Bet in the current betting round and across the whole hand
- Seat status (active, folded, all-in, busted, sitting out)
"""

from __future__ import annotations
from typing import List, Optional, Dict, Any
from dataclasses import dataclass, field
from enum import Enum

from pokersim.core.card import Card


class PlayerStatus(Enum):
    """Seat states during a hand."""
    ACTIVE = "ACTIVE"            # Still in the hand, can act
    FOLDED = "FOLDED"            # Has folded
    ALL_IN = "ALL_IN"            # All-in, no more actions
    BUSTED = "BUSTED"            # Out of the game (no chips)
    SITTING_OUT = "SITTING_OUT"  # Temporarily sitting out


@dataclass
class Player:
    """
    A seat at the table.

    Attributes:
        id: Stable identity for the session (also the seat index)
        name: Display name
        is_bot: True for scripted opponents
        chips: Chips behind (not yet committed)
        hole_cards: The player's private cards (0 or 2)
        status: Current seat status
        current_bet: Chips committed in the current betting round
        total_hand_bet: Chips committed across the whole hand
        last_action: Label of the last action for display
        has_acted: Acted since the last full raise of this round
    """
    id: int
    name: str
    chips: int
    is_bot: bool = True
    hole_cards: List[Card] = field(default_factory=list)
    status: PlayerStatus = PlayerStatus.ACTIVE
    current_bet: int = 0
    total_hand_bet: int = 0
    last_action: Optional[str] = None
    has_acted: bool = False

    def reset_for_new_hand(self) -> None:
        """Reset seat state for a new hand."""
        self.hole_cards = []
        self.current_bet = 0
        self.total_hand_bet = 0
        self.has_acted = False
        self.last_action = None

        # Only seats with chips take part
        if self.chips > 0:
            self.status = PlayerStatus.ACTIVE
        else:
            self.status = PlayerStatus.BUSTED

    def reset_for_new_round(self) -> None:
        """Reset seat state for a new street (flop, turn, river)."""
        self.current_bet = 0
        self.has_acted = False
        self.last_action = None

    def commit(self, amount: int) -> int:
        """
        Move chips from the stack into the pot.

        Args:
            amount: Chips to commit

        Returns:
            Actual amount committed (less than asked if the stack runs out)
        """
        amount = int(amount)
        if amount <= 0:
            return 0

        actual = min(amount, self.chips)

        self.chips -= actual
        self.current_bet += actual
        self.total_hand_bet += actual

        if self.chips == 0:
            self.status = PlayerStatus.ALL_IN

        return actual

    def fold(self) -> None:
        """Fold the hand."""
        self.status = PlayerStatus.FOLDED
        self.last_action = "FOLD"

    @property
    def can_act(self) -> bool:
        """Check if the seat can still take betting actions."""
        return self.status == PlayerStatus.ACTIVE

    @property
    def is_in_hand(self) -> bool:
        """Still contesting the pot (not folded, busted or sitting out)."""
        return self.status in (PlayerStatus.ACTIVE, PlayerStatus.ALL_IN)

    def to_dict(self, hide_cards: bool = True) -> Dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        Args:
            hide_cards: If True, don't include hole cards
        """
        result = {
            "id": self.id,
            "name": self.name,
            "is_bot": self.is_bot,
            "chips": self.chips,
            "bet": self.current_bet,
            "total_bet": self.total_hand_bet,
            "status": self.status.value,
            "last_action": self.last_action,
        }

        if not hide_cards and self.hole_cards:
            result["cards"] = [card.to_dict() for card in self.hole_cards]

        return result

    def __repr__(self) -> str:
        return (
            f"Player({self.id}, {self.name}, chips={self.chips}, "
            f"bet={self.current_bet}, status={self.status.name})"
        )

    def __str__(self) -> str:
        cards_str = " ".join(str(c) for c in self.hole_cards) if self.hole_cards else "??"
        return f"{self.name} [{cards_str}] ${self.chips}"
