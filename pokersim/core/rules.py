"""
Texas Hold'em Rules and Constants.

Table rules used by the engine:

1. Heads-up (2 seats): Dealer posts small blind, the other seat the big
   blind. Preflop the dealer acts first, postflop the non-dealer.

2. Minimum raise: a raise must increase the current bet by at least the
   previous raise increment (the big blind when nobody has raised yet).

3. All-in less than a minimum raise does not reopen betting for seats
   that already acted; they may only call or fold.

4. Blinds: each blind is min(chips, blind value); a seat left with no
   chips after posting is all-in.
"""

from __future__ import annotations
from enum import Enum
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from pokersim.core.player import Player, PlayerStatus


class GamePhase(Enum):
    """Phases of a session."""
    WAITING = "Waiting"      # No hand running (before first hand or session over)
    PREFLOP = "Pre-Flop"     # After hole cards dealt, before flop
    FLOP = "Flop"            # After 3 community cards
    TURN = "Turn"            # After 4th community card
    RIVER = "River"          # After 5th community card
    SHOWDOWN = "Showdown"    # Pot awarded, waiting for next hand


class ActionType(Enum):
    """Possible player actions."""
    FOLD = "FOLD"
    CHECK = "CHECK"
    CALL = "CALL"
    RAISE = "RAISE"
    ALL_IN = "ALL_IN"

    @classmethod
    def parse(cls, value: str) -> ActionType:
        """Accept 'raise', 'RAISE', 'all-in', 'ALL_IN' and friends."""
        normalized = value.strip().upper().replace("-", "_").replace(" ", "_")
        if normalized == "ALLIN":
            normalized = "ALL_IN"
        return cls(normalized)


class Difficulty(Enum):
    """Bot difficulty tiers."""
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"

    @classmethod
    def parse(cls, value: str) -> Difficulty:
        for level in cls:
            if value.strip().lower() in (level.value.lower(), level.name.lower()):
                return level
        raise ValueError(f"Unknown difficulty: {value}")


@dataclass(frozen=True)
class Action:
    """
    A betting action.

    `amount` only matters for RAISE, where it is the seat's new total bet
    for the round (not the increment). None means a minimum raise.
    """
    type: ActionType
    amount: Optional[int] = None

    @classmethod
    def fold(cls) -> Action:
        return cls(ActionType.FOLD)

    @classmethod
    def check(cls) -> Action:
        return cls(ActionType.CHECK)

    @classmethod
    def call(cls) -> Action:
        return cls(ActionType.CALL)

    @classmethod
    def raise_to(cls, amount: Optional[int] = None) -> Action:
        return cls(ActionType.RAISE, None if amount is None else int(amount))

    @classmethod
    def all_in(cls) -> Action:
        return cls(ActionType.ALL_IN)

    def to_dict(self) -> dict:
        return {"action": self.type.value, "amount": self.amount}


# Default game settings
DEFAULT_SMALL_BLIND = 10
DEFAULT_BIG_BLIND = 20
DEFAULT_STARTING_CHIPS = 1000
DEFAULT_SEAT_NAMES = ("You", "Alex", "Beth", "Carl", "Dana", "Earl")
MIN_PLAYERS = 2
MAX_PLAYERS = 10

# Cards per phase
HOLE_CARDS = 2
FLOP_CARDS = 3
TURN_CARDS = 1
RIVER_CARDS = 1
TOTAL_COMMUNITY_CARDS = 5

# Street order and the number of community cards dealt entering each street
NEXT_STREET = {
    GamePhase.PREFLOP: GamePhase.FLOP,
    GamePhase.FLOP: GamePhase.TURN,
    GamePhase.TURN: GamePhase.RIVER,
    GamePhase.RIVER: GamePhase.SHOWDOWN,
}
STREET_CARDS = {
    GamePhase.FLOP: FLOP_CARDS,
    GamePhase.TURN: TURN_CARDS,
    GamePhase.RIVER: RIVER_CARDS,
}
BETTING_PHASES = (GamePhase.PREFLOP, GamePhase.FLOP, GamePhase.TURN, GamePhase.RIVER)

# Display messages
OPPONENTS_FOLDED = "Opponents Folded"
SPLIT_POT = "Split Pot!"
STREET_MESSAGES = {
    GamePhase.PREFLOP: "Pre-Flop Betting",
    GamePhase.FLOP: "The Flop",
    GamePhase.TURN: "The Turn",
    GamePhase.RIVER: "The River",
}

# Seats that can never be picked as blind, dealer or first to act
_SKIPPED_SEATS = (PlayerStatus.BUSTED, PlayerStatus.SITTING_OUT)


def next_seat(
    players: Sequence[Player],
    start: int,
    predicate: Callable[[Player], bool],
) -> Optional[int]:
    """
    Walk clockwise from the seat after `start` (wrapping around, `start`
    itself checked last) and return the first seat matching `predicate`.
    """
    num = len(players)
    for offset in range(1, num + 1):
        idx = (start + offset) % num
        if predicate(players[idx]):
            return idx
    return None


def is_dealt_in(player: Player) -> bool:
    """Seat takes part in the current hand (not busted, not sitting out)."""
    return player.status not in _SKIPPED_SEATS


def get_blind_positions(players: Sequence[Player], dealer_index: int) -> Tuple[int, int]:
    """
    Calculate small blind and big blind seats.

    Walks clockwise from the dealer to the next two dealt-in seats. In
    heads-up play the dealer posts the small blind.

    Returns:
        Tuple of (small_blind_index, big_blind_index)
    """
    dealt_in = [i for i, p in enumerate(players) if is_dealt_in(p)]
    if len(dealt_in) < MIN_PLAYERS:
        raise ValueError("Need at least 2 players")

    if len(dealt_in) == 2 and is_dealt_in(players[dealer_index]):
        sb = dealer_index
    else:
        sb = next_seat(players, dealer_index, is_dealt_in)
    bb = next_seat(players, sb, is_dealt_in)
    return sb, bb


def next_dealer_index(players: Sequence[Player], dealer_index: int) -> int:
    """Move the button to the next seat that still has chips."""
    found = next_seat(players, dealer_index, lambda p: p.chips > 0)
    return dealer_index if found is None else found


def min_raise_total(current_bet: int, min_raise: int) -> int:
    """Smallest legal total bet for a raise."""
    return current_bet + min_raise


def seat_names(count: int, names: Sequence[str] = DEFAULT_SEAT_NAMES) -> List[str]:
    """Names for `count` seats, numbering any seats beyond the name list."""
    return [names[i] if i < len(names) else f"Bot {i}" for i in range(count)]
