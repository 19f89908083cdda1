"""
Pot construction for showdown.

By default the whole hand plays for one pot that every seat still in the
hand is eligible for, even an all-in seat that covered only part of the
betting. Tables created with side_pots=True split the pot into layers
instead, so an all-in seat can only win what it matched from each
opponent.
"""

from __future__ import annotations
from typing import List, Sequence
from dataclasses import dataclass, field

from pokersim.core.player import Player


@dataclass
class Pot:
    """Represents a pot (main pot or side pot)."""
    amount: int = 0
    eligible_players: List[int] = field(default_factory=list)

    def add(self, amount: int) -> None:
        self.amount += amount


def single_pot(players: Sequence[Player], amount: int) -> List[Pot]:
    """One pot for every seat still contesting the hand."""
    return [Pot(amount=amount, eligible_players=[p.id for p in players if p.is_in_hand])]


def build_side_pots(players: Sequence[Player]) -> List[Pot]:
    """
    Split hand contributions into a main pot and side pots.

    Each distinct contribution level opens a layer. A layer nobody still
    in the hand can win (chips put in by a seat that later folded above
    every live stake) is folded into the pot below it.
    """
    contributors = sorted(
        (p for p in players if p.total_hand_bet > 0),
        key=lambda p: p.total_hand_bet,
    )
    if not contributors:
        return []

    pots: List[Pot] = []
    carry = 0
    prev_level = 0

    for level in sorted({p.total_hand_bet for p in contributors}):
        payers = [p for p in contributors if p.total_hand_bet >= level]
        layer = (level - prev_level) * len(payers) + carry
        eligible = [p.id for p in players if p.is_in_hand and p.total_hand_bet >= level]
        prev_level = level

        if not eligible:
            if pots:
                pots[-1].add(layer)
                carry = 0
            else:
                carry = layer
            continue
        carry = 0

        if pots and pots[-1].eligible_players == eligible:
            pots[-1].add(layer)
        else:
            pots.append(Pot(amount=layer, eligible_players=eligible))

    return pots


def split_amount(amount: int, ways: int) -> List[int]:
    """
    Integer shares of a split pot; the odd chips all go to the first share.

    split_amount(101, 2) == [51, 50]
    """
    share, remainder = divmod(int(amount), ways)
    return [share + remainder] + [share] * (ways - 1)
