"""
Card and Deck classes for Texas Hold'em.

Ranks are the plain integers 2..14 (11=J, 12=Q, 13=K, 14=A) so that hand
evaluation and bot heuristics can do arithmetic on them directly.
"""

from __future__ import annotations
import random
from dataclasses import dataclass
from typing import List, Optional
from enum import IntEnum


class Suit(IntEnum):
    """Card suits."""
    HEARTS = 0    # ♥
    DIAMONDS = 1  # ♦
    CLUBS = 2     # ♣
    SPADES = 3    # ♠


class Rank(IntEnum):
    """Card ranks from 2 (lowest) to Ace (14, highest)."""
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14


# String mappings
SUIT_SYMBOLS = {
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
    Suit.SPADES: "♠",
}

SUIT_CHARS = {
    Suit.HEARTS: "h",
    Suit.DIAMONDS: "d",
    Suit.CLUBS: "c",
    Suit.SPADES: "s",
}

RANK_CHARS = {
    Rank.TWO: "2",
    Rank.THREE: "3",
    Rank.FOUR: "4",
    Rank.FIVE: "5",
    Rank.SIX: "6",
    Rank.SEVEN: "7",
    Rank.EIGHT: "8",
    Rank.NINE: "9",
    Rank.TEN: "T",
    Rank.JACK: "J",
    Rank.QUEEN: "Q",
    Rank.KING: "K",
    Rank.ACE: "A",
}

# Reverse mappings
CHAR_TO_RANK = {v: k for k, v in RANK_CHARS.items()}
CHAR_TO_SUIT = {v: k for k, v in SUIT_CHARS.items()}
SYMBOL_TO_SUIT = {v: k for k, v in SUIT_SYMBOLS.items()}

DECK_SIZE = 52


@dataclass(frozen=True)
class Card:
    """
    An immutable playing card; equality is by (rank, suit).

    Cards can be created from:
    - Rank and Suit enums: Card(Rank.ACE, Suit.SPADES)
    - String notation: Card.from_string("As"), Card.from_string("10♥")
    """

    rank: Rank
    suit: Suit

    def __post_init__(self):
        object.__setattr__(self, "rank", Rank(self.rank))
        object.__setattr__(self, "suit", Suit(self.suit))

    @classmethod
    def from_string(cls, s: str) -> Card:
        """
        Create a card from string notation.

        Accepts formats:
        - "As", "Kh", "Td", "2c" (rank + suit char)
        - "A♠", "K♥", "10♦", "2♣" (rank + suit symbol)
        """
        s = s.strip()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        if s[:2] == "10":
            rank_char, suit_part = "T", s[2:]
        else:
            rank_char, suit_part = s[0].upper(), s[1:]

        if rank_char not in CHAR_TO_RANK:
            raise ValueError(f"Invalid rank: {rank_char}")

        rank = CHAR_TO_RANK[rank_char]

        # Try suit char first, then symbol
        if suit_part.lower() in CHAR_TO_SUIT:
            suit = CHAR_TO_SUIT[suit_part.lower()]
        elif suit_part in SYMBOL_TO_SUIT:
            suit = SYMBOL_TO_SUIT[suit_part]
        else:
            raise ValueError(f"Invalid suit: {suit_part}")

        return cls(rank, suit)

    def __lt__(self, other: Card) -> bool:
        """Compare by rank only (for sorting)."""
        return self.rank < other.rank

    def __repr__(self) -> str:
        return f"Card({RANK_CHARS[self.rank]}{SUIT_CHARS[self.suit]})"

    def __str__(self) -> str:
        return f"{RANK_CHARS[self.rank]}{SUIT_SYMBOLS[self.suit]}"

    @property
    def short_str(self) -> str:
        """Short string like 'As', 'Kh'."""
        return f"{RANK_CHARS[self.rank]}{SUIT_CHARS[self.suit]}"

    @property
    def long_name(self) -> str:
        """Spelled-out name like 'ACE of ♠', used in advice prompts."""
        return f"{self.rank.name} of {SUIT_SYMBOLS[self.suit]}"

    @property
    def color(self) -> str:
        """Return 'red' for hearts/diamonds, 'black' for clubs/spades."""
        return "red" if self.suit in (Suit.HEARTS, Suit.DIAMONDS) else "black"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "rank": RANK_CHARS[self.rank],
            "value": int(self.rank),
            "suit": SUIT_SYMBOLS[self.suit],
            "text": str(self),
            "color": self.color,
        }


class Deck:
    """
    A standard 52-card deck, owned by a single hand.

    Cards are drawn from the end of the list. A deck is never refilled;
    a new hand builds a new deck.

    Usage:
        deck = create_deck(random.Random(7))
        hole_cards = deck.deal(2)
        flop = deck.deal(3)
    """

    def __init__(self, cards: Optional[List[Card]] = None):
        if cards is None:
            cards = [Card(rank, suit) for suit in Suit for rank in Rank]
        self._cards: List[Card] = list(cards)

    def shuffle(self, rng: Optional[random.Random] = None) -> None:
        """
        Shuffle the remaining cards in place.

        random.Random.shuffle is the Fisher-Yates walk from the last index
        down to 1, swapping with a uniform index in [0, i].
        """
        (rng or random).shuffle(self._cards)

    def deal(self, n: int = 1) -> List[Card]:
        """
        Deal n cards from the end of the deck.

        Raises:
            ValueError: If not enough cards remain.
        """
        if n > len(self._cards):
            raise ValueError(f"Cannot deal {n} cards, only {len(self._cards)} remain")

        return [self._cards.pop() for _ in range(n)]

    def deal_one(self) -> Card:
        """Deal a single card."""
        return self.deal(1)[0]

    @property
    def cards(self) -> List[Card]:
        """Copy of the remaining cards, last element is the next card dealt."""
        return list(self._cards)

    @property
    def remaining(self) -> int:
        """Number of cards remaining in the deck."""
        return len(self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def __repr__(self) -> str:
        return f"Deck({self.remaining} cards remaining)"


def create_deck(rng: Optional[random.Random] = None) -> Deck:
    """Build all 52 cards and shuffle them with the given random source."""
    deck = Deck()
    deck.shuffle(rng)
    return deck


def parse_cards(cards_str: str) -> List[Card]:
    """
    Parse multiple cards from a string.

    Accepts formats:
    - "As Kh Td" (space-separated)
    - "AsKhTd" (no separator, 2 chars each)
    - "A♠ K♥ T♦" (with symbols)
    """
    cards_str = cards_str.strip()
    if not cards_str:
        return []

    # Try space-separated first
    if " " in cards_str:
        return [Card.from_string(s) for s in cards_str.split()]

    # Try 2-char chunks
    result = []
    i = 0
    while i < len(cards_str):
        if i + 1 < len(cards_str) and (
            cards_str[i + 1] in SYMBOL_TO_SUIT or cards_str[i + 1].lower() in CHAR_TO_SUIT
        ):
            result.append(Card.from_string(cards_str[i:i + 2]))
            i += 2
        else:
            raise ValueError(f"Cannot parse card at position {i}: {cards_str[i:]}")

    return result
