"""
Hand Evaluation for Texas Hold'em.

This module scores any set of cards (2 hole cards plus up to 5 community
cards) and returns the best hand it contains. Higher score = better hand.

Hand Rankings (best to worst):
9. Royal Flush: A♠ K♠ Q♠ J♠ T♠
8. Straight Flush: 5 consecutive cards of same suit
7. Four of a Kind: 4 cards of same rank
6. Full House: 3 of a kind + pair
5. Flush: 5 cards of same suit
4. Straight: 5 consecutive cards
3. Three of a Kind: 3 cards of same rank
2. Two Pair: 2 different pairs
1. Pair: 2 cards of same rank
0. High Card: No made hand

Note: Ace can be low in A-2-3-4-5 straight (wheel).
"""

from __future__ import annotations
from typing import List, Dict, Optional, Sequence
from dataclasses import dataclass, field
from enum import IntEnum
from collections import Counter

from pokersim.core.card import Card, Rank


class HandRank(IntEnum):
    """Hand categories from worst (0) to best (9)."""
    HIGH_CARD = 0
    ONE_PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8
    ROYAL_FLUSH = 9


# Hand rank names for display
HAND_RANK_NAMES = {
    HandRank.ROYAL_FLUSH: "Royal Flush",
    HandRank.STRAIGHT_FLUSH: "Straight Flush",
    HandRank.FOUR_OF_A_KIND: "Four of a Kind",
    HandRank.FULL_HOUSE: "Full House",
    HandRank.FLUSH: "Flush",
    HandRank.STRAIGHT: "Straight",
    HandRank.THREE_OF_A_KIND: "Three of a Kind",
    HandRank.TWO_PAIR: "Two Pair",
    HandRank.ONE_PAIR: "Pair",
    HandRank.HIGH_CARD: "High Card",
}


# Each category owns the score band [rank * M, (rank + 1) * M).
# Kickers are weighted in base 15, five places max: 14 * (15^5 - 1) / 14 < M.
RANK_MULTIPLIER = 1000000
KICKER_BASE = 15

# Number of significant ranks each category is scored on
KICKER_SLOTS = {
    HandRank.ROYAL_FLUSH: 1,
    HandRank.STRAIGHT_FLUSH: 1,
    HandRank.FOUR_OF_A_KIND: 2,
    HandRank.FULL_HOUSE: 2,
    HandRank.FLUSH: 5,
    HandRank.STRAIGHT: 1,
    HandRank.THREE_OF_A_KIND: 3,
    HandRank.TWO_PAIR: 3,
    HandRank.ONE_PAIR: 4,
    HandRank.HIGH_CARD: 5,
}

HAND_SIZE = 5


@dataclass(frozen=True)
class HandResult:
    """
    Result of evaluating a set of cards.

    Attributes:
        rank: Hand category
        score: Total order over all hands; category dominates, then kickers
        best_cards: The (up to) 5 cards substantiating the hand
    """
    rank: HandRank
    score: int
    best_cards: List[Card] = field(default_factory=list)

    @property
    def name(self) -> str:
        return HAND_RANK_NAMES[self.rank]

    def to_dict(self) -> Dict[str, object]:
        return {
            "rank": self.rank.name,
            "name": self.name,
            "score": self.score,
            "cards": [str(c) for c in self.best_cards],
        }


def evaluate_hand(cards: Optional[Sequence[Card]]) -> HandResult:
    """
    Evaluate the best hand contained in up to 7 cards.

    Fewer than 5 cards (pre-flop advice, partial boards) evaluate to the
    best partial hand: only pairs, trips, quads and high cards can be made.
    An empty input yields High Card with score 0 and no cards.

    Args:
        cards: 0-7 Card objects, order irrelevant

    Returns:
        HandResult with category, comparable score and best cards
    """
    if not cards:
        return HandResult(HandRank.HIGH_CARD, 0, [])

    # Sort by rank descending
    sorted_cards = sorted(cards, key=lambda c: c.rank, reverse=True)

    flush_suited = _flush_suit_cards(sorted_cards)

    # Straight flush / royal flush, checked on every card of the flush suit
    if flush_suited:
        straight_flush = _find_straight(flush_suited)
        if straight_flush:
            if straight_flush[0].rank == Rank.ACE and straight_flush[1].rank == Rank.KING:
                return _result(HandRank.ROYAL_FLUSH, [Rank.ACE], straight_flush)
            return _result(HandRank.STRAIGHT_FLUSH, [_straight_high(straight_flush)], straight_flush)

    quads, trips, pairs = _group_by_rank(sorted_cards)

    # Four of a kind
    if quads:
        quad = quads[0]
        kickers = [c for c in sorted_cards if c.rank != quad[0].rank][:1]
        return _result(
            HandRank.FOUR_OF_A_KIND,
            [quad[0].rank] + [c.rank for c in kickers],
            quad + kickers,
        )

    # Full house: best trips plus the best pair, a lower trips counts as a pair
    if trips and (len(trips) > 1 or pairs):
        trip = trips[0]
        pair_candidates = [t[:2] for t in trips[1:]] + pairs
        pair = max(pair_candidates, key=lambda g: g[0].rank)
        return _result(HandRank.FULL_HOUSE, [trip[0].rank, pair[0].rank], trip + pair)

    # Flush
    if flush_suited:
        flush_cards = flush_suited[:HAND_SIZE]
        return _result(HandRank.FLUSH, [c.rank for c in flush_cards], flush_cards)

    # Straight
    straight = _find_straight(sorted_cards)
    if straight:
        return _result(HandRank.STRAIGHT, [_straight_high(straight)], straight)

    # Three of a kind
    if trips:
        trip = trips[0]
        kickers = [c for c in sorted_cards if c.rank != trip[0].rank][:2]
        return _result(
            HandRank.THREE_OF_A_KIND,
            [trip[0].rank] + [c.rank for c in kickers],
            trip + kickers,
        )

    # Two pair
    if len(pairs) >= 2:
        high, low = pairs[0], pairs[1]
        kickers = [c for c in sorted_cards if c.rank not in (high[0].rank, low[0].rank)][:1]
        return _result(
            HandRank.TWO_PAIR,
            [high[0].rank, low[0].rank] + [c.rank for c in kickers],
            high + low + kickers,
        )

    # One pair
    if pairs:
        pair = pairs[0]
        kickers = [c for c in sorted_cards if c.rank != pair[0].rank][:3]
        return _result(
            HandRank.ONE_PAIR,
            [pair[0].rank] + [c.rank for c in kickers],
            pair + kickers,
        )

    # High card
    top = sorted_cards[:HAND_SIZE]
    return _result(HandRank.HIGH_CARD, [c.rank for c in top], top)


def _result(hand_type: HandRank, kicker_ranks: List[int], best_cards: List[Card]) -> HandResult:
    return HandResult(hand_type, _calculate_score(hand_type, kicker_ranks), list(best_cards))


def _calculate_score(hand_type: HandRank, kicker_ranks: List[int]) -> int:
    """
    Calculate the absolute score for a hand type and its ordered kickers.

    Formula: hand_type * RANK_MULTIPLIER + sum(rank_i * 15^(slots - 1 - i))
    Missing kickers (partial hands) count as zero.
    """
    slots = KICKER_SLOTS[hand_type]
    padded = list(kicker_ranks[:slots]) + [0] * (slots - len(kicker_ranks))

    kicker_value = 0
    for rank in padded:
        kicker_value = kicker_value * KICKER_BASE + int(rank)

    return int(hand_type) * RANK_MULTIPLIER + kicker_value


def _flush_suit_cards(sorted_cards: List[Card]) -> List[Card]:
    """All cards of a suit holding 5+ members (rank descending), else []."""
    suit_counts = Counter(c.suit for c in sorted_cards)
    for suit, count in suit_counts.items():
        if count >= HAND_SIZE:
            return [c for c in sorted_cards if c.suit == suit]
    return []


def _find_straight(sorted_cards: List[Card]) -> Optional[List[Card]]:
    """
    Find the highest 5-card straight in rank-descending cards.

    The wheel (A-2-3-4-5) is only used when no higher run exists; its cards
    are returned 5-4-3-2-A.
    """
    by_rank: Dict[int, Card] = {}
    for card in sorted_cards:
        by_rank.setdefault(card.rank, card)
    unique_ranks = list(by_rank)

    for i in range(len(unique_ranks) - HAND_SIZE + 1):
        if unique_ranks[i] - unique_ranks[i + HAND_SIZE - 1] == HAND_SIZE - 1:
            return [by_rank[r] for r in unique_ranks[i:i + HAND_SIZE]]

    wheel = [Rank.FIVE, Rank.FOUR, Rank.THREE, Rank.TWO, Rank.ACE]
    if all(r in by_rank for r in wheel):
        return [by_rank[r] for r in wheel]

    return None


def _straight_high(straight: List[Card]) -> int:
    """Top rank of a straight; the wheel plays 5-high."""
    if straight[0].rank == Rank.FIVE and straight[-1].rank == Rank.ACE:
        return Rank.FIVE
    return straight[0].rank


def _group_by_rank(sorted_cards: List[Card]):
    """Split rank-descending cards into quads, trips and pairs, best first."""
    groups: Dict[int, List[Card]] = {}
    for card in sorted_cards:
        groups.setdefault(card.rank, []).append(card)

    quads = [g for g in groups.values() if len(g) == 4]
    trips = [g for g in groups.values() if len(g) == 3]
    pairs = [g for g in groups.values() if len(g) == 2]
    return quads, trips, pairs


def compare_hands(cards1: List[Card], cards2: List[Card]) -> int:
    """
    Compare two hands.

    Returns:
        1 if cards1 wins, -1 if cards2 wins, 0 if tie
    """
    score1 = evaluate_hand(cards1).score
    score2 = evaluate_hand(cards2).score

    if score1 > score2:
        return 1
    elif score1 < score2:
        return -1
    else:
        return 0


def hand_rank_to_string(score: int) -> str:
    """Convert a numeric score to its category name."""
    try:
        return HAND_RANK_NAMES[HandRank(score // RANK_MULTIPLIER)]
    except ValueError:
        return "Unknown"


def get_hand_description(cards: List[Card]) -> str:
    """Get a human-readable description of the hand."""
    if not cards:
        return "No cards"

    result = evaluate_hand(cards)
    best_cards = result.best_cards
    hand_type = result.rank

    if hand_type == HandRank.ROYAL_FLUSH:
        return "Royal Flush"
    elif hand_type == HandRank.STRAIGHT_FLUSH:
        return f"Straight Flush, {_rank_name(_straight_high(best_cards))} high"
    elif hand_type == HandRank.FOUR_OF_A_KIND:
        return f"Four of a Kind, {_plural(best_cards[0].rank)}"
    elif hand_type == HandRank.FULL_HOUSE:
        return (
            f"Full House, {_plural(best_cards[0].rank)} "
            f"full of {_plural(best_cards[3].rank)}"
        )
    elif hand_type == HandRank.FLUSH:
        return f"Flush, {_rank_name(best_cards[0].rank)} high"
    elif hand_type == HandRank.STRAIGHT:
        high = _straight_high(best_cards)
        if high == Rank.FIVE:
            return "Straight, Five high (Wheel)"
        return f"Straight, {_rank_name(high)} high"
    elif hand_type == HandRank.THREE_OF_A_KIND:
        return f"Three of a Kind, {_plural(best_cards[0].rank)}"
    elif hand_type == HandRank.TWO_PAIR:
        return (
            f"Two Pair, {_plural(best_cards[0].rank)} "
            f"and {_plural(best_cards[2].rank)}"
        )
    elif hand_type == HandRank.ONE_PAIR:
        return f"Pair of {_plural(best_cards[0].rank)}"
    else:
        return f"High Card, {_rank_name(best_cards[0].rank)}"


def _rank_name(rank: int) -> str:
    """Get the name of a rank."""
    names = {
        Rank.TWO: "Two", Rank.THREE: "Three", Rank.FOUR: "Four",
        Rank.FIVE: "Five", Rank.SIX: "Six", Rank.SEVEN: "Seven",
        Rank.EIGHT: "Eight", Rank.NINE: "Nine", Rank.TEN: "Ten",
        Rank.JACK: "Jack", Rank.QUEEN: "Queen", Rank.KING: "King",
        Rank.ACE: "Ace"
    }
    return names[Rank(rank)]


def _plural(rank: int) -> str:
    name = _rank_name(rank)
    return name + "es" if name.endswith("x") else name + "s"
