"""
Pytest configuration and shared fixtures for pokersim tests.
"""

import random

import pytest
from pokersim.config import TableConfig
from pokersim.core.card import Card, Deck, Rank, Suit, parse_cards
from pokersim.core.player import Player
from pokersim.core.game import TexasHoldemGame


def make_game(num_players=6, seed=7, **config):
    """Game with the default seat names and a seeded random source."""
    names = ("You", "Alex", "Beth", "Carl", "Dana", "Earl", "Finn", "Gail", "Hugo", "Ivy")
    return TexasHoldemGame(
        TableConfig(seat_names=names[:num_players], **config),
        rng=random.Random(seed),
    )


def rig(game, hole_cards, board=""):
    """
    Replace the dealt cards of the running hand.

    Args:
        game: Game with a hand in progress
        hole_cards: {seat_id: "As Kd"}
        board: Up to five cards, dealt in order on the coming streets
    """
    for seat_id, cards in hole_cards.items():
        game.state.get_player(seat_id).hole_cards = parse_cards(cards)
    game.state.deck = Deck(list(reversed(parse_cards(board))))


def total_chips(game):
    """Chips behind plus chips in the pot."""
    return sum(p.chips for p in game.players) + (game.state.pot if game.is_hand_running() else 0)


@pytest.fixture(name="make_game")
def make_game_fixture():
    """Factory for seeded games: make_game(num_players, seed=7, **config)."""
    return make_game


@pytest.fixture(name="rig")
def rig_fixture():
    """Replace dealt cards: rig(game, {seat: "As Kd"}, board="...")."""
    return rig


@pytest.fixture(name="total_chips")
def total_chips_fixture():
    return total_chips


@pytest.fixture
def deck():
    """Create a fresh shuffled deck."""
    deck = Deck()
    deck.shuffle(random.Random(1))
    return deck


@pytest.fixture
def unshuffled_deck():
    """Create a fresh unshuffled deck."""
    return Deck()


@pytest.fixture
def sample_player():
    """Create a sample player with 1000 chips."""
    return Player(id=0, name="You", chips=1000, is_bot=False)


@pytest.fixture
def two_player_game():
    """Create a 2-player game (heads-up)."""
    return make_game(2)


@pytest.fixture
def three_player_game():
    """Create a 3-player game."""
    return make_game(3)


@pytest.fixture
def six_player_game():
    """Create a 6-player game."""
    return make_game(6)


@pytest.fixture
def sample_hand():
    """Create a sample 5-card hand (pair of aces)."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.ACE, Suit.HEARTS),
        Card(Rank.KING, Suit.DIAMONDS),
        Card(Rank.QUEEN, Suit.CLUBS),
        Card(Rank.JACK, Suit.SPADES),
    ]


@pytest.fixture
def royal_flush():
    """Create a royal flush hand."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.KING, Suit.SPADES),
        Card(Rank.QUEEN, Suit.SPADES),
        Card(Rank.JACK, Suit.SPADES),
        Card(Rank.TEN, Suit.SPADES),
    ]


@pytest.fixture
def straight_flush():
    """Create a straight flush (9-high)."""
    return [
        Card(Rank.NINE, Suit.HEARTS),
        Card(Rank.EIGHT, Suit.HEARTS),
        Card(Rank.SEVEN, Suit.HEARTS),
        Card(Rank.SIX, Suit.HEARTS),
        Card(Rank.FIVE, Suit.HEARTS),
    ]


@pytest.fixture
def wheel_straight():
    """Create a wheel straight (A-2-3-4-5)."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.TWO, Suit.HEARTS),
        Card(Rank.THREE, Suit.DIAMONDS),
        Card(Rank.FOUR, Suit.CLUBS),
        Card(Rank.FIVE, Suit.SPADES),
    ]
