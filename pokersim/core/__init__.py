"""
pokersim Core - Pure Python Texas Hold'em Game Logic

This module contains all game logic without any network dependencies.
"""

from pokersim.core.card import Card, Deck, Rank, Suit, create_deck, parse_cards
from pokersim.core.player import Player, PlayerStatus
from pokersim.core.hand import HandRank, HandResult, evaluate_hand, compare_hands
from pokersim.core.rules import GamePhase, ActionType, Action, Difficulty
from pokersim.core.state import GameState, Winner, ActionEvent
from pokersim.core.errors import PokerError, IllegalActionError
from pokersim.core.game import (
    TexasHoldemGame, ActionResult,
    initialize_game, start_new_hand, apply_action, advance_turn, advance_street,
    determine_winners, legal_actions, check_invariants,
)

__all__ = [
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "create_deck",
    "parse_cards",
    "Player",
    "PlayerStatus",
    "HandRank",
    "HandResult",
    "evaluate_hand",
    "compare_hands",
    "GamePhase",
    "ActionType",
    "Action",
    "Difficulty",
    "GameState",
    "Winner",
    "ActionEvent",
    "PokerError",
    "IllegalActionError",
    "TexasHoldemGame",
    "ActionResult",
    "initialize_game",
    "start_new_hand",
    "apply_action",
    "advance_turn",
    "advance_street",
    "determine_winners",
    "legal_actions",
    "check_invariants",
]
