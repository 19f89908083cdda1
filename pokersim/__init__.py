"""
pokersim - Texas Hold'em against scripted bots

A single-table Texas Hold'em simulator with:
- Pure Python game core (hand evaluation, betting state machine, payouts)
- Heuristic bots in three difficulty tiers
- Optional coaching advice from an OpenAI-compatible endpoint
- FastAPI + WebSocket server architecture

Usage:
    from pokersim.core import Card, Deck, Player, TexasHoldemGame
    from pokersim.agents import BotAgent, CallAgent
"""

__version__ = "0.2.0"

from pokersim.core.card import Card, Deck
from pokersim.core.player import Player
from pokersim.core.game import TexasHoldemGame
from pokersim.core.hand import HandRank, evaluate_hand

__all__ = [
    "Card",
    "Deck",
    "Player",
    "TexasHoldemGame",
    "HandRank",
    "evaluate_hand",
    "__version__",
]
