"""
Simple scripted agents.

Useful for testing and as baselines for the difficulty tiers.
"""

from typing import Optional

from pokersim.agents.base import BaseAgent
from pokersim.core.rules import Action
from pokersim.core.state import GameState


class CallAgent(BaseAgent):
    """
    An agent that always calls (or checks).

    Hands played by call agents only end at showdown or when a stack runs
    dry, which makes them handy for driving the engine through every street.
    """

    def __init__(self, player_id: int, name: Optional[str] = None):
        super().__init__(player_id, name or f"Caller-{player_id}")

    def act(self, state: GameState, seat_id: int) -> Action:
        player = state.get_player(seat_id)
        if player is None or player.current_bet >= state.current_bet:
            return Action.check()
        return Action.call()


class FoldAgent(BaseAgent):
    """An agent that checks when free and folds to any bet."""

    def __init__(self, player_id: int, name: Optional[str] = None):
        super().__init__(player_id, name or f"Folder-{player_id}")

    def act(self, state: GameState, seat_id: int) -> Action:
        player = state.get_player(seat_id)
        if player is not None and player.current_bet >= state.current_bet:
            return Action.check()
        return Action.fold()
