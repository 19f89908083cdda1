"""
Base Agent Interface for pokersim.

This module defines the abstract base class for all seat controllers.
An agent looks at the authoritative GameState and returns an Action for
its seat; the caller submits it through the game facade.

Usage:
    class MyAgent(BaseAgent):
        def act(self, state, seat_id):
            return Action.call()
"""

from abc import ABC, abstractmethod
from typing import Optional

from pokersim.core.rules import Action
from pokersim.core.state import GameState, ActionEvent


class BaseAgent(ABC):
    """
    Abstract base class for poker agents.

    Attributes:
        player_id: Seat this agent plays
        name: Human-readable name
    """

    def __init__(self, player_id: int, name: Optional[str] = None):
        """
        Initialize the agent.

        Args:
            player_id: Seat this agent plays
            name: Optional human-readable name
        """
        self.player_id = player_id
        self.name = name or f"Agent-{player_id}"

    @abstractmethod
    def act(self, state: GameState, seat_id: int) -> Action:
        """
        Choose an action for `seat_id` given the current state.

        The returned action should be legal; the engine rejects anything
        that is not (IllegalActionError).

        Args:
            state: Current game state (do not mutate)
            seat_id: Seat to act for

        Returns:
            The chosen Action
        """

    def observe(self, event: ActionEvent, state: GameState) -> None:
        """
        Called after every completed action at the table.

        Matches the listener signature of TexasHoldemGame.subscribe, so an
        agent can be registered directly.
        """
        pass

    def reset(self) -> None:
        """
        Reset the agent's internal state for a new session.

        Override this method if your agent keeps state between hands.
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.player_id}, {self.name})"


class HumanAgent(BaseAgent):
    """
    Placeholder agent for human players.

    This agent doesn't make decisions automatically - it's used
    to mark a seat as controlled by a human player.
    """

    def __init__(self, player_id: int, name: Optional[str] = None):
        super().__init__(player_id, name or f"Human-{player_id}")

    def act(self, state: GameState, seat_id: int) -> Action:
        """
        Human action is provided externally.

        This method should not be called directly - human actions
        come through the API/WebSocket.
        """
        raise NotImplementedError("Human actions should come through the API")
